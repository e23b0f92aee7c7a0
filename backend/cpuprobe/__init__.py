"""cpuprobe: read processor and hardware-platform names out of cpuinfo-style files."""

__version__ = "0.1.0"

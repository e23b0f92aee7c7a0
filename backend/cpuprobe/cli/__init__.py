from cpuprobe.cli.app import app

__all__ = ["app"]

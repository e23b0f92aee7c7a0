"""
Tests for the console-script entry point's debug-mode detection.
"""
import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from cpuprobe.entrypoint import _config_arg, _is_debug_mode  # noqa: E402


def test_config_arg_forms() -> None:
    assert _config_arg(["cpuprobe", "--config", "a.toml", "x"]) == "a.toml"
    assert _config_arg(["cpuprobe", "--config=b.toml", "x"]) == "b.toml"
    assert _config_arg(["cpuprobe", "x"]) is None
    assert _config_arg(["cpuprobe", "--config"]) is None


def test_debug_flag_and_env() -> None:
    assert _is_debug_mode(["cpuprobe", "--debug", "x"]) is True
    with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
        assert _is_debug_mode(["cpuprobe", "x"]) is True


def test_explicit_config_file_is_honoured() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        empty = root / "cfg"
        empty.mkdir()
        explicit = root / "explicit.toml"
        explicit.write_text("[logging]\ndebug = true\n")

        with patch.dict(os.environ, {"CPUPROBE_CONFIG_DIR": str(empty)}):
            os.environ.pop("LOG_LEVEL", None)
            assert _is_debug_mode(["cpuprobe", "--config", str(explicit), "x"]) is True
            assert _is_debug_mode(["cpuprobe", f"--config={explicit}", "x"]) is True
            # Without --config only the (empty) config dir is consulted
            assert _is_debug_mode(["cpuprobe", "x"]) is False


def test_missing_or_broken_config_is_not_debug() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        broken = root / "broken.toml"
        broken.write_text("[logging\n")

        with patch.dict(os.environ, {"CPUPROBE_CONFIG_DIR": str(root)}):
            os.environ.pop("LOG_LEVEL", None)
            assert _is_debug_mode(["cpuprobe", "--config", str(root / "nope.toml")]) is False
            assert _is_debug_mode(["cpuprobe", "--config", str(broken)]) is False

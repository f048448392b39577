"""Tests for configuration loading."""

from pathlib import Path

import pytest

from memfs.config import ConfigError, SeedKind, load_config, parse_config


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "memfs.yaml"
    path.write_text(text)
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_full_config(self, tmp_path):
        path = _write(
            tmp_path,
            """
filesystem:
  scheme: scratch
  readonly: true
  debounce_ms: 20
sample_data: true
seed:
  - directory: /notes
  - file: /notes/todo.txt
    content: buy milk
  - file: /blob.bin
    content: !!binary AAEC
listeners:
  - module: memfs.sample_listeners
    function: log_changes
    options:
      level: DEBUG
""",
        )
        config = load_config(path)
        assert config.filesystem.scheme == "scratch"
        assert config.filesystem.readonly is True
        assert config.filesystem.debounce_seconds == pytest.approx(0.02)
        assert config.sample_data is True
        assert [(entry.kind, entry.path) for entry in config.seed] == [
            (SeedKind.DIRECTORY, "/notes"),
            (SeedKind.FILE, "/notes/todo.txt"),
            (SeedKind.FILE, "/blob.bin"),
        ]
        assert config.seed[1].content == b"buy milk"
        assert config.seed[2].content == b"\x00\x01\x02"
        assert config.listeners[0].name == "listener_0"
        assert config.listeners[0].options == {"level": "DEBUG"}

    def test_empty_file_uses_defaults(self, tmp_path):
        config = load_config(_write(tmp_path, ""))
        assert config.filesystem.scheme == "memfs"
        assert config.filesystem.readonly is False
        assert config.filesystem.debounce_ms == 5.0
        assert config.seed == []
        assert config.listeners == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            load_config(_write(tmp_path, "- a\n- b\n"))


class TestValidation:
    """Tests for field-level validation."""

    @pytest.mark.parametrize(
        "data, message",
        [
            ({"filesystem": []}, "'filesystem' section"),
            ({"filesystem": {"scheme": "a:b"}}, "scheme"),
            ({"filesystem": {"readonly": "yes"}}, "readonly"),
            ({"filesystem": {"debounce_ms": "soon"}}, "numeric"),
            ({"filesystem": {"debounce_ms": 0}}, "positive"),
            ({"filesystem": {"debounce_ms": True}}, "numeric"),
            ({"sample_data": "yes"}, "sample_data"),
            ({"seed": {}}, "'seed' section"),
            ({"seed": [{"directory": "/a", "file": "/b"}]}, "exactly one"),
            ({"seed": [{}]}, "exactly one"),
            ({"seed": [{"directory": "/a", "content": "x"}]}, "only valid for files"),
            ({"seed": [{"file": "/a", "content": 3}]}, "content"),
            ({"listeners": [{"module": "x"}]}, "'module' and 'function'"),
            ({"listeners": [{"module": "x", "function": "y", "options": []}]}, "options"),
        ],
    )
    def test_invalid_values(self, data, message):
        with pytest.raises(ConfigError, match=message):
            parse_config(data)

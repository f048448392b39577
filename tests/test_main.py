"""Tests for the command-line entry point."""

import io

import pytest

from memfs.__main__ import build_provider, main, populate, print_tree
from memfs.config import parse_config


class TestCli:
    """Tests for main and its helpers."""

    def test_seeded_tree_is_printed(self, tmp_path, capsys):
        config = tmp_path / "memfs.yaml"
        config.write_text(
            """
filesystem:
  scheme: scratch
  readonly: true
seed:
  - directory: /notes
  - file: /notes/todo.txt
    content: buy milk
"""
        )
        main(["--config", str(config), "--log-level", "WARNING"])
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "directory         0 scratch:/",
            "directory         0 scratch:/notes",
            "file              8 scratch:/notes/todo.txt",
        ]

    def test_missing_config_exits_with_status_2(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["--config", str(tmp_path / "missing.yaml")])
        assert excinfo.value.code == 2

    def test_bad_listener_exits_with_status_2(self, tmp_path):
        config = tmp_path / "memfs.yaml"
        config.write_text("listeners:\n  - module: memfs.nope\n    function: f\n")
        with pytest.raises(SystemExit) as excinfo:
            main(["--config", str(config)])
        assert excinfo.value.code == 2

    def test_invalid_seed_exits_with_status_1(self, tmp_path):
        config = tmp_path / "memfs.yaml"
        config.write_text("seed:\n  - file: /missing/dir/a.txt\n")
        with pytest.raises(SystemExit) as excinfo:
            main(["--config", str(config)])
        assert excinfo.value.code == 1

    def test_populate_with_readonly_provider(self):
        app_config = parse_config({"filesystem": {"readonly": True}, "seed": [{"file": "/a", "content": "x"}]})
        provider = build_provider(app_config)
        populate(provider, app_config)
        provider.notifier.close()
        out = io.StringIO()
        print_tree(provider, out)
        assert out.getvalue().splitlines()[-1] == "file              1 memfs:/a"
        assert provider.capabilities.is_readonly

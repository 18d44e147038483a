"""Tests for the releasemerge command line, config loading and exit codes."""

import json

import pytest

from args import parse_args
from cli_config import apply_config
from constants import Constants, ExitCodes, _load_yaml_config
import releasemerge


class TestArgParsing:
    """Tests for CLI argument parsing."""

    def test_bundles_and_directory(self):
        ns = parse_args(["-d", "/srv/bundles", "core", "extras"])
        assert ns.bundles == ["core", "extras"]
        assert ns.BUNDLE_DIRECTORY == "/srv/bundles"

    def test_defaults(self):
        ns = parse_args(["core"])
        assert ns.LOG_LEVEL == "INFO"
        assert ns.OUTPUT is None
        assert ns.QUIET is False
        assert ns.READ_MAX_CONCURRENCY is None

    def test_bundle_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestConfig:
    """Tests for YAML configuration and CLI overrides."""

    def test_yaml_overrides_constants(self, tmp_path):
        cfg = tmp_path / "config.yml"
        cfg.write_text(
            "basename:\n"
            "  bundle: Bundle\n"
            "library:\n"
            "  preserve: 5\n"
            "  publish: true\n"
            "resolution:\n"
            "  read_max_concurrency: '4'\n"
            "unrelated:\n"
            "  key: 1\n"
        )

        applied = _load_yaml_config(str(cfg))

        assert Constants.BUNDLE_FILE == "Bundle"
        assert Constants.LIBRARY_PRESERVE == 5
        assert Constants.LIBRARY_PUBLISH is True
        assert Constants.READ_MAX_CONCURRENCY == 4
        assert "unrelated.key" not in applied

    def test_config_from_environment(self, tmp_path, monkeypatch):
        cfg = tmp_path / "config.yml"
        cfg.write_text("basename:\n  archive: Archive\n")
        monkeypatch.setenv(Constants.ENV_CONFIG, str(cfg))

        _load_yaml_config()

        assert Constants.ARCHIVE_FILE == "Archive"

    def test_missing_config_keeps_defaults(self, tmp_path):
        assert _load_yaml_config(str(tmp_path / "nope.yml")) == {}
        assert Constants.BUNDLE_FILE == "bundle"

    def test_invalid_value_is_ignored(self, tmp_path):
        cfg = tmp_path / "config.yml"
        cfg.write_text("resolution:\n  read_max_concurrency: many\n")
        default = Constants.READ_MAX_CONCURRENCY

        assert _load_yaml_config(str(cfg)) == {}
        assert Constants.READ_MAX_CONCURRENCY == default

    def test_cli_wins_over_config(self, tmp_path):
        cfg = tmp_path / "config.yml"
        cfg.write_text("resolution:\n  bundle_directory: /from/config\n")

        apply_config(parse_args(["-c", str(cfg), "-d", "/from/cli", "core"]))

        assert Constants.BUNDLE_DIRECTORY == "/from/cli"


class TestMain:
    """Tests for the releasemerge entry point."""

    def _main(self, argv):
        with pytest.raises(SystemExit) as excinfo:
            releasemerge.main(argv)
        return excinfo.value.code

    def test_writes_merged_json(self, bundle_root, tmp_path):
        root, write_release = bundle_root
        write_release("A", "r1", archives={"x": "1"})
        write_release("A", "r2", archives={"x": "2"})
        out = tmp_path / "merged.json"

        code = self._main(["-d", str(root), "-o", str(out), "A"])

        assert code == ExitCodes.SUCCESS.value
        merged = json.loads(out.read_text())
        assert merged["bundles"] == {"_": {"A": "r2"}}
        assert merged["archives"] == {"_": {"x": "2"}}

    def test_writes_to_stdout(self, bundle_root, capsys):
        root, write_release = bundle_root
        write_release("A", "r1", archives={"x": "1"})

        code = self._main(["-d", str(root), "A"])

        assert code == ExitCodes.SUCCESS.value
        assert json.loads(capsys.readouterr().out)["bundles"] == {"_": {"A": "r1"}}

    def test_quiet_suppresses_stdout(self, bundle_root, capsys):
        root, write_release = bundle_root
        write_release("A", "r1", archives={"x": "1"})

        self._main(["-q", "-d", str(root), "A"])

        assert capsys.readouterr().out == ""

    def test_conflict_exit_code(self, bundle_root, caplog):
        root, _ = bundle_root

        code = self._main(["-d", str(root), "C"])

        assert code == ExitCodes.RESOLUTION_ERROR.value
        assert "Unknown bundle(s): C" in caplog.text

    def test_missing_directory_exit_code(self, tmp_path):
        code = self._main(["-d", str(tmp_path / "absent"), "A"])
        assert code == ExitCodes.FILE_ERROR.value

    def test_no_directory_exit_code(self):
        code = self._main(["A"])
        assert code == ExitCodes.FILE_ERROR.value

"""Integration tests for the command-line entry point."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import mongomock
import pytest
import yaml

from voxnote.__main__ import main, parse_args


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a config pointing the local store at a temp directory."""
    path = tmp_path / "test.yaml"
    path.write_text(
        yaml.dump(
            {
                "voxnote": {
                    "remote": {"base_url": "http://127.0.0.1:9", "probe_timeout_seconds": 0.2},
                    "storage": {"local_dir": str(tmp_path / "notes")},
                    "logging": {"level": "WARNING"},
                }
            }
        )
    )
    return path


@pytest.fixture
def mongo_driver() -> MagicMock:
    """Create a driver factory backed by mongomock."""
    driver = MagicMock()
    driver.admin.command.return_value = {"ok": 1.0}
    driver.__getitem__.return_value = mongomock.MongoClient()["voxnote"]
    return MagicMock(return_value=driver)


class TestParseArgs:
    """Tests for argument parsing."""

    def test_save_words(self) -> None:
        """Test save collects the note text."""
        args = parse_args(["--owner", "ana@example.com", "save", "buy", "milk"])

        assert args.command == "save"
        assert args.text == ["buy", "milk"]
        assert args.owner == "ana@example.com"

    def test_command_required(self) -> None:
        """Test a command must be given."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestMainConfigErrors:
    """Tests for unusable configuration."""

    def test_missing_config_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test a missing config file exits with 1 and explains why."""
        missing = tmp_path / "absent.yaml"

        assert main(["--config", str(missing), "list"]) == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_unknown_profile(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a profile with no file exits with 1."""
        assert main(["--profile", "no-such-profile", "list"]) == 1
        assert "no-such-profile.yaml" in capsys.readouterr().err

    def test_invalid_yaml(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test an unparsable config file exits with 1."""
        path = tmp_path / "broken.yaml"
        path.write_text("voxnote: [unclosed")

        assert main(["--config", str(path), "list"]) == 1
        assert "Error loading config" in capsys.readouterr().err


class TestMainOffline:
    """Tests for CLI runs against an unreachable server."""

    def test_save_offline_then_list(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test an offline save is stored locally and listed."""
        assert main(["--config", str(config_file), "save", "hello", "world"]) == 0
        saved = capsys.readouterr()
        assert "(pending)" in saved.out
        assert "Note saved locally" in saved.err

        assert main(["--config", str(config_file), "list"]) == 0
        listed = capsys.readouterr().out
        assert "hello world" in listed
        assert "local-" in listed

    def test_blank_save_fails(self, config_file: Path) -> None:
        """Test validation errors exit with 1."""
        assert main(["--config", str(config_file), "save", "   "]) == 1

    def test_ping_offline(self, config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test ping reports offline."""
        assert main(["--config", str(config_file), "ping"]) == 0
        assert capsys.readouterr().out.strip() == "offline"


class TestMainLocalBackend:
    """Tests for CLI runs against the in-process backend."""

    def test_save_list_delete(
        self,
        config_file: Path,
        mongo_driver: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test a full round through the MongoDB-backed API."""
        base = ["--config", str(config_file), "--local-backend", "--owner", "ana@example.com"]

        with patch("voxnote.storage.client.MongoClient", mongo_driver):
            assert main([*base, "save", "remember", "this"]) == 0
            note_id = capsys.readouterr().out.split()[0]
            assert not note_id.startswith("local-")

            assert main([*base, "list"]) == 0
            assert "remember this" in capsys.readouterr().out

            assert main([*base, "delete", note_id]) == 0
            capsys.readouterr()

            assert main([*base, "list", "--refresh"]) == 0
            assert "remember this" not in capsys.readouterr().out

"""Tests for the precondition validator."""

from pathlib import Path
from unittest.mock import patch

import pytest

from bootcfg.config.settings import BootcfgSettings
from bootcfg.domain.address import ListenAddress
from bootcfg.services.preconditions import validate_settings
from bootcfg.services.result import VALIDATION_ERROR


def _settings(data_dir: Path, images_dir: Path, **overrides: str) -> BootcfgSettings:
    values = {
        "address": "127.0.0.1:8080",
        "data_path": str(data_dir),
        "images_path": str(images_dir),
        **overrides,
    }
    return BootcfgSettings.from_cli(**values)


class TestValidateSettings:
    def test_valid(self, data_dir: Path, images_dir: Path) -> None:
        result = validate_settings(_settings(data_dir, images_dir, address="0.0.0.0:9090"))
        assert result.ok
        assert result.data["address"] == ListenAddress("0.0.0.0", 9090)

    @pytest.mark.parametrize("address", ["", "not an address", "127.0.0.1:99999"])
    def test_bad_address(self, data_dir: Path, images_dir: Path, address: str) -> None:
        result = validate_settings(_settings(data_dir, images_dir, address=address))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == VALIDATION_ERROR
        assert result.error.message == "A valid HTTP listen address is required"
        assert result.error.detail["setting"] == "address"

    def test_bad_address_checked_before_directories(self, tmp_path: Path) -> None:
        settings = _settings(tmp_path / "no-data", tmp_path / "no-images", address="")
        with patch("bootcfg.services.preconditions.Path.is_dir") as is_dir:
            result = validate_settings(settings)
        is_dir.assert_not_called()
        assert result.error is not None
        assert result.error.detail["setting"] == "address"

    def test_missing_data_dir(self, tmp_path: Path, images_dir: Path) -> None:
        result = validate_settings(_settings(tmp_path / "missing", images_dir))
        assert result.error is not None
        assert result.error.message == "A path to a data directory is required"
        assert result.error.detail["setting"] == "data_path"

    def test_data_path_is_file(self, tmp_path: Path, images_dir: Path) -> None:
        file_path = tmp_path / "file"
        file_path.write_text("x")
        result = validate_settings(_settings(file_path, images_dir))
        assert result.error is not None
        assert result.error.detail["setting"] == "data_path"

    def test_missing_images_dir(self, tmp_path: Path, data_dir: Path) -> None:
        result = validate_settings(_settings(data_dir, tmp_path / "missing"))
        assert result.error is not None
        assert result.error.message == "A path to an assets directory is required"
        assert result.error.detail["setting"] == "images_path"

    def test_fail_fast_reports_first_problem(self, tmp_path: Path) -> None:
        result = validate_settings(_settings(tmp_path / "a", tmp_path / "b"))
        assert result.error is not None
        assert result.error.detail["setting"] == "data_path"

    def test_no_writes(self, tmp_path: Path, data_dir: Path, images_dir: Path) -> None:
        before = sorted(p.name for p in tmp_path.rglob("*"))
        validate_settings(_settings(data_dir, images_dir))
        assert sorted(p.name for p in tmp_path.rglob("*")) == before

"""Tests for RegistryFetcher download and extraction."""

from pathlib import Path
from unittest.mock import patch

import pytest

from modern_patch.engine.exceptions import DownloadError
from modern_patch.engine.registry_fetcher import RegistryFetcher, unwrap_package_root
from modern_patch.utils.process import CommandResult


def _ok():
    return CommandResult(args=[], returncode=0, output="", error="")


def _fake_tools(nested=True, pack_ok=True, tar_ok=True):
    """Simulate `npm pack` writing a tarball and `tar` unpacking it."""

    def run(args, cwd=None, timeout=None):
        if args[0] == "npm":
            if not pack_ok:
                return CommandResult(args=args, returncode=1, output="", error="E404 Not Found")
            destination = Path(args[args.index("--pack-destination") + 1])
            (destination / "left-pad-1.3.0.tgz").write_bytes(b"tarball")
            return _ok()
        if not tar_ok:
            return CommandResult(args=args, returncode=2, output="", error="not in gzip format")
        extract_dir = Path(args[args.index("-C") + 1])
        root = extract_dir / "package" if nested else extract_dir
        root.mkdir(parents=True, exist_ok=True)
        (root / "index.js").write_text("module.exports = leftPad;\n")
        return _ok()

    return run


class TestRegistryFetcher:
    def test_fetch_unwraps_package_directory(self, project_root):
        with patch("modern_patch.engine.registry_fetcher.run_command", side_effect=_fake_tools()) as mock_run:
            baseline = RegistryFetcher(project_root).fetch("left-pad", "1.3.0")

        assert baseline is not None
        assert baseline.name == "package"
        assert (baseline / "index.js").is_file()
        pack_args = mock_run.call_args_list[0].args[0]
        assert pack_args[:3] == ["npm", "pack", "left-pad@1.3.0"]

    def test_fetch_without_nesting(self, project_root):
        with patch("modern_patch.engine.registry_fetcher.run_command", side_effect=_fake_tools(nested=False)):
            baseline = RegistryFetcher(project_root).fetch("left-pad", "1.3.0")
        assert baseline is not None
        assert (baseline / "index.js").is_file()

    def test_download_failure_returns_none(self, project_root):
        with patch("modern_patch.engine.registry_fetcher.run_command", side_effect=_fake_tools(pack_ok=False)):
            assert RegistryFetcher(project_root).fetch("left-pad", "1.3.0") is None

    def test_extraction_failure_raises_with_detail(self, project_root):
        with patch("modern_patch.engine.registry_fetcher.run_command", side_effect=_fake_tools(tar_ok=False)):
            with pytest.raises(DownloadError, match="tar extraction failed"):
                RegistryFetcher(project_root).fetch_or_raise("left-pad", "1.3.0")

    def test_temp_directory_is_kept(self, project_root):
        with patch("modern_patch.engine.registry_fetcher.run_command", side_effect=_fake_tools()):
            baseline = RegistryFetcher(project_root).fetch("left-pad", "1.3.0")
        assert baseline.exists()
        assert baseline.parent.parent.name.startswith("modern-patch-")


def test_unwrap_package_root(tmp_path):
    assert unwrap_package_root(tmp_path) == tmp_path
    (tmp_path / "package").mkdir()
    assert unwrap_package_root(tmp_path) == tmp_path / "package"

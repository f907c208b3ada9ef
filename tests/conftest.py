import json
import logging
from pathlib import Path

import pytest

from modern_patch.config import PatchSettings
from modern_patch.models import ManagerIdentity, ManagerKind


def write_package(
    package_dir: Path,
    name: str,
    version: str,
    files: dict[str, str] | None = None,
    main: str | None = None,
) -> Path:
    """Create a dependency directory with a package.json and some files."""
    package_dir.mkdir(parents=True, exist_ok=True)
    manifest = {"name": name, "version": version}
    if main is not None:
        manifest["main"] = main
    (package_dir / "package.json").write_text(json.dumps(manifest, indent=2) + "\n")
    for relative_path, content in (files or {}).items():
        target = package_dir / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    return package_dir


def snapshot_tree(root: Path) -> dict[str, tuple[bytes, int]]:
    """Map every file under root to (content, mtime_ns) to detect writes."""
    return {
        path.relative_to(root).as_posix(): (path.read_bytes(), path.stat().st_mtime_ns)
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


class FakeProbe:
    """ManagerProbe stand-in returning a fixed identity."""

    def __init__(self, identity: ManagerIdentity) -> None:
        self.identity = identity
        self.calls = 0

    def detect(self) -> ManagerIdentity:
        self.calls += 1
        return self.identity


class FakeFetcher:
    """RegistryFetcher stand-in returning a prepared baseline (or None)."""

    def __init__(self, baseline: Path | None) -> None:
        self.baseline = baseline
        self.requests: list[tuple[str, str]] = []

    def fetch(self, name: str, version: str) -> Path | None:
        self.requests.append((name, version))
        return self.baseline


@pytest.fixture
def project_root(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    (root / "package.json").write_text('{"name": "app", "version": "0.0.0"}\n')
    return root


@pytest.fixture
def npm_identity():
    return ManagerIdentity(
        kind=ManagerKind.NPM, version="10.2.0", lock_file="package-lock.json", has_lock_file=True
    )


@pytest.fixture
def yarn_classic_identity():
    return ManagerIdentity(
        kind=ManagerKind.YARN, version="1.22.19", lock_file="yarn.lock", has_lock_file=True
    )


@pytest.fixture
def yarn_berry_identity():
    return ManagerIdentity(
        kind=ManagerKind.YARN, version="4.0.2", lock_file="yarn.lock", has_lock_file=True
    )


@pytest.fixture
def settings():
    return PatchSettings(command_timeout=5)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("modern_patch")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)

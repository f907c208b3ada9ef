"""Download of pristine package copies from the npm registry."""

import logging
import tempfile
from pathlib import Path

from modern_patch.engine.exceptions import DownloadError
from modern_patch.utils.process import DEFAULT_TIMEOUT, run_command

logger = logging.getLogger(__name__)

TEMP_PREFIX = "modern-patch-"
# npm tarballs wrap their contents in a single top-level directory.
TARBALL_ROOT = "package"


class RegistryFetcher:
    """Fetches ``name@version`` with ``npm pack`` and unpacks it.

    The temporary directory is left on disk after use so the baseline
    can be inspected when a diff looks wrong.
    """

    def __init__(self, project_root: str | Path, timeout: int = DEFAULT_TIMEOUT) -> None:
        self.project_root = Path(project_root)
        self.timeout = timeout

    def fetch(self, name: str, version: str) -> Path | None:
        """Return the extracted baseline root, or None on any failure."""
        try:
            return self.fetch_or_raise(name, version)
        except DownloadError as exc:
            logger.warning("Could not fetch %s@%s from the registry: %s", name, version, exc)
            return None

    def fetch_or_raise(self, name: str, version: str) -> Path:
        """Like fetch(), but raise DownloadError describing the failed step."""
        work_dir = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
        logger.debug("Fetching %s@%s into %s", name, version, work_dir)

        packed = run_command(
            ["npm", "pack", f"{name}@{version}", "--pack-destination", str(work_dir)],
            cwd=self.project_root,
            timeout=self.timeout,
        )
        if not packed.success:
            raise DownloadError(f"npm pack failed: {packed.error.strip() or packed.returncode}")

        tarballs = sorted(work_dir.glob("*.tgz"))
        if not tarballs:
            raise DownloadError(f"npm pack produced no tarball in {work_dir}")

        extract_dir = work_dir / "extracted"
        extract_dir.mkdir()
        extracted = run_command(
            ["tar", "-xzf", str(tarballs[0]), "-C", str(extract_dir)],
            timeout=self.timeout,
        )
        if not extracted.success:
            raise DownloadError(f"tar extraction failed: {extracted.error.strip() or extracted.returncode}")

        return unwrap_package_root(extract_dir)


def unwrap_package_root(extract_dir: Path) -> Path:
    """Descend into the conventional ``package/`` directory when present."""
    nested = extract_dir / TARBALL_ROOT
    if nested.is_dir():
        return nested
    return extract_dir

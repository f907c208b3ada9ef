"""Detection of the package manager that owns a project."""

import logging
from pathlib import Path
from typing import Callable

from modern_patch.models.manager_models import ManagerIdentity, ManagerKind
from modern_patch.utils.process import DEFAULT_TIMEOUT, run_command

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "unknown"

# Checked in order; the first lock file present decides the manager.
LOCK_FILES: list[tuple[ManagerKind, str]] = [
    (ManagerKind.YARN, "yarn.lock"),
    (ManagerKind.PNPM, "pnpm-lock.yaml"),
    (ManagerKind.NPM, "package-lock.json"),
]

VersionQuery = Callable[[ManagerKind], str]


class ManagerProbe:
    """Inspects lock files and asks the manager for its version."""

    def __init__(
        self,
        project_root: str | Path,
        version_query: VersionQuery | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.project_root = Path(project_root)
        self.timeout = timeout
        self._version_query = version_query or self._query_version

    def detect(self) -> ManagerIdentity:
        """Return a fresh identity; nothing is cached between calls."""
        for kind, lock_file in LOCK_FILES:
            if (self.project_root / lock_file).exists():
                identity = ManagerIdentity(
                    kind=kind,
                    version=self._version_query(kind),
                    lock_file=lock_file,
                    has_lock_file=True,
                )
                logger.debug("Detected %s %s via %s", kind.value, identity.version, lock_file)
                return identity

        return ManagerIdentity(
            kind=ManagerKind.NPM,
            version=self._version_query(ManagerKind.NPM),
            lock_file="package-lock.json",
            has_lock_file=False,
        )

    def _query_version(self, kind: ManagerKind) -> str:
        result = run_command([kind.value, "--version"], cwd=self.project_root, timeout=self.timeout)
        version = result.output.strip()
        if not result.success or not version:
            logger.debug("Could not read %s version: %s", kind.value, result.error.strip())
            return UNKNOWN_VERSION
        return version

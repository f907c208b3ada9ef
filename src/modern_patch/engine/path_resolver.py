"""Resolution of dependency names to installed directories."""

import json
import logging
from pathlib import Path
from typing import Callable

from modern_patch.engine.exceptions import ResolutionError
from modern_patch.engine.strategies import Strategy, run_chain, succeed, try_next
from modern_patch.models.manager_models import ManagerIdentity
from modern_patch.models.patch_models import DependencyLocation
from modern_patch.models.result_models import StrategyOutcome, StrategyResult
from modern_patch.utils.process import DEFAULT_TIMEOUT, run_command

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
DEFAULT_ENTRY_POINT = "index.js"

PathExists = Callable[[Path], bool]
LocationQuery = Callable[[str], str | None]


def _path_exists(path: Path) -> bool:
    return path.exists()


def _find_location(payload: object) -> str | None:
    """Look for a location field in one decoded `yarn info --json` line."""
    if not isinstance(payload, dict):
        return None
    for key in ("location", "Location"):
        if isinstance(payload.get(key), str):
            return payload[key]
    for nested_key in ("data", "children", "value"):
        found = _find_location(payload.get(nested_key))
        if found:
            return found
    return None


class PathResolver:
    """Finds where a package manager materialized a dependency.

    Every call re-probes the filesystem: packages may have been
    installed or removed since the previous call.
    """

    def __init__(
        self,
        project_root: str | Path,
        path_exists: PathExists | None = None,
        location_query: LocationQuery | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.project_root = Path(project_root)
        self.timeout = timeout
        self._path_exists = path_exists or _path_exists
        self._location_query = location_query or self._query_yarn_location

    def resolve(self, identity: ManagerIdentity, dependency_name: str) -> Path | None:
        """Return the dependency directory, or None when nothing exists."""
        result = run_chain(self._strategies(identity, dependency_name))
        if result.outcome == StrategyOutcome.SUCCESS:
            logger.debug("Resolved %s via %s: %s", dependency_name, result.strategy, result.value)
            return result.value
        logger.debug("Could not resolve %s (%s)", dependency_name, result.detail)
        return None

    def locate(self, identity: ManagerIdentity, dependency_name: str) -> DependencyLocation:
        """Resolve a dependency and read its manifest.

        Raises:
            ResolutionError: If the directory or its package.json is missing.
        """
        path = self.resolve(identity, dependency_name)
        if path is None:
            raise ResolutionError(f"Package {dependency_name} not found in node_modules")
        manifest = read_manifest(path)
        if manifest is None:
            raise ResolutionError(f"Could not read package.json for {dependency_name}")
        return DependencyLocation(
            dependency_name=dependency_name,
            path=path,
            package_name=str(manifest.get("name") or dependency_name),
            package_version=str(manifest.get("version") or "unknown"),
        )

    def _strategies(self, identity: ManagerIdentity, dependency_name: str) -> list[Strategy]:
        node_modules = self.project_root / "node_modules" / dependency_name

        if identity.is_yarn_classic:
            return [self._probe("node_modules", node_modules)]

        if identity.is_yarn_berry:
            return [
                self._probe("node_modules", node_modules),
                self._probe("yarn-cache", self.project_root / ".yarn" / "cache" / dependency_name),
                self._probe("yarn-unplugged", self.project_root / ".yarn" / "unplugged" / dependency_name),
                ("yarn-info", lambda: self._query_strategy(dependency_name, node_modules)),
            ]

        return [
            self._probe("node_modules", node_modules),
            self._probe(
                "pnpm-virtual-store",
                self.project_root / "node_modules" / ".pnpm" / "node_modules" / dependency_name,
            ),
            self._probe("pnpm-root", self.project_root / ".pnpm" / dependency_name),
        ]

    def _probe(self, name: str, path: Path) -> Strategy:
        def probe() -> StrategyResult:
            if self._path_exists(path):
                return succeed(name, path)
            return try_next(name, f"{path} does not exist")

        return (name, probe)

    def _query_strategy(self, dependency_name: str, fallback: Path) -> StrategyResult:
        location = self._location_query(dependency_name)
        if location:
            path = Path(location)
            if not path.is_absolute():
                path = self.project_root / path
            return succeed("yarn-info", path)
        if self._path_exists(fallback):
            return succeed("node_modules-fallback", fallback)
        return try_next("yarn-info", "location query failed and no node_modules fallback")

    def _query_yarn_location(self, dependency_name: str) -> str | None:
        result = run_command(
            ["yarn", "info", dependency_name, "--json"],
            cwd=self.project_root,
            timeout=self.timeout,
        )
        if not result.success:
            return None
        for raw_line in result.output.splitlines():
            raw_line = raw_line.strip()
            if not raw_line:
                continue
            try:
                payload = json.loads(raw_line)
            except json.JSONDecodeError:
                continue
            location = _find_location(payload)
            if location:
                return location
        return None


def read_manifest(package_path: Path) -> dict | None:
    """Load package.json from a dependency directory; None if absent or invalid."""
    manifest_path = package_path / MANIFEST_FILE
    if not manifest_path.is_file():
        return None
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def entry_point(package_path: Path) -> str:
    """Relative path of the dependency's entry point (``main`` or index.js)."""
    manifest = read_manifest(package_path) or {}
    main = manifest.get("main")
    if isinstance(main, str) and main.strip():
        return main.strip().removeprefix("./")
    return DEFAULT_ENTRY_POINT

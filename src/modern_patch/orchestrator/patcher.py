"""High-level create/apply/reverse/list flows over a project's patches."""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from modern_patch.config import PatchSettings, load_settings
from modern_patch.engine.apply_engine import ApplyEngine
from modern_patch.engine.diff_engine import DiffEngine
from modern_patch.engine.exceptions import PatchNameError, ResolutionError
from modern_patch.engine.manager_probe import ManagerProbe
from modern_patch.engine.path_resolver import PathResolver
from modern_patch.engine.registry_fetcher import RegistryFetcher
from modern_patch.models import (
    ApplyState,
    DependencyLocation,
    PatchArtifact,
    PatchResult,
    ProjectInfo,
)
from modern_patch.orchestrator.catalog import PatchCatalog
from modern_patch.utils.diff_generator import render_placeholder
from modern_patch.utils.issue_link import build_issue_url, open_issue
from modern_patch.utils.patch_namer import encode_patch_name

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "unknown"


class PatchOptions(BaseModel):
    """Per-command options, mirroring the CLI flags."""

    model_config = ConfigDict(frozen=True)

    patch_dir: str | None = None          # Defaults to PatchSettings.patch_dir
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    case_sensitive: bool = False
    create_issue: bool = False
    append: str | None = None             # Description for a new sequenced patch
    error_on_fail: bool = False
    reverse: bool = False


class PatchPackage:
    """Entry point tying resolution, diffing and application together.

    Each public call is self-contained: the manager identity is detected
    afresh and the patch directory is re-read from disk.
    """

    def __init__(
        self,
        project_root: str | Path,
        options: PatchOptions | None = None,
        settings: PatchSettings | None = None,
        probe: ManagerProbe | None = None,
        resolver: PathResolver | None = None,
        fetcher: RegistryFetcher | None = None,
    ) -> None:
        self.project_root = Path(project_root).resolve()
        self.options = options or PatchOptions()
        self.settings = settings or load_settings()
        timeout = self.settings.command_timeout

        patch_dir = Path(self.options.patch_dir or self.settings.patch_dir)
        self.patch_dir = patch_dir if patch_dir.is_absolute() else self.project_root / patch_dir

        self.probe = probe or ManagerProbe(self.project_root, timeout=timeout)
        self.resolver = resolver or PathResolver(self.project_root, timeout=timeout)
        self.fetcher = fetcher or RegistryFetcher(self.project_root, timeout=timeout)
        self.catalog = PatchCatalog(self.patch_dir)
        self.diff_engine = DiffEngine(
            include=self.options.include,
            exclude=self.options.exclude,
            case_sensitive=self.options.case_sensitive,
        )

    def create_patch(self, package_name: str) -> PatchResult:
        """Capture the edits made to an installed dependency.

        Resolution, download and no-difference failures all degrade to a
        placeholder patch, so a patch file is always left behind unless
        it cannot be named or written.
        """
        result = PatchResult()
        logger.info("Creating patch for package: %s", package_name)

        identity = self.probe.detect()
        try:
            location = self.resolver.locate(identity, package_name)
        except ResolutionError as exc:
            logger.warning("%s; writing a placeholder patch", exc)
            body = render_placeholder(package_name, UNKNOWN_VERSION, str(exc))
            return self._write_patch(result, package_name, UNKNOWN_VERSION, body)

        logger.info("Found package: %s@%s", location.package_name, location.package_version)
        body = self._diff_against_registry(location)
        return self._write_patch(result, location.package_name, location.package_version, body)

    def _diff_against_registry(self, location: DependencyLocation) -> str:
        name, version = location.package_name, location.package_version

        baseline = self.fetcher.fetch(name, version)
        if baseline is None:
            logger.warning("Could not create a structural diff, using a placeholder patch")
            return render_placeholder(name, version, f"could not download {name}@{version} from the registry")

        body = self.diff_engine.diff(baseline, location.path, name)
        if body is None:
            return render_placeholder(name, version, f"no differences from the registry copy of {name}@{version}")
        return body

    def _write_patch(self, result: PatchResult, name: str, version: str, body: str) -> PatchResult:
        sequence = None
        if self.options.append:
            sequence = self.catalog.next_sequence(name, version)

        try:
            file_name = encode_patch_name(name, version, sequence, self.options.append)
        except PatchNameError as exc:
            result.errors.append(f"Failed to create patch: {exc}")
            logger.error("Failed to create patch: %s", exc)
            return result.finalize()

        patch_path = self.patch_dir / file_name
        try:
            self.patch_dir.mkdir(parents=True, exist_ok=True)
            patch_path.write_text(body, encoding="utf-8", newline="")
        except OSError as exc:
            result.errors.append(f"Failed to create patch: {exc}")
            logger.error("Failed to create patch: %s", exc)
            return result.finalize()

        result.patches_created.append(str(patch_path))
        logger.info("Patch created: %s", file_name)

        if self.options.create_issue:
            open_issue(build_issue_url(self.settings.issue_url, name, body))

        return result.finalize()

    def apply_patches(self) -> PatchResult:
        """Apply every patch in catalog order."""
        return self._run_batch(self.catalog.list(), reverse=False)

    def reverse_patches(self) -> PatchResult:
        """Undo every patch, last one first."""
        return self._run_batch(self.catalog.list_reversed(), reverse=True)

    def _run_batch(self, artifacts: list[PatchArtifact], reverse: bool) -> PatchResult:
        verb = "reverse" if reverse else "apply"
        result = PatchResult()
        logger.info("%s patches...", "Reversing" if reverse else "Applying")

        if not artifacts:
            logger.warning("No patch files found in %s", self.patch_dir)
            return result.finalize()

        engine = ApplyEngine(
            self.project_root,
            identity=self.probe.detect(),
            resolver=self.resolver,
            timeout=self.settings.command_timeout,
        )

        for artifact in artifacts:
            outcome = engine.reverse(artifact) if reverse else engine.apply(artifact)
            result.outcomes.append(outcome)
            if outcome.state == ApplyState.SKIPPED_MANUAL:
                result.patches_skipped.append(str(artifact.path))
            elif outcome.state == ApplyState.FAILED:
                error = f"Failed to {verb} patch {artifact.file_name}: {outcome.detail}"
                result.errors.append(error)
                logger.error(error)
            else:
                result.patches_applied.append(str(artifact.path))

        result.finalize()
        past = "Reversed" if reverse else "Applied"
        if result.success:
            logger.info(
                "%s %d patch(es) successfully, %d skipped",
                past,
                len(result.patches_applied),
                len(result.patches_skipped),
            )
        else:
            logger.error("Failed to %s %d patch(es)", verb, len(result.errors))
        return result

    def list_patches(self) -> list[PatchArtifact]:
        return self.catalog.list()

    def info(self) -> ProjectInfo:
        return ProjectInfo(
            manager=self.probe.detect(),
            patch_dir=str(self.patch_dir),
            patch_count=len(self.catalog.list()),
        )

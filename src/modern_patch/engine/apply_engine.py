"""Application and reversal of patch artifacts."""

import logging
import re
from pathlib import Path

from modern_patch.engine.exceptions import ApplyError, PatchError, ReverseError
from modern_patch.engine.path_resolver import PathResolver, entry_point
from modern_patch.engine.strategies import Strategy, hard_failure, run_chain, succeed, try_next
from modern_patch.models.manager_models import ManagerIdentity
from modern_patch.models.patch_models import BodyKind, PatchArtifact
from modern_patch.models.result_models import ApplyOutcome, ApplyState, StrategyOutcome, StrategyResult
from modern_patch.utils.diff_generator import classify_body, parse_structural_diff, reconstruct_content
from modern_patch.utils.process import DEFAULT_TIMEOUT, run_command

logger = logging.getLogger(__name__)

# git apply --reject reports partially applied patches on stderr.
PARTIAL_REJECT_RE = re.compile(r"with \d+ rejects?|Rejected hunk", re.IGNORECASE)


class ApplyEngine:
    """Realizes (or undoes) the changes recorded in one patch artifact."""

    def __init__(
        self,
        project_root: str | Path,
        identity: ManagerIdentity,
        resolver: PathResolver | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.project_root = Path(project_root)
        self.identity = identity
        self.resolver = resolver or PathResolver(project_root, timeout=timeout)
        self.timeout = timeout

    def apply(self, artifact: PatchArtifact) -> ApplyOutcome:
        return self._process(artifact, reverse=False)

    def reverse(self, artifact: PatchArtifact) -> ApplyOutcome:
        return self._process(artifact, reverse=True)

    def _process(self, artifact: PatchArtifact, reverse: bool) -> ApplyOutcome:
        error_cls = ReverseError if reverse else ApplyError
        try:
            body = artifact.read_body()
        except (OSError, UnicodeDecodeError) as exc:
            return self._failed(artifact, None, reverse, f"Could not read patch: {exc}")

        kind = classify_body(body)
        if kind == BodyKind.PLACEHOLDER:
            logger.info("Skipping %s: manual placeholder patch", artifact.file_name)
            return ApplyOutcome(
                file_name=artifact.file_name,
                state=ApplyState.SKIPPED_MANUAL,
                mode=kind,
                reverse=reverse,
                detail="Placeholder patch; apply the changes manually",
            )

        try:
            if kind == BodyKind.STRUCTURAL_DIFF:
                touched = self._replay_structural(artifact, body, reverse, error_cls)
                state = ApplyState.APPLIED
                detail = ""
            else:
                state, detail = self._apply_unified(artifact, reverse, error_cls)
                touched = []
        except PatchError as exc:
            return self._failed(artifact, kind, reverse, str(exc))

        return ApplyOutcome(
            file_name=artifact.file_name,
            state=state,
            mode=kind,
            reverse=reverse,
            detail=detail,
            touched_files=touched,
        )

    def _failed(
        self,
        artifact: PatchArtifact,
        kind: BodyKind | None,
        reverse: bool,
        detail: str,
    ) -> ApplyOutcome:
        return ApplyOutcome(
            file_name=artifact.file_name,
            state=ApplyState.FAILED,
            mode=kind,
            reverse=reverse,
            detail=detail,
        )

    def _replay_structural(
        self,
        artifact: PatchArtifact,
        body: str,
        reverse: bool,
        error_cls: type[PatchError],
    ) -> list[str]:
        """Rewrite every file recorded in a structural diff.

        All targets are computed before the first write so a malformed
        patch leaves the dependency untouched.

        Returns:
            Relative paths of the files that were written or removed.
        """
        dependency_dir = self.resolver.resolve(self.identity, artifact.dependency_name)
        if dependency_dir is None:
            raise error_cls(f"Package {artifact.dependency_name} not found in node_modules")

        try:
            hunks = parse_structural_diff(body)
        except ValueError as exc:
            raise error_cls(f"Malformed structural diff: {exc}") from exc
        if not hunks:
            raise error_cls("Structural diff contains no hunks")

        resolved_root = dependency_dir.resolve()
        planned: list[tuple[str, Path, str | None]] = []
        for hunk in hunks:
            relative_path = hunk.file_path or entry_point(dependency_dir)
            target = (dependency_dir / relative_path).resolve()
            if not target.is_relative_to(resolved_root):
                raise error_cls(f"Refusing to write outside {artifact.dependency_name}: {relative_path}")
            planned.append((relative_path, target, reconstruct_content(hunk, reverse=reverse)))

        touched: list[str] = []
        for relative_path, target, content in planned:
            try:
                if content is None:
                    if target.exists():
                        target.unlink()
                        touched.append(relative_path)
                    continue
                encoded = content.encode("utf-8")
                if target.is_file() and target.read_bytes() == encoded:
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(encoded)
            except OSError as exc:
                raise error_cls(f"Could not write {relative_path}: {exc}") from exc
            touched.append(relative_path)

        logger.info(
            "%s %s (%d file(s) changed)",
            "Reversed" if reverse else "Applied",
            artifact.file_name,
            len(touched),
        )
        return touched

    def _apply_unified(
        self,
        artifact: PatchArtifact,
        reverse: bool,
        error_cls: type[PatchError],
    ) -> tuple[ApplyState, str]:
        """Apply a conventional unified diff with git, strict then partial."""
        base_args = ["git", "apply"]
        if reverse:
            base_args.append("--reverse")
        base_args.append("--ignore-whitespace")
        patch_path = str(artifact.path.resolve())

        def whitespace_tolerant() -> StrategyResult:
            result = run_command(base_args + [patch_path], cwd=self.project_root, timeout=self.timeout)
            if result.success:
                return succeed("ignore-whitespace", ApplyState.APPLIED)
            return try_next("ignore-whitespace", result.error.strip())

        def partial_reject() -> StrategyResult:
            result = run_command(
                base_args + ["--reject", patch_path],
                cwd=self.project_root,
                timeout=self.timeout,
            )
            if result.success:
                return succeed("reject", ApplyState.APPLIED)
            if PARTIAL_REJECT_RE.search(result.error):
                return succeed("reject", ApplyState.APPLIED_WITH_REJECTIONS, result.error.strip())
            return hard_failure("reject", result.error.strip())

        chain: list[Strategy] = [
            ("ignore-whitespace", whitespace_tolerant),
            ("reject", partial_reject),
        ]
        outcome = run_chain(chain)
        if outcome.outcome != StrategyOutcome.SUCCESS:
            action = "Git reverse apply" if reverse else "Git apply"
            raise error_cls(f"{action} failed: {outcome.detail or 'unknown error'}")

        if outcome.value == ApplyState.APPLIED_WITH_REJECTIONS:
            logger.warning("%s applied with rejected hunks; see the .rej files", artifact.file_name)
        return outcome.value, outcome.detail

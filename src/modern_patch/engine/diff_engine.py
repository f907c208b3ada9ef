"""Structural diffing of a modified dependency against its baseline."""

import logging
from pathlib import Path

from modern_patch.models.patch_models import DiffHunk
from modern_patch.utils.diff_generator import build_positional_hunk, render_structural_diff
from modern_patch.utils.file_filter import should_include_file

logger = logging.getLogger(__name__)

# Never part of a dependency's published files.
DEFAULT_IGNORED_PARTS = frozenset({"node_modules", ".git"})


class DiffEngine:
    """Compares two directory trees and renders a structural diff."""

    def __init__(
        self,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
        case_sensitive: bool = False,
    ) -> None:
        self.include = include or []
        self.exclude = exclude or []
        self.case_sensitive = case_sensitive

    def diff(self, baseline_dir: Path, modified_dir: Path, dependency_name: str) -> str | None:
        """Render the difference between two trees.

        Args:
            baseline_dir: Pristine copy of the dependency.
            modified_dir: The edited, installed dependency.
            dependency_name: Name recorded in the diff header.

        Returns:
            Structural diff body, or None when nothing differs.
        """
        hunks = self.collect_hunks(Path(baseline_dir), Path(modified_dir))
        if not hunks:
            logger.info("No differences found for %s", dependency_name)
            return None
        logger.info("Found %d changed file(s) in %s", len(hunks), dependency_name)
        return render_structural_diff(dependency_name, hunks)

    def collect_hunks(self, baseline_dir: Path, modified_dir: Path) -> list[DiffHunk]:
        """Build one hunk per added, deleted or changed file."""
        baseline_files = self._discover_files(baseline_dir)
        modified_files = self._discover_files(modified_dir)

        hunks: list[DiffHunk] = []
        for relative_path in sorted(baseline_files | modified_files):
            in_base = relative_path in baseline_files
            in_mod = relative_path in modified_files
            base_bytes = (baseline_dir / relative_path).read_bytes() if in_base else b""
            mod_bytes = (modified_dir / relative_path).read_bytes() if in_mod else b""

            if in_base and in_mod and base_bytes == mod_bytes:
                continue

            try:
                base_text = base_bytes.decode("utf-8")
                mod_text = mod_bytes.decode("utf-8")
            except UnicodeDecodeError:
                logger.warning("Skipping binary file %s", relative_path)
                continue

            hunks.append(
                build_positional_hunk(
                    relative_path,
                    base_text,
                    mod_text,
                    is_new_file=not in_base,
                    is_deleted_file=not in_mod,
                )
            )
        return hunks

    def _discover_files(self, root: Path) -> set[str]:
        """Relative POSIX paths of regular files under root that pass the filters."""
        files: set[str] = set()
        for path in root.rglob("*"):
            if path.is_symlink() or not path.is_file():
                continue
            relative = path.relative_to(root)
            if any(part in DEFAULT_IGNORED_PARTS for part in relative.parts):
                continue
            relative_path = relative.as_posix()
            if should_include_file(relative_path, self.include, self.exclude, self.case_sensitive):
                files.add(relative_path)
        return files

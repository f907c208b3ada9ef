"""Enumeration and ordering of the patch files in a directory."""

from __future__ import annotations

import logging
from pathlib import Path

from modern_patch.models.patch_models import PatchArtifact
from modern_patch.utils.patch_namer import PATCH_SUFFIX, decode_patch_name

logger = logging.getLogger(__name__)


def sort_key(artifact: PatchArtifact) -> tuple[str, int, str]:
    """Name, then sequence (absent sorts as 0), then version."""
    return (
        artifact.dependency_name,
        artifact.sequence if artifact.sequence is not None else 0,
        artifact.dependency_version,
    )


class PatchCatalog:
    """Reads the patch directory; the listing is the only persisted state."""

    def __init__(self, patch_dir: str | Path) -> None:
        self.patch_dir = Path(patch_dir)

    def list(self) -> list[PatchArtifact]:
        """Parse every ``*.patch`` file, skipping names outside the grammar.

        Returns:
            Artifacts in application order.
        """
        if not self.patch_dir.is_dir():
            return []

        artifacts: list[PatchArtifact] = []
        for path in sorted(self.patch_dir.glob(f"*{PATCH_SUFFIX}")):
            if not path.is_file():
                continue
            parsed = decode_patch_name(path.name)
            if parsed is None:
                logger.debug("Ignoring %s: not a patch file name", path.name)
                continue
            artifacts.append(
                PatchArtifact(
                    file_name=path.name,
                    path=path,
                    dependency_name=parsed.package_name,
                    dependency_version=parsed.package_version,
                    sequence=parsed.sequence,
                    description=parsed.description,
                )
            )
        return sorted(artifacts, key=sort_key)

    def list_reversed(self) -> list[PatchArtifact]:
        """Artifacts in undo order: last applied, first reversed."""
        return list(reversed(self.list()))

    def next_sequence(self, dependency_name: str, dependency_version: str) -> int:
        """Sequence number for a new patch appended to a dependency version."""
        sequences = [
            artifact.sequence or 0
            for artifact in self.list()
            if artifact.dependency_name == dependency_name
            and artifact.dependency_version == dependency_version
        ]
        return max(sequences, default=0) + 1

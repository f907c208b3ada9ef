"""Data models for modern-patch."""

from modern_patch.models.manager_models import ManagerIdentity, ManagerKind
from modern_patch.models.patch_models import (
    BodyKind,
    DependencyLocation,
    DiffHunk,
    HunkLine,
    LineMarker,
    PatchArtifact,
)
from modern_patch.models.result_models import (
    ApplyOutcome,
    ApplyState,
    PatchResult,
    ProjectInfo,
    StrategyOutcome,
    StrategyResult,
)

__all__ = [
    "ApplyOutcome",
    "ApplyState",
    "BodyKind",
    "DependencyLocation",
    "DiffHunk",
    "HunkLine",
    "LineMarker",
    "ManagerIdentity",
    "ManagerKind",
    "PatchArtifact",
    "PatchResult",
    "ProjectInfo",
    "StrategyOutcome",
    "StrategyResult",
]

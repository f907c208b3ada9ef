"""Result models for apply/reverse outcomes and batch operations."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from modern_patch.models.manager_models import ManagerIdentity
from modern_patch.models.patch_models import BodyKind


class ApplyState(str, Enum):
    """Terminal states of a single artifact application."""

    APPLIED = "applied"
    APPLIED_WITH_REJECTIONS = "applied-with-rejections"
    SKIPPED_MANUAL = "skipped-manual"
    FAILED = "failed"


class ApplyOutcome(BaseModel):
    model_config = ConfigDict(frozen=False)

    file_name: str
    state: ApplyState
    mode: BodyKind | None = None
    reverse: bool = False
    detail: str = ""
    touched_files: list[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state != ApplyState.FAILED


class PatchResult(BaseModel):
    """Aggregate result of a create/apply/reverse batch."""

    model_config = ConfigDict(frozen=False)

    success: bool = False
    patches_created: list[str] = Field(default_factory=list)
    patches_applied: list[str] = Field(default_factory=list)
    patches_skipped: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    outcomes: list[ApplyOutcome] = Field(default_factory=list)

    def finalize(self) -> "PatchResult":
        self.success = not self.errors
        return self


class StrategyOutcome(str, Enum):
    """Tag returned by one step of a layered fallback chain."""

    SUCCESS = "success"
    TRY_NEXT = "try-next"
    HARD_FAILURE = "hard-failure"


class StrategyResult(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    outcome: StrategyOutcome
    strategy: str
    value: Any = None
    detail: str = ""


class ProjectInfo(BaseModel):
    """What the `info` command reports about a project."""

    model_config = ConfigDict(frozen=True)

    manager: ManagerIdentity
    patch_dir: str
    patch_count: int

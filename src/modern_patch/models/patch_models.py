"""Models for patch artifacts and the hunks they carry."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class BodyKind(str, Enum):
    """How a patch body is interpreted on apply/reverse."""

    STRUCTURAL_DIFF = "structural-diff"
    UNIFIED_DIFF = "unified-diff"
    PLACEHOLDER = "placeholder"


class LineMarker(str, Enum):
    CONTEXT = " "
    ADD = "+"
    REMOVE = "-"


class HunkLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    marker: LineMarker
    text: str


class DiffHunk(BaseModel):
    """All changed lines of a single file, positionally aligned."""

    model_config = ConfigDict(frozen=False)

    file_path: str | None             # Relative to the dependency root; None targets the entry point
    base_line_count: int
    modified_line_count: int
    lines: list[HunkLine] = Field(default_factory=list)
    is_new_file: bool = False         # Baseline side is /dev/null
    is_deleted_file: bool = False     # Modified side is /dev/null
    base_missing_newline: bool = False
    modified_missing_newline: bool = False


class DependencyLocation(BaseModel):
    """A resolved dependency directory plus the identity from its manifest."""

    model_config = ConfigDict(frozen=True)

    dependency_name: str
    path: Path
    package_name: str
    package_version: str


class PatchArtifact(BaseModel):
    """A patch file on disk, identified purely by its file name."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    path: Path
    dependency_name: str
    dependency_version: str
    sequence: int | None = None
    description: str | None = None

    def read_body(self) -> str:
        # Text mode would rewrite "\r\n" and split rows on a lone "\r".
        return self.path.read_bytes().decode("utf-8")

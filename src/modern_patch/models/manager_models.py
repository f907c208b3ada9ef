"""Models describing the package manager that owns a project."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ManagerKind(str, Enum):
    """Package managers whose dependency layouts are understood."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


class ManagerIdentity(BaseModel):
    """Snapshot of the detected package manager for one invocation."""

    model_config = ConfigDict(frozen=True)

    kind: ManagerKind
    version: str                  # Output of `<manager> --version`, or "unknown"
    lock_file: str                # e.g. "yarn.lock"
    has_lock_file: bool

    @property
    def is_yarn_classic(self) -> bool:
        """True for Yarn 1.x, which only knows the node_modules layout."""
        return self.kind == ManagerKind.YARN and self.version.startswith("1.")

    @property
    def is_yarn_berry(self) -> bool:
        return self.kind == ManagerKind.YARN and not self.is_yarn_classic

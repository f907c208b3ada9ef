"""Patch lifecycle engine: resolution, diffing, fetching and applying."""

from modern_patch.engine.apply_engine import ApplyEngine
from modern_patch.engine.diff_engine import DiffEngine
from modern_patch.engine.exceptions import (
    ApplyError,
    DownloadError,
    PatchError,
    PatchNameError,
    ResolutionError,
    ReverseError,
)
from modern_patch.engine.manager_probe import ManagerProbe
from modern_patch.engine.path_resolver import PathResolver
from modern_patch.engine.registry_fetcher import RegistryFetcher

__all__ = [
    "ApplyEngine",
    "ApplyError",
    "DiffEngine",
    "DownloadError",
    "ManagerProbe",
    "PatchError",
    "PatchNameError",
    "PathResolver",
    "RegistryFetcher",
    "ResolutionError",
    "ReverseError",
]

"""Batch orchestration of patch creation, application and listing."""

from modern_patch.orchestrator.catalog import PatchCatalog
from modern_patch.orchestrator.patcher import PatchOptions, PatchPackage

__all__ = [
    "PatchCatalog",
    "PatchOptions",
    "PatchPackage",
]

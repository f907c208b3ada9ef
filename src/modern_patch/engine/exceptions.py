"""Exceptions for the patch lifecycle engine."""


class PatchError(Exception):
    """Base exception for all patch operations."""


class ResolutionError(PatchError):
    """Raised when a dependency directory or its manifest cannot be found."""


class DownloadError(PatchError):
    """Raised when a pristine registry copy cannot be fetched or extracted."""


class PatchNameError(PatchError):
    """Raised when a patch file name cannot be encoded from its parts."""


class ApplyError(PatchError):
    """Raised when a patch cannot be applied, even in partial-rejection mode."""


class ReverseError(PatchError):
    """Raised when a patch cannot be reversed."""

"""Utilities for modern-patch."""

from modern_patch.utils.diff_generator import (
    build_positional_hunk,
    classify_body,
    parse_structural_diff,
    reconstruct_content,
    render_placeholder,
    render_structural_diff,
)
from modern_patch.utils.file_filter import should_include_file
from modern_patch.utils.process import CommandResult, run_command

__all__ = [
    "CommandResult",
    "build_positional_hunk",
    "classify_body",
    "parse_structural_diff",
    "reconstruct_content",
    "render_placeholder",
    "render_structural_diff",
    "run_command",
    "should_include_file",
]

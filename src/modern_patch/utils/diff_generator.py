"""Rendering and parsing of structural diffs and placeholder patch bodies."""

import re

from modern_patch.models.patch_models import BodyKind, DiffHunk, HunkLine, LineMarker

PLACEHOLDER_MARKER = "This is a placeholder patch file."
TOOL_MARKER = "Created by modern-patch"
STRUCTURAL_INDEX_LINE = "index 0000000..0000000 100644"
NO_NEWLINE_MARKER = "\\ No newline at end of file"
DEV_NULL = "/dev/null"

STRUCTURAL_HEADER_RE = re.compile(
    r"^diff --git a/(\S+) b/\1\n" + re.escape(STRUCTURAL_INDEX_LINE) + r"$",
    re.MULTILINE,
)
HUNK_HEADER_RE = re.compile(r"^@@ -1,(\d+) \+1,(\d+) @@")


def split_lines(content: str) -> tuple[list[str], bool]:
    """Split text into lines.

    Returns:
        Tuple of (lines, missing_final_newline). Only ``\\n`` separates
        lines so ``\\r`` survives a round trip.
    """
    if not content:
        return [], False
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
        return lines, False
    return lines, True


def build_positional_hunk(
    file_path: str,
    original_content: str,
    modified_content: str,
    is_new_file: bool = False,
    is_deleted_file: bool = False,
) -> DiffHunk:
    """Compare two versions of a file line by line at equal positions.

    This is not an alignment diff: an inserted line shifts every later
    line, which is then recorded as removed and re-added.

    Args:
        file_path: Path relative to the dependency root.
        original_content: Baseline text ("" for new files).
        modified_content: Modified text ("" for deleted files).
        is_new_file: The baseline side does not exist.
        is_deleted_file: The modified side does not exist.

    Returns:
        DiffHunk covering max(base, modified) positions.
    """
    base_lines, base_missing = split_lines(original_content)
    mod_lines, mod_missing = split_lines(modified_content)
    base_count = len(base_lines)
    mod_count = len(mod_lines)

    lines: list[HunkLine] = []
    for index in range(max(base_count, mod_count)):
        base = base_lines[index] if index < base_count else None
        mod = mod_lines[index] if index < mod_count else None
        base_last = base_missing and index == base_count - 1
        mod_last = mod_missing and index == mod_count - 1

        if base == mod and base_last == mod_last:
            lines.append(HunkLine(marker=LineMarker.CONTEXT, text=base))
            continue
        if base is not None:
            lines.append(HunkLine(marker=LineMarker.REMOVE, text=base))
        if mod is not None:
            lines.append(HunkLine(marker=LineMarker.ADD, text=mod))

    return DiffHunk(
        file_path=file_path,
        base_line_count=base_count,
        modified_line_count=mod_count,
        lines=lines,
        is_new_file=is_new_file,
        is_deleted_file=is_deleted_file,
        base_missing_newline=base_missing,
        modified_missing_newline=mod_missing,
    )


def _render_hunk(hunk: DiffHunk) -> list[str]:
    out: list[str] = []
    if hunk.file_path is not None:
        out.append(f"--- {DEV_NULL if hunk.is_new_file else 'a/' + hunk.file_path}")
        out.append(f"+++ {DEV_NULL if hunk.is_deleted_file else 'b/' + hunk.file_path}")
    out.append(f"@@ -1,{hunk.base_line_count} +1,{hunk.modified_line_count} @@")

    base_seen = 0
    mod_seen = 0
    for line in hunk.lines:
        out.append(f"{line.marker.value}{line.text}")
        on_base = line.marker in (LineMarker.CONTEXT, LineMarker.REMOVE)
        on_mod = line.marker in (LineMarker.CONTEXT, LineMarker.ADD)
        base_seen += on_base
        mod_seen += on_mod
        ends_base = on_base and base_seen == hunk.base_line_count and hunk.base_missing_newline
        ends_mod = on_mod and mod_seen == hunk.modified_line_count and hunk.modified_missing_newline
        if ends_base or ends_mod:
            out.append(NO_NEWLINE_MARKER)
    return out


def render_structural_diff(dependency_name: str, hunks: list[DiffHunk]) -> str:
    """Serialize hunks under the synthetic dependency header."""
    out = [
        f"diff --git a/{dependency_name} b/{dependency_name}",
        STRUCTURAL_INDEX_LINE,
    ]
    for hunk in hunks:
        out.extend(_render_hunk(hunk))
    return "\n".join(out) + "\n"


def _strip_side_prefix(raw: str, prefix: str) -> str:
    return raw[len(prefix):] if raw.startswith(prefix) else raw


def parse_structural_diff(body: str) -> list[DiffHunk]:
    """Parse a body produced by render_structural_diff back into hunks.

    Hunk lines are consumed by the counts in each ``@@`` header, so
    removed lines that start with ``--`` are not mistaken for headers.

    Raises:
        ValueError: If a hunk is truncated or malformed.
    """
    rows = body.split("\n")
    hunks: list[DiffHunk] = []
    old_side: str | None = None
    new_side: str | None = None
    position = 0

    while position < len(rows):
        row = rows[position]
        position += 1

        if row.startswith("--- "):
            old_side = row[4:]
            continue
        if row.startswith("+++ "):
            new_side = row[4:]
            continue

        header = HUNK_HEADER_RE.match(row)
        if header is None:
            continue

        base_count, mod_count = int(header.group(1)), int(header.group(2))
        is_new = old_side == DEV_NULL
        is_deleted = new_side == DEV_NULL
        if old_side is None and new_side is None:
            file_path = None
        elif is_deleted:
            file_path = _strip_side_prefix(old_side or "", "a/")
        else:
            file_path = _strip_side_prefix(new_side or "", "b/")

        hunk = DiffHunk(
            file_path=file_path,
            base_line_count=base_count,
            modified_line_count=mod_count,
            is_new_file=is_new,
            is_deleted_file=is_deleted,
        )

        base_seen = 0
        mod_seen = 0
        while base_seen < base_count or mod_seen < mod_count:
            if position >= len(rows):
                raise ValueError(f"Truncated hunk for {file_path or '<entry point>'}")
            row = rows[position]
            position += 1

            if row.startswith(NO_NEWLINE_MARKER[:2]):
                _mark_missing_newline(hunk)
                continue
            marker = row[:1] or LineMarker.CONTEXT.value
            try:
                line_marker = LineMarker(marker)
            except ValueError as exc:
                raise ValueError(f"Unexpected hunk line: {row!r}") from exc
            hunk.lines.append(HunkLine(marker=line_marker, text=row[1:]))
            base_seen += line_marker in (LineMarker.CONTEXT, LineMarker.REMOVE)
            mod_seen += line_marker in (LineMarker.CONTEXT, LineMarker.ADD)

        if position < len(rows) and rows[position].startswith(NO_NEWLINE_MARKER[:2]):
            _mark_missing_newline(hunk)
            position += 1

        hunks.append(hunk)
        old_side = None
        new_side = None

    return hunks


def _mark_missing_newline(hunk: DiffHunk) -> None:
    if not hunk.lines:
        return
    previous = hunk.lines[-1].marker
    if previous in (LineMarker.CONTEXT, LineMarker.REMOVE):
        hunk.base_missing_newline = True
    if previous in (LineMarker.CONTEXT, LineMarker.ADD):
        hunk.modified_missing_newline = True


def reconstruct_content(hunk: DiffHunk, reverse: bool = False) -> str | None:
    """Rebuild one side of a file from its hunk.

    Args:
        hunk: Parsed hunk.
        reverse: Rebuild the baseline side instead of the modified side.

    Returns:
        File text, or None when that side of the file does not exist.
    """
    if reverse:
        if hunk.is_new_file:
            return None
        keep = (LineMarker.CONTEXT, LineMarker.REMOVE)
        missing_newline = hunk.base_missing_newline
    else:
        if hunk.is_deleted_file:
            return None
        keep = (LineMarker.CONTEXT, LineMarker.ADD)
        missing_newline = hunk.modified_missing_newline

    lines = [line.text for line in hunk.lines if line.marker in keep]
    if not lines:
        return ""
    return "\n".join(lines) + ("" if missing_newline else "\n")


def render_placeholder(package_name: str, package_version: str, reason: str) -> str:
    """Human-readable body for a patch that carries no changes."""
    return (
        f"# Manual patch for {package_name}@{package_version}\n"
        f"# {TOOL_MARKER}\n"
        "#\n"
        f"# {PLACEHOLDER_MARKER}\n"
        f"# Reason: {reason}\n"
        "#\n"
        "# No structural diff could be computed, so applying this patch\n"
        "# changes nothing. Re-create it once a registry copy of the\n"
        "# package is reachable, or replace this file with a unified diff\n"
        "# (for example from `git diff --no-index <pristine> <modified>`).\n"
    )


def is_placeholder(body: str) -> bool:
    return PLACEHOLDER_MARKER in body and TOOL_MARKER in body


def is_structural_diff(body: str) -> bool:
    return STRUCTURAL_HEADER_RE.search(body) is not None


def classify_body(body: str) -> BodyKind:
    """Infer the body kind from its sentinels; placeholders win."""
    if is_placeholder(body):
        return BodyKind.PLACEHOLDER
    if is_structural_diff(body):
        return BodyKind.STRUCTURAL_DIFF
    return BodyKind.UNIFIED_DIFF

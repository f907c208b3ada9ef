"""Encoding and decoding of patch file names.

Grammar::

    <name>+<version>[+<seq>[+<description>]].patch

``seq`` is zero-padded to width 3. Scoped package names (``@scope/pkg``)
are written with ``__`` in place of ``/`` since file names cannot hold
path separators.
"""

import re
from typing import NamedTuple

from modern_patch.engine.exceptions import PatchNameError

PATCH_SUFFIX = ".patch"
SEQUENCE_WIDTH = 3
SCOPE_SEPARATOR = "__"

PATCH_NAME_RE = re.compile(r"^([^+]+)\+([^+]+)(?:\+(\d+)(?:\+(.+))?)?\.patch$")


class ParsedPatchName(NamedTuple):
    package_name: str
    package_version: str
    sequence: int | None
    description: str | None


def encode_patch_name(
    package_name: str,
    package_version: str,
    sequence: int | None = None,
    description: str | None = None,
) -> str:
    """Build the on-disk file name for a patch.

    Args:
        package_name: Dependency name, scoped names allowed.
        package_version: Installed version of the dependency.
        sequence: Optional ordering number, emitted zero-padded.
        description: Optional free text, only emitted with a sequence; an
            empty string is rejected rather than silently dropped.

    Returns:
        File name ending in ``.patch``.

    Raises:
        PatchNameError: If a component cannot be represented.
    """
    if not package_name or not package_version:
        raise PatchNameError("Package name and version are required")
    if "+" in package_name or "+" in package_version:
        raise PatchNameError(
            f"'+' is reserved in patch names: {package_name}@{package_version}"
        )
    if SCOPE_SEPARATOR in package_name:
        raise PatchNameError(f"'{SCOPE_SEPARATOR}' is reserved in package names: {package_name}")

    file_name = f"{package_name.replace('/', SCOPE_SEPARATOR)}+{package_version}"

    if sequence is not None:
        if sequence < 0:
            raise PatchNameError(f"Sequence must be >= 0, got {sequence}")
        file_name += f"+{sequence:0{SEQUENCE_WIDTH}d}"
        if description is not None:
            if not description:
                raise PatchNameError("Description must not be empty when given")
            if "/" in description or "\\" in description:
                raise PatchNameError(f"Description cannot contain path separators: {description}")
            file_name += f"+{description}"

    return f"{file_name}{PATCH_SUFFIX}"


def decode_patch_name(file_name: str) -> ParsedPatchName | None:
    """Parse a patch file name; None when it does not follow the grammar."""
    match = PATCH_NAME_RE.match(file_name)
    if match is None:
        return None

    name, version, sequence, description = match.groups()
    return ParsedPatchName(
        package_name=name.replace(SCOPE_SEPARATOR, "/"),
        package_version=version,
        sequence=int(sequence) if sequence is not None else None,
        description=description,
    )

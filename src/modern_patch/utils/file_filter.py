"""Include/exclude matching of relative file paths."""

import re


def glob_to_regex(pattern: str, case_sensitive: bool = False) -> re.Pattern[str]:
    """Compile a ``*``-only glob into an anchored regular expression."""
    body = ".*".join(re.escape(part) for part in pattern.split("*"))
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(f"^{body}$", flags)


def should_include_file(
    file_path: str,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    case_sensitive: bool = False,
) -> bool:
    """Decide whether a file takes part in a diff.

    Exclude patterns win. When include patterns are given, the file must
    match at least one of them.
    """
    for pattern in exclude or []:
        if glob_to_regex(pattern, case_sensitive).match(file_path):
            return False

    if include:
        return any(
            glob_to_regex(pattern, case_sensitive).match(file_path)
            for pattern in include
        )

    return True

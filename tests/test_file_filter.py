"""Tests for include/exclude file matching."""

from modern_patch.utils.file_filter import glob_to_regex, should_include_file


def test_no_patterns_includes_everything():
    assert should_include_file("lib/index.js") is True


def test_exclude_wins_over_include():
    assert should_include_file("lib/index.js", include=["lib/*"], exclude=["*.js"]) is False


def test_include_requires_a_match():
    assert should_include_file("README.md", include=["lib/*"]) is False
    assert should_include_file("lib/a.js", include=["lib/*"]) is True


def test_case_insensitive_by_default():
    assert should_include_file("LIB/A.JS", include=["lib/*.js"]) is True


def test_case_sensitive_flag():
    assert should_include_file("LIB/A.JS", include=["lib/*.js"], case_sensitive=True) is False


def test_glob_escapes_regex_characters():
    """Only * is a wildcard; dots and brackets are literal."""
    pattern = glob_to_regex("dist/[x].min.js")
    assert pattern.match("dist/[x].min.js")
    assert not pattern.match("dist/x-minxjs")

"""Prefilled issue links for sharing a patch upstream."""

import logging
import webbrowser
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


def build_issue_url(base_url: str, package_name: str, patch_body: str) -> str:
    """Build a new-issue URL with title and body filled in."""
    title = f"Fix for {package_name}"
    body = (
        f"## Patch for {package_name}\n\n"
        "This patch was created using modern-patch.\n\n"
        f"```patch\n{patch_body}\n```\n\n"
        "Please review and consider merging this fix."
    )
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode({'title': title, 'body': body})}"


def open_issue(url: str) -> bool:
    """Open the URL in a browser; failures are logged, never raised."""
    logger.info("Opening issue: %s", url)
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as exc:
        logger.warning("Could not open a browser for the issue: %s", exc)
        return False
    if not opened:
        logger.warning("No browser available; open the link above manually")
    return opened

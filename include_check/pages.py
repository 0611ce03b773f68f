"""
Include Check - Chrome Page Checker.

Every application page must carry the shared chrome: the
sidebar, header and breadcrumb elements, their scripts, and
the full-height flex layout. Page templates and the
components directory are not pages and are skipped.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

from .report import CheckReport
from .validator import read_document


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

SKIPPED_DIR = "components"
TEMPLATE_MARKER = "template"

REQUIRED_CHROME: Tuple[Tuple[str, str], ...] = (
    ("<webropol-sidebar", "Missing webropol-sidebar component"),
    ("<webropol-header", "Missing webropol-header component"),
    ("<webropol-breadcrumbs", "Missing webropol-breadcrumbs component"),
    ("sidebar.js", "Missing sidebar.js script import"),
    ("header.js", "Missing header.js script import"),
    ("breadcrumbs.js", "Missing breadcrumbs.js script import"),
    ('class="flex h-screen"', "Missing proper layout structure"),
)


@dataclass(frozen=True)
class PageCheckResult:
    """Chrome findings for one page."""

    path: str
    issues: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues


def check_page(text: str) -> List[str]:
    """Get the chrome issues for one page's text."""
    return [message for needle, message in REQUIRED_CHROME if needle not in text]


def discover_pages(root: PathLike) -> List[Path]:
    """List .html pages under root, skipping components dirs and templates."""
    pages: List[Path] = []
    for directory, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d != SKIPPED_DIR)
        for filename in sorted(filenames):
            if filename.endswith(".html") and TEMPLATE_MARKER not in filename:
                pages.append(Path(directory) / filename)
    return pages


class ChromePageChecker:
    """Checks every page under a root for the shared chrome."""

    def __init__(self, root: PathLike):
        self.root = Path(root)

    def run(self) -> CheckReport:
        results = []
        for page in discover_pages(self.root):
            name = Path(os.path.relpath(page, self.root)).as_posix()
            try:
                text = read_document(page)
            except OSError as e:
                logger.warning(f"Unreadable page {page}: {e}")
                results.append(PageCheckResult(path=name, issues=[f"Unreadable: {e.strerror or e}"]))
                continue
            results.append(PageCheckResult(path=name, issues=check_page(text)))

        logger.info(f"Chrome check complete | pages={len(results)}")
        return CheckReport(
            title="🔍 Validating pages for sidebar and header components...",
            results=results,
            checked_label="Total pages",
            valid_heading="✅ Pages with proper sidebar and header:",
        )


__all__ = [
    "REQUIRED_CHROME",
    "PageCheckResult",
    "check_page",
    "discover_pages",
    "ChromePageChecker",
]

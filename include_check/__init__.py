"""
Include Check Package - Static Page Validation.

Scans a corpus of HTML pages without running them:

- StaticOrderValidator: canonical settings includes on
  header-enabled pages (presence, duplicates, order)
- ChromePageChecker: shared sidebar/header/breadcrumb chrome

Both produce a CheckReport with a text and JSON rendering.
"""

from .pages import ChromePageChecker, PageCheckResult, check_page, discover_pages
from .prefix import document_depth, prefix_for
from .report import CheckReport, CheckReportSchema, PageResultSchema
from .validator import (
    StaticOrderValidator,
    ValidationResult,
    check_include_order,
    discover_documents,
)

__all__ = [
    "ChromePageChecker",
    "PageCheckResult",
    "check_page",
    "discover_pages",
    "document_depth",
    "prefix_for",
    "CheckReport",
    "CheckReportSchema",
    "PageResultSchema",
    "StaticOrderValidator",
    "ValidationResult",
    "check_include_order",
    "discover_documents",
]

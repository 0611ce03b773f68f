"""
Include Check - Static Order Validator.

============================================================
RESPONSIBILITY
============================================================
Proves, before a page ever runs, that it includes the
settings system in the order the bootstrap loads it.

- Discover .html documents under a corpus root
- Only check documents that use the header (opt-in marker)
- Required includes: present, not duplicated, in order
- Optional includes: present

============================================================
CHECKS PER DOCUMENT
============================================================
1. Expected paths = prefix (by depth) + canonical path
2. First index of each required path (-1 when absent)
3. Literal occurrence count of each required path
4. Presence of each optional path
5. Order: only when nothing required is missing, first
   indices must be strictly increasing

Findings are data, never exceptions: one bad document
never stops the scan.

============================================================
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from core.constants import (
    CANONICAL_RESOURCES,
    DOCUMENT_EXTENSIONS,
    EXCLUDED_DIR,
    HEADER_MARKER,
    OPTIONAL_RESOURCES,
)
from .prefix import prefix_for
from .report import CheckReport


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


# ============================================================
# RESULT MODEL
# ============================================================

@dataclass(frozen=True)
class ValidationResult:
    """Include-order findings for one document."""

    path: str
    prefix: str
    missing_required: Tuple[str, ...] = ()
    missing_optional: Tuple[str, ...] = ()
    duplicates: Mapping[str, int] = field(default_factory=dict)
    order_ok: bool = True
    read_error: Optional[str] = None

    @property
    def valid(self) -> bool:
        return (
            self.read_error is None
            and not self.missing_required
            and not self.missing_optional
            and not self.duplicates
            and self.order_ok
        )

    @property
    def issues(self) -> List[str]:
        """Human-readable issue lines, in report order."""
        issues = []
        if self.read_error is not None:
            issues.append(f"Unreadable: {self.read_error}")
        if self.missing_required:
            issues.append(f"Missing: {', '.join(self.missing_required)}")
        if self.missing_optional:
            issues.append(f"Missing CSS: {', '.join(self.missing_optional)}")
        if self.duplicates:
            listed = "; ".join(f"{src} x{count}" for src, count in self.duplicates.items())
            issues.append(f"Duplicates: {listed}")
        if not self.order_ok:
            issues.append("Incorrect include order")
        return issues


# ============================================================
# TEXT CHECKS
# ============================================================

def expected_paths(prefix: str, resources: Sequence[str]) -> List[str]:
    return [f"{prefix}{resource}" for resource in resources]


def count_literal(text: str, needle: str) -> int:
    """Count non-overlapping literal occurrences of needle."""
    return text.count(needle) if needle else 0


def check_include_order(
    text: str,
    prefix: str = "",
    required: Sequence[str] = CANONICAL_RESOURCES,
    optional: Sequence[str] = OPTIONAL_RESOURCES,
    path: str = "<text>",
) -> ValidationResult:
    """
    Check one document's text against the include contract.

    Args:
        text: Raw document text
        prefix: Relative prefix expected for this document
        required: Ordered required resources (unprefixed)
        optional: Presence-only resources (unprefixed)
        path: Label used in the result

    Returns:
        ValidationResult for the document
    """
    required_paths = expected_paths(prefix, required)
    optional_paths = expected_paths(prefix, optional)

    indices = [text.find(src) for src in required_paths]
    missing = tuple(src for src, idx in zip(required_paths, indices) if idx == -1)

    missing_optional = tuple(href for href in optional_paths if href not in text)

    duplicates: Dict[str, int] = {}
    for src in required_paths:
        count = count_literal(text, src)
        if count > 1:
            duplicates[src] = count

    order_ok = True
    if not missing:
        order_ok = all(later > earlier for earlier, later in zip(indices, indices[1:]))

    return ValidationResult(
        path=path,
        prefix=prefix,
        missing_required=missing,
        missing_optional=missing_optional,
        duplicates=MappingProxyType(duplicates),
        order_ok=order_ok,
    )


# ============================================================
# DISCOVERY
# ============================================================

def discover_documents(
    root: PathLike,
    excluded_dir: str = EXCLUDED_DIR,
    extensions: Iterable[str] = DOCUMENT_EXTENSIONS,
) -> List[Path]:
    """
    Recursively list documents under root, sorted.

    Any entry named excluded_dir is skipped at every level.
    """
    suffixes = tuple(extensions)
    found: List[Path] = []

    def _walk(directory: Path) -> None:
        with os.scandir(directory) as entries:
            ordered = sorted(entries, key=lambda e: e.name)
        for entry in ordered:
            if entry.name == excluded_dir:
                continue
            if entry.is_dir(follow_symlinks=False):
                _walk(Path(entry.path))
            elif entry.is_file() and entry.name.endswith(suffixes):
                found.append(Path(entry.path))

    _walk(Path(root))
    return found


def read_document(path: Path) -> str:
    """
    Read a document as text. Undecodable bytes are replaced.

    Raises:
        OSError: If the document cannot be read
    """
    return path.read_text(encoding="utf-8", errors="replace")


# ============================================================
# VALIDATOR
# ============================================================

class StaticOrderValidator:
    """
    Scans a corpus and checks every header-enabled page.

    Stateless between documents; two runs over the same corpus
    produce the same report.
    """

    def __init__(
        self,
        corpus_root: PathLike,
        excluded_dir: str = EXCLUDED_DIR,
        header_marker: str = HEADER_MARKER,
        required: Sequence[str] = CANONICAL_RESOURCES,
        optional: Sequence[str] = OPTIONAL_RESOURCES,
    ):
        self.corpus_root = Path(corpus_root)
        self.excluded_dir = excluded_dir
        self.header_marker = header_marker
        self.required = tuple(required)
        self.optional = tuple(optional)

    def uses_header(self, text: str) -> bool:
        return self.header_marker in text

    def relative_name(self, path: Path) -> str:
        return Path(os.path.relpath(path, self.corpus_root)).as_posix()

    def validate_document(self, path: PathLike) -> Optional[ValidationResult]:
        """
        Validate one document.

        Returns:
            ValidationResult, or None when the document does not opt in
        """
        path = Path(path)
        try:
            prefix = prefix_for(path, self.corpus_root)
        except ValueError as e:
            logger.warning(f"Rejected document {path}: {e}")
            return ValidationResult(path=self.relative_name(path), prefix="", read_error=str(e))

        try:
            text = read_document(path)
        except OSError as e:
            logger.warning(f"Unreadable document {path}: {e}")
            return ValidationResult(
                path=self.relative_name(path),
                prefix=prefix,
                read_error=e.strerror or str(e),
            )
        if not self.uses_header(text):
            return None

        return check_include_order(
            text,
            prefix=prefix,
            required=self.required,
            optional=self.optional,
            path=self.relative_name(path),
        )

    def run(self) -> CheckReport:
        """Validate every document in the corpus."""
        documents = discover_documents(self.corpus_root, excluded_dir=self.excluded_dir)
        logger.debug(f"Discovered {len(documents)} documents under {self.corpus_root}")

        results = []
        for document in documents:
            result = self.validate_document(document)
            if result is not None:
                results.append(result)

        report = CheckReport(
            title="🔍 Validating canonical Settings includes on Header-enabled pages...",
            results=results,
        )
        logger.info(
            f"Include check complete | checked={report.checked} "
            f"valid={len(report.valid)} invalid={len(report.invalid)}"
        )
        return report


__all__ = [
    "ValidationResult",
    "expected_paths",
    "count_literal",
    "check_include_order",
    "discover_documents",
    "read_document",
    "StaticOrderValidator",
]

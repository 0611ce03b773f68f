"""
Include Check - Reports.

Aggregates per-page findings into one report, renders it as
text for the terminal or as JSON for tooling, and decides the
process exit code. Any page result exposing path, valid and
issues can be reported.
"""

from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from pydantic import BaseModel, Field


class PageFinding(Protocol):
    path: str

    @property
    def valid(self) -> bool:
        ...

    @property
    def issues(self) -> List[str]:
        ...


# =============================================================
# JSON SCHEMA
# =============================================================

class PageResultSchema(BaseModel):
    """One checked page."""
    path: str
    valid: bool
    issues: List[str] = Field(default_factory=list)


class CheckReportSchema(BaseModel):
    """Machine-readable check report."""
    checked: int
    valid: int
    invalid: int
    pages: List[PageResultSchema] = Field(default_factory=list)


# =============================================================
# REPORT
# =============================================================

@dataclass
class CheckReport:
    """Aggregate of page findings."""

    title: str
    results: Sequence[PageFinding] = field(default_factory=list)
    checked_label: str = "Checked pages"
    invalid_heading: str = "❌ Pages needing updates:"
    valid_heading: str = "✅ Pages with correct includes:"

    @property
    def checked(self) -> int:
        return len(self.results)

    @property
    def valid(self) -> List[PageFinding]:
        return [r for r in self.results if r.valid]

    @property
    def invalid(self) -> List[PageFinding]:
        return [r for r in self.results if not r.valid]

    @property
    def exit_code(self) -> int:
        return 1 if self.invalid else 0

    def render_text(self) -> str:
        """Render the terminal report."""
        valid = self.valid
        invalid = self.invalid

        lines = [self.title, ""]
        lines.append("📊 Summary:")
        lines.append(f"  {self.checked_label}: {self.checked}")
        lines.append(f"  ✅ Valid: {len(valid)}")
        lines.append(f"  ❌ Invalid: {len(invalid)}")
        lines.append("")

        if invalid:
            lines.append(self.invalid_heading)
            for result in invalid:
                lines.append(f"  - {result.path}")
                for issue in result.issues:
                    lines.append(f"     • {issue}")
            lines.append("")

        if valid:
            lines.append(self.valid_heading)
            for result in valid:
                lines.append(f"  • {result.path}")

        return "\n".join(lines)

    def to_schema(self) -> CheckReportSchema:
        return CheckReportSchema(
            checked=self.checked,
            valid=len(self.valid),
            invalid=len(self.invalid),
            pages=[
                PageResultSchema(path=r.path, valid=r.valid, issues=list(r.issues))
                for r in self.results
            ],
        )

    def render_json(self) -> str:
        return self.to_schema().model_dump_json(indent=2)


__all__ = [
    "PageFinding",
    "PageResultSchema",
    "CheckReportSchema",
    "CheckReport",
]

"""
Diagnostics channel for record-level parse failures.

Skipped records are both logged and collected in a ``DiagnosticsSink``, so
that a caller (or a test) can inspect exactly which groups were rejected
and why, instead of scraping log output.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from datasource_ingest.assemblers import RecordGroup

_EXCERPT_LIMIT = 200


@dataclass(frozen=True)
class ParseFailure:
    """One rejected record group."""
    format_name: str
    line_number: int
    byte_offset: int
    reason: str
    excerpt: str

    @classmethod
    def from_group(cls, format_name: str, group: RecordGroup, error: Exception) -> ParseFailure:
        return cls(
            format_name=format_name,
            line_number=group.line_number,
            byte_offset=group.byte_offset,
            reason=f"{type(error).__name__}: {error}",
            excerpt=render_excerpt(group.first_line.text),
        )


def render_excerpt(text: str) -> str:
    """Make a line readable in a log message (tabs shown, length capped)."""
    text = text.replace("\t", " [TAB] ")
    if len(text) > _EXCERPT_LIMIT:
        text = text[:_EXCERPT_LIMIT] + "..."
    return text


@dataclass
class DiagnosticsSink:
    """Collects ``ParseFailure`` entries reported by a reader."""
    failures: list[ParseFailure] = field(default_factory=list)

    def record(self, failure: ParseFailure) -> None:
        self.failures.append(failure)

    def count_by_reason(self) -> Counter[str]:
        """Failure counts keyed by exception class name."""
        return Counter(f.reason.split(":", 1)[0] for f in self.failures)

    def line_numbers(self) -> list[int]:
        return [f.line_number for f in self.failures]

    def __len__(self) -> int:
        return len(self.failures)

"""Data models exchanged between the analyzer and its driver."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..source.models import Position, SourceFile


@dataclass(frozen=True)
class Diagnostic:
    """A problem reported at a source position."""

    position: Position
    message: str
    category: str = "faillint"

    def __str__(self) -> str:
        return f"{self.position}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "filename": self.position.filename,
            "line": self.position.line,
            "column": self.position.column,
            "offset": self.position.offset,
            "message": self.message,
            "category": self.category,
        }


@dataclass
class AnalysisPass:
    """One package worth of parsed files plus the sink diagnostics go to."""

    files: list[SourceFile]
    report: Callable[[Diagnostic], None]
    package: str = ""

    def reportf(self, position: Position, message: str) -> None:
        diagnostic = Diagnostic(position=position, message=message)
        self.report(diagnostic)

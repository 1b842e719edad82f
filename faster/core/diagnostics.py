"""
Diagnostics reported by the parser and the driver.

A message plus severity and span; the driver renders them one per line in
the usual `file:line:column: severity: message` form.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""A single problem found in the input (error/warning)."""

	message: str
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes an unknown location.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self) -> str:
		lines = [f"{self.span.prefix()}: {self.severity}: {self.message}"]
		lines.extend(f"  note: {note}" for note in self.notes)
		return "\n".join(lines)


def has_errors(diagnostics: list[Diagnostic]) -> bool:
	return any(d.severity == "error" for d in diagnostics)


__all__ = ["Diagnostic", "has_errors"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span used by diagnostics.

A Span carries best-effort file/line/column information and keeps the raw
parser object (a lark exception, a `Located`) in `raw` for callers that want
more detail.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""A source span (best-effort file/line/column plus the raw parser location)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, file: Optional[str] = None) -> "Span":
		"""
		Build a Span from a parser location object.

		A Span is returned unchanged. Anything else is probed for the usual
		line/column attributes and stored in `raw`.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		return cls(
			file=file or getattr(loc, "file", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	def prefix(self) -> str:
		"""`file:line:column` with the unknown parts left out."""
		parts = [self.file or "<source>"]
		if self.line is not None:
			parts.append(str(self.line))
			if self.column is not None:
				parts.append(str(self.column))
		return ":".join(parts)


__all__ = ["Span"]

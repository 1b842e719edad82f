# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Settings handed to the transform passes."""

from __future__ import annotations

from dataclasses import dataclass

_GO_KEYWORDS = frozenset(
	{
		"break", "case", "chan", "const", "continue", "default", "defer", "else",
		"fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
		"map", "package", "range", "return", "select", "struct", "switch", "type", "var",
	}
)


@dataclass(frozen=True)
class TransformConfig:
	"""
	holder_name: identifier of the channel each wrapped function creates,
	sends its result on and returns.
	"""

	holder_name: str = "result"

	def __post_init__(self) -> None:
		if not is_go_identifier(self.holder_name):
			raise ValueError(f"invalid holder name '{self.holder_name}': not a Go identifier")
		if self.holder_name == "_":
			raise ValueError("invalid holder name '_': the blank identifier cannot be read back")


def is_go_identifier(name: str) -> bool:
	return bool(name) and name.isidentifier() and name not in _GO_KEYWORDS


__all__ = ["TransformConfig", "is_go_identifier"]

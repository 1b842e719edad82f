# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from faster.core import Diagnostic, Span, has_errors
from faster.parser.ast import Located


def test_render_with_full_span() -> None:
	diag = Diagnostic(message="unexpected token", span=Span(file="a.go", line=3, column=7))
	assert diag.render() == "a.go:3:7: error: unexpected token"


def test_render_with_unknown_location_and_notes() -> None:
	diag = Diagnostic(message="boom", severity="warning", span=None, notes=["see here"])
	assert diag.render() == "<source>: warning: boom\n  note: see here"


def test_span_from_located() -> None:
	span = Span.from_loc(Located(2, 5, 2, 9), file="b.go")
	assert (span.file, span.line, span.column, span.end_column) == ("b.go", 2, 5, 9)
	assert Span.from_loc(span) is span
	assert Span.from_loc(None, file="c.go") == Span(file="c.go")


def test_has_errors_ignores_warnings() -> None:
	assert not has_errors([Diagnostic(message="w", severity="warning")])
	assert has_errors([Diagnostic(message="w", severity="warning"), Diagnostic(message="e")])

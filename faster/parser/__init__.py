# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go front end: source text -> `File` tree with comments attached.

Parse problems never escape as exceptions: lark's `UnexpectedInput` and the
builders' `GoSyntaxError` are collected as diagnostics so the driver can
report them before producing any output.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput

from faster.core.diagnostics import Diagnostic
from faster.core.span import Span

from . import parser as _parser
from .ast import File
from .comments import attach_comments

logger = logging.getLogger(__name__)


def parse_go_source(source: str, path: Optional[str] = None) -> Tuple[Optional[File], List[Diagnostic]]:
	"""
	Parse Go source text.

	Returns `(file, diagnostics)`; `file` is None whenever a diagnostic with
	error severity was produced.
	"""
	label = path or "<source>"
	try:
		file = _parser.parse_file_tree(source)
	except _parser.GoSyntaxError as err:
		return None, [Diagnostic(message=str(err), severity="error", span=Span.from_loc(err.loc, file=label))]
	except UnexpectedInput as err:
		line = getattr(err, "line", None)
		column = getattr(err, "column", None)
		if line is None or line < 1:
			# end-of-input errors carry no position; point past the last line
			line = source.count("\n") + 1
			column = 1
		span = Span(file=label, line=line, column=column, raw=err)
		return None, [Diagnostic(message=_describe(err), severity="error", span=span)]
	attach_comments(file)
	logger.debug("parsed %s: %d declarations, %d comments", label, len(file.decls), len(file.comments))
	return file, []


def parse_go_file(path: Path | str) -> Tuple[Optional[File], List[Diagnostic]]:
	"""Read and parse a Go source file; an unreadable file is reported as a diagnostic."""
	path = Path(path)
	try:
		source = path.read_text(encoding="utf-8")
	except (OSError, UnicodeDecodeError) as err:
		return None, [Diagnostic(message=f"cannot read file: {err}", severity="error", span=Span(file=str(path)))]
	return parse_go_source(source, str(path))


def _describe(err: UnexpectedInput) -> str:
	# lark messages span several lines (context excerpt, expected set); the
	# first line is the one that reads well after `path:line:col: error:`.
	text = str(err).strip()
	first = text.splitlines()[0] if text else type(err).__name__
	if isinstance(err, UnexpectedEOF):
		return "unexpected end of file"
	token = getattr(err, "token", None)
	if token is not None and token.type == "$END":
		return "unexpected end of file"
	if token is not None and token.type == "_SEMI":
		return "unexpected newline or semicolon"
	if token is not None:
		kind = _TOKEN_KINDS.get(token.type)
		return f"unexpected {kind} {token.value}" if kind else f"unexpected {token.value}"
	if isinstance(err, UnexpectedCharacters):
		return f"invalid character {err.char!r}"
	return first


_TOKEN_KINDS = {"NAME": "name", "NUMBER": "literal", "STRING": "literal", "CHAR": "literal"}


__all__ = ["parse_go_source", "parse_go_file", "File"]

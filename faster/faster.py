# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`faster` command line: parse a Go file, wrap its functions, print the result.

    faster [-o PATH] [--holder-name NAME] [-v] inputfile

Failures are all-or-nothing: a usage error or a parse error is reported on
stderr with exit status 1 and nothing is written to stdout or to `-o`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from faster.config import TransformConfig
from faster.core.diagnostics import has_errors
from faster.parser import parse_go_file
from faster.printer import format_file
from faster.transform import transform_file

logger = logging.getLogger(__name__)


class _UsageError(Exception):
	pass


class _ArgumentParser(argparse.ArgumentParser):
	def error(self, message: str) -> None:  # type: ignore[override]
		raise _UsageError(message)


def _build_arg_parser() -> argparse.ArgumentParser:
	parser = _ArgumentParser(
		prog="faster",
		usage="%(prog)s [options] inputfile",
		description="Make every single-result Go function run on its own goroutine.",
	)
	parser.add_argument("source", type=Path, help="Go source file to rewrite")
	parser.add_argument(
		"-o",
		"--output",
		type=Path,
		help="Write the rewritten source to this path instead of stdout",
	)
	parser.add_argument(
		"--holder-name",
		default=TransformConfig.holder_name,
		help="Identifier of the result channel inside wrapped functions (default: %(default)s)",
	)
	parser.add_argument(
		"-v",
		"--verbose",
		action="store_true",
		help="Log what the scan and rewrite passes do on stderr",
	)
	return parser


def main(argv: list[str] | None = None) -> int:
	"""
	Run the tool; returns the process exit status.

	Usage and parse errors print to stderr and return 1 before anything is
	written. On success the formatted program goes to stdout (or `-o`).
	"""
	parser = _build_arg_parser()
	try:
		args = parser.parse_args(argv)
		config = TransformConfig(holder_name=args.holder_name)
	except (_UsageError, ValueError) as err:
		parser.print_usage(sys.stderr)
		print(f"{parser.prog}: error: {err}", file=sys.stderr)
		return 1

	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)

	source_path: Path = args.source
	file, diagnostics = parse_go_file(source_path)
	if file is None or has_errors(diagnostics):
		print(f"failed to parse {source_path}", file=sys.stderr)
		for diag in diagnostics:
			print(diag.render(), file=sys.stderr)
		return 1

	result = transform_file(file, config)
	logger.debug("%s: wrapped %s", source_path, ", ".join(result.wrapped) or "nothing")
	text = format_file(result.file)

	if args.output is not None:
		args.output.write_text(text, encoding="utf-8")
	else:
		sys.stdout.write(text)
	return 0


__all__ = ["main"]

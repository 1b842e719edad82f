# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Eligibility scan over the top-level declarations.

A declaration is eligible when it is a plain function (no receiver) with a
body and exactly one declared result. Eligible declarations are recorded in
the registry and replaced in place by their wrapped form; everything else
is left untouched. The whole file is scanned before any call site is
rewritten, so forward references and mutual recursion see every name.
"""

from __future__ import annotations

import logging
from typing import Optional

from faster.config import TransformConfig
from faster.parser.ast import Decl, File, FuncDecl

from .registry import WrappedRegistry
from .wrap import wrap_declaration

logger = logging.getLogger(__name__)


def ineligible_reason(decl: Decl) -> Optional[str]:
	"""None for an eligible declaration, otherwise a short reason."""
	if not isinstance(decl, FuncDecl):
		return "not a function"
	if decl.recv is not None:
		return "method"
	if decl.body is None:
		return "no body"
	count = decl.type.result_count()
	if count != 1:
		return f"{count} results"
	return None


def is_eligible(decl: Decl) -> bool:
	return ineligible_reason(decl) is None


def scan_file(file: File, registry: WrappedRegistry, config: TransformConfig) -> int:
	"""Wrap every eligible declaration of `file` in place; returns how many were wrapped."""
	wrapped = 0
	for index, decl in enumerate(file.decls):
		reason = ineligible_reason(decl)
		if reason is not None:
			if isinstance(decl, FuncDecl):
				logger.debug("skipping %s: %s", decl.name.name, reason)
			continue
		registry.mark(decl.name.name)
		file.decls[index] = wrap_declaration(decl, config)
		wrapped += 1
		logger.debug("wrapped %s", decl.name.name)
	return wrapped


__all__ = ["scan_file", "is_eligible", "ineligible_reason"]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
faster.transform: the two passes over a parsed file.

  1. scanner: wrap every eligible top-level function and record its name,
  2. callsites: turn each direct call of a recorded name into a receive.

The scan finishes (and the registry is sealed) before any call site is
touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from faster.config import TransformConfig
from faster.parser.ast import File

from .callsites import CallSiteRewriter, rewrite_call_sites
from .registry import RegistrySealedError, WrappedRegistry
from .scanner import is_eligible, scan_file
from .wrap import wrap_declaration

logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
	file: File
	wrapped: List[str] = field(default_factory=list)  # in declaration order
	rewritten_calls: int = 0


def transform_file(file: File, config: Optional[TransformConfig] = None) -> TransformResult:
	"""Rewrite `file` in place and report what changed."""
	config = config or TransformConfig()
	registry = WrappedRegistry()
	scan_file(file, registry, config)
	registry.seal()
	rewritten = rewrite_call_sites(file, registry)
	logger.debug("wrapped %d function(s), rewrote %d call(s)", len(registry), rewritten)
	return TransformResult(file=file, wrapped=registry.names(), rewritten_calls=rewritten)


__all__ = [
	"TransformResult",
	"transform_file",
	"WrappedRegistry",
	"RegistrySealedError",
	"CallSiteRewriter",
	"rewrite_call_sites",
	"scan_file",
	"is_eligible",
	"wrap_declaration",
]

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
faster: rewrite Go programs so every single-result function runs on its own
goroutine and hands its result back over a channel.

Packages:
  - parser: Go source -> syntax tree with comments attached
  - transform: declaration wrapping and call-site rewriting
  - printer: syntax tree -> gofmt-style source text

The CLI entrypoint is `faster.faster:main`.
"""

__all__ = []

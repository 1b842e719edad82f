# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List


class RegistrySealedError(RuntimeError):
	"""A name was recorded after the scan finished."""


@dataclass
class WrappedRegistry:
	"""
	Names of the top-level functions rewritten to return a result channel.

	The scan records names; once it is done the registry is sealed and the
	call-site pass only reads it. Matching is by spelled name: Go has a
	single package-level namespace for functions, so a name is either
	wrapped or it is not.
	"""

	_names: List[str] = field(default_factory=list)
	_index: set[str] = field(default_factory=set)
	_sealed: bool = False

	def mark(self, name: str) -> None:
		if self._sealed:
			raise RegistrySealedError(f"cannot record '{name}': registry is sealed")
		if name in self._index:
			return
		self._index.add(name)
		self._names.append(name)

	def seal(self) -> None:
		self._sealed = True

	@property
	def sealed(self) -> bool:
		return self._sealed

	def is_wrapped(self, name: str) -> bool:
		return name in self._index

	def names(self) -> List[str]:
		"""Recorded names in scan order."""
		return list(self._names)

	def __contains__(self, name: object) -> bool:
		return name in self._index

	def __iter__(self) -> Iterator[str]:
		return iter(self._names)

	def __len__(self) -> int:
		return len(self._names)


__all__ = ["WrappedRegistry", "RegistrySealedError"]

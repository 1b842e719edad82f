# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import logging

import pytest

from faster.config import TransformConfig
from faster.parser import parse_go_source
from faster.parser.ast import ChanType, FuncDecl, GenDecl
from faster.transform.registry import WrappedRegistry
from faster.transform.scanner import ineligible_reason, is_eligible, scan_file

SOURCE = """package p

var limit = 10

type Rec struct{}

func (r Rec) M() int {
	return 1
}

func external(x int) int

func none() {
}

func pair() (int, error) {
	return 0, nil
}

func shared() (x, y int) {
	return 1, 2
}

func named() (n int) {
	n = 3
	return
}

func Add(a, b int) int { return a + b }
"""


def _parse(src: str):
	file, diagnostics = parse_go_source(src)
	assert diagnostics == []
	return file


def _decl(file, name: str):
	for decl in file.decls:
		if isinstance(decl, FuncDecl) and decl.name.name == name:
			return decl
	raise KeyError(name)


@pytest.mark.parametrize(
	"name,reason",
	[
		("M", "method"),
		("external", "no body"),
		("none", "0 results"),
		("pair", "2 results"),
		("shared", "2 results"),
		("named", None),
		("Add", None),
	],
)
def test_eligibility(name: str, reason) -> None:
	file = _parse(SOURCE)
	decl = _decl(file, name)
	assert ineligible_reason(decl) == reason
	assert is_eligible(decl) is (reason is None)


def test_gen_decls_are_not_eligible() -> None:
	file = _parse(SOURCE)
	assert not is_eligible(file.decls[0])
	assert ineligible_reason(file.decls[0]) == "not a function"


def test_scan_wraps_in_place_and_records_names() -> None:
	file = _parse(SOURCE)
	before = list(file.decls)
	reg = WrappedRegistry()
	count = scan_file(file, reg, TransformConfig())
	assert count == 2
	assert reg.names() == ["named", "Add"]
	assert len(file.decls) == len(before)
	for old, new in zip(before, file.decls):
		if isinstance(old, FuncDecl) and old.name.name in reg:
			assert new is not old
			assert isinstance(new.type.results[0].type, ChanType)
		else:
			assert new is old
	assert isinstance(file.decls[0], GenDecl)


def test_scan_logs_skipped_functions(caplog: pytest.LogCaptureFixture) -> None:
	file = _parse(SOURCE)
	with caplog.at_level(logging.DEBUG, logger="faster.transform.scanner"):
		scan_file(file, WrappedRegistry(), TransformConfig())
	assert "skipping M: method" in caplog.text
	assert "wrapped Add" in caplog.text

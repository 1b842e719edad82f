# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from faster.config import TransformConfig
from faster.parser import parse_go_source
from faster.parser.ast import (
	AssignStmt,
	CallExpr,
	ChanDir,
	ChanType,
	FuncLit,
	GoStmt,
	ReturnStmt,
	SendStmt,
)
from faster.printer import format_decl
from faster.transform.wrap import result_type, wrap_declaration


def _func(src: str):
	file, diagnostics = parse_go_source("package p\n\n" + src)
	assert diagnostics == []
	return file.decls[0]


def test_wrapped_body_has_three_statements() -> None:
	decl = _func("func Add(a, b int) int {\n\treturn a + b\n}\n")
	body = decl.body
	wrapped = wrap_declaration(decl, TransformConfig())

	make, launch, hand_back = wrapped.body.stmts
	assert isinstance(make, AssignStmt) and make.op == ":="
	assert [e.name for e in make.lhs] == ["result"]
	alloc = make.rhs[0]
	assert isinstance(alloc, CallExpr) and alloc.fun.name == "make"
	assert isinstance(alloc.args[0], ChanType) and alloc.args[0].dir is ChanDir.BOTH

	assert isinstance(launch, GoStmt)
	outer = launch.call
	assert isinstance(outer.fun, FuncLit) and outer.args == []
	send = outer.fun.body.stmts[0]
	assert isinstance(send, SendStmt)
	assert send.chan.name == "result"
	inner = send.value
	assert isinstance(inner, CallExpr) and isinstance(inner.fun, FuncLit)
	assert inner.fun.body is body

	assert isinstance(hand_back, ReturnStmt)
	assert [e.name for e in hand_back.results] == ["result"]


def test_synthesized_nodes_have_no_position() -> None:
	decl = _func("func Add(a, b int) int {\n\treturn a + b\n}\n")
	wrapped = wrap_declaration(decl, TransformConfig())
	assert wrapped.loc == decl.loc
	assert wrapped.body.loc is None
	for stmt in wrapped.body.stmts:
		assert stmt.loc is None
	calls = [wrapped.body.stmts[0].rhs[0], wrapped.body.stmts[1].call]
	assert all(call.lparen is None for call in calls)


def test_signature_keeps_params_and_returns_channel() -> None:
	decl = _func("func Add(a, b int) int {\n\treturn a + b\n}\n")
	wrapped = wrap_declaration(decl, TransformConfig())
	assert wrapped.name is decl.name
	assert wrapped.type.params is decl.type.params
	assert wrapped.recv is None
	result = wrapped.type.results[0]
	assert result.names == []
	assert isinstance(result.type, ChanType)
	assert result.type.value.name == "int"
	# the channel type is not shared with the make call
	assert result.type is not wrapped.body.stmts[0].rhs[0].args[0]


def test_wrapped_declaration_prints_like_gofmt() -> None:
	decl = _func("// Add sums.\nfunc Add(a, b int) int { return a + b }\n")
	wrapped = wrap_declaration(decl, TransformConfig())
	assert format_decl(wrapped) == (
		"func Add(a, b int) chan int {\n"
		"\tresult := make(chan int)\n"
		"\tgo func() {\n"
		"\t\tresult <- func() int {\n"
		"\t\t\treturn a + b\n"
		"\t\t}()\n"
		"\t}()\n"
		"\treturn result\n"
		"}"
	)
	assert [c.text for c in wrapped.doc] == ["// Add sums."]


def test_named_result_stays_on_inner_literal() -> None:
	decl = _func("func Div(a, b int) (q int) {\n\tq = a / b\n\treturn\n}\n")
	wrapped = wrap_declaration(decl, TransformConfig())
	text = format_decl(wrapped)
	assert text.startswith("func Div(a, b int) chan int {\n")
	assert "\t\tresult <- func() (q int) {\n" in text
	assert "\t\t\tq = a / b\n\t\t\treturn\n" in text


def test_generic_function_keeps_type_parameters() -> None:
	decl = _func("func Id[T any](v T) T {\n\treturn v\n}\n")
	wrapped = wrap_declaration(decl, TransformConfig())
	text = format_decl(wrapped)
	assert text.startswith("func Id[T any](v T) chan T {\n\tresult := make(chan T)\n")


def test_holder_name_is_configurable() -> None:
	decl = _func("func F() string {\n\treturn \"x\"\n}\n")
	wrapped = wrap_declaration(decl, TransformConfig(holder_name="out"))
	text = format_decl(wrapped)
	assert "\tout := make(chan string)\n" in text
	assert "\t\tout <- func() string {\n" in text
	assert text.endswith("\treturn out\n}")


def test_pointer_and_channel_results() -> None:
	ptr = wrap_declaration(_func("func New() *T {\n\treturn nil\n}\n"), TransformConfig())
	assert format_decl(ptr).startswith("func New() chan *T {\n\tresult := make(chan *T)\n")
	recv = wrap_declaration(_func("func Src() <-chan int {\n\treturn nil\n}\n"), TransformConfig())
	assert format_decl(recv).startswith("func Src() chan (<-chan int) {\n\tresult := make(chan (<-chan int))\n")


def test_result_type_requires_single_result() -> None:
	decl = _func("func Two() (int, error) {\n\treturn 0, nil\n}\n")
	with pytest.raises(ValueError):
		result_type(decl)
	with pytest.raises(ValueError):
		wrap_declaration(decl, TransformConfig())


def test_bodyless_declaration_is_rejected() -> None:
	decl = _func("func asm() int\n")
	with pytest.raises(ValueError):
		wrap_declaration(decl, TransformConfig())


def test_invalid_holder_names_are_rejected() -> None:
	for name in ["", "1x", "func", "_", "a-b"]:
		with pytest.raises(ValueError):
			TransformConfig(holder_name=name)
	assert TransformConfig().holder_name == "result"
	assert TransformConfig(holder_name="ch").holder_name == "ch"

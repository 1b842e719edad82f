# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from faster.parser.ast import (
	Block,
	CallExpr,
	ChanDir,
	ChanType,
	ExprStmt,
	FuncLit,
	FuncType,
	GoStmt,
	Ident,
	IndexExpr,
	ReturnStmt,
	SelectorExpr,
	StarExpr,
	UnaryExpr,
)
from faster.printer import format_expr, format_stmt, format_type


def _call(name: str, *args) -> CallExpr:
	return CallExpr(loc=None, fun=Ident(None, name), args=list(args))


def _recv(expr) -> UnaryExpr:
	return UnaryExpr(loc=None, op="<-", x=expr)


def test_receive_of_call() -> None:
	assert format_expr(_recv(_call("f", Ident(None, "x")))) == "<-f(x)"


def test_receive_is_parenthesized_as_an_operand() -> None:
	selector = SelectorExpr(loc=None, x=_recv(_call("f")), sel=Ident(None, "field"))
	assert format_expr(selector) == "(<-f()).field"
	index = IndexExpr(loc=None, x=_recv(_call("f")), indices=[Ident(None, "i")])
	assert format_expr(index) == "(<-f())[i]"
	call = CallExpr(loc=None, fun=_recv(_call("f")), args=[])
	assert format_expr(call) == "(<-f())()"


def test_nested_receives() -> None:
	assert format_expr(_recv(_call("f", _recv(_call("g"))))) == "<-f(<-g())"
	assert format_expr(StarExpr(loc=None, x=_recv(_call("p")))) == "*<-p()"


@pytest.mark.parametrize(
	"chan,text",
	[
		(ChanType(None, ChanDir.BOTH, Ident(None, "int")), "chan int"),
		(ChanType(None, ChanDir.BOTH, ChanType(None, ChanDir.RECV, Ident(None, "int"))), "chan (<-chan int)"),
		(ChanType(None, ChanDir.BOTH, ChanType(None, ChanDir.SEND, Ident(None, "int"))), "chan chan<- int"),
		(ChanType(None, ChanDir.RECV, ChanType(None, ChanDir.BOTH, Ident(None, "int"))), "<-chan chan int"),
	],
)
def test_channel_types(chan: ChanType, text: str) -> None:
	assert format_type(chan) == text


def test_unpositioned_func_literal_is_never_one_line() -> None:
	lit = FuncLit(
		loc=None,
		type=FuncType(loc=None, params=[]),
		body=Block(None, [ExprStmt(loc=None, x=_call("work"))]),
	)
	stmt = GoStmt(loc=None, call=CallExpr(loc=None, fun=lit, args=[]))
	assert format_stmt(stmt) == "go func() {\n\twork()\n}()"


def test_unpositioned_block_has_no_blank_lines() -> None:
	block = Block(None, [ExprStmt(loc=None, x=_call("a")), ReturnStmt(loc=None, results=[Ident(None, "b")])])
	assert format_stmt(block) == "{\n\ta()\n\treturn b\n}"


def test_unsupported_node_raises() -> None:
	with pytest.raises(TypeError):
		format_expr(object())  # type: ignore[arg-type]

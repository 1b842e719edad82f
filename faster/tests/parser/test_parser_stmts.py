# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from faster.parser import parse_go_source
from faster.parser.ast import (
	AssignStmt,
	BinaryExpr,
	Block,
	CallExpr,
	CommClause,
	CompositeLit,
	DeferStmt,
	ExprStmt,
	ForStmt,
	GoStmt,
	IfStmt,
	IncDecStmt,
	KeyValueExpr,
	LabeledStmt,
	RangeStmt,
	ReturnStmt,
	SelectStmt,
	SendStmt,
	SwitchStmt,
	TypeSwitchStmt,
	UnaryExpr,
)


def _body(src: str) -> list:
	file, diagnostics = parse_go_source(f"package p\n\nfunc f() {{\n{src}\n}}\n")
	assert diagnostics == []
	return file.decls[0].body.stmts


def test_semicolons_inserted_at_line_ends() -> None:
	stmts = _body("\tx := 1\n\tx++\n\ty, z := x, 2\n\treturn")
	assert [type(s) for s in stmts] == [AssignStmt, IncDecStmt, AssignStmt, ReturnStmt]
	assert stmts[0].op == ":="
	assert [e.name for e in stmts[2].lhs] == ["y", "z"]
	assert stmts[3].results == []


def test_explicit_semicolons_on_one_line() -> None:
	stmts = _body("\ta := 1; b := 2; _ = a + b")
	assert len(stmts) == 3
	assert isinstance(stmts[2].rhs[0], BinaryExpr)


def test_call_records_parenthesis_positions() -> None:
	stmts = _body("\tg(1,\n\t\t2)")
	call = stmts[0].x
	assert isinstance(call, CallExpr)
	assert call.lparen is not None and call.rparen is not None
	assert call.lparen.line == 4
	assert call.rparen.line == 5
	assert len(call.args) == 2


def test_if_else_chain_and_init() -> None:
	stmts = _body(
		"""	if v, ok := m[k]; ok {
		use(v)
	} else if k == "" {
		return
	} else {
		panic(k)
	}"""
	)
	stmt = stmts[0]
	assert isinstance(stmt, IfStmt)
	assert isinstance(stmt.init, AssignStmt)
	assert isinstance(stmt.else_, IfStmt)
	assert isinstance(stmt.else_.else_, Block)


def test_composite_literal_in_header_needs_type_literal() -> None:
	stmts = _body("\tfor _, v := range []int{1, 2} {\n\t\tuse(v)\n\t}")
	loop = stmts[0]
	assert isinstance(loop, RangeStmt)
	assert isinstance(loop.x, CompositeLit)
	assert loop.tok == ":="
	assert len(loop.body.stmts) == 1


def test_struct_literal_in_body_is_not_a_block() -> None:
	stmts = _body("\tif ok {\n\t\tp := Point{X: 1}\n\t\t_ = p\n\t}")
	inner = stmts[0].body.stmts[0]
	lit = inner.rhs[0]
	assert isinstance(lit, CompositeLit)
	assert isinstance(lit.elts[0], KeyValueExpr)


def test_for_clauses() -> None:
	stmts = _body("\tfor i := 0; i < n; i++ {\n\t}\n\tfor x < 3 {\n\t}\n\tfor {\n\t\tbreak\n\t}")
	three, cond, forever = stmts
	assert isinstance(three, ForStmt)
	assert isinstance(three.init, AssignStmt) and isinstance(three.post, IncDecStmt)
	assert cond.init is None and cond.cond is not None
	assert forever.cond is None


def test_switch_forms() -> None:
	stmts = _body(
		"""	switch x := f(); x {
	case 1, 2:
		g()
	default:
	}
	switch v := y.(type) {
	case int:
		_ = v
	}"""
	)
	plain, typed = stmts
	assert isinstance(plain, SwitchStmt)
	assert len(plain.clauses[0].exprs) == 2
	assert plain.clauses[1].exprs is None
	assert isinstance(typed, TypeSwitchStmt)
	assert isinstance(typed.assign, AssignStmt)


def test_select_send_and_receive() -> None:
	stmts = _body(
		"""	select {
	case v := <-in:
		out <- v
	case out <- 0:
	default:
	}"""
	)
	stmt = stmts[0]
	assert isinstance(stmt, SelectStmt)
	recv, send, default = stmt.clauses
	assert isinstance(recv, CommClause)
	assert isinstance(recv.comm.rhs[0], UnaryExpr)
	assert isinstance(recv.body[0], SendStmt)
	assert isinstance(send.comm, SendStmt)
	assert default.comm is None


def test_go_defer_and_labels() -> None:
	stmts = _body("\tgo run(1)\n\tdefer close(c)\nouter:\n\tfor {\n\t\tbreak outer\n\t}")
	assert isinstance(stmts[0], GoStmt) and isinstance(stmts[0].call, CallExpr)
	assert isinstance(stmts[1], DeferStmt)
	label = stmts[2]
	assert isinstance(label, LabeledStmt)
	assert label.label.name == "outer"
	assert isinstance(label.stmt, ForStmt)


def test_receive_and_func_literal_expressions() -> None:
	stmts = _body("\tv := <-ch\n\tfn := func(a int) int { return a }\n\tfn(v)")
	assert isinstance(stmts[0].rhs[0], UnaryExpr)
	assert stmts[0].rhs[0].op == "<-"
	assert isinstance(stmts[2], ExprStmt)


@pytest.mark.parametrize("keyword", ["go", "defer"])
def test_go_and_defer_require_a_call(keyword: str) -> None:
	file, diagnostics = parse_go_source(f"package p\n\nfunc f() {{\n\t{keyword} x\n}}\n")
	assert file is None
	assert len(diagnostics) == 1
	assert diagnostics[0].message == f"expression in {keyword} must be function call"
	assert diagnostics[0].span.line == 4

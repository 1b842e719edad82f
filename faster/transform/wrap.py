# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration rewrite: run the body on a goroutine, hand back a channel.

    func F(params) T { B }

becomes

    func F(params) chan T {
        result := make(chan T)
        go func() {
            result <- func() T { B }()
        }()
        return result
    }

The inner literal reuses the original result list, so a named result stays
named and `return` statements inside `B` keep their meaning. `B` is moved
as is; calls inside it are rewritten later by the call-site pass.

Every node built here has `loc=None`. The declaration itself keeps the
original position, doc and trailing comments, so it prints where the
original stood.
"""

from __future__ import annotations

import copy

from faster.config import TransformConfig
from faster.parser.ast import (
	AssignStmt,
	Block,
	CallExpr,
	ChanDir,
	ChanType,
	Expr,
	Field,
	FuncDecl,
	FuncLit,
	FuncType,
	GoStmt,
	Ident,
	ReturnStmt,
	SendStmt,
)


def result_type(decl: FuncDecl) -> Expr:
	"""The single declared result type of an eligible declaration."""
	results = decl.type.results
	if decl.type.result_count() != 1:
		raise ValueError(f"function '{decl.name.name}' does not declare exactly one result")
	return results[0].type


def wrap_declaration(decl: FuncDecl, config: TransformConfig) -> FuncDecl:
	if decl.body is None:
		raise ValueError(f"function '{decl.name.name}' has no body")
	value_type = result_type(decl)
	holder = config.holder_name

	make_holder = AssignStmt(
		loc=None,
		lhs=[Ident(None, holder)],
		op=":=",
		rhs=[_call(Ident(None, "make"), [_chan_of(value_type)])],
	)
	produce = FuncLit(
		loc=None,
		type=FuncType(loc=None, params=[], results=decl.type.results, results_loc=decl.type.results_loc),
		body=decl.body,
	)
	launch = GoStmt(
		loc=None,
		call=_call(
			FuncLit(
				loc=None,
				type=FuncType(loc=None, params=[]),
				body=Block(None, [SendStmt(loc=None, chan=Ident(None, holder), value=_call(produce, []))]),
			),
			[],
		),
	)
	hand_back = ReturnStmt(loc=None, results=[Ident(None, holder)])

	signature = FuncType(
		loc=decl.type.loc,
		params=decl.type.params,
		results=[Field(loc=None, names=[], type=_chan_of(value_type))],
		type_params=decl.type.type_params,
		params_loc=decl.type.params_loc,
		type_params_loc=decl.type.type_params_loc,
	)
	return FuncDecl(
		loc=decl.loc,
		name=decl.name,
		recv=None,
		type=signature,
		body=Block(None, [make_holder, launch, hand_back]),
		doc=decl.doc,
		comment=decl.comment,
	)


def _chan_of(value_type: Expr) -> ChanType:
	# each use gets its own copy; the tree stays a tree
	return ChanType(loc=None, dir=ChanDir.BOTH, value=copy.deepcopy(value_type))


def _call(fun: Expr, args) -> CallExpr:
	# no lparen: synthesized calls are never candidates for the call-site pass
	return CallExpr(loc=None, fun=fun, args=list(args))


__all__ = ["wrap_declaration", "result_type"]

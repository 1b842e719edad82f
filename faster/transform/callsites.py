# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Call-site rewrite: `f(args)` -> `<-f(args)` for every wrapped `f`.

The pass walks every top-level declaration, wrapped or not, including
`var`/`const`/`type` declarations. Each handler rewrites the children of its
node first and returns the node that replaces it, so nested calls are
converted bottom-up: `f(f(1))` becomes `<-f(<-f(1))`.

A call is converted only when its callee is a bare identifier naming a
wrapped function and the call carries a source parenthesis position
(`lparen`). Converting a call clears `lparen`, so running the pass again
changes nothing, and calls synthesized by the declaration rewrite are never
candidates. The call directly under `go`/`defer` is left alone; its callee
and arguments are still visited.

Matching is by name only. A local variable or parameter that shadows a
wrapped function is rewritten too.
"""

from __future__ import annotations

import logging
from typing import List, Optional, TypeVar

from faster.parser.ast import (
	ArrayType,
	AssignStmt,
	BasicLit,
	BinaryExpr,
	Block,
	BranchStmt,
	CallExpr,
	CaseClause,
	ChanType,
	CommClause,
	CompositeLit,
	DeclStmt,
	DeferStmt,
	Ellipsis,
	Expr,
	ExprStmt,
	Field,
	File,
	ForStmt,
	FuncDecl,
	FuncLit,
	FuncType,
	GenDecl,
	GoStmt,
	Ident,
	IfStmt,
	ImportSpec,
	IncDecStmt,
	IndexExpr,
	InterfaceType,
	KeyValueExpr,
	LabeledStmt,
	MapType,
	Node,
	ParenExpr,
	RangeStmt,
	ReturnStmt,
	SelectStmt,
	SelectorExpr,
	SendStmt,
	SliceExpr,
	StarExpr,
	StructType,
	SwitchStmt,
	TypeAssertExpr,
	TypeSpec,
	TypeSwitchStmt,
	UnaryExpr,
	ValueSpec,
)

from .registry import WrappedRegistry

logger = logging.getLogger(__name__)

N = TypeVar("N", bound=Node)


class CallSiteRewriter:
	"""
	Rewrite direct calls of wrapped functions into receives.

	Dispatch is by node class (`_visit_<ClassName>`). A node class without a
	handler raises NotImplementedError: a new node kind must be taught to
	this pass explicitly rather than being skipped.
	"""

	def __init__(self, registry: WrappedRegistry) -> None:
		if not registry.sealed:
			raise ValueError("call sites are rewritten against a sealed registry; call seal() after the scan")
		self.registry = registry
		self.rewritten = 0

	# Public entry points ------------------------------------------------

	def rewrite_file(self, file: File) -> int:
		"""Rewrite every declaration of `file` in place; returns the number of converted calls."""
		before = self.rewritten
		file.decls = self._list(file.decls)
		return self.rewritten - before

	def visit(self, node: Node) -> Node:
		method = getattr(self, f"_visit_{type(node).__name__}", None)
		if method is None:
			raise NotImplementedError(f"No call-site handler for node type {type(node).__name__}")
		return method(node)

	# Helpers ------------------------------------------------------------

	def _opt(self, node: Optional[N]) -> Optional[N]:
		return None if node is None else self.visit(node)

	def _list(self, nodes: List[N]) -> List[N]:
		return [self.visit(n) for n in nodes]

	def _is_candidate(self, call: CallExpr) -> bool:
		return (
			call.lparen is not None
			and isinstance(call.fun, Ident)
			and self.registry.is_wrapped(call.fun.name)
		)

	def _receive(self, call: CallExpr) -> UnaryExpr:
		line = call.lparen.line if call.lparen is not None else None
		call.lparen = None
		self.rewritten += 1
		logger.debug("line %s: waiting on %s", line, call.fun.name)
		return UnaryExpr(loc=call.loc, op="<-", x=call)

	def _visit_call_parts(self, call: Expr) -> Expr:
		"""The call of a go/defer statement: its parts are visited, the call itself is kept."""
		if not isinstance(call, CallExpr):
			return self.visit(call)
		call.fun = self.visit(call.fun)
		call.args = self._list(call.args)
		return call

	# Expressions ---------------------------------------------------------

	def _visit_Ident(self, expr: Ident) -> Expr:
		return expr

	def _visit_BasicLit(self, expr: BasicLit) -> Expr:
		return expr

	def _visit_CallExpr(self, expr: CallExpr) -> Expr:
		expr.fun = self.visit(expr.fun)
		expr.args = self._list(expr.args)
		if self._is_candidate(expr):
			return self._receive(expr)
		return expr

	def _visit_CompositeLit(self, expr: CompositeLit) -> Expr:
		expr.type = self._opt(expr.type)
		expr.elts = self._list(expr.elts)
		return expr

	def _visit_FuncLit(self, expr: FuncLit) -> Expr:
		expr.type = self.visit(expr.type)
		expr.body = self.visit(expr.body)
		return expr

	def _visit_ParenExpr(self, expr: ParenExpr) -> Expr:
		expr.x = self.visit(expr.x)
		return expr

	def _visit_SelectorExpr(self, expr: SelectorExpr) -> Expr:
		expr.x = self.visit(expr.x)
		return expr

	def _visit_IndexExpr(self, expr: IndexExpr) -> Expr:
		expr.x = self.visit(expr.x)
		expr.indices = self._list(expr.indices)
		return expr

	def _visit_SliceExpr(self, expr: SliceExpr) -> Expr:
		expr.x = self.visit(expr.x)
		expr.low = self._opt(expr.low)
		expr.high = self._opt(expr.high)
		expr.max = self._opt(expr.max)
		return expr

	def _visit_TypeAssertExpr(self, expr: TypeAssertExpr) -> Expr:
		expr.x = self.visit(expr.x)
		expr.type = self._opt(expr.type)
		return expr

	def _visit_StarExpr(self, expr: StarExpr) -> Expr:
		expr.x = self.visit(expr.x)
		return expr

	def _visit_UnaryExpr(self, expr: UnaryExpr) -> Expr:
		expr.x = self.visit(expr.x)
		return expr

	def _visit_BinaryExpr(self, expr: BinaryExpr) -> Expr:
		expr.x = self.visit(expr.x)
		expr.y = self.visit(expr.y)
		return expr

	def _visit_KeyValueExpr(self, expr: KeyValueExpr) -> Expr:
		expr.key = self.visit(expr.key)
		expr.value = self.visit(expr.value)
		return expr

	# Types ---------------------------------------------------------------

	def _visit_Ellipsis(self, expr: Ellipsis) -> Expr:
		expr.elt = self._opt(expr.elt)
		return expr

	def _visit_ArrayType(self, expr: ArrayType) -> Expr:
		expr.len = self._opt(expr.len)
		expr.elt = self.visit(expr.elt)
		return expr

	def _visit_Field(self, node: Field) -> Field:
		node.type = self.visit(node.type)
		return node

	def _visit_StructType(self, expr: StructType) -> Expr:
		expr.fields = self._list(expr.fields)
		return expr

	def _visit_FuncType(self, expr: FuncType) -> Expr:
		expr.type_params = self._list(expr.type_params)
		expr.params = self._list(expr.params)
		expr.results = self._list(expr.results)
		return expr

	def _visit_InterfaceType(self, expr: InterfaceType) -> Expr:
		expr.methods = self._list(expr.methods)
		return expr

	def _visit_MapType(self, expr: MapType) -> Expr:
		expr.key = self.visit(expr.key)
		expr.value = self.visit(expr.value)
		return expr

	def _visit_ChanType(self, expr: ChanType) -> Expr:
		expr.value = self.visit(expr.value)
		return expr

	# Statements ----------------------------------------------------------

	def _visit_DeclStmt(self, stmt: DeclStmt) -> DeclStmt:
		stmt.decl = self.visit(stmt.decl)
		return stmt

	def _visit_LabeledStmt(self, stmt: LabeledStmt) -> LabeledStmt:
		stmt.stmt = self._opt(stmt.stmt)
		return stmt

	def _visit_ExprStmt(self, stmt: ExprStmt) -> ExprStmt:
		stmt.x = self.visit(stmt.x)
		return stmt

	def _visit_SendStmt(self, stmt: SendStmt) -> SendStmt:
		stmt.chan = self.visit(stmt.chan)
		stmt.value = self.visit(stmt.value)
		return stmt

	def _visit_IncDecStmt(self, stmt: IncDecStmt) -> IncDecStmt:
		stmt.x = self.visit(stmt.x)
		return stmt

	def _visit_AssignStmt(self, stmt: AssignStmt) -> AssignStmt:
		stmt.lhs = self._list(stmt.lhs)
		stmt.rhs = self._list(stmt.rhs)
		return stmt

	def _visit_GoStmt(self, stmt: GoStmt) -> GoStmt:
		stmt.call = self._visit_call_parts(stmt.call)
		return stmt

	def _visit_DeferStmt(self, stmt: DeferStmt) -> DeferStmt:
		stmt.call = self._visit_call_parts(stmt.call)
		return stmt

	def _visit_ReturnStmt(self, stmt: ReturnStmt) -> ReturnStmt:
		stmt.results = self._list(stmt.results)
		return stmt

	def _visit_BranchStmt(self, stmt: BranchStmt) -> BranchStmt:
		return stmt

	def _visit_Block(self, stmt: Block) -> Block:
		stmt.stmts = self._list(stmt.stmts)
		return stmt

	def _visit_IfStmt(self, stmt: IfStmt) -> IfStmt:
		stmt.init = self._opt(stmt.init)
		stmt.cond = self.visit(stmt.cond)
		stmt.body = self.visit(stmt.body)
		stmt.else_ = self._opt(stmt.else_)
		return stmt

	def _visit_CaseClause(self, clause: CaseClause) -> CaseClause:
		if clause.exprs is not None:
			clause.exprs = self._list(clause.exprs)
		clause.body = self._list(clause.body)
		return clause

	def _visit_SwitchStmt(self, stmt: SwitchStmt) -> SwitchStmt:
		stmt.init = self._opt(stmt.init)
		stmt.tag = self._opt(stmt.tag)
		stmt.clauses = self._list(stmt.clauses)
		return stmt

	def _visit_TypeSwitchStmt(self, stmt: TypeSwitchStmt) -> TypeSwitchStmt:
		stmt.init = self._opt(stmt.init)
		stmt.assign = self.visit(stmt.assign)
		stmt.clauses = self._list(stmt.clauses)
		return stmt

	def _visit_CommClause(self, clause: CommClause) -> CommClause:
		clause.comm = self._opt(clause.comm)
		clause.body = self._list(clause.body)
		return clause

	def _visit_SelectStmt(self, stmt: SelectStmt) -> SelectStmt:
		stmt.clauses = self._list(stmt.clauses)
		return stmt

	def _visit_ForStmt(self, stmt: ForStmt) -> ForStmt:
		stmt.init = self._opt(stmt.init)
		stmt.cond = self._opt(stmt.cond)
		stmt.post = self._opt(stmt.post)
		stmt.body = self.visit(stmt.body)
		return stmt

	def _visit_RangeStmt(self, stmt: RangeStmt) -> RangeStmt:
		stmt.key = self._opt(stmt.key)
		stmt.value = self._opt(stmt.value)
		stmt.x = self.visit(stmt.x)
		stmt.body = self.visit(stmt.body)
		return stmt

	# Declarations --------------------------------------------------------

	def _visit_ImportSpec(self, spec: ImportSpec) -> ImportSpec:
		return spec

	def _visit_ValueSpec(self, spec: ValueSpec) -> ValueSpec:
		spec.type = self._opt(spec.type)
		spec.values = self._list(spec.values)
		return spec

	def _visit_TypeSpec(self, spec: TypeSpec) -> TypeSpec:
		spec.type_params = self._list(spec.type_params)
		spec.type = self.visit(spec.type)
		return spec

	def _visit_GenDecl(self, decl: GenDecl) -> GenDecl:
		decl.specs = self._list(decl.specs)
		return decl

	def _visit_FuncDecl(self, decl: FuncDecl) -> FuncDecl:
		if decl.recv is not None:
			decl.recv = self._list(decl.recv)
		decl.type = self.visit(decl.type)
		decl.body = self._opt(decl.body)
		return decl


def rewrite_call_sites(file: File, registry: WrappedRegistry) -> int:
	"""Convert the calls of every registered name in `file`; returns the count."""
	return CallSiteRewriter(registry).rewrite_file(file)


__all__ = ["CallSiteRewriter", "rewrite_call_sites"]

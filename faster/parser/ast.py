# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go syntax tree.

One dataclass per Go node kind, shaped after the Go grammar. Nodes built by
the parser carry a `Located` span; nodes synthesized later by the transform
passes carry `loc=None`, which the printer reads as "no layout information".

Comments are attached by `faster.parser.comments`:
- `doc` holds the comments on the lines directly above a node,
- `comment` holds comments that trail the node on its last line (or that sat
  inside the node somewhere a comment cannot be kept in place),
- `end_comments` holds comments after the last element of a list owner
  (block, group, struct/interface body, switch/select body, clause).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Iterator, List, Optional


@dataclass(frozen=True)
class Located:
	line: int
	column: int
	end_line: Optional[int] = None
	end_column: Optional[int] = None

	@property
	def last_line(self) -> int:
		return self.end_line if self.end_line is not None else self.line

	@property
	def start(self) -> tuple[int, int]:
		return (self.line, self.column)

	@property
	def end(self) -> tuple[int, int]:
		if self.end_line is None or self.end_column is None:
			return (self.line, self.column)
		return (self.end_line, self.end_column)


@dataclass
class Comment:
	loc: Optional[Located]
	text: str

	@property
	def is_line_comment(self) -> bool:
		return self.text.startswith("//")


class Node:
	loc: Optional[Located]


class Expr(Node):
	loc: Optional[Located]


class Stmt(Node):
	loc: Optional[Located]


class Decl(Node):
	loc: Optional[Located]


class Spec(Node):
	loc: Optional[Located]


class ChanDir(Enum):
	BOTH = "chan"
	SEND = "chan<-"
	RECV = "<-chan"


# --- expressions ---


@dataclass
class Ident(Expr):
	loc: Optional[Located]
	name: str


@dataclass
class BasicLit(Expr):
	loc: Optional[Located]
	kind: str  # INT, FLOAT, IMAG, CHAR, STRING
	value: str  # raw source text, quotes included


@dataclass
class CompositeLit(Expr):
	loc: Optional[Located]
	type: Optional[Expr]
	elts: List[Expr]
	lbrace: Optional[Located] = None
	rbrace: Optional[Located] = None
	comments: List[Comment] = field(default_factory=list)  # between the braces, outside any element


@dataclass
class FuncLit(Expr):
	loc: Optional[Located]
	type: "FuncType"
	body: "Block"


@dataclass
class ParenExpr(Expr):
	loc: Optional[Located]
	x: Expr


@dataclass
class SelectorExpr(Expr):
	loc: Optional[Located]
	x: Expr
	sel: Ident


@dataclass
class IndexExpr(Expr):
	"""`x[i]`, or `x[A, B]` for a generic instantiation."""

	loc: Optional[Located]
	x: Expr
	indices: List[Expr]


@dataclass
class SliceExpr(Expr):
	loc: Optional[Located]
	x: Expr
	low: Optional[Expr]
	high: Optional[Expr]
	max: Optional[Expr]
	slice3: bool = False


@dataclass
class TypeAssertExpr(Expr):
	"""`x.(T)`; `type=None` stands for the `x.(type)` switch guard."""

	loc: Optional[Located]
	x: Expr
	type: Optional[Expr]


@dataclass
class CallExpr(Expr):
	"""
	`fun(args)`.

	`lparen` is the source position of the opening parenthesis. Calls built by
	the transform passes have none, and the call-site pass clears it on every
	call it converts, so only calls written in the source are ever rewritten.
	"""

	loc: Optional[Located]
	fun: Expr
	args: List[Expr]
	ellipsis: bool = False
	lparen: Optional[Located] = None
	rparen: Optional[Located] = None


@dataclass
class StarExpr(Expr):
	"""`*x`: pointer type or dereference."""

	loc: Optional[Located]
	x: Expr


@dataclass
class UnaryExpr(Expr):
	loc: Optional[Located]
	op: str
	x: Expr


@dataclass
class BinaryExpr(Expr):
	loc: Optional[Located]
	op: str
	x: Expr
	y: Expr


@dataclass
class KeyValueExpr(Expr):
	loc: Optional[Located]
	key: Expr
	value: Expr


# --- types ---


@dataclass
class Ellipsis(Expr):
	"""`...T` in a variadic parameter, or the `...` length of `[...]T`."""

	loc: Optional[Located]
	elt: Optional[Expr]


@dataclass
class ArrayType(Expr):
	"""`[len]elt`; `len=None` is a slice type."""

	loc: Optional[Located]
	len: Optional[Expr]
	elt: Expr


@dataclass
class Field(Node):
	loc: Optional[Located]
	names: List[Ident]
	type: Expr
	tag: Optional[BasicLit] = None
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class StructType(Expr):
	loc: Optional[Located]
	fields: List[Field]
	end_comments: List[Comment] = field(default_factory=list)


@dataclass
class FuncType(Expr):
	loc: Optional[Located]
	params: List[Field]
	results: List[Field] = field(default_factory=list)
	type_params: List[Field] = field(default_factory=list)
	# spans of the bracketed lists; results_loc is None for an unparenthesized result
	params_loc: Optional[Located] = None
	results_loc: Optional[Located] = None
	type_params_loc: Optional[Located] = None

	def result_count(self) -> int:
		return sum(max(1, len(f.names)) for f in self.results)


@dataclass
class InterfaceType(Expr):
	"""Methods are `Field(names=[m], type=FuncType)`; embedded elements have no names."""

	loc: Optional[Located]
	methods: List[Field]
	end_comments: List[Comment] = field(default_factory=list)


@dataclass
class MapType(Expr):
	loc: Optional[Located]
	key: Expr
	value: Expr


@dataclass
class ChanType(Expr):
	loc: Optional[Located]
	dir: ChanDir
	value: Expr


# --- statements ---


@dataclass
class DeclStmt(Stmt):
	loc: Optional[Located]
	decl: "GenDecl"
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class LabeledStmt(Stmt):
	loc: Optional[Located]
	label: Ident
	stmt: Optional[Stmt]
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class ExprStmt(Stmt):
	loc: Optional[Located]
	x: Expr
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class SendStmt(Stmt):
	loc: Optional[Located]
	chan: Expr
	value: Expr
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class IncDecStmt(Stmt):
	loc: Optional[Located]
	x: Expr
	op: str
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class AssignStmt(Stmt):
	"""Assignment (`=`, `op=`) or short variable declaration (`:=`)."""

	loc: Optional[Located]
	lhs: List[Expr]
	op: str
	rhs: List[Expr]
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class GoStmt(Stmt):
	loc: Optional[Located]
	call: Expr
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class DeferStmt(Stmt):
	loc: Optional[Located]
	call: Expr
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class ReturnStmt(Stmt):
	loc: Optional[Located]
	results: List[Expr]
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class BranchStmt(Stmt):
	loc: Optional[Located]
	tok: str  # break, continue, goto, fallthrough
	label: Optional[Ident] = None
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class Block(Stmt):
	"""`{ ... }`; `loc` spans the braces."""

	loc: Optional[Located]
	stmts: List[Stmt]
	end_comments: List[Comment] = field(default_factory=list)
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class IfStmt(Stmt):
	loc: Optional[Located]
	init: Optional[Stmt]
	cond: Expr
	body: Block
	else_: Optional[Stmt] = None  # IfStmt or Block
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class CaseClause(Node):
	"""`case a, b:` or `default:` (`exprs=None`)."""

	loc: Optional[Located]
	exprs: Optional[List[Expr]]
	body: List[Stmt]
	end_comments: List[Comment] = field(default_factory=list)
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class SwitchStmt(Stmt):
	loc: Optional[Located]
	init: Optional[Stmt]
	tag: Optional[Expr]
	clauses: List[CaseClause]
	end_comments: List[Comment] = field(default_factory=list)
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class TypeSwitchStmt(Stmt):
	"""`assign` is `x.(type)` as an ExprStmt or `v := x.(type)` as an AssignStmt."""

	loc: Optional[Located]
	init: Optional[Stmt]
	assign: Stmt
	clauses: List[CaseClause]
	end_comments: List[Comment] = field(default_factory=list)
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class CommClause(Node):
	"""`case <send or receive>:` or `default:` (`comm=None`)."""

	loc: Optional[Located]
	comm: Optional[Stmt]
	body: List[Stmt]
	end_comments: List[Comment] = field(default_factory=list)
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class SelectStmt(Stmt):
	loc: Optional[Located]
	clauses: List[CommClause]
	end_comments: List[Comment] = field(default_factory=list)
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class ForStmt(Stmt):
	loc: Optional[Located]
	init: Optional[Stmt]
	cond: Optional[Expr]
	post: Optional[Stmt]
	body: Block
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class RangeStmt(Stmt):
	loc: Optional[Located]
	key: Optional[Expr]
	value: Optional[Expr]
	tok: Optional[str]  # ":=", "=" or None for `for range x`
	x: Expr
	body: Block
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


# --- declarations ---


@dataclass
class ImportSpec(Spec):
	loc: Optional[Located]
	name: Optional[Ident]
	path: BasicLit
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class ValueSpec(Spec):
	loc: Optional[Located]
	names: List[Ident]
	type: Optional[Expr]
	values: List[Expr]
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class TypeSpec(Spec):
	loc: Optional[Located]
	name: Ident
	type_params: List[Field]
	assign: bool  # alias declaration `type A = B`
	type: Expr
	type_params_loc: Optional[Located] = None
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class GenDecl(Decl):
	loc: Optional[Located]
	tok: str  # import, const, var, type
	specs: List[Spec]
	grouped: bool = False
	end_comments: List[Comment] = field(default_factory=list)
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class FuncDecl(Decl):
	loc: Optional[Located]
	name: Ident
	recv: Optional[List[Field]]
	type: FuncType
	body: Optional[Block]
	doc: List[Comment] = field(default_factory=list)
	comment: List[Comment] = field(default_factory=list)


@dataclass
class File(Node):
	loc: Optional[Located]
	package: Ident
	decls: List[Decl]
	doc: List[Comment] = field(default_factory=list)
	end_comments: List[Comment] = field(default_factory=list)
	comments: List[Comment] = field(default_factory=list)  # every comment, in source order


_COMMENT_SLOTS = frozenset({"doc", "comment", "end_comments", "comments"})


def child_nodes(node: Node) -> Iterator[Node]:
	"""Yield the direct child nodes of `node` in field order (comments excluded)."""
	if not is_dataclass(node):
		return
	for f in fields(node):
		if f.name in _COMMENT_SLOTS or f.name == "loc":
			continue
		value = getattr(node, f.name)
		if isinstance(value, Node):
			yield value
		elif isinstance(value, list):
			for item in value:
				if isinstance(item, Node):
					yield item


def walk(node: Node) -> Iterator[Node]:
	"""Pre-order traversal of `node` and everything below it."""
	stack = [node]
	while stack:
		current = stack.pop()
		yield current
		stack.extend(reversed(list(child_nodes(current))))


__all__ = [
	"Located",
	"Comment",
	"Node",
	"Expr",
	"Stmt",
	"Decl",
	"Spec",
	"ChanDir",
	"Ident",
	"BasicLit",
	"CompositeLit",
	"FuncLit",
	"ParenExpr",
	"SelectorExpr",
	"IndexExpr",
	"SliceExpr",
	"TypeAssertExpr",
	"CallExpr",
	"StarExpr",
	"UnaryExpr",
	"BinaryExpr",
	"KeyValueExpr",
	"Ellipsis",
	"ArrayType",
	"Field",
	"StructType",
	"FuncType",
	"InterfaceType",
	"MapType",
	"ChanType",
	"DeclStmt",
	"LabeledStmt",
	"ExprStmt",
	"SendStmt",
	"IncDecStmt",
	"AssignStmt",
	"GoStmt",
	"DeferStmt",
	"ReturnStmt",
	"BranchStmt",
	"Block",
	"IfStmt",
	"CaseClause",
	"SwitchStmt",
	"TypeSwitchStmt",
	"CommClause",
	"SelectStmt",
	"ForStmt",
	"RangeStmt",
	"ImportSpec",
	"ValueSpec",
	"TypeSpec",
	"GenDecl",
	"FuncDecl",
	"File",
	"child_nodes",
	"walk",
]

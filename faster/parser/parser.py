# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go parser: lark grammar + post-lexer + tree builders.

The grammar (`grammar.lark`) is parsed with lark's Earley parser over a basic
lexer. `GoPostLex` sits between the two and does the work Go's own scanner
does at line ends: it inserts automatic semicolons, collects comments for
later attachment, and marks the brace that opens an if/for/switch body.
The `_build_*` functions turn the resulting lark tree into the dataclass tree
from `faster.parser.ast`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark, Token, Tree

from .ast import (
	ArrayType,
	AssignStmt,
	BasicLit,
	BinaryExpr,
	Block,
	BranchStmt,
	CallExpr,
	CaseClause,
	ChanDir,
	ChanType,
	Comment,
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
	Located,
	MapType,
	ParenExpr,
	RangeStmt,
	ReturnStmt,
	SelectStmt,
	SelectorExpr,
	SendStmt,
	SliceExpr,
	Spec,
	StarExpr,
	Stmt,
	StructType,
	SwitchStmt,
	TypeAssertExpr,
	TypeSpec,
	TypeSwitchStmt,
	UnaryExpr,
	ValueSpec,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class GoSyntaxError(ValueError):
	"""
	Input the grammar accepts but Go rejects (e.g. `go x` without a call).

	A `ValueError` subclass carrying `loc`, so the front end can turn it into
	a diagnostic next to lark's own `UnexpectedInput` errors.
	"""

	def __init__(self, message: str, *, loc: Optional[Located]) -> None:
		super().__init__(message)
		self.loc = loc


@dataclass
class _Header:
	"""An if/for/switch header waiting for its body brace."""

	depth: Tuple[int, int, int]
	type_lit: bool = False
	pending_func: bool = False


class GoPostLex:
	"""
	Post-lexer implementing Go's line-end rules.

	Semicolons: a newline (or a block comment spanning lines, or the end of
	input) becomes `_SEMI` when the line's last token is an identifier, a
	literal, one of `break continue fallthrough return`, or one of
	`++ -- ) ] }`.

	Header braces: after `if`, `for` or `switch`, the first `{` found at the
	header's own nesting depth opens the body and is retyped to
	`_BLOCK_LBRACE`. It stays a plain `_LBRACE` when it belongs to a
	`struct`/`interface` type, to a function literal, or to a composite
	literal whose type is a type literal (`[]T{...}`, `map[K]V{...}`). A
	composite literal spelled with a bare type name is not allowed there
	unparenthesized, exactly as in Go.

	Comments never reach the parser; they are kept on `self.comments` for the
	comment attachment pass.
	"""

	# Lark drops terminals the grammar does not reference unless they are listed here.
	always_accept = ("_NL", "COMMENT")

	TERMINATING_TYPES = {"NAME", "NUMBER", "STRING", "CHAR"}
	TERMINATING_VALUES = {"break", "continue", "fallthrough", "return", "++", "--", ")", "]", "}"}
	OPERAND_END_TYPES = {"NAME", "NUMBER", "STRING", "CHAR"}
	OPERAND_END_VALUES = {")", "]", "}"}
	# Tokens that may continue a type literal written in a header.
	TYPE_TOKENS = {".", "[", "]", "*", "(", ")", "}", "map", "chan", "<-", "func", "struct", "interface"}

	def __init__(self) -> None:
		self.comments: List[Token] = []
		self._reset()

	def _reset(self) -> None:
		self.paren_depth = 0
		self.bracket_depth = 0
		self.brace_depth = 0
		self.headers: List[_Header] = []

	def process(self, stream):
		self.comments = []
		self._reset()
		last: Optional[Token] = None

		for token in stream:
			if token.type == "COMMENT":
				self.comments.append(token)
				if "\n" in token.value and self._terminates(last):
					last = self._semicolon(token)
					yield last
				continue

			if token.type == "_NL":
				if self._terminates(last):
					last = self._semicolon(token)
					yield last
				continue

			token = self._classify(token, last)
			yield token
			self._track_depth(token.value)
			last = token

		if self._terminates(last):
			yield self._semicolon(last, after=True)

	@staticmethod
	def _semicolon(token: Token, after: bool = False) -> Token:
		"""An empty `_SEMI` placed where `token` starts, or where it ends with `after`."""
		if after:
			line, column, pos = token.end_line, token.end_column, token.end_pos
		else:
			line, column, pos = token.line, token.column, token.start_pos
		return Token(
			"_SEMI",
			";",
			start_pos=pos,
			line=line,
			column=column,
			end_line=line,
			end_column=column,
			end_pos=pos,
		)

	def _terminates(self, token: Optional[Token]) -> bool:
		if token is None:
			return False
		if token.type in self.TERMINATING_TYPES:
			return True
		return token.type != "_SEMI" and token.value in self.TERMINATING_VALUES

	def _depth(self) -> Tuple[int, int, int]:
		return (self.paren_depth, self.bracket_depth, self.brace_depth)

	def _track_depth(self, value: str) -> None:
		if value == "(":
			self.paren_depth += 1
		elif value == ")":
			self.paren_depth -= 1
		elif value == "[":
			self.bracket_depth += 1
		elif value == "]":
			self.bracket_depth -= 1
		elif value == "{":
			self.brace_depth += 1
		elif value == "}":
			self.brace_depth -= 1

	def _ends_operand(self, token: Optional[Token]) -> bool:
		if token is None:
			return False
		return token.type in self.OPERAND_END_TYPES or token.value in self.OPERAND_END_VALUES

	def _classify(self, token: Token, prev: Optional[Token]) -> Token:
		value = token.value
		header = self.headers[-1] if self.headers else None
		if header is not None and header.depth == self._depth():
			prev_value = prev.value if prev is not None else None
			if value == "{":
				if prev_value in ("struct", "interface"):
					pass
				elif header.pending_func or header.type_lit:
					header.pending_func = False
					header.type_lit = False
				else:
					self.headers.pop()
					token = Token.new_borrow_pos("_BLOCK_LBRACE", value, token)
			elif value == "[":
				if not self._ends_operand(prev):
					header.type_lit = True
			elif value in ("map", "struct", "interface"):
				header.type_lit = True
			elif value == "func":
				if not header.type_lit:
					header.pending_func = True
			elif value == "(":
				if prev_value != "func":
					header.type_lit = False
			elif token.type != "NAME" and value not in self.TYPE_TOKENS:
				header.type_lit = False
				header.pending_func = False

		if token.type != "NAME" and value in ("if", "for", "switch"):
			self.headers.append(_Header(depth=self._depth()))
		return token


_POSTLEX = GoPostLex()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="earley",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=_POSTLEX,
)


def parse_file_tree(source: str) -> File:
	"""Parse Go source into a `File` (comments collected but not yet attached)."""
	tree = _PARSER.parse(source)
	file = _build_file(tree)
	file.comments = [_build_comment(tok) for tok in _POSTLEX.comments]
	return file


def _build_comment(token: Token) -> Comment:
	return Comment(loc=_loc(token), text=token.value.rstrip("\r"))


# --- declarations ---


def _build_file(tree: Tree) -> File:
	package: Optional[Ident] = None
	decls = []
	for child in tree.children:
		kind = _name(child)
		if kind == "package_clause":
			package = _ident(child.children[0])
		elif kind == "import_decl":
			decls.append(_build_gen_decl(child, "import"))
		elif kind in ("const_decl", "var_decl", "type_decl"):
			decls.append(_build_gen_decl(child, kind[: -len("_decl")]))
		elif kind == "func_decl":
			decls.append(_build_func_decl(child))
		else:
			raise ValueError(f"Unsupported top-level node: {kind}")
	if package is None:
		raise GoSyntaxError("missing package clause", loc=_loc(tree))
	return File(loc=_loc(tree), package=package, decls=decls)


def _build_gen_decl(tree: Tree, tok: str) -> GenDecl:
	body = tree.children[0]
	if _name(body).endswith("_group"):
		specs = [_build_spec(child) for child in body.children if isinstance(child, Tree)]
		return GenDecl(loc=_loc(tree), tok=tok, specs=specs, grouped=True)
	return GenDecl(loc=_loc(tree), tok=tok, specs=[_build_spec(body)])


def _build_spec(tree: Tree) -> Spec:
	kind = _name(tree)
	if kind == "import_spec":
		name: Optional[Ident] = None
		path: Optional[BasicLit] = None
		for child in tree.children:
			if isinstance(child, Tree) and _name(child) == "import_name":
				name = _ident(child.children[0])
			elif isinstance(child, Token):
				path = BasicLit(loc=_loc(child), kind="STRING", value=child.value)
		return ImportSpec(loc=_loc(tree), name=name, path=path)
	if kind in ("const_spec", "var_spec"):
		names: List[Ident] = []
		typ: Optional[Expr] = None
		values: List[Expr] = []
		for child in tree.children:
			sub = _name(child)
			if sub == "ident_list":
				names = _build_ident_list(child)
			elif sub == "expr_list":
				values = _build_expr_list(child)
			else:
				typ = _build_type(child)
		return ValueSpec(loc=_loc(tree), names=names, type=typ, values=values)
	if kind == "type_spec":
		name_tok = tree.children[0]
		type_params: List[Field] = []
		type_params_loc: Optional[Located] = None
		assign = False
		typ = None
		for child in tree.children[1:]:
			sub = _name(child)
			if sub == "type_params":
				type_params = _build_type_params(child)
				type_params_loc = _loc(child)
			elif sub == "alias_marker":
				assign = True
			else:
				typ = _build_type(child)
		return TypeSpec(
			loc=_loc(tree),
			name=_ident(name_tok),
			type_params=type_params,
			assign=assign,
			type=typ,
			type_params_loc=type_params_loc,
		)
	raise ValueError(f"Unsupported spec node: {kind}")


def _build_func_decl(tree: Tree) -> FuncDecl:
	recv: Optional[List[Field]] = None
	name: Optional[Ident] = None
	type_params: List[Field] = []
	type_params_loc: Optional[Located] = None
	signature: Optional[Tree] = None
	body: Optional[Block] = None
	for child in tree.children:
		if isinstance(child, Token):
			name = _ident(child)
			continue
		kind = _name(child)
		if kind == "receiver":
			recv = _build_params(child.children[0])
		elif kind == "type_params":
			type_params = _build_type_params(child)
			type_params_loc = _loc(child)
		elif kind == "signature":
			signature = child
		elif kind == "block":
			body = _build_block(child)
	header_loc = _span(_loc(tree), _loc(signature))
	func_type = _build_signature(signature, header_loc)
	func_type.type_params = type_params
	func_type.type_params_loc = type_params_loc
	return FuncDecl(loc=_loc(tree), name=name, recv=recv, type=func_type, body=body)


def _build_type_params(tree: Tree) -> List[Field]:
	params = []
	for decl in tree.children:
		names = _build_ident_list(decl.children[0])
		constraint = _build_type_elem(decl.children[1])
		params.append(Field(loc=_loc(decl), names=names, type=constraint))
	return params


def _build_signature(tree: Tree, loc: Optional[Located]) -> FuncType:
	params = _build_params(tree.children[0])
	results: List[Field] = []
	results_loc: Optional[Located] = None
	if len(tree.children) > 1:
		result = tree.children[1]
		if _name(result) == "parameters":
			results = _build_params(result)
			results_loc = _loc(result)
		else:
			typ = _build_type(result)
			results = [Field(loc=typ.loc, names=[], type=typ)]
	return FuncType(
		loc=loc,
		params=params,
		results=results,
		params_loc=_loc(tree.children[0]),
		results_loc=results_loc,
	)


def _build_params(tree: Tree) -> List[Field]:
	"""
	Build a parameter list, regrouping Go's `a, b int` shorthand.

	Each comma-separated entry is parsed on its own, so in `(a, b int)` the
	entry `a` arrives as an unnamed parameter of type `a`. If any entry in the
	list is named, every bare-identifier entry is really a name sharing the
	type of the next named entry.
	"""
	entries: List[Tuple[Tree, Optional[Token], Expr]] = []
	for child in tree.children:
		for entry in child.children:
			kind = _name(entry)
			if kind == "named_param":
				entries.append((entry, entry.children[0], _build_type(entry.children[1])))
			elif kind == "named_variadic":
				elt = _build_type(entry.children[1])
				entries.append((entry, entry.children[0], Ellipsis(loc=None, elt=elt)))
			elif kind == "anon_param":
				entries.append((entry, None, _build_type(entry.children[0])))
			elif kind == "anon_variadic":
				elt = _build_type(entry.children[0])
				entries.append((entry, None, Ellipsis(loc=_loc(entry), elt=elt)))
			else:
				raise ValueError(f"Unsupported parameter node: {kind}")

	if not any(name is not None for _, name, _ in entries):
		return [Field(loc=_loc(entry), names=[], type=typ) for entry, _, typ in entries]

	fields: List[Field] = []
	pending: List[Tuple[Tree, Ident]] = []
	for entry, name, typ in entries:
		if name is None:
			if not isinstance(typ, Ident):
				raise GoSyntaxError("mixed named and unnamed parameters", loc=_loc(entry))
			pending.append((entry, typ))
			continue
		first = pending[0][0] if pending else entry
		names = [ident for _, ident in pending] + [_ident(name)]
		fields.append(Field(loc=_span(_loc(first), _loc(entry)), names=names, type=typ))
		pending = []
	if pending:
		raise GoSyntaxError("mixed named and unnamed parameters", loc=_loc(pending[-1][0]))
	return fields


# --- types ---


def _build_type(node) -> Expr:
	if isinstance(node, Token):
		raise TypeError(f"Unexpected token in type position: {node.type}")
	name = _name(node)
	loc = _loc(node)
	if name == "type_name":
		return _ident(node.children[0])
	if name == "qualified_type":
		pkg, sel = node.children
		return SelectorExpr(loc=loc, x=_ident(pkg), sel=_ident(sel))
	if name == "generic_type":
		base = _build_type(node.children[0])
		args = [_build_type(child) for child in node.children[1:]]
		return IndexExpr(loc=loc, x=base, indices=args)
	if name == "array_type":
		return ArrayType(loc=loc, len=_build_expr(node.children[0]), elt=_build_type(node.children[1]))
	if name == "ellipsis_array":
		return ArrayType(loc=loc, len=Ellipsis(loc=None, elt=None), elt=_build_type(node.children[0]))
	if name == "slice_type":
		return ArrayType(loc=loc, len=None, elt=_build_type(node.children[0]))
	if name in ("pointer_type", "embedded_pointer"):
		return StarExpr(loc=loc, x=_build_type(node.children[0]))
	if name == "func_type":
		return _build_signature(node.children[0], loc)
	if name == "map_type":
		return MapType(loc=loc, key=_build_type(node.children[0]), value=_build_type(node.children[1]))
	if name == "chan_both":
		return ChanType(loc=loc, dir=ChanDir.BOTH, value=_build_type(node.children[0]))
	if name == "chan_send":
		return ChanType(loc=loc, dir=ChanDir.SEND, value=_build_type(node.children[0]))
	if name == "chan_recv":
		return ChanType(loc=loc, dir=ChanDir.RECV, value=_build_type(node.children[0]))
	if name == "struct_type":
		return StructType(loc=loc, fields=[_build_struct_field(child) for child in node.children])
	if name == "interface_type":
		return InterfaceType(loc=loc, methods=[_build_interface_elem(child) for child in node.children])
	raise ValueError(f"Unsupported type node: {name}")


def _build_struct_field(tree: Tree) -> Field:
	kind = _name(tree)
	tag: Optional[BasicLit] = None
	if isinstance(tree.children[-1], Token):
		tok = tree.children[-1]
		tag = BasicLit(loc=_loc(tok), kind="STRING", value=tok.value)
	if kind == "named_field":
		names = _build_ident_list(tree.children[0])
		return Field(loc=_loc(tree), names=names, type=_build_type(tree.children[1]), tag=tag)
	if kind == "embedded_field":
		return Field(loc=_loc(tree), names=[], type=_build_type(tree.children[0]), tag=tag)
	raise ValueError(f"Unsupported struct field node: {kind}")


def _build_interface_elem(tree: Tree) -> Field:
	kind = _name(tree)
	if kind == "method_elem":
		name_tok, signature = tree.children
		return Field(loc=_loc(tree), names=[_ident(name_tok)], type=_build_signature(signature, _loc(signature)))
	if kind == "type_elem":
		return Field(loc=_loc(tree), names=[], type=_build_type_elem(tree))
	raise ValueError(f"Unsupported interface element: {kind}")


def _build_type_elem(tree: Tree) -> Expr:
	"""`A | ~B | C` folds left into nested `|` binary expressions."""
	terms = [_build_type_term(child) for child in tree.children]
	result = terms[0]
	for term in terms[1:]:
		result = BinaryExpr(loc=_span(result.loc, term.loc), op="|", x=result, y=term)
	return result


def _build_type_term(node: Tree) -> Expr:
	if _name(node) == "tilde_term":
		return UnaryExpr(loc=_loc(node), op="~", x=_build_type(node.children[0]))
	return _build_type(node)


# --- statements ---


def _build_block(tree: Tree) -> Block:
	stmt_list = tree.children[0]
	return Block(loc=_loc(tree), stmts=_build_stmt_list(stmt_list))


def _build_stmt_list(tree: Tree) -> List[Stmt]:
	return [_build_stmt(child) for child in tree.children]


def _build_stmt(tree: Tree) -> Stmt:
	kind = _name(tree)
	loc = _loc(tree)
	if kind == "decl_stmt":
		decl = tree.children[0]
		return DeclStmt(loc=loc, decl=_build_gen_decl(decl, _name(decl)[: -len("_decl")]))
	if kind == "labeled_stmt":
		label = _ident(tree.children[0])
		stmt = _build_stmt(tree.children[1]) if len(tree.children) > 1 else None
		return LabeledStmt(loc=loc, label=label, stmt=stmt)
	if kind == "expr_stmt":
		return ExprStmt(loc=loc, x=_build_expr(tree.children[0]))
	if kind == "send_stmt":
		return SendStmt(loc=loc, chan=_build_expr(tree.children[0]), value=_build_expr(tree.children[1]))
	if kind == "inc_dec_stmt":
		op = tree.children[1].children[0].value
		return IncDecStmt(loc=loc, x=_build_expr(tree.children[0]), op=op)
	if kind == "assign_stmt":
		lhs, op_tree, rhs = tree.children
		return AssignStmt(
			loc=loc,
			lhs=_build_expr_list(lhs),
			op=op_tree.children[0].value,
			rhs=_build_expr_list(rhs),
		)
	if kind == "short_var_decl":
		lhs, rhs = tree.children
		return AssignStmt(loc=loc, lhs=_build_expr_list(lhs), op=":=", rhs=_build_expr_list(rhs))
	if kind == "go_stmt":
		return GoStmt(loc=loc, call=_build_call_operand(tree, "go"))
	if kind == "defer_stmt":
		return DeferStmt(loc=loc, call=_build_call_operand(tree, "defer"))
	if kind == "return_stmt":
		results = _build_expr_list(tree.children[0]) if tree.children else []
		return ReturnStmt(loc=loc, results=results)
	if kind == "branch_stmt":
		keyword = tree.children[0].value
		label = _ident(tree.children[1]) if len(tree.children) > 1 else None
		return BranchStmt(loc=loc, tok=keyword, label=label)
	if kind == "block":
		return _build_block(tree)
	if kind == "if_stmt":
		return _build_if_stmt(tree)
	if kind == "switch_stmt":
		return _build_switch_stmt(tree)
	if kind == "type_switch_stmt":
		return _build_type_switch_stmt(tree)
	if kind == "select_stmt":
		clauses = [_build_comm_clause(child) for child in tree.children]
		return SelectStmt(loc=loc, clauses=clauses)
	if kind == "for_stmt":
		return _build_for_stmt(tree)
	if kind == "range_stmt":
		return _build_range_stmt(tree)
	raise ValueError(f"Unsupported statement node: {kind}")


def _build_call_operand(tree: Tree, keyword: str) -> Expr:
	expr = _build_expr(tree.children[0])
	if isinstance(expr, ParenExpr):
		raise GoSyntaxError(f"expression in {keyword} must not be parenthesized", loc=expr.loc)
	if not isinstance(expr, CallExpr):
		raise GoSyntaxError(f"expression in {keyword} must be function call", loc=expr.loc)
	return expr


def _build_simple_init(tree: Tree) -> Stmt:
	return _build_stmt(tree.children[0])


def _build_if_stmt(tree: Tree) -> IfStmt:
	children = tree.children
	init: Optional[Stmt] = None
	idx = 0
	if _name(children[0]) == "simple_init":
		init = _build_simple_init(children[0])
		idx = 1
	cond = _build_expr(children[idx])
	body = _build_block(children[idx + 1])
	else_: Optional[Stmt] = None
	if len(children) > idx + 2:
		else_ = _build_stmt(children[idx + 2])
	return IfStmt(loc=_loc(tree), init=init, cond=cond, body=body, else_=else_)


def _build_switch_stmt(tree: Tree) -> SwitchStmt:
	init: Optional[Stmt] = None
	tag: Optional[Expr] = None
	clauses: List[CaseClause] = []
	for child in tree.children:
		kind = _name(child)
		if kind == "simple_init":
			init = _build_simple_init(child)
		elif kind in ("case_clause", "default_clause"):
			clauses.append(_build_case_clause(child))
		else:
			tag = _build_expr(child)
	return SwitchStmt(loc=_loc(tree), init=init, tag=tag, clauses=clauses)


def _build_type_switch_stmt(tree: Tree) -> TypeSwitchStmt:
	init: Optional[Stmt] = None
	assign: Optional[Stmt] = None
	clauses: List[CaseClause] = []
	for child in tree.children:
		kind = _name(child)
		if kind == "simple_init":
			init = _build_simple_init(child)
		elif kind == "type_switch_guard":
			assign = _build_type_switch_guard(child)
		else:
			clauses.append(_build_case_clause(child))
	return TypeSwitchStmt(loc=_loc(tree), init=init, assign=assign, clauses=clauses)


def _build_type_switch_guard(tree: Tree) -> Stmt:
	loc = _loc(tree)
	if isinstance(tree.children[0], Token):
		name_tok, operand = tree.children
		x = _build_expr(operand)
		guard = TypeAssertExpr(loc=_span(x.loc, loc), x=x, type=None)
		return AssignStmt(loc=loc, lhs=[_ident(name_tok)], op=":=", rhs=[guard])
	x = _build_expr(tree.children[0])
	return ExprStmt(loc=loc, x=TypeAssertExpr(loc=loc, x=x, type=None))


def _build_case_clause(tree: Tree) -> CaseClause:
	if _name(tree) == "default_clause":
		return CaseClause(loc=_loc(tree), exprs=None, body=_build_stmt_list(tree.children[0]))
	exprs, body = tree.children
	return CaseClause(loc=_loc(tree), exprs=_build_expr_list(exprs), body=_build_stmt_list(body))


def _build_comm_clause(tree: Tree) -> CommClause:
	if _name(tree) == "default_comm":
		return CommClause(loc=_loc(tree), comm=None, body=_build_stmt_list(tree.children[0]))
	comm, body = tree.children
	return CommClause(loc=_loc(tree), comm=_build_stmt(comm), body=_build_stmt_list(body))


def _build_for_stmt(tree: Tree) -> ForStmt:
	init: Optional[Stmt] = None
	cond: Optional[Expr] = None
	post: Optional[Stmt] = None
	body: Optional[Block] = None
	for child in tree.children:
		kind = _name(child)
		if kind == "for_init":
			init = _build_stmt(child.children[0])
		elif kind == "for_cond":
			cond = _build_expr(child.children[0])
		elif kind == "for_post":
			post = _build_stmt(child.children[0])
		elif kind == "header_block":
			body = _build_block(child)
	return ForStmt(loc=_loc(tree), init=init, cond=cond, post=post, body=body)


def _build_range_stmt(tree: Tree) -> RangeStmt:
	key: Optional[Expr] = None
	value: Optional[Expr] = None
	tok: Optional[str] = None
	children = list(tree.children)
	if _name(children[0]) == "range_lhs":
		lhs = children.pop(0)
		targets = _build_expr_list(lhs.children[0])
		tok = lhs.children[1].children[0].value
		key = targets[0]
		if len(targets) > 1:
			value = targets[1]
		if len(targets) > 2:
			raise GoSyntaxError("range clause permits at most two iteration variables", loc=_loc(lhs))
	x = _build_expr(children[0])
	body = _build_block(children[1])
	return RangeStmt(loc=_loc(tree), key=key, value=value, tok=tok, x=x, body=body)


# --- expressions ---

_TYPE_NODES = {
	"type_name",
	"qualified_type",
	"generic_type",
	"array_type",
	"ellipsis_array",
	"slice_type",
	"pointer_type",
	"func_type",
	"map_type",
	"chan_both",
	"chan_send",
	"chan_recv",
	"struct_type",
	"interface_type",
}


def _build_expr(node) -> Expr:
	if isinstance(node, Tree):
		name = _name(node)
	else:
		raise TypeError(f"Unexpected node type: {type(node)}")
	loc = _loc(node)

	if name == "ident":
		return _ident(node.children[0])
	if name == "basic_lit":
		return _build_basic_lit(node.children[0])
	if name == "binary":
		x, op_tree, y = node.children
		return BinaryExpr(loc=loc, op=op_tree.children[0].value, x=_build_expr(x), y=_build_expr(y))
	if name == "unary":
		op_tree, operand = node.children
		op = op_tree.children[0].value
		if op == "*":
			return StarExpr(loc=loc, x=_build_expr(operand))
		return UnaryExpr(loc=loc, op=op, x=_build_expr(operand))
	if name == "paren":
		return ParenExpr(loc=loc, x=_build_expr(node.children[0]))
	if name == "selector":
		x, sel = node.children
		return SelectorExpr(loc=loc, x=_build_expr(x), sel=_ident(sel))
	if name == "type_assert":
		x, typ = node.children
		return TypeAssertExpr(loc=loc, x=_build_expr(x), type=_build_type(typ))
	if name == "index":
		x, indices = node.children
		return IndexExpr(loc=loc, x=_build_expr(x), indices=_build_expr_list(indices))
	if name in ("slice", "slice3"):
		return _build_slice(node)
	if name == "call":
		return _build_call(node)
	if name == "func_lit":
		signature, body = node.children
		return FuncLit(
			loc=loc,
			type=_build_signature(signature, _span(loc, _loc(signature))),
			body=_build_block(body),
		)
	if name == "composite_lit":
		typ, value = node.children
		return _build_literal_value(value, _build_type(typ), loc)
	if name == "literal_value":
		return _build_literal_value(node, None, loc)
	if name == "key_value":
		key, value = node.children
		return KeyValueExpr(loc=loc, key=_build_expr(key), value=_build_expr(value))
	if name in _TYPE_NODES:
		return _build_type(node)
	raise ValueError(f"Unsupported expression node: {name}")


def _build_basic_lit(token: Token) -> BasicLit:
	value = token.value
	if token.type == "STRING":
		kind = "STRING"
	elif token.type == "CHAR":
		kind = "CHAR"
	elif value.endswith("i"):
		kind = "IMAG"
	elif value[:2] in ("0x", "0X"):
		kind = "FLOAT" if ("." in value or "p" in value or "P" in value) else "INT"
	elif "." in value or "e" in value or "E" in value:
		kind = "FLOAT"
	else:
		kind = "INT"
	return BasicLit(loc=_loc(token), kind=kind, value=value)


def _build_slice(tree: Tree) -> SliceExpr:
	x = _build_expr(tree.children[0])
	parts = {"slice_low": None, "slice_high": None, "slice_max": None}
	for child in tree.children[1:]:
		parts[_name(child)] = _build_expr(child.children[0])
	return SliceExpr(
		loc=_loc(tree),
		x=x,
		low=parts["slice_low"],
		high=parts["slice_high"],
		max=parts["slice_max"],
		slice3=_name(tree) == "slice3",
	)


def _build_call(tree: Tree) -> CallExpr:
	fun = _build_expr(tree.children[0])
	args: List[Expr] = []
	ellipsis = False
	lparen: Optional[Located] = None
	rparen: Optional[Located] = None
	for child in tree.children[1:]:
		kind = _name(child)
		if kind == "lparen":
			lparen = _loc(child.children[0])
		elif kind == "rparen":
			rparen = _loc(child.children[0])
		elif kind in ("call_args", "spread_args"):
			args = _build_expr_list(child.children[0])
			ellipsis = kind == "spread_args"
	return CallExpr(loc=_loc(tree), fun=fun, args=args, ellipsis=ellipsis, lparen=lparen, rparen=rparen)


def _build_literal_value(tree: Tree, typ: Optional[Expr], loc: Optional[Located]) -> CompositeLit:
	elts: List[Expr] = []
	for child in tree.children:
		elts.extend(_build_expr(item) for item in child.children)
	braces = _loc(tree)
	lbrace = rbrace = None
	if braces is not None:
		lbrace = Located(braces.line, braces.column)
		rbrace = Located(braces.last_line, max(1, (braces.end_column or 2) - 1))
	return CompositeLit(loc=loc, type=typ, elts=elts, lbrace=lbrace, rbrace=rbrace)


def _build_expr_list(tree: Tree) -> List[Expr]:
	return [_build_expr(child) for child in tree.children]


def _build_ident_list(tree: Tree) -> List[Ident]:
	return [_ident(tok) for tok in tree.children]


# --- helpers ---


def _ident(token: Token) -> Ident:
	return Ident(loc=_loc(token), name=token.value)


def _loc(node) -> Optional[Located]:
	if node is None:
		return None
	if isinstance(node, Token):
		return Located(
			line=node.line,
			column=node.column,
			end_line=node.end_line,
			end_column=node.end_column,
		)
	meta = node.meta
	if getattr(meta, "empty", True):
		return None
	return Located(line=meta.line, column=meta.column, end_line=meta.end_line, end_column=meta.end_column)


def _span(start: Optional[Located], end: Optional[Located]) -> Optional[Located]:
	if start is None:
		return end
	if end is None:
		return start
	return Located(line=start.line, column=start.column, end_line=end.end_line, end_column=end.end_column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = ["GoPostLex", "GoSyntaxError", "parse_file_tree"]

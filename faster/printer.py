# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go printer: `File` tree -> gofmt-style source text.

Layout follows gofmt's conventions: tab indentation, aligned columns for
trailing comments, struct fields, grouped specs and keyed composite
elements, at most one preserved blank line, and gofmt's operator spacing.
Line breaks inside lists are taken from source positions; nodes without a
position (built by the transform passes) get the default single-line or
block layout.

Every `format_*` function renders at indentation zero. Continuation lines
are indented relative to the node's own first line and the enclosing block
adds its level when it embeds the text.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from faster.parser.ast import (
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
	CommClause,
	Comment,
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
	Node,
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
	child_nodes,
	walk,
)

# Stand-in for a newline inside a raw string or block comment: such lines are
# never re-indented. Swapped back for "\n" once the whole file is laid out.
_RAW_NL = "\x00"
# Leading marker for a line printed one level left of its list (labels).
_OUTDENT = "\x01"

_PADDING = 1
_MAX_ONE_LINE_BODY = 100
_MAX_ONE_LINE_STMTS = 5
_MAX_ONE_LINE_FIELD = 30

_LOWEST_PREC = 0
_UNARY_PREC = 6
_HIGHEST_PREC = 7

_BINARY_PREC = {
	"||": 1,
	"&&": 2,
	"==": 3,
	"!=": 3,
	"<": 3,
	"<=": 3,
	">": 3,
	">=": 3,
	"+": 4,
	"-": 4,
	"|": 4,
	"^": 4,
	"*": 5,
	"/": 5,
	"%": 5,
	"<<": 5,
	">>": 5,
	"&": 5,
	"&^": 5,
}

# Operator characters that would fuse with the next token if printed without
# a blank (`- -x` is not `--x`).
_COMBINING = {"+": "+", "-": "-", "/": "*", "<": "-<", "&": "&^"}

Rows = List[List[str]]


def format_file(file: File) -> str:
	rows: Rows = []
	last: Optional[int] = None
	for comment in file.doc:
		rows.extend(_gap(last, _line(comment.loc)))
		rows.append([_comment_text(comment)])
		last = _last(comment.loc)
	package_line = _line(file.package.loc)
	if file.doc:
		rows.extend(_gap(last, package_line))
	rows.append([f"package {file.package.name}"])
	lines = _tabwrite(rows)
	items = [(decl, _decl_rows(decl)) for decl in file.decls]
	lines.extend(_emit(items, open_line=package_line, end_comments=file.end_comments, spacing=_decl_spacing))
	text = "\n".join(lines)
	return text.replace(_RAW_NL, "\n").rstrip("\n") + "\n"


def format_decl(decl: Node) -> str:
	return "\n".join(_tabwrite(_decl_rows(decl))).replace(_RAW_NL, "\n")


def format_stmt(stmt: Stmt) -> str:
	if isinstance(stmt, ExprStmt):
		return _expr0(stmt.x, 1)
	if isinstance(stmt, SendStmt):
		return f"{_expr0(stmt.chan, 1)} <- {_expr0(stmt.value, 1)}"
	if isinstance(stmt, IncDecStmt):
		return _expr0(stmt.x, 2) + stmt.op
	if isinstance(stmt, AssignStmt):
		return _format_assign(stmt)
	if isinstance(stmt, GoStmt):
		return "go " + format_expr(stmt.call)
	if isinstance(stmt, DeferStmt):
		return "defer " + format_expr(stmt.call)
	if isinstance(stmt, ReturnStmt):
		if not stmt.results:
			return "return"
		return _after("return", _format_list(stmt.results, 1, None, None))
	if isinstance(stmt, BranchStmt):
		if stmt.label is None:
			return stmt.tok
		return f"{stmt.tok} {stmt.label.name}"
	if isinstance(stmt, Block):
		return _format_block(stmt)
	if isinstance(stmt, IfStmt):
		text = "if" + _control_clause(stmt.init, stmt.cond, None, False) + _format_block(stmt.body)
		if stmt.else_ is not None:
			text += " else " + format_stmt(stmt.else_)
		return text
	if isinstance(stmt, SwitchStmt):
		header = "switch" + _control_clause(stmt.init, stmt.tag, None, False)
		open_line = _last(_first_loc(stmt.tag, stmt.init)) or _line(stmt.loc)
		return header + _format_clauses(stmt.clauses, open_line, _last(stmt.loc), stmt.end_comments)
	if isinstance(stmt, TypeSwitchStmt):
		header = "switch "
		if stmt.init is not None:
			header += format_stmt(stmt.init) + "; "
		header += format_stmt(stmt.assign) + " "
		open_line = _last(stmt.assign.loc) or _line(stmt.loc)
		return header + _format_clauses(stmt.clauses, open_line, _last(stmt.loc), stmt.end_comments)
	if isinstance(stmt, SelectStmt):
		return "select " + _format_clauses(stmt.clauses, _line(stmt.loc), _last(stmt.loc), stmt.end_comments)
	if isinstance(stmt, ForStmt):
		return "for" + _control_clause(stmt.init, stmt.cond, stmt.post, True) + _format_block(stmt.body)
	if isinstance(stmt, RangeStmt):
		text = "for "
		if stmt.key is not None:
			text += format_expr(stmt.key)
			if stmt.value is not None:
				text += ", " + format_expr(stmt.value)
			text += f" {stmt.tok} "
		text += "range " + format_expr(_strip_parens(stmt.x)) + " "
		return text + _format_block(stmt.body)
	if isinstance(stmt, DeclStmt):
		return _format_gen_decl(stmt.decl)
	if isinstance(stmt, LabeledStmt):
		if stmt.stmt is None:
			return f"{stmt.label.name}:"
		return f"{stmt.label.name}:\n{format_stmt(stmt.stmt)}"
	raise TypeError(f"Unsupported statement: {type(stmt).__name__}")


def format_expr(expr: Expr) -> str:
	return _expr1(expr, _LOWEST_PREC, 1)


def format_type(typ: Expr) -> str:
	if isinstance(typ, Ident):
		return typ.name
	if isinstance(typ, Ellipsis):
		if typ.elt is None:
			return "..."
		return "..." + format_type(typ.elt)
	if isinstance(typ, ArrayType):
		if typ.len is None:
			return "[]" + format_type(typ.elt)
		return f"[{format_expr(typ.len)}]{format_type(typ.elt)}"
	if isinstance(typ, StructType):
		return "struct" + _format_field_block(typ.fields, typ.loc, typ.end_comments, is_struct=True)
	if isinstance(typ, InterfaceType):
		return "interface" + _format_field_block(typ.methods, typ.loc, typ.end_comments, is_struct=False)
	if isinstance(typ, FuncType):
		return "func" + _format_signature(typ)
	if isinstance(typ, MapType):
		return f"map[{format_type(typ.key)}]{format_type(typ.value)}"
	if isinstance(typ, ChanType):
		value = format_type(typ.value)
		if typ.dir is ChanDir.BOTH and isinstance(typ.value, ChanType) and typ.value.dir is ChanDir.RECV:
			# `chan <-chan T` would read as `chan<- chan T`
			value = f"({value})"
		return f"{typ.dir.value} {value}"
	# named, qualified, generic and pointer types are ordinary expressions
	return format_expr(typ)


# --- lists of lines ---


def _emit(
	items: Sequence[Tuple[Node, Rows]],
	open_line: Optional[int] = None,
	close_line: Optional[int] = None,
	end_comments: Sequence[Comment] = (),
	spacing: Optional[Callable[[Optional[Node], Node], int]] = None,
) -> List[str]:
	"""
	Lay out list elements one per line with their doc comments, keeping at
	most one blank line wherever the source had any, then align columns.
	"""
	rows: Rows = []
	prev_end = open_line
	prev_node: Optional[Node] = None
	for node, node_rows in items:
		minimum = spacing(prev_node, node) if spacing is not None else 0
		doc = getattr(node, "doc", [])
		first = doc[0].loc if doc else node.loc
		rows.extend(_gap(prev_end, _line(first), minimum))
		last: Optional[int] = None
		for i, comment in enumerate(doc):
			if i > 0:
				rows.extend(_gap(last, _line(comment.loc)))
			rows.append([_comment_text(comment)])
			last = _last(comment.loc)
		if doc:
			rows.extend(_gap(last, _line(node.loc)))
		rows.extend(node_rows)
		prev_end = _last_line(node)
		prev_node = node
	for comment in end_comments:
		rows.extend(_gap(prev_end, _line(comment.loc)))
		rows.append([_comment_text(comment)])
		prev_end = _last(comment.loc)
	if rows:
		rows.extend(_gap(prev_end, close_line))
	return _tabwrite(rows)


def _gap(prev_end: Optional[int], start: Optional[int], minimum: int = 0) -> Rows:
	if minimum > 0:
		return [[""]]
	if prev_end is not None and start is not None and start - prev_end > 1:
		return [[""]]
	return []


def _decl_spacing(prev: Optional[Node], decl: Node) -> int:
	if prev is None or _decl_token(prev) != _decl_token(decl) or decl.doc:
		return 1
	return 0


def _decl_token(decl: Node) -> str:
	if isinstance(decl, GenDecl):
		return decl.tok
	return "func"


def _tabwrite(rows: Rows) -> List[str]:
	"""
	Align cells into columns like text/tabwriter with gofmt's settings.

	Every cell but the last of a row is terminated; a column block is a run
	of consecutive rows that all have a terminated cell in that column, and
	blocks nest left to right. Columns that are empty throughout a block take
	no space.
	"""
	lines = _split_rows(rows)
	widths = [[0] * (len(cells) - 1) for cells in lines]
	_format_columns(lines, widths, 0, len(lines), 0)
	out = []
	for cells, row_widths in zip(lines, widths):
		parts = []
		for cell, width in zip(cells, row_widths):
			parts.append(cell + " " * (width - _cell_width(cell)) if width else cell)
		parts.append(cells[-1])
		out.append("".join(parts).rstrip(" "))
	return out


def _split_rows(rows: Rows) -> Rows:
	# A multi-line cell ends its row: its first line stays in the columns,
	# later lines stand alone, anything after it follows the last line.
	lines: Rows = []
	for cells in rows:
		for k, cell in enumerate(cells):
			if "\n" not in cell:
				continue
			parts = cell.split("\n")
			lines.append(cells[:k] + [parts[0]])
			lines.extend([part] for part in parts[1:-1])
			rest = [c for c in cells[k + 1 :] if c]
			lines.append([" ".join([parts[-1]] + rest)])
			break
		else:
			lines.append(list(cells))
	return lines


def _format_columns(lines: Rows, widths: List[List[int]], line0: int, line1: int, column: int) -> None:
	this = line0
	while this < line1:
		if column >= len(lines[this]) - 1:
			this += 1
			continue
		start = this
		width = 0
		while this < line1 and column < len(lines[this]) - 1:
			size = _cell_width(lines[this][column])
			if size:
				width = max(width, size + _PADDING)
			this += 1
		for k in range(start, this):
			widths[k][column] = width
		_format_columns(lines, widths, start, this, column + 1)


def _cell_width(cell: str) -> int:
	return len(cell.rsplit(_RAW_NL, 1)[-1])


def _indent_lines(lines: Iterable[str]) -> str:
	out = []
	for line in lines:
		for part in line.split("\n"):
			if part.startswith(_OUTDENT):
				out.append(part[1:])
			elif part:
				out.append("\t" + part)
			else:
				out.append("")
	return "\n".join(out)


def _indent_tail(text: str) -> str:
	first, *rest = text.split("\n")
	return "\n".join([first] + ["\t" + line if line else line for line in rest])


def _with_trailing(rows: Rows, comments: Sequence[Comment]) -> Rows:
	if comments:
		rows[-1] = rows[-1] + [" ".join(_comment_text(c) for c in comments)]
	return rows


def _comment_text(comment: Comment) -> str:
	if comment.is_line_comment:
		return comment.text.rstrip()
	return comment.text.replace("\n", _RAW_NL)


# --- declarations ---


def _decl_rows(decl: Node) -> Rows:
	if isinstance(decl, FuncDecl):
		header = _format_func_header(decl)
		if decl.body is None:
			rows = [[header]]
		else:
			body = _one_line_body(header, decl.body) if decl.loc is not None else None
			if body is not None:
				rows = [[header, body]]
			else:
				rows = [[header + " " + _format_block(decl.body)]]
	elif isinstance(decl, GenDecl):
		rows = [[_format_gen_decl(decl)]]
	else:
		raise TypeError(f"Unsupported declaration: {type(decl).__name__}")
	return _with_trailing(rows, decl.comment)


def _format_func_header(decl: FuncDecl) -> str:
	text = "func "
	if decl.recv is not None:
		text += _format_params(decl.recv, None) + " "
	return text + decl.name.name + _format_signature(decl.type)


def _one_line_body(header: str, body: Block) -> Optional[str]:
	"""`{ s1; s2 }` when gofmt would keep a short body on the header line."""
	if "\n" in header:
		return None
	if body.loc is not None and body.loc.line != body.loc.last_line:
		return None
	if len(body.stmts) > _MAX_ONE_LINE_STMTS or _has_comments(body):
		return None
	if not body.stmts:
		return "{}"
	texts = [format_stmt(s) for s in body.stmts]
	if any("\n" in t or _RAW_NL in t for t in texts):
		return None
	size = len(header) + sum(len(t) for t in texts) + 2 * (len(texts) - 1)
	if size > _MAX_ONE_LINE_BODY:
		return None
	return "{ " + "; ".join(texts) + " }"


def _has_comments(node: Node) -> bool:
	for sub in walk(node):
		for slot in ("doc", "comment", "end_comments", "comments"):
			if getattr(sub, slot, None):
				return True
	return False


def _format_gen_decl(decl: GenDecl) -> str:
	if not decl.grouped:
		return f"{decl.tok} {_format_spec(decl.specs[0])}"
	if not decl.specs and not decl.end_comments:
		return f"{decl.tok} ()"
	count = len(decl.specs)
	if count > 1 and decl.tok in ("const", "var"):
		keep = _keep_type_column(decl.specs)
	else:
		keep = [False] * count
	items = [(spec, _spec_rows(spec, count, keep[i])) for i, spec in enumerate(decl.specs)]
	lines = _emit(items, _line(decl.loc), _last(decl.loc), decl.end_comments)
	return f"{decl.tok} (\n{_indent_lines(lines)}\n)"


def _keep_type_column(specs: Sequence[Spec]) -> List[bool]:
	"""
	For each spec of a const/var group, whether it keeps an (possibly empty)
	type column: true throughout a run of specs with values if any spec of
	that run has a type.
	"""
	keep = [False] * len(specs)
	start = -1
	keep_type = False
	for i, spec in enumerate(specs):
		if spec.values:
			if start < 0:
				start = i
				keep_type = False
		elif start >= 0:
			if keep_type:
				keep[start:i] = [True] * (i - start)
			start = -1
		if spec.type is not None:
			keep_type = True
	if start >= 0 and keep_type:
		keep[start:] = [True] * (len(specs) - start)
	return keep


def _format_spec(spec: Spec) -> str:
	if isinstance(spec, ImportSpec):
		if spec.name is None:
			return spec.path.value
		return f"{spec.name.name} {spec.path.value}"
	if isinstance(spec, ValueSpec):
		text = ", ".join(n.name for n in spec.names)
		if spec.type is not None:
			text += " " + format_type(spec.type)
		if spec.values:
			text = _after(text + " =", _format_list(spec.values, 1, None, None))
		return text
	if isinstance(spec, TypeSpec):
		text = _type_spec_name(spec) + " "
		if spec.assign:
			text += "= "
		return text + format_type(spec.type)
	raise TypeError(f"Unsupported spec: {type(spec).__name__}")


def _spec_rows(spec: Spec, count: int, keep_type: bool) -> Rows:
	if isinstance(spec, ValueSpec) and count > 1:
		cells = [", ".join(n.name for n in spec.names)]
		if spec.type is not None or keep_type:
			cells.append(format_type(spec.type) if spec.type is not None else "")
		if spec.values:
			cells.append(_after("=", _format_list(spec.values, 1, None, None)))
		if spec.comment:
			cells.extend([""] * (3 - len(cells)))
		return _with_trailing([cells], spec.comment)
	if isinstance(spec, TypeSpec) and count > 1:
		value = ("= " if spec.assign else "") + format_type(spec.type)
		return _with_trailing([[_type_spec_name(spec), value]], spec.comment)
	return _with_trailing([[_format_spec(spec)]], spec.comment)


def _type_spec_name(spec: TypeSpec) -> str:
	if not spec.type_params:
		return spec.name.name
	return spec.name.name + _format_params(spec.type_params, spec.type_params_loc, "[", "]")


# --- signatures and field lists ---


def _format_signature(ftype: FuncType) -> str:
	text = ""
	if ftype.type_params:
		text += _format_params(ftype.type_params, ftype.type_params_loc, "[", "]")
	text += _format_params(ftype.params, ftype.params_loc)
	count = ftype.result_count()
	if count == 0:
		return text
	if count == 1 and not ftype.results[0].names:
		return text + " " + format_type(ftype.results[0].type)
	return text + " " + _format_params(ftype.results, ftype.results_loc)


def _format_params(fields: Sequence[Field], loc: Optional[Located], open_tok: str = "(", close_tok: str = ")") -> str:
	if not fields:
		return open_tok + close_tok
	text = open_tok
	prev_line = _line(loc)
	broken = False
	for i, f in enumerate(fields):
		param = _format_param(f)
		line = _line(f.loc)
		if i > 0:
			text += ","
		if prev_line is not None and line is not None and prev_line < line:
			text += "\n\t"
			broken = True
		elif i > 0:
			text += " "
		text += _indent_tail(param) if broken else param
		prev_line = _last(f.loc)
	close_line = _last(loc)
	if prev_line is not None and close_line is not None and prev_line < close_line:
		text += ",\n"
	elif open_tok == "[" and sum(max(1, len(f.names)) for f in fields) == 1 and _combines_with_name(fields[0].type):
		# `[P *T]` alone would read as an array length
		text += ","
	return text + close_tok


def _format_param(f: Field) -> str:
	typ = format_type(f.type)
	if not f.names:
		return typ
	return ", ".join(n.name for n in f.names) + " " + typ


def _combines_with_name(typ: Expr) -> bool:
	if isinstance(typ, StarExpr):
		return not _is_type_elem(typ.x)
	if isinstance(typ, BinaryExpr):
		return _combines_with_name(typ.x) and not _is_type_elem(typ.y)
	return False


def _is_type_elem(typ: Expr) -> bool:
	if isinstance(typ, (ArrayType, StructType, FuncType, InterfaceType, MapType, ChanType)):
		return True
	if isinstance(typ, UnaryExpr):
		return typ.op == "~"
	if isinstance(typ, BinaryExpr):
		return _is_type_elem(typ.x) or _is_type_elem(typ.y)
	if isinstance(typ, ParenExpr):
		return _is_type_elem(typ.x)
	return False


def _format_field_block(fields: Sequence[Field], loc: Optional[Located], end_comments: Sequence[Comment], is_struct: bool) -> str:
	one_line_src = loc is not None and loc.line == loc.last_line
	has_comments = bool(end_comments) or any(_has_comments(f) for f in fields)
	if one_line_src and not has_comments:
		if not fields:
			return "{}"
		if len(fields) == 1:
			text = _one_line_field(fields[0], is_struct)
			if text is not None:
				return "{ " + text + " }"
	if not fields and not end_comments:
		return " {\n}"
	items = [(f, _field_rows(f, is_struct)) for f in fields]
	lines = _emit(items, _line(loc), _last(loc), end_comments)
	return " {\n" + _indent_lines(lines) + "\n}"


def _one_line_field(f: Field, is_struct: bool) -> Optional[str]:
	if f.tag is not None or f.comment:
		return None
	size = (1 if f.names else 0) + len(format_type(f.type))
	text = _member_text(f, is_struct)
	if size > _MAX_ONE_LINE_FIELD or "\n" in text:
		return None
	return text


def _member_text(f: Field, is_struct: bool) -> str:
	if is_struct:
		return _format_param(f)
	if f.names:
		return f.names[0].name + _format_signature(f.type)
	return format_type(f.type)


def _field_rows(f: Field, is_struct: bool) -> Rows:
	if not is_struct:
		return _with_trailing([[_member_text(f, False)]], f.comment)
	if f.names:
		cells = [", ".join(n.name for n in f.names), format_type(f.type)]
	else:
		cells = [format_type(f.type)]
	if f.tag is not None:
		cells.append(f.tag.value.replace("\n", _RAW_NL))
	elif f.comment and not f.names:
		cells.append("")
	return _with_trailing([cells], f.comment)


# --- statements ---


def _stmt_rows(stmt: Stmt) -> Rows:
	if isinstance(stmt, LabeledStmt):
		rows = [[_OUTDENT + stmt.label.name + ":"]]
		if stmt.stmt is not None:
			rows.extend(_stmt_rows(stmt.stmt))
		return _with_trailing(rows, stmt.comment)
	return _with_trailing([[format_stmt(stmt)]], stmt.comment)


def _format_block(block: Block) -> str:
	items = [(s, _stmt_rows(s)) for s in block.stmts]
	lines = _emit(items, _line(block.loc), _last(block.loc), block.end_comments)
	if not lines:
		return "{\n}"
	return "{\n" + _indent_lines(lines) + "\n}"


def _format_assign(stmt: AssignStmt) -> str:
	depth = 2 if len(stmt.lhs) > 1 and len(stmt.rhs) > 1 else 1
	lhs = _format_list(stmt.lhs, depth, None, None)
	op_line = _last(stmt.lhs[-1].loc) if stmt.lhs else None
	return _after(f"{lhs} {stmt.op}", _format_list(stmt.rhs, depth, op_line, None))


def _control_clause(init: Optional[Stmt], cond: Optional[Expr], post: Optional[Stmt], is_for: bool) -> str:
	"""The text between `if`/`for`/`switch` and the opening brace."""
	if init is None and post is None:
		if cond is None:
			return " "
		return " " + format_expr(_strip_parens(cond)) + " "
	text = " "
	if init is not None:
		text += format_stmt(init)
	text += "; "
	needs_blank = False
	if cond is not None:
		text += format_expr(_strip_parens(cond))
		needs_blank = True
	if is_for:
		text += "; "
		needs_blank = False
		if post is not None:
			text += format_stmt(post)
			needs_blank = True
	if needs_blank:
		text += " "
	return text


def _format_clauses(clauses, open_line: Optional[int], close_line: Optional[int], end_comments: Sequence[Comment]) -> str:
	items = [(c, _clause_rows(c)) for c in clauses]
	lines = _emit(items, open_line, close_line, end_comments)
	if not lines:
		return "{\n}"
	return "{\n" + "\n".join(lines) + "\n}"


def _clause_rows(clause: Node) -> Rows:
	if isinstance(clause, CaseClause):
		if clause.exprs is None:
			head = "default:"
		else:
			head = "case " + _format_list(clause.exprs, 1, _line(clause.loc), None) + ":"
	elif isinstance(clause, CommClause):
		head = "default:" if clause.comm is None else f"case {format_stmt(clause.comm)}:"
	else:
		raise TypeError(f"Unsupported clause: {type(clause).__name__}")
	rows = _with_trailing([[head]], clause.comment)
	items = [(s, _stmt_rows(s)) for s in clause.body]
	body = _emit(items, _clause_head_line(clause), None, clause.end_comments)
	if body:
		rows.extend([line] for line in _indent_lines(body).split("\n"))
	return rows


def _clause_head_line(clause: Node) -> Optional[int]:
	if isinstance(clause, CaseClause) and clause.exprs:
		return _last(clause.exprs[-1].loc)
	if isinstance(clause, CommClause) and clause.comm is not None:
		return _last(clause.comm.loc)
	return _line(clause.loc)


# --- expressions ---


def _expr0(expr: Expr, depth: int) -> str:
	return _expr1(expr, _LOWEST_PREC, depth)


def _expr1(expr: Expr, prec1: int, depth: int) -> str:
	if isinstance(expr, Ident):
		return expr.name
	if isinstance(expr, BasicLit):
		return expr.value.replace("\n", _RAW_NL)
	if isinstance(expr, BinaryExpr):
		return _format_binary(expr, prec1, _cutoff(expr, depth), depth)
	if isinstance(expr, KeyValueExpr):
		return f"{format_expr(expr.key)}: {format_expr(expr.value)}"
	if isinstance(expr, StarExpr):
		text = "*" + format_expr(expr.x)
		return f"({text})" if _UNARY_PREC < prec1 else text
	if isinstance(expr, UnaryExpr):
		if _UNARY_PREC < prec1:
			return "(" + format_expr(expr) + ")"
		return _join_tokens(expr.op, _expr1(expr.x, _UNARY_PREC, depth))
	if isinstance(expr, ParenExpr):
		if isinstance(expr.x, ParenExpr):
			return _expr0(expr.x, depth)
		return "(" + _expr0(expr.x, _reduce_depth(depth)) + ")"
	if isinstance(expr, SelectorExpr):
		return _format_selector(expr, depth)
	if isinstance(expr, TypeAssertExpr):
		typ = "type" if expr.type is None else format_type(expr.type)
		return f"{_expr1(expr.x, _HIGHEST_PREC, depth)}.({typ})"
	if isinstance(expr, IndexExpr):
		indices = ", ".join(_expr0(i, depth + 1) for i in expr.indices)
		return f"{_expr1(expr.x, _HIGHEST_PREC, 1)}[{indices}]"
	if isinstance(expr, SliceExpr):
		return _format_slice(expr, depth)
	if isinstance(expr, CallExpr):
		return _format_call(expr, depth)
	if isinstance(expr, CompositeLit):
		return _format_composite(expr, depth)
	if isinstance(expr, FuncLit):
		return _format_func_lit(expr)
	if isinstance(expr, (Ellipsis, ArrayType, StructType, InterfaceType, FuncType, MapType, ChanType)):
		return format_type(expr)
	raise TypeError(f"Unsupported expression: {type(expr).__name__}")


def _format_binary(expr: BinaryExpr, prec1: int, cutoff: int, depth: int) -> str:
	prec = _BINARY_PREC[expr.op]
	if prec < prec1:
		return "(" + _expr0(expr, _reduce_depth(depth)) + ")"
	blank = prec < cutoff
	left = _expr1(expr.x, prec, depth + _diff_prec(expr.x, prec))
	right = _expr1(expr.y, prec + 1, depth + 1)
	if blank:
		left = f"{left} {expr.op}"
	else:
		left = _join_tokens(left, expr.op)
	x_line = _last(expr.x.loc)
	y_line = _line(expr.y.loc)
	if x_line is not None and y_line is not None and x_line < y_line:
		return left + "\n\t" + _indent_tail(right)
	if blank:
		return f"{left} {right}"
	return _join_tokens(left, right)


def _cutoff(expr: BinaryExpr, depth: int) -> int:
	has4, has5, max_problem = _walk_binary(expr)
	if max_problem > 0:
		return max_problem + 1
	if has4 and has5:
		return 5 if depth == 1 else 4
	return 6 if depth == 1 else 4


def _walk_binary(expr: BinaryExpr) -> Tuple[bool, bool, int]:
	prec = _BINARY_PREC[expr.op]
	has4 = prec == 4
	has5 = prec == 5
	max_problem = 0

	left = expr.x
	if isinstance(left, BinaryExpr) and _BINARY_PREC[left.op] >= prec:
		h4, h5, mp = _walk_binary(left)
		has4, has5, max_problem = has4 or h4, has5 or h5, max(max_problem, mp)

	right = expr.y
	if isinstance(right, BinaryExpr):
		if _BINARY_PREC[right.op] > prec:
			h4, h5, mp = _walk_binary(right)
			has4, has5, max_problem = has4 or h4, has5 or h5, max(max_problem, mp)
	elif isinstance(right, StarExpr):
		if expr.op == "/":
			max_problem = 5
	elif isinstance(right, UnaryExpr):
		pair = expr.op + right.op
		if pair in ("/*", "&&", "&^"):
			max_problem = 5
		elif pair in ("++", "--"):
			max_problem = max(max_problem, 4)
	return has4, has5, max_problem


def _diff_prec(expr: Expr, prec: int) -> int:
	if not isinstance(expr, BinaryExpr) or prec != _BINARY_PREC[expr.op]:
		return 1
	return 0


def _reduce_depth(depth: int) -> int:
	return max(1, depth - 1)


def _join_tokens(left: str, right: str) -> str:
	if left and right and right[0] in _COMBINING.get(left[-1], ""):
		return f"{left} {right}"
	return left + right


def _format_selector(expr: SelectorExpr, depth: int) -> str:
	base = _expr1(expr.x, _HIGHEST_PREC, depth)
	if _selector_breaks(expr):
		return f"{base}.\n\t{expr.sel.name}"
	return f"{base}.{expr.sel.name}"


def _selector_breaks(expr: Expr) -> bool:
	if not isinstance(expr, SelectorExpr):
		return False
	x_line = _last(expr.x.loc)
	sel_line = _line(expr.sel.loc)
	return x_line is not None and sel_line is not None and x_line < sel_line


def _format_slice(expr: SliceExpr, depth: int) -> str:
	indices = [expr.low, expr.high]
	if expr.slice3:
		indices.append(expr.max)
	needs_blanks = False
	if depth <= 1:
		present = [i for i in indices if i is not None]
		needs_blanks = len(present) > 1 and any(isinstance(i, BinaryExpr) for i in present)
	text = _expr1(expr.x, _HIGHEST_PREC, 1) + "["
	for i, index in enumerate(indices):
		if i > 0:
			if indices[i - 1] is not None and needs_blanks:
				text += " "
			text += ":"
			if index is not None and needs_blanks:
				text += " "
		if index is not None:
			text += _expr0(index, depth + 1)
	return text + "]"


def _format_call(call: CallExpr, depth: int) -> str:
	if len(call.args) > 1:
		depth += 1
	if isinstance(call.fun, FuncType):
		fun = "(" + format_type(call.fun) + ")"
	else:
		fun = _expr1(call.fun, _HIGHEST_PREC, depth)
	# a converted call has lost its parenthesis position; its callee stands in
	open_line = _line(call.lparen) if call.lparen is not None else _last(call.fun.loc)
	args = _format_list(call.args, depth, open_line, _line(call.rparen), ellipsis=call.ellipsis)
	if _selector_breaks(call.fun):
		args = _indent_tail(args)
	return f"{fun}({args})"


def _format_composite(lit: CompositeLit, depth: int) -> str:
	typ = _expr1(lit.type, _HIGHEST_PREC, depth) if lit.type is not None else ""
	if not lit.elts and not lit.comments:
		return typ + "{}"
	elts = _format_list(lit.elts, 1, _line(lit.lbrace), _line(lit.rbrace), comments=lit.comments, align_pairs=True)
	return typ + "{" + elts + "}"


def _format_func_lit(lit: FuncLit) -> str:
	header = "func" + _format_signature(lit.type)
	if lit.loc is not None:
		body = _one_line_body(header, lit.body)
		if body is not None:
			return f"{header} {body}"
	return f"{header} {_format_block(lit.body)}"


def _format_list(
	exprs: Sequence[Expr],
	depth: int,
	open_line: Optional[int],
	close_line: Optional[int],
	comments: Sequence[Comment] = (),
	align_pairs: bool = False,
	ellipsis: bool = False,
) -> str:
	"""
	Render a comma-separated list, keeping the source's line breaks.

	Elements on the opening line stay there; each later source line becomes
	an indented row, and single keyed elements on their own row get their
	values aligned. When the closing token sat on its own line, the last
	element gets a trailing comma and the closer goes to a new line.
	"""
	if not exprs and not comments:
		return ""
	texts = [_expr0(x, depth) for x in exprs]
	if ellipsis and texts:
		texts[-1] += "..."
	first = exprs[0].loc if exprs else None
	last = exprs[-1].loc if exprs else None
	if (
		not comments
		and open_line is not None
		and first is not None
		and last is not None
		and open_line == first.line == last.last_line
	):
		return ", ".join(texts)

	# group elements by the source line they start on
	groups: List[List[int]] = [[]]
	prev_line = open_line or 0
	for i, x in enumerate(exprs):
		line = _line(x.loc) or 0
		if prev_line and prev_line < line:
			groups.append([])
		groups[-1].append(i)
		prev_line = _last(x.loc) or 0

	trailing_comments: List[List[Comment]] = [[] for _ in groups]
	leading_comments: List[List[Comment]] = [[] for _ in groups]
	end_comments: List[Comment] = []
	for comment in sorted(comments, key=lambda c: c.loc.start):
		_place_list_comment(comment, exprs, groups, open_line, trailing_comments, leading_comments, end_comments)

	trailing = bool(close_line and prev_line and prev_line < close_line) or bool(end_comments)
	if trailing_comments[0] and len(groups) == 1:
		trailing = True
	count = len(exprs)

	def element(i: int) -> str:
		return texts[i] + ("," if i < count - 1 or trailing else "")

	head = " ".join(element(i) for i in groups[0])
	if trailing_comments[0]:
		head = _after(head, " ".join(_comment_text(c) for c in trailing_comments[0]))

	def group_end(g: int) -> Optional[int]:
		lines = [_last(exprs[i].loc) for i in groups[g]] or [open_line]
		lines.extend(_last(c.loc) for c in trailing_comments[g])
		present = [n for n in lines if n is not None]
		return max(present) if present else None

	rows: Rows = []
	for g in range(1, len(groups)):
		prev_end = group_end(g - 1)
		for comment in leading_comments[g]:
			if rows:
				rows.extend(_gap(prev_end, _line(comment.loc)))
			rows.append([_comment_text(comment)])
			prev_end = _last(comment.loc)
		indices = groups[g]
		x = exprs[indices[0]]
		if rows:
			rows.extend(_gap(prev_end, _line(x.loc)))
		if (
			align_pairs
			and count > 1
			and len(indices) == 1
			and isinstance(x, KeyValueExpr)
			and "\n" not in texts[indices[0]]
			and open_line is not None
			and close_line is not None
		):
			cells = [format_expr(x.key) + ":", format_expr(x.value) + ("," if indices[0] < count - 1 or trailing else "")]
		else:
			cells = [" ".join(element(i) for i in indices)]
		rows.append(_with_trailing([cells], trailing_comments[g])[0])
	prev_end = group_end(len(groups) - 1)
	for comment in end_comments:
		if rows:
			rows.extend(_gap(prev_end, _line(comment.loc)))
		rows.append([_comment_text(comment)])
		prev_end = _last(comment.loc)

	text = head
	if rows:
		text += "\n" + _indent_lines(_tabwrite(rows))
	if trailing:
		text += "\n"
	return text


def _place_list_comment(comment, exprs, groups, open_line, trailing, leading, end) -> None:
	for g, indices in enumerate(groups):
		if indices:
			first = exprs[indices[0]].loc
			last = exprs[indices[-1]].loc
		else:
			first = last = None
		if g == 0 and not indices:
			if open_line is not None and comment.loc.line == open_line:
				trailing[0].append(comment)
				return
			continue
		if last is not None and comment.loc.line == last.last_line and comment.loc.start >= last.end:
			trailing[g].append(comment)
			return
		if first is not None and comment.loc.end <= first.start:
			if g == 0:
				# ahead of elements on the opening line; keep it on that line
				trailing[0].append(comment)
			else:
				leading[g].append(comment)
			return
	end.append(comment)


# --- helpers ---


def _strip_parens(expr: Expr) -> Expr:
	"""Drop redundant parentheses around a header expression unless a composite literal needs them."""
	while isinstance(expr, ParenExpr) and not _has_bare_composite(expr.x):
		expr = expr.x
	return expr


def _has_bare_composite(expr: Node) -> bool:
	if isinstance(expr, ParenExpr):
		return False
	if isinstance(expr, CompositeLit):
		return _is_type_name(expr.type)
	if isinstance(expr, FuncLit):
		return False
	return any(_has_bare_composite(child) for child in child_nodes(expr))


def _is_type_name(expr: Optional[Expr]) -> bool:
	if isinstance(expr, Ident):
		return True
	if isinstance(expr, SelectorExpr):
		return _is_type_name(expr.x)
	return False


def _after(prefix: str, text: str) -> str:
	if not text:
		return prefix
	if text.startswith("\n"):
		return prefix + text
	return f"{prefix} {text}"


def _first_loc(*nodes: Optional[Node]) -> Optional[Located]:
	for node in nodes:
		if node is not None and node.loc is not None:
			return node.loc
	return None


def _line(loc: Optional[Located]) -> Optional[int]:
	return loc.line if loc is not None else None


def _last(loc: Optional[Located]) -> Optional[int]:
	return loc.last_line if loc is not None else None


def _last_line(node: Node) -> Optional[int]:
	lines = [node.loc.last_line] if node.loc is not None else []
	for slot in ("comment", "end_comments"):
		lines.extend(c.loc.last_line for c in getattr(node, slot, []) if c.loc is not None)
	return max(lines) if lines else None


__all__ = ["format_file", "format_decl", "format_stmt", "format_expr", "format_type"]

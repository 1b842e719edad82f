# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Attach collected comments to the tree.

The post-lexer hands back every comment with its position. Each one is
routed to the innermost statement-like node ("host") around it:

- before a host: the host's `doc`,
- on the host's last line, after it: the host's `comment`,
- inside a list owner (block, group, struct/interface body, switch/select
  body, clause) but after its last element: the owner's `end_comments`,
- between switch or select clauses but indented deeper than the next
  `case`: the previous clause's `end_comments`,
- inside a host but not inside any nested list owner (for instance in the
  middle of a multi-line expression): the host's `comment`.

Comments therefore move with the node they describe when a transform
replaces or wraps it.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .ast import (
	Block,
	CaseClause,
	CommClause,
	Comment,
	CompositeLit,
	File,
	GenDecl,
	InterfaceType,
	Located,
	Node,
	SelectStmt,
	StructType,
	SwitchStmt,
	TypeSwitchStmt,
	child_nodes,
)


def attach_comments(file: File) -> None:
	comments = sorted(
		(c for c in file.comments if c.loc is not None),
		key=lambda c: c.loc.start,
	)
	package_line = file.package.loc.line if file.package.loc is not None else 1
	for comment in comments:
		if comment.loc.last_line < package_line:
			file.doc.append(comment)
			continue
		_distribute(comment, file.decls, file.end_comments)


def _distribute(comment: Comment, hosts: List[Node], sink: List[Comment]) -> None:
	for host in hosts:
		loc = host.loc
		if loc is None:
			continue
		if comment.loc.end <= loc.start:
			host.doc.append(comment)
			return
		if _contains(loc, comment.loc):
			_place_inside(host, comment, host)
			return
		if comment.loc.line == loc.last_line:
			host.comment.append(comment)
			return
	sink.append(comment)


def _distribute_clauses(comment: Comment, clauses: List[Node], sink: List[Comment], owner: Located) -> None:
	"""
	Like `_distribute`, for the clauses of a switch or select.

	A comment on its own line between two clauses, indented deeper than the
	clause keyword that follows it (or the closing brace), still belongs to
	the body of the clause before it.
	"""
	prev: Optional[Node] = None
	for clause in clauses:
		loc = clause.loc
		if loc is None:
			continue
		if comment.loc.end <= loc.start:
			if _indented_past(prev, comment, loc.column):
				prev.end_comments.append(comment)
			else:
				clause.doc.append(comment)
			return
		if _contains(loc, comment.loc) or comment.loc.line == loc.last_line:
			_place_inside(clause, comment, clause)
			return
		prev = clause
	close_column = owner.end_column - 1 if owner.end_column is not None else None
	if _indented_past(prev, comment, close_column):
		prev.end_comments.append(comment)
		return
	sink.append(comment)


def _indented_past(prev: Optional[Node], comment: Comment, column: Optional[int]) -> bool:
	if prev is None or prev.loc is None or column is None:
		return False
	return comment.loc.line > prev.loc.last_line and comment.loc.column > column


def _place_inside(node: Node, comment: Comment, fallback: Node) -> None:
	if isinstance(node, CompositeLit):
		_place_in_literal(node, comment, fallback)
		return
	owned = _owned_list(node, comment)
	if owned is not None:
		hosts, sink = owned
		if isinstance(node, (SwitchStmt, TypeSwitchStmt, SelectStmt)):
			_distribute_clauses(comment, hosts, sink, node.loc)
		else:
			_distribute(comment, hosts, sink)
		return
	for child in child_nodes(node):
		if child.loc is not None and _contains(child.loc, comment.loc):
			_place_inside(child, comment, fallback)
			return
	fallback.comment.append(comment)


def _place_in_literal(lit: CompositeLit, comment: Comment, fallback: Node) -> None:
	for elt in lit.elts:
		if elt.loc is not None and _contains(elt.loc, comment.loc):
			_place_inside(elt, comment, fallback)
			return
	if lit.lbrace is not None and lit.lbrace.start <= comment.loc.start:
		lit.comments.append(comment)
		return
	fallback.comment.append(comment)


def _owned_list(node: Node, comment: Comment) -> Optional[Tuple[List[Node], List[Comment]]]:
	"""The (elements, end sink) pair `node` owns, if `comment` falls in that list."""
	if isinstance(node, Block):
		return node.stmts, node.end_comments
	if isinstance(node, StructType):
		return node.fields, node.end_comments
	if isinstance(node, InterfaceType):
		return node.methods, node.end_comments
	if isinstance(node, GenDecl) and node.grouped:
		return node.specs, node.end_comments
	if isinstance(node, SwitchStmt):
		if _any_contains([node.init, node.tag], comment):
			return None
		return node.clauses, node.end_comments
	if isinstance(node, TypeSwitchStmt):
		if _any_contains([node.init, node.assign], comment):
			return None
		return node.clauses, node.end_comments
	if isinstance(node, SelectStmt):
		return node.clauses, node.end_comments
	if isinstance(node, CaseClause):
		if _any_contains(node.exprs or [], comment):
			return None
		if _on_clause_line(node, comment):
			return None
		return node.body, node.end_comments
	if isinstance(node, CommClause):
		if _any_contains([node.comm], comment):
			return None
		if _on_clause_line(node, comment):
			return None
		return node.body, node.end_comments
	return None


def _on_clause_line(clause, comment: Comment) -> bool:
	"""A comment after `case ...:` on the same line stays with the clause header."""
	if clause.loc is None or comment.loc.line != clause.loc.line:
		return False
	first = clause.body[0].loc if clause.body else None
	return first is None or comment.loc.end <= first.start


def _any_contains(nodes, comment: Comment) -> bool:
	return any(n is not None and n.loc is not None and _contains(n.loc, comment.loc) for n in nodes)


def _contains(outer: Located, inner: Located) -> bool:
	return outer.start <= inner.start and inner.end <= outer.end


__all__ = ["attach_comments"]

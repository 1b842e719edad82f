# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from faster.parser import parse_go_source
from faster.parser.ast import (
	ArrayType,
	ChanDir,
	ChanType,
	FuncDecl,
	GenDecl,
	Ident,
	ImportSpec,
	StarExpr,
	StructType,
	TypeSpec,
	ValueSpec,
)


def _parse(src: str):
	file, diagnostics = parse_go_source(src)
	assert diagnostics == []
	assert file is not None
	return file


def test_parse_package_and_imports() -> None:
	file = _parse(
		"""
package main

import "fmt"

import (
	"os"
	str "strings"
)
"""
	)
	assert file.package.name == "main"
	single, group = file.decls
	assert isinstance(single, GenDecl) and single.tok == "import" and not single.grouped
	assert isinstance(group, GenDecl) and group.grouped
	assert [s.path.value for s in group.specs] == ['"os"', '"strings"']
	named = group.specs[1]
	assert isinstance(named, ImportSpec)
	assert named.name is not None and named.name.name == "str"


def test_parse_func_signatures() -> None:
	file = _parse(
		"""
package p

func Add(a, b int) int { return a + b }

func Split(s string) (head, tail string) {
	return s[:1], s[1:]
}

func Log(format string, args ...any) {}
"""
	)
	add, split, log = file.decls
	assert isinstance(add, FuncDecl) and add.recv is None
	assert [n.name for n in add.type.params[0].names] == ["a", "b"]
	assert add.type.result_count() == 1
	assert split.type.result_count() == 2
	assert split.type.results_loc is not None
	assert log.type.result_count() == 0
	assert log.type.params[1].type.elt.name == "any"


def test_parse_method_receiver_and_bodyless_func() -> None:
	file = _parse(
		"""
package p

func (r *Rec) M() int {
	return r.n
}

func external(x int) int
"""
	)
	method, external = file.decls
	assert method.recv is not None
	assert isinstance(method.recv[0].type, StarExpr)
	assert external.body is None


def test_parse_generic_func_and_type() -> None:
	file = _parse(
		"""
package p

type Pair[K comparable, V any] struct {
	Key K
	Val V
}

func Map[T, U any](xs []T, f func(T) U) []U {
	return nil
}
"""
	)
	pair, fn = file.decls
	spec = pair.specs[0]
	assert isinstance(spec, TypeSpec)
	assert [f.names[0].name for f in spec.type_params] == ["K", "V"]
	assert isinstance(spec.type, StructType)
	assert [n.name for n in fn.type.type_params[0].names] == ["T", "U"]
	assert fn.type.type_params_loc is not None
	assert isinstance(fn.type.results[0].type, ArrayType)


def test_parse_value_specs_and_channel_types() -> None:
	file = _parse(
		"""
package p

const (
	A = iota
	B
)

var in, out chan<- int
var done <-chan struct{}
"""
	)
	consts, outs, done = file.decls
	assert [s.names[0].name for s in consts.specs] == ["A", "B"]
	assert consts.specs[1].values == []
	spec = outs.specs[0]
	assert isinstance(spec, ValueSpec)
	assert isinstance(spec.type, ChanType) and spec.type.dir is ChanDir.SEND
	recv = done.specs[0].type
	assert recv.dir is ChanDir.RECV
	assert isinstance(recv.value, StructType)


def test_parse_positions_are_one_based() -> None:
	file = _parse("package p\n\nfunc F() int {\n\treturn 1\n}\n")
	decl = file.decls[0]
	assert decl.loc.line == 3
	assert decl.loc.last_line == 5
	assert isinstance(decl.name, Ident) and decl.name.loc.column == 6

# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from faster.config import TransformConfig
from faster.parser import parse_go_source
from faster.printer import format_file
from faster.transform import TransformResult, transform_file


def _run(src: str, config: TransformConfig | None = None) -> tuple[str, TransformResult]:
	file, diagnostics = parse_go_source(src)
	assert diagnostics == []
	result = transform_file(file, config)
	return format_file(result.file), result


def test_add_is_wrapped_and_its_call_waits() -> None:
	out, result = _run(
		"""package main

import "fmt"

func Add(a, b int) int { return a + b }

func main() {
	fmt.Println(Add(2, 3))
}
"""
	)
	assert out == """package main

import "fmt"

func Add(a, b int) chan int {
	result := make(chan int)
	go func() {
		result <- func() int {
			return a + b
		}()
	}()
	return result
}

func main() {
	fmt.Println(<-Add(2, 3))
}
"""
	assert result.wrapped == ["Add"]
	assert result.rewritten_calls == 1


def test_method_is_untouched_and_its_calls_are_not_rewritten() -> None:
	src = """package main

type Rec struct{}

func (r Rec) M() int {
	return 1
}

func main() {
	r := Rec{}
	println(r.M())
}
"""
	out, result = _run(src)
	assert out == src
	assert result.wrapped == []
	assert result.rewritten_calls == 0


def test_self_recursion_waits_on_a_fresh_invocation() -> None:
	out, result = _run(
		"""package main

func F(n int) int {
	if n == 0 {
		return 0
	}
	return F(n-1) + 1
}
"""
	)
	assert out == """package main

func F(n int) chan int {
	result := make(chan int)
	go func() {
		result <- func() int {
			if n == 0 {
				return 0
			}
			return <-F(n-1) + 1
		}()
	}()
	return result
}
"""
	assert result.rewritten_calls == 1


def test_forward_and_mutual_references() -> None:
	out, result = _run(
		"""package main

func even(n int) bool {
	if n == 0 {
		return true
	}
	return odd(n - 1)
}

func odd(n int) bool {
	if n == 0 {
		return false
	}
	return even(n - 1)
}
"""
	)
	assert result.wrapped == ["even", "odd"]
	assert "\t\t\treturn <-odd(n - 1)\n" in out
	assert "\t\t\treturn <-even(n - 1)\n" in out
	assert "func even(n int) chan bool {\n" in out


def test_ineligible_declarations_print_unchanged() -> None:
	src = """package main

import "errors"

var ErrNone = errors.New("none")

type T struct {
	n int
}

func (t *T) Get() int {
	return t.n
}

func pair() (int, error) {
	return 0, ErrNone
}

func run() {
	n, err := pair()
	_, _ = n, err
}
"""
	out, result = _run(src)
	assert out == src
	assert result.wrapped == []


def test_comments_survive_the_rewrite() -> None:
	out, _ = _run(
		"""package main

// Twice doubles x.
func Twice(x int) int {
	// multiply
	return x * 2 // done
}

func main() {
	_ = Twice(4) // call
}
"""
	)
	assert out == """package main

// Twice doubles x.
func Twice(x int) chan int {
	result := make(chan int)
	go func() {
		result <- func() int {
			// multiply
			return x * 2 // done
		}()
	}()
	return result
}

func main() {
	_ = <-Twice(4) // call
}
"""


def test_wrapped_functions_calling_each_other_in_arguments() -> None:
	out, result = _run(
		"""package main

func inc(x int) int {
	return x + 1
}

func twice(x int) int {
	return inc(inc(x))
}
"""
	)
	assert "\t\t\treturn <-inc(<-inc(x))\n" in out
	assert result.rewritten_calls == 2


def test_custom_holder_name() -> None:
	out, _ = _run("package main\n\nfunc one() int {\n\treturn 1\n}\n", TransformConfig(holder_name="ch"))
	assert "\tch := make(chan int)\n" in out
	assert "\t\tch <- func() int {\n" in out
	assert "\treturn ch\n" in out


def test_never_received_handle_is_not_reported() -> None:
	out, result = _run("package main\n\nfunc one() int {\n\treturn 1\n}\n\nfunc main() {\n\tgo one()\n}\n")
	assert "\tgo one()\n" in out
	assert result.rewritten_calls == 0

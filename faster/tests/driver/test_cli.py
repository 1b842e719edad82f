# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from faster.faster import main

REPO_ROOT = Path(__file__).resolve().parents[3]

ADD_SRC = """package main

import "fmt"

func Add(a, b int) int {
	return a + b
}

func main() {
	fmt.Println(Add(2, 3))
}
"""

ADD_OUT = """package main

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


def _write_file(path: Path, text: str) -> Path:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")
	return path


def test_rewrites_file_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "add.go", ADD_SRC)
	assert main([str(src)]) == 0
	captured = capsys.readouterr()
	assert captured.out == ADD_OUT
	assert captured.err == ""


@pytest.mark.parametrize("argv", [[], ["a.go", "b.go"]])
def test_wrong_argument_count_prints_usage(argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
	assert main(argv) == 1
	captured = capsys.readouterr()
	assert captured.out == ""
	assert captured.err.startswith("usage: faster")


def test_parse_failure_names_the_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "bad.go", "package main\n\nfunc main() {\n\tx := )\n}\n")
	assert main([str(src)]) == 1
	captured = capsys.readouterr()
	assert captured.out == ""
	lines = captured.err.splitlines()
	assert lines[0] == f"failed to parse {src}"
	assert lines[1].startswith(f"{src}:4:")
	assert ": error: " in lines[1]


def test_missing_file_is_a_parse_failure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	missing = tmp_path / "nope.go"
	assert main([str(missing)]) == 1
	captured = capsys.readouterr()
	assert captured.out == ""
	assert captured.err.startswith(f"failed to parse {missing}\n")
	assert "cannot read file" in captured.err


def test_output_option_writes_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "add.go", ADD_SRC)
	dest = tmp_path / "out" / "add_fast.go"
	dest.parent.mkdir()
	assert main([str(src), "-o", str(dest)]) == 0
	assert capsys.readouterr().out == ""
	assert dest.read_text(encoding="utf-8") == ADD_OUT


def test_output_is_not_written_on_parse_failure(tmp_path: Path) -> None:
	src = _write_file(tmp_path / "bad.go", "package main\n\nfunc (\n")
	dest = tmp_path / "out.go"
	assert main([str(src), "--output", str(dest)]) == 1
	assert not dest.exists()


def test_holder_name_option(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "add.go", ADD_SRC)
	assert main(["--holder-name", "ch", str(src)]) == 0
	out = capsys.readouterr().out
	assert "\tch := make(chan int)\n" in out
	assert "\treturn ch\n" in out


def test_invalid_holder_name_is_a_usage_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "add.go", ADD_SRC)
	assert main(["--holder-name", "go", str(src)]) == 1
	captured = capsys.readouterr()
	assert captured.out == ""
	assert captured.err.startswith("usage: faster")
	assert "invalid holder name 'go'" in captured.err


def test_verbose_logs_the_passes(tmp_path: Path, caplog: pytest.LogCaptureFixture, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "add.go", ADD_SRC)
	with caplog.at_level("DEBUG", logger="faster"):
		assert main(["-v", str(src)]) == 0
	assert capsys.readouterr().out == ADD_OUT
	messages = [r.getMessage() for r in caplog.records]
	assert "wrapped Add" in messages
	assert "skipping main: 0 results" in messages
	assert "wrapped 1 function(s), rewrote 1 call(s)" in messages


def test_module_entrypoint(tmp_path: Path) -> None:
	src = _write_file(tmp_path / "add.go", ADD_SRC)
	cp = subprocess.run(
		[sys.executable, "-m", "faster", str(src)],
		cwd=REPO_ROOT,
		text=True,
		capture_output=True,
	)
	assert cp.returncode == 0, cp.stderr
	assert cp.stdout == ADD_OUT

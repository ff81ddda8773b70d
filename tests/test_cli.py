"""
tests/test_cli.py
Tests for the dtoschema command-line interface.

Each test runs ``cli_main`` in-process and checks the exit code and the
printed report.
"""

from __future__ import annotations

import json
import logging
import pathlib
from typing import Any, Callable, Iterator, List

import pytest

from dtoschema.cli import (
    EXIT_INPUT_ERROR,
    EXIT_SCHEMA_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    _setup_logging,
    cli_main,
)
from dtoschema.schema import Schema


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """cli_main reconfigures the ``dtoschema`` logger; undo it after each test."""
    yield
    root_logger = logging.getLogger("dtoschema")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


VALID_POST = {"title": "Hello", "tags": [{"name": "py", "value": "3"}]}
INVALID_POST = {"title": "Hi", "tags": [{"name": "", "value": "abc"}]}


class TestValidationRuns:
    """Exit codes and output for data files."""

    def test_valid_file(
        self,
        schema_yaml_path: pathlib.Path,
        write_data: Callable[[str, Any], pathlib.Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        data = write_data("post.json", VALID_POST)
        code = _run(["-s", str(schema_yaml_path), "-t", "post", str(data)])
        assert code == EXIT_SUCCESS
        assert "post: valid." in capsys.readouterr().out

    def test_invalid_file(
        self,
        schema_yaml_path: pathlib.Path,
        write_data: Callable[[str, Any], pathlib.Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        data = write_data("post.yaml", INVALID_POST)
        code = _run(["-s", str(schema_yaml_path), "-t", "post", str(data)])
        out = capsys.readouterr().out
        assert code == EXIT_VALIDATION_ERROR
        assert "2 error(s) in 2 location(s)." in out
        assert "✗ title: Must contain at least 3 chars" in out
        assert "✗ tags[0].name: Cannot be empty" in out

    def test_one_invalid_file_fails_the_run(
        self,
        schema_yaml_path: pathlib.Path,
        write_data: Callable[[str, Any], pathlib.Path],
    ) -> None:
        good = write_data("good.json", VALID_POST)
        bad = write_data("bad.json", INVALID_POST)
        code = _run(["-s", str(schema_yaml_path), "-t", "post", str(good), str(bad)])
        assert code == EXIT_VALIDATION_ERROR

    def test_json_format(
        self,
        schema_yaml_path: pathlib.Path,
        write_data: Callable[[str, Any], pathlib.Path],
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        data = write_data("post.json", INVALID_POST)
        _run(["-s", str(schema_yaml_path), "-t", "post", str(data), "--format", "json"])
        payload = json.loads(capsys.readouterr().out)
        assert payload == [
            {
                "type": "post",
                "valid": False,
                "errors": {
                    "title": ["Must contain at least 3 chars"],
                    "tags": {"0": {"name": ["Cannot be empty"]}},
                },
                "source": str(data),
            }
        ]

    def test_structure_only(
        self,
        schema_yaml_path: pathlib.Path,
        write_data: Callable[[str, Any], pathlib.Path],
    ) -> None:
        data = write_data("post.json", INVALID_POST)
        argv = ["-s", str(schema_yaml_path), "-t", "post", str(data), "--structure-only"]
        assert _run(argv) == EXIT_SUCCESS

        broken = write_data("broken.json", {"tags": "x"})
        argv = ["-s", str(schema_yaml_path), "-t", "post", str(broken), "--structure-only"]
        assert _run(argv) == EXIT_VALIDATION_ERROR


class TestSchemaMode:
    """--check-schema and schema errors."""

    def test_check_schema(
        self,
        schema_yaml_path: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run(["-s", str(schema_yaml_path), "--check-schema"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "schema.yaml: OK (4 type(s)" in out
        assert "  - account" in out

    def test_undefined_type_in_schema(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "schema.json"
        path.write_text(
            json.dumps({"objects": {"post": {"fields": {"author": {"type": "user"}}}}}),
            encoding="utf-8",
        )
        assert _run(["-s", str(path), "--check-schema"]) == EXIT_SCHEMA_ERROR

    def test_invalid_document(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "schema.yaml"
        path.write_text("objects:\n  post:\n    colour: red\n", encoding="utf-8")
        assert _run(["-s", str(path), "--check-schema"]) == EXIT_SCHEMA_ERROR


class TestInputErrors:
    """Missing files and arguments."""

    def test_missing_schema(self, tmp_path: pathlib.Path) -> None:
        assert _run(["-s", str(tmp_path / "nope.yaml"), "--check-schema"]) == EXIT_INPUT_ERROR

    def test_missing_type(self, schema_yaml_path: pathlib.Path) -> None:
        assert _run(["-s", str(schema_yaml_path)]) == EXIT_INPUT_ERROR

    def test_unknown_type(
        self,
        schema_yaml_path: pathlib.Path,
        write_data: Callable[[str, Any], pathlib.Path],
    ) -> None:
        data = write_data("post.json", VALID_POST)
        assert _run(["-s", str(schema_yaml_path), "-t", "comment", str(data)]) == EXIT_INPUT_ERROR

    def test_missing_data_file(self, schema_yaml_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        argv = ["-s", str(schema_yaml_path), "-t", "post", str(tmp_path / "nope.json")]
        assert _run(argv) == EXIT_INPUT_ERROR

    def test_deeply_nested_json(self, schema_yaml_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "deep.json"
        path.write_text('{"c":[' * 5000 + "]}" * 5000, encoding="utf-8")
        argv = ["-s", str(schema_yaml_path), "-t", "post", str(path)]
        assert _run(argv) == EXIT_INPUT_ERROR

        array = tmp_path / "array.json"
        array.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        argv = ["-s", str(schema_yaml_path), "-t", "post", str(array)]
        assert _run(argv) == EXIT_INPUT_ERROR

    def test_data_too_deep_to_validate(
        self,
        schema_yaml_path: pathlib.Path,
        write_data: Callable[[str, Any], pathlib.Path],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def exhausted(self: Schema, name: str, data: Any, source: str = "") -> None:
            raise RecursionError("maximum recursion depth exceeded")

        monkeypatch.setattr(Schema, "report", exhausted)
        data = write_data("post.json", VALID_POST)
        assert _run(["-s", str(schema_yaml_path), "-t", "post", str(data)]) == EXIT_INPUT_ERROR

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["--version"]) == 0
        assert "DTOSchema v" in capsys.readouterr().out


class TestLoggingSetup:
    """Verbosity flags map onto the package logger level."""

    @pytest.mark.parametrize(
        "verbosity, level",
        [(-1, logging.ERROR), (0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
    )
    def test_levels(self, verbosity: int, level: int) -> None:
        _setup_logging(verbosity)
        package_logger = logging.getLogger("dtoschema")
        assert package_logger.level == level
        assert len(package_logger.handlers) == 1
        assert package_logger.propagate is False

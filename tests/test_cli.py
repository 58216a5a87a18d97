import json
import sys
from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from cubejs import cubejs_cli

FAKE_SOURCE = "let x = 5"


def test_run_cubejs_string_input_prints(capsys: pytest.CaptureFixture[str]) -> None:
    cubejs_cli.run_cubejs(source=FAKE_SOURCE, is_string=True)
    out = json.loads(capsys.readouterr().out)
    assert out["type"] == "Program"
    assert out["body"][0]["type"] == "VariableStatement"
    assert out["body"][0]["body"][0]["name"] == "x"


def test_run_cubejs_file_input(
    schema_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cubejs_cli.run_cubejs(source=str(schema_file))
    out = json.loads(capsys.readouterr().out)
    assert [n["type"] for n in out["body"]] == [
        "VariableStatement",
        "FunctionCallExpression",
    ]


def test_run_cubejs_rejects_other_extensions(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Only .js"):
        cubejs_cli.run_cubejs(source=str(tmp_path / "schema.yml"))


def test_run_cubejs_pretty_output(capsys: pytest.CaptureFixture[str]) -> None:
    cubejs_cli.run_cubejs(source=FAKE_SOURCE, is_string=True, pretty=True)
    out = capsys.readouterr().out
    assert "AST" in out
    assert '\n  "type": "Program"' in out


def test_run_cubejs_output_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output_path = tmp_path / "out.json"
    cubejs_cli.run_cubejs(
        source=FAKE_SOURCE, is_string=True, out=str(output_path), pretty=True
    )
    assert json.loads(output_path.read_text())["type"] == "Program"
    assert "(wrote to" in capsys.readouterr().out


def test_run_cubejs_syntax_error_propagates() -> None:
    with pytest.raises(SyntaxError):
        cubejs_cli.run_cubejs(source="let = 1", is_string=True)


def test_main_entry(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(sys, "argv", ["cubejs", "-s", FAKE_SOURCE, "-p"])
    monkeypatch.setattr(cubejs_cli, "run_cubejs", lambda **kwargs: calls.append(kwargs))
    cubejs_cli.main()
    assert calls == [
        {"source": FAKE_SOURCE, "is_string": True, "out": None, "pretty": True}
    ]


def test_main_reports_syntax_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(sys, "argv", ["cubejs", "-s", "function f() 1"])
    with pytest.raises(SystemExit) as e:
        cubejs_cli.main()
    assert e.value.code == 1
    assert "[error] >>>" in capsys.readouterr().err


def test_main_missing_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(sys, "argv", ["cubejs", str(tmp_path / "missing.js")])
    with pytest.raises(SystemExit) as e:
        cubejs_cli.main()
    assert e.value.code == 1
    assert "[error] >>>" in capsys.readouterr().err


def test_main_without_args_starts_repl(monkeypatch: pytest.MonkeyPatch) -> None:
    started: list[bool] = []
    monkeypatch.setattr(sys, "argv", ["cubejs"])
    monkeypatch.setattr(
        "cubejs.cubejs_repl.start_repl", lambda verbose=False: started.append(verbose)
    )
    cubejs_cli.main()
    assert started == [False]


def test_main_repl_flag_verbose(monkeypatch: pytest.MonkeyPatch) -> None:
    started: list[bool] = []
    monkeypatch.setattr(sys, "argv", ["cubejs", "--repl", "--verbose"])
    monkeypatch.setattr(
        "cubejs.cubejs_repl.start_repl", lambda verbose=False: started.append(verbose)
    )
    cubejs_cli.main()
    assert started == [True]


def test_main_unknown_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["cubejs", "--bogus"])
    with pytest.raises(SystemExit) as e:
        cubejs_cli.main()
    assert e.value.code == 2


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])  # type: ignore[misc]
@given(n=st.integers(min_value=0, max_value=10**6))  # type: ignore[misc]
def test_run_cubejs_numeric_values(
    n: int, capsys: pytest.CaptureFixture[str]
) -> None:
    cubejs_cli.run_cubejs(source=f"let v = {n}", is_string=True)
    out = json.loads(capsys.readouterr().out)
    assert out["body"][0]["body"][0]["initializer"]["value"] == n

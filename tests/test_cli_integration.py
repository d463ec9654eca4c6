import json
import os
import subprocess
from pathlib import Path


def _run_cli(args, cwd: Path):
    env = os.environ.copy()
    pythonpath = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = str(Path("src").resolve()) + (os.pathsep + pythonpath if pythonpath else "")
    result = subprocess.run(
        ["python3", "-m", "cli", *args],
        cwd=cwd,
        env=env,
        check=False,
        capture_output=True,
        text=True,
    )
    return result


def test_cli_reports_declarations_and_aliases():
    result = _run_cli(["report", "tests/cases/report_sample.js"], cwd=Path("."))
    assert result.returncode == 0, result.stderr
    lines = result.stdout.splitlines()
    assert len(lines) == 4
    assert lines[0].endswith("report_sample.js:1:4: declaration LIMIT -> const")
    assert lines[1].endswith(":2:4: declaration total -> let")
    assert lines[2].endswith(":9:6: declaration $panel -> const")
    assert lines[3].endswith(':9:6: alias $panel -> "#panel"')


def test_cli_json_output():
    result = _run_cli(["report", "--json", "tests/cases/report_sample.js"], cwd=Path("."))
    assert result.returncode == 0, result.stderr
    findings = json.loads(result.stdout)
    assert [finding["category"] for finding in findings] == ["declaration", "declaration", "declaration", "alias"]
    assert findings[0]["name"] == "LIMIT"
    assert findings[0]["result"] == "const"
    assert findings[0]["line"] == 1
    assert findings[0]["source"].endswith("report_sample.js")


def test_cli_custom_wrapper():
    result = _run_cli(["report", "tests/cases/wrapped.js", "--wrapper", "wrap"], cwd=Path("."))
    assert result.returncode == 0, result.stderr
    assert "declaration el -> const" in result.stdout
    assert "declaration other -> let" in result.stdout
    assert "alias el -> node" in result.stdout
    assert "alias other -> unresolved" in result.stdout


def test_cli_default_wrappers_ignore_unknown_callees():
    result = _run_cli(["report", "tests/cases/wrapped.js"], cwd=Path("."))
    assert result.returncode == 0, result.stderr
    assert "alias" not in result.stdout


def test_cli_missing_file():
    result = _run_cli(["report", "tests/cases/does_not_exist.js"], cwd=Path("."))
    assert result.returncode == 1
    assert "Input file not found" in result.stderr


def test_cli_broken_input():
    result = _run_cli(["report", "tests/cases/broken.js"], cwd=Path("."))
    assert result.returncode == 1
    assert "Parsing failed" in result.stderr


def test_cli_strict_mode_rejects_broken_input():
    result = _run_cli(["report", "--strict", "tests/cases/broken.js"], cwd=Path("."))
    assert result.returncode == 1
    assert "broken.js" in result.stderr


def test_cli_continues_after_failed_file():
    result = _run_cli(
        ["report", "tests/cases/broken.js", "tests/cases/report_sample.js"],
        cwd=Path("."),
    )
    assert result.returncode == 1
    assert "declaration LIMIT -> const" in result.stdout


def test_cli_without_command_prints_help():
    result = _run_cli([], cwd=Path("."))
    assert result.returncode == 1
    assert "report" in result.stdout

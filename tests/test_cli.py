"""
Minimal CLI test for cca.cli.

Tests only:
  - Argument parsing
  - Happy path (text and JSON)
  - Error paths (non-existent path, unknown rule id)

Does NOT test output wording beyond the summary lines.
"""
import json
import subprocess
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from cca.cli import build_parser, main

SAMPLE = """
class Sample
{
    void M(int a,int b,int c,int d){ int x; if(a>0 && b>0 && c>0){ if(d>0){ } } }
}
"""


def _run(*args):
    return subprocess.run(
        [sys.executable, "-m", "cca.cli", *args],
        cwd=ROOT,
        capture_output=True,
        text=True,
    )


class TestCLI:

    def test_analyze_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "Sample.cs").write_text(SAMPLE)

            result = _run("analyze", tmpdir)

            assert result.returncode == 0, f"CLI failed: {result.stderr}"
            assert "Analyzed:" in result.stdout
            assert "Total findings: 2" in result.stdout
            assert "PNCC002" in result.stdout
            assert "M has too many parameters (4 parameters)." in result.stdout

    def test_json_output(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "Sample.cs").write_text(SAMPLE)

            result = _run("analyze", tmpdir, "--format", "json")

            assert result.returncode == 0, f"CLI failed: {result.stderr}"
            findings = json.loads(result.stdout)
            assert sorted(f["rule"] for f in findings) == ["PNCC001", "PNCC002"]
            assert all(f["path"] == "Sample.cs" for f in findings)

    def test_ignore_rule(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "Sample.cs").write_text(SAMPLE)

            result = _run("analyze", tmpdir, "--ignore", "pncc001")

            assert result.returncode == 0
            assert "Total findings: 1" in result.stdout
            assert "PNCC001" not in result.stdout

    def test_nonexistent_path_returns_error(self):
        result = _run("analyze", "/nonexistent/path")

        assert result.returncode == 1
        assert "Path does not exist" in result.stderr

    def test_unknown_rule_returns_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            result = _run("analyze", tmpdir, "--select", "PNCC999")

            assert result.returncode == 1
            assert "Unknown rule id: PNCC999" in result.stderr

    def test_changed_since_outside_git_returns_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            result = _run("analyze", tmpdir, "--changed-since", "HEAD")

            assert result.returncode == 1
            assert "Not a Git repository" in result.stderr

    def test_rules_lists_every_rule(self):
        result = _run("rules")

        assert result.returncode == 0
        for rule_id in ("PNCC001", "PNCC002", "PNCC003", "PNCC004", "PNCC005"):
            assert rule_id in result.stdout


class TestParser:

    def test_analyze_defaults(self):
        args = build_parser().parse_args(["analyze"])
        assert args.path == "."
        assert args.format == "text"
        assert args.changed_since is None
        assert args.debug is False

    def test_command_required(self):
        try:
            build_parser().parse_args([])
        except SystemExit as e:
            assert e.code == 2
        else:
            raise AssertionError("missing command accepted")

    def test_long_expression_file(self, capsys):
        terms = " + ".join(['"a"'] * 2000)
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "Gen.cs").write_text(
                f"class Gen {{ string M() {{ return {terms}; }} }}"
            )
            assert main(["analyze", tmpdir]) == 0
        assert "Total findings: 0" in capsys.readouterr().out

    def test_main_in_process(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            assert main(["analyze", tmpdir]) == 0
        assert "Total findings: 0" in capsys.readouterr().out

"""Tests für die Kommandozeile (main.py)."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from main import cli


PROBLEM_XML = """\
<problem name="cli" nrDays="5" slotsPerDay="288" nrWeeks="1">
  <optimization time="1" room="1" distribution="1" student="1"/>
  <rooms>
    <room id="1" capacity="30"/>
  </rooms>
  <courses>
    <course id="1">
      <config id="1">
        <subpart id="1">
          <class id="1" limit="30">
            <room id="1" penalty="0"/>
            <time days="10000" start="0" length="12" weeks="1" penalty="0"/>
          </class>
          <class id="2" limit="30">
            <room id="1" penalty="0"/>
            <time days="10000" start="24" length="12" weeks="1" penalty="0"/>
            <time days="10000" start="6" length="12" weeks="1" penalty="0"/>
          </class>
          <class id="3" limit="30" room="false">
            <time days="01000" start="0" length="12" weeks="1" penalty="0"/>
          </class>
        </subpart>
      </config>
    </course>
  </courses>
  <distributions>
    <distribution type="NotOverlap" required="true">
      <class id="1"/><class id="2"/>
    </distribution>
  </distributions>
</problem>
"""

SOLUTION_XML = """\
<solution name="cli">
  <class id="1" days="10000" start="0" weeks="1" room="1"/>
  <class id="2" days="10000" start="{start}" weeks="1" room="1"/>
  <class id="3" days="01000" start="0" weeks="1"/>
</solution>
"""


@pytest.fixture
def files(tmp_path: Path):
    """Schreibt Problem, gültige und ungültige Lösung; Config-Pfad ohne Datei."""
    problem = tmp_path / "problem.xml"
    problem.write_text(PROBLEM_XML, encoding="utf-8")
    valid = tmp_path / "valid.xml"
    valid.write_text(SOLUTION_XML.format(start=24), encoding="utf-8")
    invalid = tmp_path / "invalid.xml"
    invalid.write_text(SOLUTION_XML.format(start=6), encoding="utf-8")
    return problem, valid, invalid, tmp_path / "engine.yaml"


# ─── EVALUATE ─────────────────────────────────────────────────────────────────

class TestEvaluate:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_valid_solution(self, files):
        problem, valid, _, config = files
        result = CliRunner().invoke(
            cli, ["evaluate", str(problem), str(valid), "--config", str(config)]
        )
        assert result.exit_code == 0
        assert "GÜLTIG" in result.stdout
        assert "UNGÜLTIG" not in result.stdout

    def test_invalid_solution(self, files):
        problem, _, invalid, config = files
        result = CliRunner().invoke(
            cli, ["evaluate", str(problem), str(invalid), "--config", str(config)]
        )
        assert result.exit_code == 1
        assert "UNGÜLTIG" in result.stdout
        assert "NotOverlap" in result.stdout

    def test_json_report(self, files):
        problem, _, invalid, config = files
        result = CliRunner().invoke(
            cli, ["evaluate", str(problem), str(invalid), "--json", "--config", str(config)]
        )
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["instance_name"] == "cli"
        assert data["is_valid"] is False
        assert data["hard_results"][0]["pairs"] == [[1, 2]]
        # Raum 1 ist doppelt belegt
        assert data["room_violations"][0]["kind"] == "room_clash"

    def test_quick_check(self, files):
        problem, valid, invalid, config = files
        runner = CliRunner()
        ok = runner.invoke(
            cli, ["evaluate", str(problem), str(valid), "--quick", "--config", str(config)]
        )
        bad = runner.invoke(
            cli, ["evaluate", str(problem), str(invalid), "--quick", "--json",
                  "--config", str(config)]
        )
        assert ok.exit_code == 0
        assert "ZULÄSSIG" in ok.stdout
        assert bad.exit_code == 1
        assert json.loads(bad.stdout) == {"instance_name": "cli", "is_valid": False}

    def test_workers_option(self, files):
        problem, valid, _, config = files
        result = CliRunner().invoke(
            cli, ["evaluate", str(problem), str(valid), "-w", "4", "--json",
                  "--config", str(config)]
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)["is_valid"] is True

    def test_broken_solution_fails(self, files, tmp_path: Path):
        problem, _, _, config = files
        broken = tmp_path / "broken.xml"
        broken.write_text(SOLUTION_XML.format(start=7), encoding="utf-8")
        result = CliRunner().invoke(
            cli, ["evaluate", str(problem), str(broken), "--config", str(config)]
        )
        assert result.exit_code == 1
        assert "Bewertung fehlgeschlagen" in result.stdout

    def test_missing_file_rejected(self, files, tmp_path: Path):
        problem, _, _, config = files
        result = CliRunner().invoke(
            cli, ["evaluate", str(problem), str(tmp_path / "fehlt.xml"), "--config", str(config)]
        )
        assert result.exit_code == 2


# ─── INFO ─────────────────────────────────────────────────────────────────────

class TestInfo:
    def test_info_summary(self, files):
        problem, _, _, config = files
        result = CliRunner().invoke(cli, ["info", str(problem), "--config", str(config)])
        assert result.exit_code == 0
        assert "Klassen: 3" in result.stdout
        assert "NotOverlap" in result.stdout

    def test_info_broken_problem(self, tmp_path: Path):
        problem = tmp_path / "problem.xml"
        problem.write_text("<solution/>", encoding="utf-8")
        result = CliRunner().invoke(
            cli, ["info", str(problem), "--config", str(tmp_path / "engine.yaml")]
        )
        assert result.exit_code == 1
        assert "Import fehlgeschlagen" in result.stdout


# ─── CONFIG ───────────────────────────────────────────────────────────────────

class TestConfigCommands:
    def test_init_then_refuse_overwrite(self, tmp_path: Path):
        target = tmp_path / "engine.yaml"
        runner = CliRunner()
        first = runner.invoke(cli, ["config", "init", "--config", str(target)])
        assert first.exit_code == 0
        assert target.exists()
        second = runner.invoke(cli, ["config", "init", "--config", str(target)])
        assert second.exit_code == 1
        forced = runner.invoke(cli, ["config", "init", "--force", "--config", str(target)])
        assert forced.exit_code == 0

    def test_show_defaults_without_file(self, tmp_path: Path):
        result = CliRunner().invoke(
            cli, ["config", "show", "--config", str(tmp_path / "engine.yaml")]
        )
        assert result.exit_code == 0
        assert "Standardwerte" in result.stdout
        assert "num_workers" in result.stdout

    def test_show_invalid_file(self, tmp_path: Path):
        target = tmp_path / "engine.yaml"
        target.write_text("report:\n  max_rows: 0\n", encoding="utf-8")
        result = CliRunner().invoke(cli, ["config", "show", "--config", str(target)])
        assert result.exit_code == 1
        assert "Konfiguration ungültig" in result.stdout

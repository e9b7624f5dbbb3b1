#!/usr/bin/env python3
"""Tests for validate_skills.py - SKILL.md name/description checks."""

import json
import subprocess
import sys
from pathlib import Path

import pytest
from skill_validation_common import Document
from validate_skills import validate_skill_document, validate_skill_files

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SCRIPT_PATH = PROJECT_ROOT / "scripts" / "validate_skills.py"

VALID_DESCRIPTION = "Use when creating a new entity in the data schema."


def skill_md(name: str, description: str) -> str:
    return f"---\nname: {name}\ndescription: {description}\n---\n\n# Title\n"


def validate(content: str, folder: str = "bknd-create-entity"):
    return validate_skill_document(Document(path=f"{folder}/SKILL.md", content=content), folder)


def run_validator(root: Path, *args: str) -> subprocess.CompletedProcess[str]:
    """Run validate_skills.py against root and return result."""
    cmd = [sys.executable, str(SCRIPT_PATH), "--root", str(root)] + list(args)
    return subprocess.run(cmd, capture_output=True, text=True, timeout=30)


class TestScenarios:
    """End-to-end document scenarios."""

    def test_valid_skill_has_no_findings(self) -> None:
        """A matching name and a Use-when description produce nothing."""
        report = validate(skill_md("bknd-create-entity", VALID_DESCRIPTION))
        assert report.errors == []
        assert report.warnings == []

    def test_mismatched_name_is_single_warning(self) -> None:
        """A name that differs from the folder is advisory only."""
        report = validate(skill_md("foo", VALID_DESCRIPTION))
        assert report.errors == []
        assert len(report.warnings) == 1
        assert '"foo"' in report.warnings[0]
        assert '"bknd-create-entity"' in report.warnings[0]

    def test_missing_description(self) -> None:
        """Only the description error is reported; name checks still run."""
        report = validate("---\nname: bknd-create-entity\n---\n")
        assert report.errors == ["Missing required field: description"]
        assert report.warnings == []

    def test_missing_description_with_bad_name_reports_both(self) -> None:
        report = validate("---\nname: Bad_Name\n---\n")
        assert "Missing required field: description" in report.errors
        assert any("no start/end hyphen" in e for e in report.errors)

    def test_missing_frontmatter_stops_checks(self) -> None:
        report = validate("# No frontmatter\n\nUse when nothing.\n")
        assert report.errors == ["Missing YAML frontmatter (must start with ---)"]
        assert report.warnings == []

    def test_zero_byte_document(self) -> None:
        report = validate("")
        assert report.errors == ["Missing YAML frontmatter (must start with ---)"]

    def test_missing_name(self) -> None:
        report = validate(f"---\ndescription: {VALID_DESCRIPTION}\n---\n")
        assert report.errors == ["Missing required field: name"]


class TestNameField:
    """Tests for name length and pattern rules."""

    def test_name_equal_to_folder_has_no_warning(self) -> None:
        report = validate(skill_md("my-skill", VALID_DESCRIPTION), folder="my-skill")
        assert report.warnings == []

    def test_64_char_name_is_valid(self) -> None:
        name = "a" + "-b" * 31 + "c"
        assert len(name) == 64
        report = validate(skill_md(name, VALID_DESCRIPTION), folder=name)
        assert report.errors == []

    def test_65_char_name_is_one_length_error(self) -> None:
        name = "a" * 65
        report = validate(skill_md(name, VALID_DESCRIPTION), folder=name)
        assert report.errors == ["name must be 1-64 chars (got 65)"]

    def test_single_character_name(self) -> None:
        report = validate(skill_md("a", VALID_DESCRIPTION), folder="a")
        assert report.errors == []

    @pytest.mark.parametrize("name", ["-leading", "trailing-", "Upper", "under_score", "-"])
    def test_invalid_pattern(self, name: str) -> None:
        report = validate(skill_md(name, VALID_DESCRIPTION), folder=name)
        assert report.errors == [f'name must be lowercase letters/numbers/hyphens, no start/end hyphen: "{name}"']

    def test_consecutive_hyphens_allowed(self) -> None:
        report = validate(skill_md("a--b", VALID_DESCRIPTION), folder="a--b")
        assert report.errors == []

    def test_empty_name_reports_length_and_pattern(self) -> None:
        report = validate(f"---\nname:\ndescription: {VALID_DESCRIPTION}\n---\n")
        assert report.errors[0] == "name must be 1-64 chars (got 0)"
        assert len(report.errors) == 2

    def test_quoted_name_is_unquoted(self) -> None:
        report = validate(f'---\nname: "bknd-create-entity"\ndescription: {VALID_DESCRIPTION}\n---\n')
        assert report.errors == []
        assert report.warnings == []


class TestDescriptionField:
    """Tests for description length and trigger phrase rules."""

    def test_use_when_anywhere_any_case(self) -> None:
        report = validate(skill_md("bknd-create-entity", "Creates entities. USE WHEN modeling data."))
        assert report.warnings == []

    def test_missing_trigger_phrase_is_one_warning(self) -> None:
        report = validate(skill_md("bknd-create-entity", "Creates a new entity in the data schema."))
        assert report.errors == []
        assert report.warnings == ['description should include "Use when..." trigger phrases']

    def test_empty_description_is_distinct_error(self) -> None:
        report = validate("---\nname: bknd-create-entity\ndescription: ''\n---\n")
        assert "description must be non-empty" in report.errors
        assert "Missing required field: description" not in report.errors

    def test_description_at_limit(self) -> None:
        desc = "Use when " + "x" * 1015
        assert len(desc) == 1024
        assert validate(skill_md("bknd-create-entity", desc)).errors == []

    def test_description_over_limit(self) -> None:
        desc = "Use when " + "x" * 1016
        report = validate(skill_md("bknd-create-entity", desc))
        assert report.errors == ["description must be max 1024 chars (got 1025)"]


class TestValidateSkillFiles:
    """Tests for discovery plus validation over a skills tree."""

    def test_results_sorted_by_path(self, make_skill, tmp_path: Path) -> None:
        make_skill("bknd-zeta", skill_md("bknd-zeta", VALID_DESCRIPTION))
        make_skill("bknd-alpha", skill_md("bknd-alpha", VALID_DESCRIPTION))
        run = validate_skill_files(tmp_path)
        assert run.file_count == 2
        assert [r.file for r in run.reports] == [
            "plugins/bknd-skills/skills/bknd-alpha/SKILL.md",
            "plugins/bknd-skills/skills/bknd-zeta/SKILL.md",
        ]
        assert run.exit_code == 0

    def test_counts_errors_and_warnings(self, make_skill, tmp_path: Path) -> None:
        make_skill("bknd-one", "no frontmatter")
        make_skill("bknd-two", skill_md("other", "No trigger phrase."))
        run = validate_skill_files(tmp_path)
        assert run.error_count == 1
        assert run.warning_count == 2
        assert run.exit_code == 1

    def test_unreadable_file_is_skipped(self, make_skill, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        make_skill("bknd-good", skill_md("bknd-good", VALID_DESCRIPTION))
        bad = make_skill("bknd-bad", "")
        bad.write_bytes(b"\xff\xfe bad")
        run = validate_skill_files(tmp_path)
        assert run.skipped == ["plugins/bknd-skills/skills/bknd-bad/SKILL.md"]
        assert [r.file for r in run.reports] == ["plugins/bknd-skills/skills/bknd-good/SKILL.md"]
        assert "Cannot read:" in capsys.readouterr().err


class TestCLI:
    """Tests for the command-line entry point."""

    def test_passing_run(self, make_skill, tmp_path: Path) -> None:
        make_skill("bknd-create-entity", skill_md("bknd-create-entity", VALID_DESCRIPTION))
        result = run_validator(tmp_path)
        assert result.returncode == 0
        assert "Total: 1 files, 0 errors, 0 warnings" in result.stdout
        assert "Validation PASSED" in result.stdout

    def test_failing_run(self, make_skill, tmp_path: Path) -> None:
        make_skill("bknd-create-entity", "---\nname: bknd-create-entity\n---\n")
        result = run_validator(tmp_path)
        assert result.returncode == 1
        assert "bknd-create-entity/SKILL.md:" in result.stdout
        assert "[ERROR] Missing required field: description" in result.stdout
        assert "Validation FAILED" in result.stdout

    def test_warnings_only_passes(self, make_skill, tmp_path: Path) -> None:
        make_skill("bknd-create-entity", skill_md("foo", VALID_DESCRIPTION))
        result = run_validator(tmp_path)
        assert result.returncode == 0
        assert "[WARNING]" in result.stdout
        assert "Total: 1 files, 0 errors, 1 warnings" in result.stdout

    def test_no_files(self, skills_dir: Path, tmp_path: Path) -> None:
        result = run_validator(tmp_path)
        assert result.returncode == 0
        assert "Total: 0 files, 0 errors, 0 warnings" in result.stdout

    def test_missing_root_exits_one(self, tmp_path: Path) -> None:
        result = run_validator(tmp_path / "missing")
        assert result.returncode == 1
        assert "Error:" in result.stderr

    def test_absolute_skills_dir(self, make_skill, skills_dir: Path, tmp_path: Path) -> None:
        """An absolute --skills-dir is scanned regardless of --root."""
        make_skill("bknd-create-entity", "---\nname: bknd-create-entity\n---\n")
        other_root = tmp_path / "elsewhere"
        other_root.mkdir()
        result = run_validator(other_root, "--skills-dir", str(skills_dir))
        assert result.returncode == 1
        assert "Traceback" not in result.stderr
        assert "Total: 1 files, 1 errors, 0 warnings" in result.stdout
        assert "\nbknd-create-entity/SKILL.md:" in result.stdout

    def test_output_is_idempotent(self, make_skill, tmp_path: Path) -> None:
        make_skill("bknd-a", "no frontmatter")
        make_skill("bknd-b", skill_md("x", "plain"))
        first = run_validator(tmp_path)
        second = run_validator(tmp_path)
        assert first.stdout == second.stdout
        assert first.returncode == second.returncode == 1
        assert "\033[" not in first.stdout

    def test_json_output(self, make_skill, tmp_path: Path) -> None:
        make_skill("bknd-create-entity", skill_md("foo", VALID_DESCRIPTION))
        result = run_validator(tmp_path, "--json")
        data = json.loads(result.stdout)
        assert data["exit_code"] == 0
        assert data["total_files"] == 1
        assert data["warnings"] == 1
        assert data["results"][0]["file"] == "plugins/bknd-skills/skills/bknd-create-entity/SKILL.md"

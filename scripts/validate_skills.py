#!/usr/bin/env python3
"""
Skill Docs Validation - Skill Metadata Validator

Validates the frontmatter of every SKILL.md under the skills root:
- name: required, 1-64 chars, lowercase letters/numbers/hyphens,
  no leading or trailing hyphen, should match the folder name
- description: required, non-empty, max 1024 chars,
  should contain a "Use when..." trigger phrase

Usage:
    python scripts/validate_skills.py
    python scripts/validate_skills.py --root path/to/repo
    python scripts/validate_skills.py --json

Exit codes:
    0 - No errors (warnings allowed)
    1 - One or more errors, or the root directory cannot be scanned
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from skill_validation_common import (
    DEFAULT_SKILLS_DIR,
    SKILL_FILENAME,
    DiscoveryError,
    Document,
    DocumentReadError,
    FrontmatterAbsent,
    ValidationReport,
    colorize,
    discover_skill_documents,
    extract_frontmatter,
    format_result,
    log_skipped,
    read_document,
    resolve_root,
    use_color,
)

MAX_NAME_LENGTH = 64
MAX_DESCRIPTION_LENGTH = 1024

NAME_PATTERN = re.compile(r"^[a-z0-9]$|^[a-z0-9][a-z0-9-]*[a-z0-9]$")

TRIGGER_PHRASE = "use when"


@dataclass
class SkillFileReport(ValidationReport):
    """Validation report for one SKILL.md file."""

    file: str = ""

    def to_dict(self) -> dict[str, object]:
        base = super().to_dict()
        base["file"] = self.file
        return base


@dataclass
class SkillValidationRun:
    """All per-file reports of one invocation, sorted by path."""

    file_count: int = 0
    reports: list[SkillFileReport] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(len(r.errors) for r in self.reports)

    @property
    def warning_count(self) -> int:
        return sum(len(r.warnings) for r in self.reports)

    @property
    def exit_code(self) -> int:
        return 1 if self.error_count else 0


def validate_name_field(name: str | None, folder_name: str, report: ValidationReport) -> None:
    """Validate the 'name' frontmatter field."""
    if name is None:
        report.error("Missing required field: name")
        return

    if len(name) < 1 or len(name) > MAX_NAME_LENGTH:
        report.error(f"name must be 1-{MAX_NAME_LENGTH} chars (got {len(name)})")

    if not NAME_PATTERN.fullmatch(name):
        report.error(f'name must be lowercase letters/numbers/hyphens, no start/end hyphen: "{name}"')

    if name != folder_name:
        report.warning(f'name "{name}" doesn\'t match folder "{folder_name}"')


def validate_description_field(description: str | None, report: ValidationReport) -> None:
    """Validate the 'description' frontmatter field."""
    if description is None:
        report.error("Missing required field: description")
        return

    if not description.strip():
        report.error("description must be non-empty")

    if len(description) > MAX_DESCRIPTION_LENGTH:
        report.error(f"description must be max {MAX_DESCRIPTION_LENGTH} chars (got {len(description)})")

    if TRIGGER_PHRASE not in description.lower():
        report.warning('description should include "Use when..." trigger phrases')


def validate_skill_document(document: Document, folder_name: str) -> SkillFileReport:
    """Validate one SKILL.md document.

    Args:
        document: The document to check
        folder_name: Name of the directory containing the document

    Returns:
        Report with all errors and warnings for the file
    """
    report = SkillFileReport(file=document.path)

    frontmatter = extract_frontmatter(document.content)
    if isinstance(frontmatter, FrontmatterAbsent):
        report.error("Missing YAML frontmatter (must start with ---)")
        return report

    validate_name_field(frontmatter.get("name"), folder_name, report)
    validate_description_field(frontmatter.get("description"), report)
    return report


def validate_skill_files(root: str | Path | None = None, skills_dir: str = DEFAULT_SKILLS_DIR) -> SkillValidationRun:
    """Discover and validate every <skills_dir>/*/SKILL.md below root.

    Raises:
        DiscoveryError: root cannot be scanned
    """
    root_path = resolve_root(root)
    files = discover_skill_documents(skills_dir, root_path)
    run = SkillValidationRun(file_count=len(files))

    for rel_path in files:
        try:
            document = read_document(root_path / rel_path, display_path=rel_path)
        except DocumentReadError as exc:
            log_skipped(exc)
            run.skipped.append(rel_path)
            continue
        folder_name = PurePosixPath(rel_path).parent.name
        run.reports.append(validate_skill_document(document, folder_name))

    return run


def _short_path(path: str, skills_dir: str) -> str:
    prefix = Path(skills_dir).as_posix().rstrip("/") + "/"
    return path[len(prefix) :] if path.startswith(prefix) else path


def print_results(run: SkillValidationRun, skills_dir: str = DEFAULT_SKILLS_DIR, color: bool = False) -> None:
    """Print validation results in human-readable format."""
    print(f"\nValidating {run.file_count} {SKILL_FILENAME} files...\n")

    for report in run.reports:
        if not report.results:
            continue
        print(f"\n{_short_path(report.file, skills_dir)}:")
        for result in report.results:
            if result.level == "ERROR":
                print(f"  {format_result(result, color)}")
        for result in report.results:
            if result.level == "WARNING":
                print(f"  {format_result(result, color)}")

    print(f"\n{'=' * 50}")
    print(f"Total: {run.file_count} files, {run.error_count} errors, {run.warning_count} warnings")

    if run.exit_code:
        print(f"\n{colorize('✗ Validation FAILED', 'ERROR', color)}")
    else:
        print(f"\n{colorize('✓ Validation PASSED', 'PASSED', color)}")


def print_json(run: SkillValidationRun) -> None:
    """Print validation results as JSON."""
    output = {
        "exit_code": run.exit_code,
        "total_files": run.file_count,
        "errors": run.error_count,
        "warnings": run.warning_count,
        "skipped": run.skipped,
        "results": [r.to_dict() for r in run.reports if r.results],
    }
    print(json.dumps(output, indent=2))


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate SKILL.md frontmatter (name and description)")
    parser.add_argument("--root", default=None, help="Directory to resolve the skills root from (default: cwd)")
    parser.add_argument(
        "--skills-dir",
        default=DEFAULT_SKILLS_DIR,
        help=f"Skills root, relative to --root or absolute (default: {DEFAULT_SKILLS_DIR})",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    args = parser.parse_args()

    try:
        run = validate_skill_files(args.root, args.skills_dir)
    except DiscoveryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print_json(run)
    else:
        print_results(run, args.skills_dir, use_color(args.no_color))

    return run.exit_code


if __name__ == "__main__":
    sys.exit(main())

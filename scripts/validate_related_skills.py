#!/usr/bin/env python3
"""
Skill Docs Validation - Related Skills Cross-Reference Validator

Checks that every skill referenced in a SKILL.md "## Related Skills"
section names an existing skill directory. A reference is any identifier
with the skill prefix that appears:
1. In bold: **bknd-skill**
2. As the first token of a list item: - bknd-skill / - **bknd-skill**
3. In square brackets: [bknd-skill]

Skills without a Related Skills section are listed separately. They only
fail the run with --strict.

Usage:
    python scripts/validate_related_skills.py
    python scripts/validate_related_skills.py --strict
    python scripts/validate_related_skills.py --json

Exit codes:
    0 - All references resolve
    1 - Broken references found (or, with --strict, missing sections),
        or the skills directory cannot be listed
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

from skill_validation_common import (
    DEFAULT_SKILLS_DIR,
    SKILL_FILENAME,
    SKILL_PREFIX,
    DiscoveryError,
    DocumentReadError,
    colorize,
    extract_section,
    list_skill_dirs,
    log_skipped,
    read_document,
    use_color,
)

RELATED_HEADING = "## Related Skills"


def reference_patterns(prefix: str = SKILL_PREFIX) -> list[re.Pattern[str]]:
    """Build the three reference forms for a skill prefix."""
    ident = f"({re.escape(prefix)}[a-z0-9-]+)"
    return [
        re.compile(rf"\*\*{ident}\*\*"),  # **bknd-skill**
        re.compile(rf"^- \*?\*?{ident}\*?\*?", re.MULTILINE),  # - bknd-skill / - **bknd-skill**
        re.compile(rf"\[{ident}\]"),  # [bknd-skill]
    ]


@dataclass
class RelatedSkillsReport:
    """Outcome of one cross-reference run.

    Attributes:
        skill_count: Number of skill directories found
        no_related_section: Skills whose SKILL.md has no Related Skills heading
        broken: Skill -> referenced identifiers that have no directory
        unreadable: SKILL.md paths that could not be read
        strict: Missing sections also fail the run
    """

    skill_count: int = 0
    no_related_section: list[str] = field(default_factory=list)
    broken: dict[str, list[str]] = field(default_factory=dict)
    unreadable: list[str] = field(default_factory=list)
    strict: bool = False

    @property
    def exit_code(self) -> int:
        if self.broken:
            return 1
        if self.strict and self.no_related_section:
            return 1
        return 0

    def to_dict(self) -> dict[str, object]:
        return {
            "exit_code": self.exit_code,
            "skill_count": self.skill_count,
            "no_related_section": self.no_related_section,
            "broken": self.broken,
            "unreadable": self.unreadable,
        }


def get_existing_skills(skills_dir: str | Path) -> set[str]:
    """Get set of skill names (directory names in the skills root)."""
    return set(list_skill_dirs(skills_dir))


def has_related_section(content: str) -> bool:
    return RELATED_HEADING.lower() in content.lower()


def extract_related_skills(content: str, prefix: str = SKILL_PREFIX) -> list[str]:
    """Return skill identifiers referenced in the Related Skills section.

    Duplicates are dropped; the first occurrence keeps its position.
    """
    section = extract_section(content, RELATED_HEADING)
    if section is None:
        return []

    found: list[str] = []
    for pattern in reference_patterns(prefix):
        found.extend(match.group(1) for match in pattern.finditer(section))
    return list(dict.fromkeys(found))


def validate_related_skills(
    skills_dir: str | Path = DEFAULT_SKILLS_DIR,
    prefix: str = SKILL_PREFIX,
    strict: bool = False,
) -> RelatedSkillsReport:
    """Check the Related Skills section of every skill under skills_dir.

    Raises:
        DiscoveryError: skills_dir cannot be listed
    """
    skills_path = Path(skills_dir)
    existing = get_existing_skills(skills_path)
    report = RelatedSkillsReport(skill_count=len(existing), strict=strict)

    for skill_name in sorted(existing):
        skill_md = skills_path / skill_name / SKILL_FILENAME
        try:
            document = read_document(skill_md)
        except DocumentReadError as exc:
            log_skipped(exc)
            report.unreadable.append(str(skill_md))
            continue

        if not has_related_section(document.content):
            report.no_related_section.append(skill_name)
            continue

        missing = [ref for ref in extract_related_skills(document.content, prefix) if ref not in existing]
        if missing:
            report.broken[skill_name] = missing

    return report


def print_results(report: RelatedSkillsReport, color: bool = False) -> None:
    """Print validation results in human-readable format."""
    print(f"Found {report.skill_count} skills\n")

    if report.no_related_section:
        print("Skills WITHOUT Related Skills section:")
        for skill in report.no_related_section:
            print(f"  - {skill}")
        print()

    if report.broken:
        print("Skills with BROKEN Related Skills links:")
        for skill, missing in report.broken.items():
            print(f"  {skill}:")
            for ref in missing:
                print(f"    {colorize('✗', 'ERROR', color)} {ref} (not found)")
        print()

    if report.exit_code:
        print(colorize("✗ Related Skills validation FAILED", "ERROR", color))
    else:
        print(colorize("✓ All Related Skills links are valid!", "PASSED", color))


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate Related Skills references between SKILL.md files")
    parser.add_argument("--root", default=None, help="Directory to resolve the skills root from (default: cwd)")
    parser.add_argument(
        "--skills-dir",
        default=DEFAULT_SKILLS_DIR,
        help=f"Skills root, relative to --root or absolute (default: {DEFAULT_SKILLS_DIR})",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Strict mode — skills without a Related Skills section also fail",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    args = parser.parse_args()

    root = Path.cwd() if args.root is None else Path(args.root)

    try:
        report = validate_related_skills(root / args.skills_dir, strict=args.strict)
    except DiscoveryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_results(report, use_color(args.no_color))

    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())

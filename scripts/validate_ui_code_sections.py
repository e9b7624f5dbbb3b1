#!/usr/bin/env python3
"""
Skill Docs Validation - UI + Code Approach Section Checker

Checks that every in-scope skill documents BOTH a UI (admin panel) approach
and a code (SDK/API) approach. Guidance on choosing between the two is
counted but never required.

Heading matching is intentionally loose: many skills phrase these sections
differently, so any generic "## ...setup" heading counts as a code approach
and a bare "## When to Use" heading counts as a UI approach.

Usage:
    python scripts/validate_ui_code_sections.py
    python scripts/validate_ui_code_sections.py --verbose
    python scripts/validate_ui_code_sections.py --scope-file scope.yaml

Scope file (YAML), either a list of skill names or categories of lists:
    schema:
      - bknd-create-entity
      - bknd-add-field

Exit codes:
    0 - Every in-scope skill has both UI and code sections
    1 - At least one skill is missing a section, or setup failed
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

import yaml
from skill_validation_common import (
    DEFAULT_SKILLS_DIR,
    SKILL_FILENAME,
    SKILL_PREFIX,
    DocumentReadError,
    SkillValidationError,
    colorize,
    discover_skill_documents,
    log_skipped,
    read_document,
    resolve_root,
    use_color,
)

# =============================================================================
# In-scope skills — legacy skills are not checked
# =============================================================================

DEFAULT_SKILL_SCOPE = frozenset(
    {
        # Schema & Data Modeling
        "bknd-create-entity",
        "bknd-add-field",
        "bknd-define-relationship",
        "bknd-modify-schema",
        "bknd-delete-entity",
        # Data Operations
        "bknd-seed-data",
        "bknd-crud-create",
        "bknd-crud-read",
        "bknd-crud-update",
        "bknd-crud-delete",
        "bknd-query-filter",
        "bknd-pagination",
        "bknd-bulk-operations",
        # Authentication
        "bknd-create-user",
        "bknd-setup-auth",
        "bknd-login-flow",
        "bknd-registration",
        "bknd-password-reset",
        "bknd-session-handling",
        "bknd-oauth-setup",
        # Authorization
        "bknd-create-role",
        "bknd-assign-permissions",
        "bknd-row-level-security",
        "bknd-protect-endpoint",
        "bknd-public-vs-auth",
        # API Consumption
        "bknd-api-discovery",
        "bknd-client-setup",
        "bknd-custom-endpoint",
        "bknd-webhooks",
        "bknd-realtime",
        # Files & Media
        "bknd-file-upload",
        "bknd-storage-config",
        "bknd-serve-files",
        # Development Workflow
        "bknd-local-setup",
        "bknd-env-config",
        "bknd-debugging",
        "bknd-testing",
        # Deployment
        "bknd-deploy-hosting",
        "bknd-database-provision",
        "bknd-production-config",
    }
)


# =============================================================================
# Heading Matchers
# =============================================================================


@dataclass(frozen=True)
class SectionMatcher:
    """One heading pattern of a matcher category."""

    pattern: re.Pattern[str]

    def search(self, content: str) -> str | None:
        """Return the matched text, or None."""
        match = self.pattern.search(content)
        return match.group(0) if match else None


def _matcher(pattern: str, flags: int = 0) -> SectionMatcher:
    return SectionMatcher(re.compile(pattern, re.IGNORECASE | flags))


# Accepts "## UI Approach" as well as "## When to Use UI Mode" (code-only skills)
UI_MATCHERS = (
    _matcher(r"##\s*(?:step[- ]?by[- ]?step:?\s*)?ui\s*(?:approach|mode)"),
    _matcher(r"##\s*ui\s*approach"),
    _matcher(r"##\s*admin\s*panel"),
    _matcher(r"##\s*using\s*(?:the\s*)?(?:admin\s*)?ui"),
    _matcher(r"##\s*(?:via|through|in)\s*(?:the\s*)?(?:admin\s*)?(?:panel|ui)"),
    _matcher(r"##\s*when\s*to\s*use\s*ui\s*mode"),
    _matcher(r"##\s*when\s*to\s*use$", re.MULTILINE),
)

CODE_MATCHERS = (
    _matcher(r"##\s*(?:step[- ]?by[- ]?step:?\s*)?code\s*(?:approach|mode)"),
    _matcher(r"##\s*code\s*approach"),
    _matcher(r"##\s*programmatic"),
    _matcher(r"##\s*using\s*(?:the\s*)?(?:sdk|api|code)"),
    _matcher(r"##\s*(?:via|through|with)\s*(?:the\s*)?(?:sdk|api|code)"),
    _matcher(r"##\s*(?:typescript|javascript)"),
    _matcher(r"##\s*when\s*to\s*use\s*code\s*mode"),
    _matcher(r"##\s*test\s*runner\s*setup"),
    _matcher(r"##\s*.*setup"),
)

CHOICE_MATCHERS = (
    _matcher(r"##\s*when\s*to\s*use\s*(?:ui|code)"),
    _matcher(r"##\s*(?:ui|code)\s*vs\s*(?:ui|code)"),
    _matcher(r"##\s*choosing\s*(?:an\s*)?approach"),
)


def first_match(matchers: tuple[SectionMatcher, ...], content: str) -> str | None:
    """Return the text matched by the first matcher that hits."""
    for matcher in matchers:
        matched = matcher.search(content)
        if matched is not None:
            return matched
    return None


@dataclass
class SectionCheck:
    """UI/code section findings for one skill."""

    skill: str
    has_ui_section: bool
    has_code_section: bool
    has_choice_guidance: bool
    ui_match: str | None = None
    code_match: str | None = None

    @property
    def passed(self) -> bool:
        return self.has_ui_section and self.has_code_section

    @property
    def missing(self) -> list[str]:
        missing = []
        if not self.has_ui_section:
            missing.append("UI")
        if not self.has_code_section:
            missing.append("Code")
        return missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "skill": self.skill,
            "hasUISection": self.has_ui_section,
            "hasCodeSection": self.has_code_section,
            "hasWhenToUse": self.has_choice_guidance,
            "uiMatch": self.ui_match,
            "codeMatch": self.code_match,
        }


def check_sections(skill: str, content: str) -> SectionCheck:
    """Evaluate the three matcher categories against one document."""
    ui_match = first_match(UI_MATCHERS, content)
    code_match = first_match(CODE_MATCHERS, content)
    return SectionCheck(
        skill=skill,
        has_ui_section=ui_match is not None,
        has_code_section=code_match is not None,
        has_choice_guidance=first_match(CHOICE_MATCHERS, content) is not None,
        ui_match=ui_match,
        code_match=code_match,
    )


# =============================================================================
# Scope Loading
# =============================================================================


def load_skill_scope(scope_file: str | Path) -> frozenset[str]:
    """Load the in-scope skill names from a YAML file.

    Accepts a list of names or a mapping of category -> list of names.

    Raises:
        SkillValidationError: unreadable file, invalid YAML or wrong shape
    """
    try:
        with open(scope_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise SkillValidationError(f"Cannot read scope file {scope_file}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise SkillValidationError(f"Invalid YAML in scope file {scope_file}: {exc}") from exc

    if isinstance(data, dict):
        groups = list(data.values())
    elif isinstance(data, list):
        groups = [data]
    else:
        raise SkillValidationError(f"Scope file {scope_file} must contain a list or a mapping of lists")

    names: set[str] = set()
    for group in groups:
        if not isinstance(group, list) or not all(isinstance(name, str) for name in group):
            raise SkillValidationError(f"Scope file {scope_file} must only contain lists of skill names")
        names.update(group)
    return frozenset(names)


# =============================================================================
# Run
# =============================================================================


@dataclass
class SectionCheckRun:
    """Results for all in-scope skills found on disk, sorted by skill.

    In-scope skills whose SKILL.md exists but cannot be read are listed in
    unreadable, not in not_found.
    """

    results: list[SectionCheck] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    unreadable: list[str] = field(default_factory=list)

    @property
    def failing(self) -> list[SectionCheck]:
        return [r for r in self.results if not r.passed]

    @property
    def choice_guidance_count(self) -> int:
        return sum(1 for r in self.results if r.has_choice_guidance)

    @property
    def exit_code(self) -> int:
        return 1 if self.failing else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "exit_code": self.exit_code,
            "checked": len(self.results),
            "with_when_to_use": self.choice_guidance_count,
            "missing": [r.skill for r in self.failing],
            "not_found": self.not_found,
            "unreadable": self.unreadable,
            "results": [r.to_dict() for r in self.results],
        }


def check_skills(
    root: str | Path | None = None,
    scope: frozenset[str] = DEFAULT_SKILL_SCOPE,
    skills_dir: str = DEFAULT_SKILLS_DIR,
    prefix: str = SKILL_PREFIX,
) -> SectionCheckRun:
    """Check every in-scope <skills_dir>/<prefix>*/SKILL.md below root.

    Raises:
        DiscoveryError: root cannot be scanned
    """
    root_path = resolve_root(root)
    run = SectionCheckRun()
    seen: set[str] = set()

    for rel_path in discover_skill_documents(skills_dir, root_path, name_glob=f"{prefix}*"):
        skill = PurePosixPath(rel_path).parent.name
        if skill not in scope:
            continue
        seen.add(skill)
        try:
            document = read_document(root_path / rel_path, display_path=rel_path)
        except DocumentReadError as exc:
            log_skipped(exc)
            run.unreadable.append(rel_path)
            continue
        run.results.append(check_sections(skill, document.content))

    run.results.sort(key=lambda r: r.skill)
    run.not_found = sorted(scope - seen)
    return run


def _match_mark(matched: str | None) -> str:
    return f'✓ "{matched}"' if matched is not None else "✗"


def print_results(run: SectionCheckRun, verbose: bool = False, color: bool = False) -> None:
    """Print check results in human-readable format."""
    print(f"\nChecking {len(run.results)} skills for UI + code approach sections...\n")

    failing = run.failing
    if not failing:
        print(colorize("✓ All skills have both UI and code approach sections!", "PASSED", color) + "\n")
        print("Summary:")
        print(f"  - {len(run.results)} skills checked")
        print(f'  - {run.choice_guidance_count} have "When to use UI vs Code" section')
    else:
        print(colorize(f"✗ Found {len(failing)} skills missing UI and/or code sections:", "ERROR", color) + "\n")
        for r in failing:
            print(f"  {r.skill}: missing {' + '.join(r.missing)} section")

    if run.not_found:
        print(f"\n{len(run.not_found)} in-scope skills have no {SKILL_FILENAME} (not checked):")
        for skill in run.not_found:
            print(f"  - {skill}")

    if run.unreadable:
        print(f"\n{len(run.unreadable)} in-scope {SKILL_FILENAME} files could not be read (not checked):")
        for path in run.unreadable:
            print(f"  - {path}")

    if verbose:
        print("\n\nDetailed results:")
        for r in run.results:
            print(f"\n{r.skill}:")
            print(f"  UI: {_match_mark(r.ui_match)}")
            print(f"  Code: {_match_mark(r.code_match)}")
            print(f"  When to use: {'✓' if r.has_choice_guidance else '✗'}")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Check that in-scope skills document both UI and code approaches")
    parser.add_argument("--root", default=None, help="Directory to resolve the skills root from (default: cwd)")
    parser.add_argument(
        "--skills-dir",
        default=DEFAULT_SKILLS_DIR,
        help=f"Skills root, relative to --root or absolute (default: {DEFAULT_SKILLS_DIR})",
    )
    parser.add_argument("--scope-file", default=None, help="YAML file listing the in-scope skills")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show per-skill match details")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    args = parser.parse_args()

    try:
        scope = DEFAULT_SKILL_SCOPE if args.scope_file is None else load_skill_scope(args.scope_file)
        run = check_skills(args.root, scope, args.skills_dir)
    except SkillValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(run.to_dict(), indent=2))
    else:
        print_results(run, args.verbose, use_color(args.no_color))

    return run.exit_code


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Skill Docs Validation - Common Module

Shared infrastructure for the SKILL.md content checkers.
This module contains:
- Type definitions (Level, ValidationResult, ValidationReport)
- File discovery and document reading
- Frontmatter and section extraction
- Terminal formatting helpers

Each checker script imports from this module so that parsing rules and
report formatting stay identical across checkers.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Literal

# =============================================================================
# Defaults
# =============================================================================

# Skills root, relative to the directory the checkers are run from
DEFAULT_SKILLS_DIR = "plugins/bknd-skills/skills"

# Primary document inside each skill directory
SKILL_FILENAME = "SKILL.md"

# Naming convention prefix for skill identifiers
SKILL_PREFIX = "bknd-"

# =============================================================================
# Type Definitions
# =============================================================================

# - ERROR: blocks validation (non-zero exit code)
# - WARNING: never blocks, always reported
Level = Literal["ERROR", "WARNING"]

EXIT_OK = 0
EXIT_FAILED = 1


class SkillValidationError(Exception):
    """Base class for failures raised outside of a single document's checks."""


class DiscoveryError(SkillValidationError):
    """The root or skills directory cannot be scanned. Aborts the run."""


class DocumentReadError(SkillValidationError):
    """A single document could not be read. The file is skipped."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read: {path} ({reason})")
        self.path = path
        self.reason = reason


@dataclass
class ValidationResult:
    """Single validation check result.

    Attributes:
        level: Severity level (ERROR, WARNING)
        message: Human-readable description of the result
    """

    level: Level
    message: str


@dataclass
class ValidationReport:
    """Ordered collection of validation results.

    Errors and warnings keep the order in which they were added. Only
    ERROR results affect the exit code.
    """

    results: list[ValidationResult] = field(default_factory=list)

    def add(self, level: Level, message: str) -> None:
        """Add a validation result."""
        self.results.append(ValidationResult(level, message))

    def error(self, message: str) -> None:
        """Add a blocking error."""
        self.add("ERROR", message)

    def warning(self, message: str) -> None:
        """Add a warning — always reported, never blocks validation."""
        self.add("WARNING", message)

    @property
    def errors(self) -> list[str]:
        return [r.message for r in self.results if r.level == "ERROR"]

    @property
    def warnings(self) -> list[str]:
        return [r.message for r in self.results if r.level == "WARNING"]

    @property
    def has_errors(self) -> bool:
        return any(r.level == "ERROR" for r in self.results)

    @property
    def exit_code(self) -> int:
        """0 when no ERROR was recorded, 1 otherwise. Warnings never count."""
        return EXIT_FAILED if self.has_errors else EXIT_OK

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "exit_code": self.exit_code,
            "errors": self.errors,
            "warnings": self.warnings,
        }


# =============================================================================
# File Discovery
# =============================================================================


def resolve_root(root: str | Path | None) -> Path:
    """Return root as a Path (cwd when None).

    Raises:
        DiscoveryError: root does not exist or is not a directory
    """
    root_path = Path.cwd() if root is None else Path(root)
    if not root_path.is_dir():
        raise DiscoveryError(f"{root_path} is not a directory")
    return root_path


def discover_files(pattern: str, root: str | Path | None = None) -> list[str]:
    """Resolve a glob pattern to a sorted list of relative file paths.

    Args:
        pattern: Glob relative to root, e.g. "plugins/*/skills/*/SKILL.md"
        root: Directory to resolve from (defaults to the current directory)

    Returns:
        POSIX-style paths relative to root, sorted. Empty when nothing matches.

    Raises:
        DiscoveryError: root is not a directory, or pattern is absolute
    """
    if Path(pattern).is_absolute():
        raise DiscoveryError(f"Glob pattern must be relative to the root: {pattern}")
    root_path = resolve_root(root)
    matches = [p.relative_to(root_path).as_posix() for p in root_path.glob(pattern) if p.is_file()]
    return sorted(matches)


def discover_skill_documents(
    skills_dir: str | Path,
    root: str | Path | None = None,
    name_glob: str = "*",
) -> list[str]:
    """Find <skills_dir>/<name_glob>/SKILL.md files, sorted.

    skills_dir may be relative to root or absolute. Returned paths start
    with skills_dir as given, so relative skills dirs give root-relative
    paths. A skills dir that does not exist yields no files.

    Raises:
        DiscoveryError: root does not exist or is not a directory
    """
    root_path = resolve_root(root)
    base = root_path / skills_dir
    if not base.is_dir():
        return []
    prefix = PurePosixPath(Path(skills_dir).as_posix())
    return [(prefix / rel).as_posix() for rel in discover_files(f"{name_glob}/{SKILL_FILENAME}", base)]


# =============================================================================
# Document Reading
# =============================================================================


@dataclass(frozen=True)
class Document:
    """A file path plus its raw text."""

    path: str
    content: str


def read_document(path: str | Path, display_path: str | None = None) -> Document:
    """Read a UTF-8 document.

    Raises:
        DocumentReadError: the file is missing, unreadable or not UTF-8
    """
    shown = display_path if display_path is not None else str(path)
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(shown, exc.__class__.__name__) from exc
    return Document(path=shown, content=content)


def log_skipped(exc: DocumentReadError) -> None:
    """Report a skipped document on stderr."""
    print(f"⚠️  {exc}", file=sys.stderr)


# =============================================================================
# Frontmatter Extraction
# =============================================================================

# Opening --- on the first line, then the shortest run of lines up to the
# first line that is exactly ---
FRONTMATTER_PATTERN = re.compile(r"\A---\n(.*?)\n---(?=\n|\Z)", re.DOTALL)


@dataclass(frozen=True)
class FrontmatterAbsent:
    """The document has no delimited frontmatter block."""


@dataclass(frozen=True)
class FrontmatterPresent:
    """Key/value pairs from the frontmatter block (possibly empty)."""

    fields: dict[str, str]

    def get(self, key: str) -> str | None:
        return self.fields.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.fields


Frontmatter = FrontmatterAbsent | FrontmatterPresent


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def extract_frontmatter(content: str) -> Frontmatter:
    """Parse the leading --- block into string key/value pairs.

    Lines are split at their first colon; lines without a colon or with an
    empty key are ignored. Values keep their text as-is apart from trimming
    and removal of one matching pair of surrounding quotes.
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return FrontmatterAbsent()

    fields: dict[str, str] = {}
    for line in match.group(1).split("\n"):
        colon_index = line.find(":")
        if colon_index <= 0:
            continue
        key = line[:colon_index].strip()
        if not key:
            continue
        fields[key] = _strip_quotes(line[colon_index + 1 :].strip())

    return FrontmatterPresent(fields)


def render_frontmatter(fields: dict[str, str]) -> str:
    """Render a record as a --- delimited block, one `key: value` per line."""
    lines = ["---"]
    lines.extend(f"{key}: {value}" for key, value in fields.items())
    lines.append("---")
    return "\n".join(lines) + "\n"


# =============================================================================
# Section Extraction
# =============================================================================

# A section runs until the next level-2 heading or the end of the document
SECTION_END = r"(?=\n## |\Z)"


def extract_section(content: str, heading: str | re.Pattern[str]) -> str | None:
    """Return the block starting at heading and ending before the next `## `.

    Args:
        content: Markdown text
        heading: Literal heading text (matched case-insensitively) or a
            compiled pattern matching the heading

    Returns:
        The section text including its heading, or None if the heading is absent
    """
    if isinstance(heading, str):
        heading_re = re.escape(heading)
        flags = re.IGNORECASE
    else:
        heading_re = heading.pattern
        flags = heading.flags
    match = re.search(f"(?:{heading_re}).*?{SECTION_END}", content, flags | re.DOTALL)
    return match.group(0) if match else None


# =============================================================================
# Color Formatting (for terminal output)
# =============================================================================

COLORS = {
    "ERROR": "\033[91m",  # Red
    "WARNING": "\033[93m",  # Yellow
    "PASSED": "\033[92m",  # Green
    "BOLD": "\033[1m",
    "RESET": "\033[0m",
}


def use_color(no_color: bool = False) -> bool:
    """Colors only when writing to a terminal and not disabled by flag."""
    return not no_color and sys.stdout.isatty()


def colorize(text: str, level: str, enabled: bool = True) -> str:
    """Apply color to text based on level."""
    if not enabled:
        return text
    color = COLORS.get(level, "")
    return f"{color}{text}{COLORS['RESET']}"


def format_result(result: ValidationResult, color: bool = False) -> str:
    """Format a single result as `[LEVEL] message`."""
    return f"{colorize(f'[{result.level}]', result.level, color)} {result.message}"

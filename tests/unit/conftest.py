"""Shared fixtures: fake skill trees under tmp_path."""

from collections.abc import Callable
from pathlib import Path

import pytest

SKILLS_REL = Path("plugins") / "bknd-skills" / "skills"

SkillFactory = Callable[[str, str], Path]


@pytest.fixture
def skills_dir(tmp_path: Path) -> Path:
    path = tmp_path / SKILLS_REL
    path.mkdir(parents=True)
    return path


@pytest.fixture
def make_skill(skills_dir: Path) -> SkillFactory:
    """Create <skills_dir>/<folder>/SKILL.md with the given text."""

    def _make(folder: str, content: str) -> Path:
        skill_path = skills_dir / folder
        skill_path.mkdir(parents=True, exist_ok=True)
        doc = skill_path / "SKILL.md"
        doc.write_text(content, encoding="utf-8")
        return doc

    return _make

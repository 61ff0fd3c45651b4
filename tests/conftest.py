"""
Shared pytest fixtures for skills-ref tests.

This module provides:
- scripts/ on sys.path so the validator modules import by name
- write_skill: builds skill directories under a temporary skills root
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Project root for locating files
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SCRIPTS_DIR = PROJECT_ROOT / "scripts"

if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

VALID_BODY = """# Create PR

Open a pull request for the current branch.

```bash
gh pr create --fill
```
"""


def make_skill_md(
    name: str | None = "create-pr",
    description: str | None = "Create pull requests.",
    body: str = VALID_BODY,
    extra: str = "",
) -> str:
    """Build SKILL.md text with the given frontmatter fields."""
    lines = ["---"]
    if name is not None:
        lines.append(f"name: {name}")
    if description is not None:
        lines.append(f'description: "{description}"')
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    return "\n".join(lines) + "\n" + body


@pytest.fixture
def skills_root(tmp_path: Path) -> Path:
    """Empty skills/ directory inside a temporary project."""
    root = tmp_path / "skills"
    root.mkdir()
    return root


@pytest.fixture
def write_skill(skills_root: Path) -> Callable[..., Path]:
    """Create skills_root/<dir_name>/SKILL.md and return the skill directory.

    Pass content= for a literal document; other keyword arguments go to
    make_skill_md.
    """

    def _write(dir_name: str = "create-pr", content: str | None = None, **fields: str | None) -> Path:
        skill_dir = skills_root / dir_name
        skill_dir.mkdir(parents=True, exist_ok=True)
        if content is None:
            fields.setdefault("name", dir_name)
            content = make_skill_md(**fields)  # type: ignore[arg-type]
        (skill_dir / "SKILL.md").write_text(content, encoding="utf-8")
        return skill_dir

    return _write

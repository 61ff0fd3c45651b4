#!/usr/bin/env python3
"""
Skills Reference Validation - Skill Discovery

Find the skill packages under a skills root directory.

A skill package is an immediate subdirectory of the root that contains a
file named exactly SKILL.md. Subdirectories without that file are not
skills (tooling directories, shared assets) and are skipped silently.
Discovery never searches deeper than one level.

Usage:
    python3 skills_ref_discover.py [ROOT] [--json]

Output Modes:
    Default: One line per skill (name and directory)
    --json: JSON list for programmatic use
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from skills_ref_common import (
    DEFAULT_SKILLS_ROOT,
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    SKILL_FILE_NAME,
    ConfigurationError,
    get_project_dir,
)


@dataclass(frozen=True)
class SkillPackage:
    """One candidate skill: its directory and the raw text of its SKILL.md."""

    path: Path
    raw_document: str

    @property
    def name(self) -> str:
        """Directory base name, which the frontmatter 'name' must equal."""
        return self.path.name

    @property
    def skill_file(self) -> Path:
        return self.path / SKILL_FILE_NAME


def read_skill_file(skill_file: Path) -> str:
    """Read a SKILL.md file as UTF-8 text.

    Raises:
        ConfigurationError: If the file cannot be read or is not valid UTF-8
    """
    try:
        return skill_file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"Cannot decode {skill_file} as UTF-8: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {skill_file}: {e.strerror or e}") from e


def load_skill_package(skill_dir: Path) -> SkillPackage:
    """Load an explicitly named skill directory.

    Raises:
        ConfigurationError: If the directory does not exist or has no SKILL.md
    """
    if not skill_dir.exists():
        raise ConfigurationError(f"Skill path does not exist: {skill_dir}")
    if not skill_dir.is_dir():
        raise ConfigurationError(f"Skill path is not a directory: {skill_dir}")
    skill_file = skill_dir / SKILL_FILE_NAME
    if not is_skill_file(skill_file):
        raise ConfigurationError(f"No {SKILL_FILE_NAME} found in {skill_dir}")
    # "." and ".." carry no directory name until resolved
    return SkillPackage(path=skill_dir.resolve(), raw_document=read_skill_file(skill_file))


def is_skill_file(candidate: Path) -> bool:
    """Check for SKILL.md with an exact, case-sensitive name match.

    Path.is_file() alone is not enough on case-insensitive filesystems,
    where skill.md would also satisfy it.
    """
    if not candidate.is_file():
        return False
    return any(entry.name == SKILL_FILE_NAME for entry in candidate.parent.iterdir())


def discover_skills(skills_root: Path) -> list[SkillPackage]:
    """Discover skill packages under a root directory.

    Args:
        skills_root: Directory containing one subdirectory per skill

    Returns:
        Skill packages ordered by directory name

    Raises:
        ConfigurationError: If the root does not exist or is not a directory
    """
    if not skills_root.exists():
        raise ConfigurationError(f"Skills root not found: {skills_root}")
    if not skills_root.is_dir():
        raise ConfigurationError(f"Skills root is not a directory: {skills_root}")

    packages = []
    for skill_dir in sorted(skills_root.iterdir(), key=lambda p: p.name):
        if not skill_dir.is_dir():
            continue
        skill_file = skill_dir / SKILL_FILE_NAME
        if not is_skill_file(skill_file):
            continue
        packages.append(SkillPackage(path=skill_dir, raw_document=read_skill_file(skill_file)))
    return packages


def load_explicit_skills(skill_dirs: Iterable[Path]) -> list[SkillPackage]:
    """Load explicitly named skill directories, de-duplicated and ordered by name."""
    unique = {skill_dir.resolve() for skill_dir in skill_dirs}
    ordered = sorted(unique, key=lambda p: (p.name, str(p)))
    return [load_skill_package(skill_dir) for skill_dir in ordered]


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="List skill packages under a skills root")
    parser.add_argument("root", nargs="?", help=f"Skills root (default: ./{DEFAULT_SKILLS_ROOT})")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    args = parser.parse_args()

    root = Path(args.root) if args.root else get_project_dir() / DEFAULT_SKILLS_ROOT

    try:
        packages = discover_skills(root)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.json:
        print(json.dumps([{"name": p.name, "path": str(p.path)} for p in packages], indent=2))
    else:
        for p in packages:
            print(f"{p.name}\t{p.path}")
        print(f"Found {len(packages)} skill(s) in {root}", file=sys.stderr)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Tests for skills_ref_discover.py - locating skill packages."""

from collections.abc import Callable
from pathlib import Path

import pytest

from skills_ref_common import ConfigurationError
from skills_ref_discover import discover_skills, load_explicit_skills, load_skill_package


class TestDiscoverSkills:
    """Tests for walking the skills root."""

    def test_lexicographic_order(self, skills_root: Path, write_skill: Callable[..., Path]) -> None:
        """Packages come back sorted by directory name regardless of creation order."""
        for name in ("zebra-skill", "alpha-skill", "mid-skill"):
            write_skill(name)
        packages = discover_skills(skills_root)
        assert [p.name for p in packages] == ["alpha-skill", "mid-skill", "zebra-skill"]

    def test_package_holds_raw_document(self, skills_root: Path, write_skill: Callable[..., Path]) -> None:
        """Each package carries its directory and SKILL.md text."""
        skill_dir = write_skill("create-pr", content="---\nname: create-pr\n---\n")
        (package,) = discover_skills(skills_root)
        assert package.path == skill_dir
        assert package.skill_file == skill_dir / "SKILL.md"
        assert package.raw_document == "---\nname: create-pr\n---\n"

    def test_directories_without_skill_file_skipped(self, skills_root: Path, write_skill: Callable[..., Path]) -> None:
        """Tooling directories without SKILL.md are not skills."""
        write_skill("create-pr")
        (skills_root / "tools").mkdir()
        (skills_root / "tools" / "README.md").write_text("# tools")
        assert [p.name for p in discover_skills(skills_root)] == ["create-pr"]

    def test_files_in_root_skipped(self, skills_root: Path, write_skill: Callable[..., Path]) -> None:
        """Plain files next to skill directories are ignored."""
        write_skill("create-pr")
        (skills_root / "SKILL.md").write_text("---\nname: root\n---\n")
        assert [p.name for p in discover_skills(skills_root)] == ["create-pr"]

    def test_file_name_is_case_sensitive(self, skills_root: Path) -> None:
        """skill.md is not SKILL.md."""
        (skills_root / "lower").mkdir()
        (skills_root / "lower" / "skill.md").write_text("---\nname: lower\n---\n")
        assert discover_skills(skills_root) == []

    def test_does_not_search_deeper(self, skills_root: Path) -> None:
        """A SKILL.md two levels down is not discovered."""
        nested = skills_root / "group" / "inner"
        nested.mkdir(parents=True)
        (nested / "SKILL.md").write_text("---\nname: inner\n---\n")
        assert discover_skills(skills_root) == []

    def test_empty_root(self, skills_root: Path) -> None:
        """An empty root yields no packages."""
        assert discover_skills(skills_root) == []

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            discover_skills(tmp_path / "skills")

    def test_root_is_file(self, tmp_path: Path) -> None:
        """A root that is a file is a configuration error."""
        root = tmp_path / "skills"
        root.write_text("")
        with pytest.raises(ConfigurationError, match="not a directory"):
            discover_skills(root)

    def test_invalid_utf8_is_configuration_error(self, skills_root: Path) -> None:
        """An undecodable SKILL.md aborts the run."""
        (skills_root / "bad").mkdir()
        (skills_root / "bad" / "SKILL.md").write_bytes(b"---\nname: \xff\xfe\n---\n")
        with pytest.raises(ConfigurationError, match="UTF-8"):
            discover_skills(skills_root)

    def test_pure_function(self, skills_root: Path, write_skill: Callable[..., Path]) -> None:
        """Discovering twice gives equal results."""
        write_skill("a-skill")
        write_skill("b-skill")
        assert discover_skills(skills_root) == discover_skills(skills_root)


class TestExplicitSkills:
    """Tests for skill directories named on the command line."""

    def test_load_skill_package(self, write_skill: Callable[..., Path]) -> None:
        """An explicit directory with SKILL.md loads."""
        skill_dir = write_skill("create-pr")
        assert load_skill_package(skill_dir).name == "create-pr"

    def test_relative_dot_paths_take_real_name(
        self, write_skill: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Dot paths resolve to the directory they point at."""
        skill_dir = write_skill("create-pr")
        (skill_dir / "scripts").mkdir()
        monkeypatch.chdir(skill_dir)
        assert load_skill_package(Path(".")).name == "create-pr"
        assert load_skill_package(Path("scripts/..")).path == skill_dir.resolve()

    def test_missing_directory(self, tmp_path: Path) -> None:
        """A missing directory is a configuration error."""
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_skill_package(tmp_path / "nope")

    def test_directory_without_skill_file(self, tmp_path: Path) -> None:
        """A directory without SKILL.md is a configuration error."""
        with pytest.raises(ConfigurationError, match="No SKILL.md"):
            load_skill_package(tmp_path)

    def test_sorted_and_deduplicated(self, write_skill: Callable[..., Path]) -> None:
        """Explicit paths are ordered by name and loaded once each."""
        b = write_skill("b-skill")
        a = write_skill("a-skill")
        packages = load_explicit_skills([b, a, b])
        assert [p.name for p in packages] == ["a-skill", "b-skill"]

#!/usr/bin/env python3
"""Tests for configuration loading in skills_ref_common.py."""

from pathlib import Path

import pytest

from skills_ref_common import ConfigurationError, ValidatorConfig, get_project_dir, load_config


def write_pyproject(project_dir: Path, table: str) -> None:
    (project_dir / "pyproject.toml").write_text(f'[project]\nname = "demo"\n\n[tool.skills-ref]\n{table}\n')


class TestLoadConfig:
    """Tests for defaults and pyproject.toml settings."""

    def test_defaults_without_pyproject(self, tmp_path: Path) -> None:
        """Without pyproject.toml the defaults apply, rooted in the project."""
        config = load_config(tmp_path)
        assert config.skills_root == tmp_path / "skills"
        assert config.strict is False
        assert config.max_line_length == 100
        assert config.max_description_length == 200
        assert config.max_lines == 500
        assert config.jobs == 1

    def test_pyproject_without_table(self, tmp_path: Path) -> None:
        """A pyproject.toml without [tool.skills-ref] keeps the defaults."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n')
        assert load_config(tmp_path) == ValidatorConfig(skills_root=tmp_path / "skills")

    def test_pyproject_settings(self, tmp_path: Path) -> None:
        """Settings in [tool.skills-ref] override the defaults."""
        write_pyproject(
            tmp_path,
            'skills-root = "docs/skills"\nstrict = true\nmax-line-length = 120\n'
            "max-description-length = 150\nmax-lines = 800\njobs = 4",
        )
        config = load_config(tmp_path)
        assert config.skills_root == tmp_path / "docs" / "skills"
        assert config.strict is True
        assert config.max_line_length == 120
        assert config.max_description_length == 150
        assert config.max_lines == 800
        assert config.jobs == 4

    def test_absolute_root_kept(self, tmp_path: Path) -> None:
        """An absolute skills-root is used as is."""
        root = tmp_path / "elsewhere"
        write_pyproject(tmp_path, f'skills-root = "{root.as_posix()}"')
        assert load_config(tmp_path).skills_root == root

    def test_unknown_setting(self, tmp_path: Path) -> None:
        """Unknown keys are rejected."""
        write_pyproject(tmp_path, "colour = true")
        with pytest.raises(ConfigurationError, match="unknown setting 'colour'"):
            load_config(tmp_path)

    @pytest.mark.parametrize(
        "table",
        ['strict = "yes"', 'max-line-length = "100"', "max-lines = 0", "jobs = true", "skills-root = 3"],
    )
    def test_wrong_types(self, tmp_path: Path, table: str) -> None:
        """Values of the wrong type are rejected."""
        write_pyproject(tmp_path, table)
        with pytest.raises(ConfigurationError):
            load_config(tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """An unparseable pyproject.toml is a configuration error."""
        (tmp_path / "pyproject.toml").write_text("[tool.skills-ref\n")
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(tmp_path)

    @pytest.mark.parametrize("content", ["tool = 1\n", '[tool]\nskills-ref = "strict"\n'])
    def test_tool_tables_must_be_tables(self, tmp_path: Path, content: str) -> None:
        """Scalar 'tool' or 'tool.skills-ref' values are configuration errors."""
        (tmp_path / "pyproject.toml").write_text(content)
        with pytest.raises(ConfigurationError, match="must be a table"):
            load_config(tmp_path)


class TestOverrides:
    """Tests for command line overrides."""

    def test_none_values_ignored(self) -> None:
        """Unset flags leave the loaded value alone."""
        config = ValidatorConfig(max_line_length=120)
        assert config.with_overrides(max_line_length=None, strict=None) == config

    def test_values_applied(self) -> None:
        """Set flags replace loaded values."""
        config = ValidatorConfig().with_overrides(strict=True, jobs=3)
        assert config.strict is True
        assert config.jobs == 3


class TestProjectDir:
    """Tests for locating the project directory."""

    def test_environment_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """SKILLS_REF_PROJECT_DIR wins over the working directory."""
        monkeypatch.setenv("SKILLS_REF_PROJECT_DIR", str(tmp_path))
        assert get_project_dir() == tmp_path

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without the variable the current directory is used."""
        monkeypatch.delenv("SKILLS_REF_PROJECT_DIR", raising=False)
        monkeypatch.chdir(tmp_path)
        assert get_project_dir() == Path.cwd()

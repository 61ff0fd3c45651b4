#!/usr/bin/env python3
"""
Skills Reference Validation - Common Module

Shared validation infrastructure for the skill package validators.
This module contains:
- Type definitions (Severity, Finding, SkillReport)
- Common constants (rule ids, schema fields, patterns, exit codes)
- Configuration loading (defaults, pyproject.toml, environment)
- Utility functions (color formatting)

All individual validators should import from this module to ensure consistency.
"""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from skills_ref_discover import SkillPackage

# =============================================================================
# Type Definitions
# =============================================================================

# Finding severity levels
# - ERROR: always fails the run (non-zero exit code)
# - WARNING: advisory, fails the run only in --strict mode
Severity = Literal["ERROR", "WARNING"]

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_OK = 0  # No blocking findings
EXIT_FAILED = 1  # ERROR findings (or any finding in --strict mode)
EXIT_CONFIG_ERROR = 2  # Fatal configuration error, no report produced

# =============================================================================
# Rule Identifiers
# =============================================================================

# Frontmatter parser
RULE_MISSING_FRONTMATTER = "missing-frontmatter"
RULE_MALFORMED_FRONTMATTER = "malformed-frontmatter"

# Schema validator
RULE_MISSING_REQUIRED_FIELD = "missing-required-field"
RULE_NAME_MISMATCH = "name-mismatch"
RULE_INVALID_NAME_FORMAT = "invalid-name-format"
RULE_NAME_TOO_LONG = "name-too-long"
RULE_DESCRIPTION_TOO_LONG = "description-too-long"
RULE_DESCRIPTION_EXCEEDS_LIMIT = "description-exceeds-limit"
RULE_COMPATIBILITY_TOO_LONG = "compatibility-too-long"
RULE_INVALID_SEMVER = "invalid-semver"
RULE_INVALID_FIELD_TYPE = "invalid-field-type"
RULE_UNKNOWN_FIELD = "unknown-field"

# Content linter
RULE_LINE_TOO_LONG = "line-too-long"
RULE_MISSING_HEADINGS = "missing-headings"
RULE_MISSING_CODE_LANGUAGE = "missing-code-language"
RULE_UNCLOSED_CODE_BLOCK = "unclosed-code-block"
RULE_TOO_MANY_LINES = "too-many-lines"

# =============================================================================
# Skill Package Conventions
# =============================================================================

# The only file name recognized as a skill document (case-sensitive)
SKILL_FILE_NAME = "SKILL.md"

# Conventional skills root, relative to the project directory
DEFAULT_SKILLS_ROOT = "skills"

# Environment variable overriding the project directory
PROJECT_DIR_ENV = "SKILLS_REF_PROJECT_DIR"

# Frontmatter fields
REQUIRED_FIELDS = ("name", "description")
OPTIONAL_FIELDS = ("license", "compatibility", "metadata", "allowed-tools")
KNOWN_FRONTMATTER_FIELDS = set(REQUIRED_FIELDS) | set(OPTIONAL_FIELDS)

# Name validation pattern, used with fullmatch (kebab-case: lowercase letters and digits, single hyphens)
NAME_PATTERN = re.compile(r"[a-z0-9]+(-[a-z0-9]+)*")

# Semantic version pattern for metadata.version, used with fullmatch (ASCII major.minor.patch only)
SEMVER_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")

# Hard limits from the Agent Skills frontmatter contract
MAX_NAME_LENGTH = 64
MAX_DESCRIPTION_CHARS = 1024
MAX_COMPATIBILITY_LENGTH = 500

# Soft limits (configurable)
DEFAULT_MAX_DESCRIPTION_LENGTH = 200
DEFAULT_MAX_LINE_LENGTH = 100
DEFAULT_MAX_LINES = 500

# =============================================================================
# Errors
# =============================================================================


class SkillsRefError(Exception):
    """Base class for skills-ref errors."""


class ConfigurationError(SkillsRefError):
    """Fatal error that aborts the whole run before any report is produced."""


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class Finding:
    """Single validation or lint finding.

    Attributes:
        severity: ERROR or WARNING
        rule_id: Identifier of the violated rule (e.g. name-mismatch)
        message: Human-readable description of the problem
        file: File path the finding refers to
        line: Optional 1-based line number in the file
    """

    severity: Severity
    rule_id: str
    message: str
    file: str
    line: int | None = None

    @property
    def location(self) -> str:
        if self.line is None:
            return self.file
        return f"{self.file}:{self.line}"

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert to dictionary for JSON serialization."""
        return {
            "severity": self.severity,
            "rule_id": self.rule_id,
            "message": self.message,
            "file": self.file,
            "line": self.line,
        }


@dataclass
class SkillReport:
    """Findings collected for one skill package.

    Validators append findings through error() and warning(); checks never
    stop at the first problem, so one run surfaces everything wrong with
    the package.
    """

    package: SkillPackage
    findings: list[Finding] = field(default_factory=list)

    @property
    def file(self) -> str:
        return str(self.package.skill_file)

    def add(self, severity: Severity, rule_id: str, message: str, line: int | None = None) -> None:
        """Add a finding located in the package's SKILL.md."""
        self.findings.append(Finding(severity, rule_id, message, self.file, line))

    def error(self, rule_id: str, message: str, line: int | None = None) -> None:
        """Add an error (always blocks)."""
        self.add("ERROR", rule_id, message, line)

    def warning(self, rule_id: str, message: str, line: int | None = None) -> None:
        """Add a warning (blocks only in --strict mode)."""
        self.add("WARNING", rule_id, message, line)

    def extend(self, findings: tuple[Finding, ...] | list[Finding]) -> None:
        self.findings.extend(findings)

    @property
    def has_errors(self) -> bool:
        return any(f.severity == "ERROR" for f in self.findings)

    @property
    def has_warnings(self) -> bool:
        return any(f.severity == "WARNING" for f in self.findings)

    def passed(self, strict: bool = False) -> bool:
        """Whether the package passes; in strict mode warnings also fail it."""
        if strict:
            return not self.findings
        return not self.has_errors

    def count_by_severity(self) -> dict[str, int]:
        counts = {"ERROR": 0, "WARNING": 0}
        for f in self.findings:
            counts[f.severity] += 1
        return counts

    def to_dict(self, strict: bool = False) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.package.name,
            "path": str(self.package.path),
            "passed": self.passed(strict),
            "counts": self.count_by_severity(),
            "findings": [f.to_dict() for f in self.findings],
        }


# =============================================================================
# Configuration
# =============================================================================

# pyproject.toml table holding project-level settings
PYPROJECT_TABLE = "skills-ref"


@dataclass(frozen=True)
class ValidatorConfig:
    """Run configuration.

    Attributes:
        skills_root: Directory holding one subdirectory per skill
        strict: Treat warnings as failures
        max_line_length: Body lines longer than this get line-too-long
        max_description_length: Descriptions longer than this get description-too-long
        max_lines: Documents longer than this get too-many-lines
        jobs: Number of worker threads used to validate packages
    """

    skills_root: Path = Path(DEFAULT_SKILLS_ROOT)
    strict: bool = False
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH
    max_lines: int = DEFAULT_MAX_LINES
    jobs: int = 1

    def with_overrides(self, **overrides: Any) -> ValidatorConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def get_project_dir() -> Path:
    """Get the project directory (environment override or current directory)."""
    project_dir = os.environ.get(PROJECT_DIR_ENV)
    if project_dir:
        return Path(project_dir)
    return Path.cwd()


def _config_key_types() -> dict[str, type]:
    types: dict[str, type] = {}
    for f in fields(ValidatorConfig):
        types[f.name.replace("_", "-")] = Path if f.name == "skills_root" else type(f.default)
    return types


def parse_config_table(table: Mapping[str, Any], source: str) -> dict[str, Any]:
    """Convert a [tool.skills-ref] table to ValidatorConfig keyword arguments.

    Raises:
        ConfigurationError: On unknown keys or values of the wrong type
    """
    key_types = _config_key_types()
    values: dict[str, Any] = {}
    for key, value in table.items():
        if key not in key_types:
            raise ConfigurationError(f"{source}: unknown setting '{key}' in [tool.{PYPROJECT_TABLE}]")
        expected = key_types[key]
        if expected is Path:
            if not isinstance(value, str):
                raise ConfigurationError(f"{source}: '{key}' must be a string")
            value = Path(value)
        elif expected is int:
            # bool is a subclass of int
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{source}: '{key}' must be a positive integer")
        elif not isinstance(value, expected):
            raise ConfigurationError(f"{source}: '{key}' must be a {expected.__name__}")
        values[key.replace("-", "_")] = value
    return values


def load_config(project_dir: Path) -> ValidatorConfig:
    """Load configuration from defaults and the project's pyproject.toml.

    A relative skills root is resolved against the project directory.

    Raises:
        ConfigurationError: If pyproject.toml cannot be parsed or holds invalid settings
    """
    values: dict[str, Any] = {}
    pyproject = project_dir / "pyproject.toml"
    if pyproject.is_file():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Cannot read {pyproject}: {e}") from e
        tool = data.get("tool", {})
        if not isinstance(tool, dict):
            raise ConfigurationError(f"{pyproject}: 'tool' must be a table")
        table = tool.get(PYPROJECT_TABLE, {})
        if not isinstance(table, dict):
            raise ConfigurationError(f"{pyproject}: [tool.{PYPROJECT_TABLE}] must be a table")
        values = parse_config_table(table, str(pyproject))

    config = ValidatorConfig(**values)
    if not config.skills_root.is_absolute():
        config = replace(config, skills_root=project_dir / config.skills_root)
    return config


# =============================================================================
# Color Formatting (for terminal output)
# =============================================================================

# ANSI color codes
COLORS = {
    "ERROR": "\033[91m",  # Red
    "WARNING": "\033[93m",  # Yellow
    "PASS": "\033[92m",  # Green
    "FAIL": "\033[91m",  # Red
    "RESET": "\033[0m",  # Reset
    "BOLD": "\033[1m",  # Bold
    "DIM": "\033[2m",  # Dim
}


def colorize(text: str, level: str, enabled: bool = True) -> str:
    """Apply color to text based on level."""
    if not enabled:
        return text
    color = COLORS.get(level, "")
    return f"{color}{text}{COLORS['RESET']}"


def color_enabled(stream: Any, disabled: bool = False) -> bool:
    """Whether ANSI colors should be written to the given stream."""
    if disabled or os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())

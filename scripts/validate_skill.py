#!/usr/bin/env python3
"""
Skills Reference Validation - Frontmatter Schema Validator

Checks decoded SKILL.md frontmatter against the skill metadata contract
and converts it into a typed SkillMetadata record.

Required fields:
    name          kebab-case, equal to the containing directory name
    description   non-empty; advisory soft length limit

Optional fields:
    license, compatibility, allowed-tools, metadata (metadata.version is semver)

Every check runs independently; findings accumulate so that one run
reports every problem in the package.

Usage:
    uv run python scripts/validate_skill.py path/to/skill/
    uv run python scripts/validate_skill.py path/to/skill/ --json

Exit codes:
    0 - No errors
    1 - Schema errors found
    2 - Skill directory missing or unreadable
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, NamedTuple

from skills_ref_common import (
    DEFAULT_MAX_DESCRIPTION_LENGTH,
    EXIT_CONFIG_ERROR,
    EXIT_FAILED,
    EXIT_OK,
    KNOWN_FRONTMATTER_FIELDS,
    MAX_COMPATIBILITY_LENGTH,
    MAX_DESCRIPTION_CHARS,
    MAX_NAME_LENGTH,
    NAME_PATTERN,
    REQUIRED_FIELDS,
    RULE_COMPATIBILITY_TOO_LONG,
    RULE_DESCRIPTION_EXCEEDS_LIMIT,
    RULE_DESCRIPTION_TOO_LONG,
    RULE_INVALID_FIELD_TYPE,
    RULE_INVALID_NAME_FORMAT,
    RULE_INVALID_SEMVER,
    RULE_MISSING_REQUIRED_FIELD,
    RULE_NAME_MISMATCH,
    RULE_NAME_TOO_LONG,
    RULE_UNKNOWN_FIELD,
    SEMVER_PATTERN,
    ConfigurationError,
    SkillReport,
)
from skills_ref_discover import load_skill_package
from skills_ref_frontmatter import parse_frontmatter


class SemVer(NamedTuple):
    """major.minor.patch version triple."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, value: str) -> SemVer | None:
        match = SEMVER_PATTERN.fullmatch(value)
        if not match:
            return None
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class SkillMetadata:
    """Typed view of a skill's frontmatter.

    Fields that are absent or failed validation are None. Unknown
    top-level fields are kept verbatim in extra.
    """

    name: str | None = None
    description: str | None = None
    license: str | None = None
    compatibility: str | None = None
    allowed_tools: tuple[str, ...] | None = None
    version: SemVer | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_required_fields(frontmatter: dict[str, Any], report: SkillReport, key_lines: dict[str, int]) -> None:
    """Report required fields that are absent, null or blank."""
    for field_name in REQUIRED_FIELDS:
        if _is_blank(frontmatter.get(field_name)):
            report.error(
                RULE_MISSING_REQUIRED_FIELD,
                f"Required field '{field_name}' is missing or empty",
                key_lines.get(field_name),
            )


def _string_field(
    frontmatter: dict[str, Any], field_name: str, report: SkillReport, key_lines: dict[str, int]
) -> str | None:
    """Return a field's string value, reporting non-string values."""
    value = frontmatter.get(field_name)
    if value is None:
        return None
    if not isinstance(value, str):
        report.error(
            RULE_INVALID_FIELD_TYPE,
            f"'{field_name}' must be a string, got {_type_name(value)}",
            key_lines.get(field_name),
        )
        return None
    return value


def validate_name_field(
    frontmatter: dict[str, Any], skill_dir_name: str, report: SkillReport, key_lines: dict[str, int]
) -> str | None:
    """Validate the 'name' frontmatter field."""
    name = _string_field(frontmatter, "name", report, key_lines)
    if name is None or not name.strip():
        return None
    line = key_lines.get("name")

    if name != skill_dir_name:
        report.error(
            RULE_NAME_MISMATCH,
            f"Skill name '{name}' does not match directory name '{skill_dir_name}'",
            line,
        )

    # Lowercase letters, digits and single hyphens; no leading/trailing hyphen
    if not NAME_PATTERN.fullmatch(name):
        report.error(
            RULE_INVALID_NAME_FORMAT,
            f"Skill name '{name}' must be kebab-case (lowercase letters, digits, single hyphens)",
            line,
        )

    if len(name) > MAX_NAME_LENGTH:
        report.error(
            RULE_NAME_TOO_LONG,
            f"Skill name exceeds {MAX_NAME_LENGTH} characters ({len(name)} chars)",
            line,
        )
    return name


def validate_description_field(
    frontmatter: dict[str, Any],
    report: SkillReport,
    key_lines: dict[str, int],
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH,
) -> str | None:
    """Validate the 'description' frontmatter field."""
    desc = _string_field(frontmatter, "description", report, key_lines)
    if desc is None or not desc.strip():
        return None
    line = key_lines.get("description")

    if len(desc) > MAX_DESCRIPTION_CHARS:
        report.error(
            RULE_DESCRIPTION_EXCEEDS_LIMIT,
            f"Description exceeds {MAX_DESCRIPTION_CHARS} characters ({len(desc)} chars)",
            line,
        )
    elif len(desc) > max_description_length:
        report.warning(
            RULE_DESCRIPTION_TOO_LONG,
            f"Description is long ({len(desc)} chars, limit {max_description_length}); "
            "keep it to one sentence",
            line,
        )
    return desc


def validate_compatibility_field(
    frontmatter: dict[str, Any], report: SkillReport, key_lines: dict[str, int]
) -> str | None:
    """Validate the optional 'compatibility' field."""
    compatibility = _string_field(frontmatter, "compatibility", report, key_lines)
    if compatibility is not None and len(compatibility) > MAX_COMPATIBILITY_LENGTH:
        report.error(
            RULE_COMPATIBILITY_TOO_LONG,
            f"'compatibility' exceeds {MAX_COMPATIBILITY_LENGTH} characters ({len(compatibility)} chars)",
            key_lines.get("compatibility"),
        )
    return compatibility


def validate_allowed_tools_field(
    frontmatter: dict[str, Any], report: SkillReport, key_lines: dict[str, int]
) -> tuple[str, ...] | None:
    """Validate the optional 'allowed-tools' field (space/comma separated string or list)."""
    if "allowed-tools" not in frontmatter:
        return None

    tools = frontmatter["allowed-tools"]
    if isinstance(tools, str):
        return tuple(t for t in tools.replace(",", " ").split() if t)
    if isinstance(tools, list) and all(isinstance(t, str) for t in tools):
        return tuple(tools)

    report.error(
        RULE_INVALID_FIELD_TYPE,
        f"'allowed-tools' must be a string or a list of strings, got {_type_name(tools)}",
        key_lines.get("allowed-tools"),
    )
    return None


def validate_metadata_field(
    frontmatter: dict[str, Any], report: SkillReport, key_lines: dict[str, int]
) -> tuple[dict[str, Any], SemVer | None]:
    """Validate the optional 'metadata' mapping and its 'version' entry."""
    if "metadata" not in frontmatter:
        return {}, None

    metadata = frontmatter["metadata"]
    line = key_lines.get("metadata")
    if not isinstance(metadata, dict):
        report.error(
            RULE_INVALID_FIELD_TYPE,
            f"'metadata' must be a mapping, got {_type_name(metadata)}",
            line,
        )
        return {}, None

    if "version" not in metadata:
        return metadata, None

    raw_version = metadata["version"]
    version = SemVer.parse(raw_version) if isinstance(raw_version, str) else None
    if version is None:
        report.error(
            RULE_INVALID_SEMVER,
            f"'metadata.version' must be MAJOR.MINOR.PATCH, got '{raw_version}'",
            line,
        )
    return metadata, version


def validate_unknown_fields(frontmatter: dict[str, Any], report: SkillReport, key_lines: dict[str, int]) -> dict[str, Any]:
    """Warn about top-level fields outside the known schema."""
    extra = {}
    for key, value in frontmatter.items():
        if key in KNOWN_FRONTMATTER_FIELDS:
            continue
        report.warning(RULE_UNKNOWN_FIELD, f"Unknown frontmatter field '{key}'", key_lines.get(key))
        extra[key] = value
    return extra


def validate_frontmatter(
    frontmatter: dict[str, Any],
    skill_dir_name: str,
    report: SkillReport,
    key_lines: dict[str, int] | None = None,
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH,
) -> SkillMetadata:
    """Validate a decoded frontmatter mapping.

    Args:
        frontmatter: Decoded frontmatter (possibly empty)
        skill_dir_name: Base name of the skill directory
        report: Report to add findings to
        key_lines: Line number of each top-level key, for locating findings
        max_description_length: Soft limit for description-too-long

    Returns:
        Typed metadata; fields that failed validation are None
    """
    key_lines = key_lines or {}

    validate_required_fields(frontmatter, report, key_lines)
    name = validate_name_field(frontmatter, skill_dir_name, report, key_lines)
    description = validate_description_field(frontmatter, report, key_lines, max_description_length)
    license_ = _string_field(frontmatter, "license", report, key_lines)
    compatibility = validate_compatibility_field(frontmatter, report, key_lines)
    allowed_tools = validate_allowed_tools_field(frontmatter, report, key_lines)
    metadata, version = validate_metadata_field(frontmatter, report, key_lines)
    extra = validate_unknown_fields(frontmatter, report, key_lines)

    return SkillMetadata(
        name=name,
        description=description,
        license=license_,
        compatibility=compatibility,
        allowed_tools=allowed_tools,
        version=version,
        metadata=metadata,
        extra=extra,
    )


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Validate the frontmatter of one skill directory")
    parser.add_argument("skill_path", help="Path to the skill directory")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--max-description-length",
        type=int,
        default=DEFAULT_MAX_DESCRIPTION_LENGTH,
        help="Soft description length limit",
    )
    args = parser.parse_args()

    try:
        package = load_skill_package(Path(args.skill_path))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    report = SkillReport(package)
    parsed = parse_frontmatter(package.raw_document, report.file)
    report.extend(parsed.findings)
    validate_frontmatter(parsed.frontmatter, package.name, report, parsed.key_lines, args.max_description_length)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        for f in report.findings:
            print(f"[{f.severity}] {f.rule_id}: {f.message} ({f.location})")
        print("✓ Frontmatter valid" if report.passed() else "✗ Frontmatter invalid")

    return EXIT_OK if report.passed() else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Skills Reference Validation - Command Line Entry Point

Validates skill packages: discovers skill directories, parses each
SKILL.md, checks its frontmatter schema, lints its body, and prints one
report for the whole run.

Usage:
    skills-ref                                  # every skill under ./skills
    skills-ref skills/create-pr skills/review   # explicit skill directories
    skills-ref --root path/to/skills --strict
    skills-ref --format json

Configuration:
    Defaults can be set in the project's pyproject.toml:

        [tool.skills-ref]
        skills-root = "skills"
        strict = false
        max-line-length = 100
        max-description-length = 200
        max-lines = 500
        jobs = 1

    The project directory is $SKILLS_REF_PROJECT_DIR, or the current
    directory. Command line flags override pyproject.toml settings.

Exit codes:
    0 - All skills passed
    1 - ERROR findings (or any finding with --strict)
    2 - Configuration error (missing skills root, unreadable SKILL.md, bad settings)
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path

from skills_ref_common import (
    EXIT_CONFIG_ERROR,
    ConfigurationError,
    SkillReport,
    ValidatorConfig,
    color_enabled,
    get_project_dir,
    load_config,
)
from skills_ref_discover import SkillPackage, discover_skills, load_explicit_skills
from skills_ref_frontmatter import parse_frontmatter
from skills_ref_report import RunReport
from validate_content import lint_body, lint_document_length
from validate_skill import validate_frontmatter


def validate_package(package: SkillPackage, config: ValidatorConfig) -> SkillReport:
    """Run the parser, schema validator and content linter on one package.

    Parser problems never stop the later stages: the schema validator and
    linter run on whatever frontmatter and body were recovered.
    """
    report = SkillReport(package)
    parsed = parse_frontmatter(package.raw_document, report.file)
    report.extend(parsed.findings)

    validate_frontmatter(
        parsed.frontmatter,
        package.name,
        report,
        parsed.key_lines,
        config.max_description_length,
    )
    lint_body(parsed.body, report, parsed.body_start_line, config.max_line_length)
    lint_document_length(package.raw_document, report, config.max_lines)
    return report


def validate_packages(packages: Sequence[SkillPackage], config: ValidatorConfig) -> RunReport:
    """Validate packages, optionally in a thread pool; results keep input order."""
    if config.jobs > 1 and len(packages) > 1:
        with ThreadPoolExecutor(max_workers=config.jobs) as executor:
            skills = list(executor.map(partial(validate_package, config=config), packages))
    else:
        skills = [validate_package(package, config) for package in packages]
    return RunReport(skills=skills, strict=config.strict)


def run(config: ValidatorConfig, skill_paths: Sequence[Path] = ()) -> RunReport:
    """Discover (or load) skill packages and validate them.

    Args:
        config: Run configuration
        skill_paths: Explicit skill directories; when empty, every skill
            under config.skills_root is validated

    Raises:
        ConfigurationError: Before any validation, if packages cannot be located or read
    """
    if skill_paths:
        packages = load_explicit_skills(skill_paths)
    else:
        packages = discover_skills(config.skills_root)
    return validate_packages(packages, config)


def positive_int(value: str) -> int:
    """argparse type for settings that must be >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skills-ref",
        description="Validate skill packages (SKILL.md frontmatter and content)",
    )
    parser.add_argument("skill_paths", nargs="*", type=Path, metavar="PATH", help="Skill directories to validate")
    parser.add_argument("--root", type=Path, help="Skills root to discover skills under (default: ./skills)")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Strict mode: warnings also fail validation",
    )
    parser.add_argument("--format", choices=("text", "json"), default="text", help="Report format")
    parser.add_argument("--json", action="store_const", const="json", dest="format", help="Same as --format json")
    parser.add_argument("--max-line-length", type=positive_int, help="Body line length limit (default: 100)")
    parser.add_argument(
        "--max-description-length",
        type=positive_int,
        help="Soft description length limit (default: 200)",
    )
    parser.add_argument("--max-lines", type=positive_int, help="Recommended SKILL.md line count (default: 500)")
    parser.add_argument("--jobs", "-j", type=positive_int, help="Validate skills in N worker threads")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print discovery details to stderr")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        project_dir = get_project_dir()
        config = load_config(project_dir).with_overrides(
            skills_root=args.root,
            strict=args.strict,
            max_line_length=args.max_line_length,
            max_description_length=args.max_description_length,
            max_lines=args.max_lines,
            jobs=args.jobs,
        )
        if args.verbose:
            source = ", ".join(str(p) for p in args.skill_paths) if args.skill_paths else str(config.skills_root)
            print(f"Validating skills from {source}", file=sys.stderr)
        report = run(config, args.skill_paths)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.verbose:
        print(f"Validated {len(report.skills)} skill(s)", file=sys.stderr)

    if args.format == "json":
        print(report.to_json())
    else:
        print(report.format_text(color=color_enabled(sys.stdout, args.no_color)))

    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())

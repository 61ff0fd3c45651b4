#!/usr/bin/env python3
"""
Skills Reference Validation - Content Linter

Lints the markdown body of a SKILL.md file. The body is treated as opaque
text; only its structure is checked:

1. Lines should not exceed the line length limit (fenced code is exempt)
2. The body should contain at least one heading
3. Code fences should declare a language tag
4. Code fences should be closed
5. The document should stay under the recommended line count

All rules produce warnings; they fail a run only in --strict mode.

Usage:
    uv run python scripts/validate_content.py path/to/skill/
    uv run python scripts/validate_content.py path/to/skill/ --max-line-length 120
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

from skills_ref_common import (
    DEFAULT_MAX_LINE_LENGTH,
    DEFAULT_MAX_LINES,
    EXIT_CONFIG_ERROR,
    EXIT_FAILED,
    EXIT_OK,
    RULE_LINE_TOO_LONG,
    RULE_MISSING_CODE_LANGUAGE,
    RULE_MISSING_HEADINGS,
    RULE_TOO_MANY_LINES,
    RULE_UNCLOSED_CODE_BLOCK,
    ConfigurationError,
    SkillReport,
)
from skills_ref_discover import load_skill_package
from skills_ref_frontmatter import parse_frontmatter

# Opening/closing fence, matched on the left-stripped line so that fences
# nested in list items count: ``` or ~~~ (3 or more)
FENCE_RE = re.compile(r"^(`{3,}|~{3,})(.*)$")

# ATX heading: 1-6 '#' followed by whitespace or end of line
HEADING_RE = re.compile(r"^ {0,3}#{1,6}(\s|$)")


def _closes_fence(match: re.Match[str], fence: str) -> bool:
    marker, rest = match.groups()
    return marker[0] == fence[0] and len(marker) >= len(fence) and not rest.strip()


def lint_body(
    body: str,
    report: SkillReport,
    first_line: int = 1,
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
) -> None:
    """Lint a markdown body.

    Args:
        body: Markdown text after the frontmatter
        report: Report to add findings to
        first_line: File line number of the first body line
        max_line_length: Lines longer than this get line-too-long
    """
    fence: str | None = None
    fence_line = 0
    has_heading = False

    for offset, raw_line in enumerate(body.split("\n")):
        line = raw_line.rstrip("\r")
        line_no = first_line + offset
        match = FENCE_RE.match(line.lstrip())

        if fence is None:
            if match:
                marker, info = match.groups()
                # Backtick fences cannot carry backticks in their info string
                if not (marker[0] == "`" and "`" in info):
                    fence = marker
                    fence_line = line_no
                    if not info.strip():
                        report.warning(
                            RULE_MISSING_CODE_LANGUAGE,
                            f"Code block at line {line_no} missing language tag",
                            line_no,
                        )
                    continue
            if HEADING_RE.match(line):
                has_heading = True
            if len(line) > max_line_length:
                report.warning(
                    RULE_LINE_TOO_LONG,
                    f"Line is {len(line)} characters long (limit {max_line_length})",
                    line_no,
                )
        elif match and _closes_fence(match, fence):
            fence = None

    if fence is not None:
        report.warning(
            RULE_UNCLOSED_CODE_BLOCK,
            f"Unclosed code block starting at line {fence_line}",
            fence_line,
        )

    if not has_heading:
        report.warning(RULE_MISSING_HEADINGS, "Body has no markdown heading")


def lint_document_length(raw_document: str, report: SkillReport, max_lines: int = DEFAULT_MAX_LINES) -> None:
    """Warn when the whole SKILL.md exceeds the recommended line count."""
    total_lines = len(raw_document.splitlines())
    if total_lines > max_lines:
        report.warning(
            RULE_TOO_MANY_LINES,
            f"{report.package.skill_file.name} has {total_lines} lines (recommended: at most {max_lines}); "
            "consider moving detail into supporting files",
        )


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Lint the markdown body of one skill directory")
    parser.add_argument("skill_path", help="Path to the skill directory")
    parser.add_argument("--max-line-length", type=int, default=DEFAULT_MAX_LINE_LENGTH)
    parser.add_argument("--max-lines", type=int, default=DEFAULT_MAX_LINES)
    parser.add_argument("--strict", action="store_true", help="Strict mode: warnings also fail")
    args = parser.parse_args()

    try:
        package = load_skill_package(Path(args.skill_path))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    report = SkillReport(package)
    parsed = parse_frontmatter(package.raw_document, report.file)
    lint_body(parsed.body, report, parsed.body_start_line, args.max_line_length)
    lint_document_length(package.raw_document, report, args.max_lines)

    for f in report.findings:
        print(f"[{f.severity}] {f.rule_id}: {f.message} ({f.location})")
    if not report.findings:
        print("✓ No lint findings")

    return EXIT_OK if report.passed(args.strict) else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())

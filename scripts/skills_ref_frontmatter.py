#!/usr/bin/env python3
"""
Skills Reference Validation - Frontmatter Parser

Splits a SKILL.md document into its YAML frontmatter and markdown body,
and decodes the frontmatter into a mapping.

The document must start with a '---' line; the frontmatter ends at the
next '---' line. Problems are reported as findings rather than raised, so
the schema validator and content linter can still run on whatever was
recovered:

- missing-frontmatter: no opening delimiter; the body is the whole document
- malformed-frontmatter: no closing delimiter, invalid YAML, duplicate keys,
  or content that is not a mapping; the frontmatter becomes empty
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from skills_ref_common import (
    RULE_MALFORMED_FRONTMATTER,
    RULE_MISSING_FRONTMATTER,
    Finding,
)

FRONTMATTER_DELIMITER = "---"

# Top-level "key:" lines, used to locate findings on frontmatter fields
TOP_LEVEL_KEY_RE = re.compile(r"^([^\s#:'\"][^:]*?)\s*:(\s|$)")

# Scalars of these types keep their literal text instead of being coerced
LITERAL_TAGS = {
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
}

MERGE_TAG = "tag:yaml.org,2002:merge"


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that rejects duplicate keys and keeps numbers as text.

    Versions such as 1.0 or 2024-01-01 stay strings exactly as written.
    """

    def construct_mapping(self, node: yaml.Node, deep: bool = False) -> dict[Any, Any]:
        if isinstance(node, yaml.MappingNode):
            # Checked before merge keys are flattened: "<<" entries may be overridden
            seen = set()
            for key_node, _value_node in node.value:
                if key_node.tag == MERGE_TAG:
                    continue
                key = self.construct_object(key_node, deep=deep)
                try:
                    duplicate = key in seen
                except TypeError:
                    # Unhashable keys are rejected by the base constructor
                    continue
                if duplicate:
                    raise yaml.constructor.ConstructorError(
                        "while constructing a mapping",
                        node.start_mark,
                        f"found duplicate key '{key}'",
                        key_node.start_mark,
                    )
                seen.add(key)
        return super().construct_mapping(node, deep=deep)


FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in LITERAL_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass(frozen=True)
class ParsedDocument:
    """A SKILL.md split into decoded frontmatter and body.

    Attributes:
        frontmatter: Decoded top-level mapping (empty when missing or malformed)
        body: Markdown text after the closing delimiter
        body_start_line: 1-based line number of the first body line in the file
        key_lines: Line number of each top-level frontmatter key
        findings: Parser findings (missing-frontmatter, malformed-frontmatter)
    """

    frontmatter: dict[str, Any]
    body: str
    body_start_line: int = 1
    key_lines: dict[str, int] = field(default_factory=dict)
    findings: tuple[Finding, ...] = ()


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == FRONTMATTER_DELIMITER


def _find_key_lines(frontmatter_lines: list[str]) -> dict[str, int]:
    key_lines: dict[str, int] = {}
    for offset, line in enumerate(frontmatter_lines):
        match = TOP_LEVEL_KEY_RE.match(line)
        if match:
            # Line 1 is the opening delimiter
            key_lines.setdefault(match.group(1), offset + 2)
    return key_lines


def decode_frontmatter(text: str) -> dict[str, Any]:
    """Decode frontmatter YAML into a mapping.

    Raises:
        yaml.YAMLError: On invalid YAML or duplicate keys
        ValueError: If the content is not a mapping
    """
    data = yaml.load(text, Loader=FrontmatterLoader)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"frontmatter must be a mapping of fields, got {type(data).__name__}")
    return {str(k): v for k, v in data.items()}


def parse_frontmatter(raw_document: str, file: str) -> ParsedDocument:
    """Split a raw SKILL.md document into frontmatter and body.

    Args:
        raw_document: Full text of the SKILL.md file
        file: Path used to locate findings

    Returns:
        ParsedDocument; parse problems are carried in its findings
    """
    document = raw_document.removeprefix("\ufeff")
    lines = document.split("\n")

    if not _is_delimiter(lines[0]):
        finding = Finding(
            "ERROR",
            RULE_MISSING_FRONTMATTER,
            f"Document must start with a '{FRONTMATTER_DELIMITER}' frontmatter delimiter",
            file,
            1,
        )
        return ParsedDocument(frontmatter={}, body=document, findings=(finding,))

    closing = next((i for i in range(1, len(lines)) if _is_delimiter(lines[i])), None)
    if closing is None:
        finding = Finding(
            "ERROR",
            RULE_MALFORMED_FRONTMATTER,
            f"Frontmatter opened on line 1 is never closed with '{FRONTMATTER_DELIMITER}'",
            file,
            1,
        )
        return ParsedDocument(frontmatter={}, body=document, findings=(finding,))

    frontmatter_lines = lines[1:closing]
    body = "\n".join(lines[closing + 1 :])
    body_start_line = closing + 2
    key_lines = _find_key_lines(frontmatter_lines)

    try:
        frontmatter = decode_frontmatter("\n".join(frontmatter_lines))
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 2 if mark is not None else 1
        message = " ".join(str(e).split())
        finding = Finding("ERROR", RULE_MALFORMED_FRONTMATTER, f"Invalid frontmatter: {message}", file, line)
        return ParsedDocument({}, body, body_start_line, key_lines, (finding,))
    except ValueError as e:
        finding = Finding("ERROR", RULE_MALFORMED_FRONTMATTER, f"Invalid frontmatter: {e}", file, 2)
        return ParsedDocument({}, body, body_start_line, key_lines, (finding,))

    return ParsedDocument(frontmatter, body, body_start_line, key_lines)

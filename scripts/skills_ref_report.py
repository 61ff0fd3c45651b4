#!/usr/bin/env python3
"""
Skills Reference Validation - Report Aggregator

Merges per-skill findings into one run report and derives the exit status.

A run succeeds when no ERROR finding exists in any skill (and, in strict
mode, no WARNING either). Every examined skill is listed, including the
ones without findings, in discovery order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from skills_ref_common import EXIT_FAILED, EXIT_OK, SkillReport, colorize


@dataclass
class RunReport:
    """Validation results for every skill examined in one run."""

    skills: list[SkillReport] = field(default_factory=list)
    strict: bool = False

    @property
    def success(self) -> bool:
        return all(skill.passed(self.strict) for skill in self.skills)

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.success else EXIT_FAILED

    def count_by_severity(self) -> dict[str, int]:
        counts = {"ERROR": 0, "WARNING": 0}
        for skill in self.skills:
            for severity, count in skill.count_by_severity().items():
                counts[severity] += count
        return counts

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        passed = sum(1 for skill in self.skills if skill.passed(self.strict))
        counts = self.count_by_severity()
        return {
            "success": self.success,
            "exit_code": self.exit_code,
            "strict": self.strict,
            "summary": {
                "skills": len(self.skills),
                "passed": passed,
                "failed": len(self.skills) - passed,
                "errors": counts["ERROR"],
                "warnings": counts["WARNING"],
            },
            "skills": [skill.to_dict(self.strict) for skill in self.skills],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def format_text(self, color: bool = False) -> str:
        """Render the human-readable report.

        One status line per skill with its findings indented beneath,
        followed by a summary. Output is identical for identical input.
        """
        lines = []
        for skill in self.skills:
            status = "PASS" if skill.passed(self.strict) else "FAIL"
            lines.append(f"{colorize(status, status, color)} {skill.package.name} ({skill.package.path})")
            for f in skill.findings:
                tag = colorize(f"[{f.severity}]", f.severity, color)
                lines.append(f"  {tag} {f.rule_id}: {f.message} ({f.location})")

        if not self.skills:
            lines.append("No skills found")

        passed = sum(1 for skill in self.skills if skill.passed(self.strict))
        counts = self.count_by_severity()
        mode = " [strict]" if self.strict else ""
        lines.append("")
        lines.append("=" * 60)
        lines.append(
            f"Validated {len(self.skills)} skill(s){mode}: {passed} passed, {len(self.skills) - passed} failed "
            f"({counts['ERROR']} error(s), {counts['WARNING']} warning(s))"
        )
        if self.success:
            lines.append(colorize("✓ All skills passed", "PASS", color))
        else:
            lines.append(colorize("✗ Skill validation failed", "FAIL", color))
        return "\n".join(lines)

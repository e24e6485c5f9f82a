"""Requirements table parsing.

Turns the Markdown-like pipe table produced by requirement extraction (or
pasted by a user) into ``RequirementRecord`` values, and renders records
back into the same table layout.
"""

import re
from typing import Iterable, List, Optional

import structlog

from app.config.settings import settings
from app.models.schemas import (
    DEFAULT_COMPLEXITY,
    ComplexityAnnotation,
    RequirementRecord,
    RequirementsSource,
)

logger = structlog.get_logger()

HEADER_PHRASES = ("requirement id", "business requirement", "acceptance criteria")
SEPARATOR_TOKEN = "---"
LOOKAHEAD_LINES = 4
MIN_COLUMNS = 3
DEFAULT_TICKET_PREFIX = "JIRA"

_SEPARATOR_LINE = re.compile(r"^[\s\-|]+$")
_FULL_COMPLEXITY = re.compile(
    r"CC:\s*(\d+),\s*Decision Points:\s*(\d+),\s*Activities:\s*(\d+),\s*Paths:\s*(\d+)"
)
_COMPLEXITY_KEYS = {
    "cc": re.compile(r"\bCC:\s*(\d+)", re.IGNORECASE),
    "decision_points": re.compile(r"Decision Points:\s*(\d+)", re.IGNORECASE),
    "activities": re.compile(r"Activities:\s*(\d+)", re.IGNORECASE),
    "paths": re.compile(r"Paths:\s*(\d+)", re.IGNORECASE),
}


def _split_cells(line: str) -> List[str]:
    """Split a pipe row into trimmed cells, keeping inner empty cells in place."""
    cells = [cell.strip() for cell in line.split("|")]
    if cells and cells[0] == "":
        cells = cells[1:]
    if cells and cells[-1] == "":
        cells = cells[:-1]
    return cells


def _is_header(line: str) -> bool:
    lowered = line.lower()
    return "|" in line and all(phrase in lowered for phrase in HEADER_PHRASES)


def _is_data_row(line: str) -> bool:
    return "|" in line and len([c for c in line.split("|") if c.strip()]) >= MIN_COLUMNS


class RequirementsTableParser:
    """Parses the first requirements table found in a block of text.

    The parser never raises: malformed rows are skipped and an unexpected
    failure is logged and reported as an empty result.
    """

    def __init__(self, default_prefix: Optional[str] = None):
        self.default_prefix = default_prefix or settings.default_requirement_prefix

    def parse(
        self,
        text: str,
        source: RequirementsSource = RequirementsSource.UPLOAD,
        ticket_prefix: Optional[str] = None,
    ) -> List[RequirementRecord]:
        try:
            rows = self._collect_table_lines(text)
            return self._build_records(rows, self._id_prefix(source, ticket_prefix))
        except Exception as e:
            logger.error("Failed to parse requirements table", error=str(e))
            return []

    def _id_prefix(self, source: RequirementsSource, ticket_prefix: Optional[str]) -> str:
        if RequirementsSource(source) == RequirementsSource.JIRA and ticket_prefix:
            return ticket_prefix
        return self.default_prefix

    def _collect_table_lines(self, text: str) -> List[str]:
        lines = text.split("\n")
        in_table = False
        table_lines: List[str] = []

        for i, line in enumerate(lines):
            if not in_table:
                if _is_header(line):
                    in_table = True
                continue

            if _SEPARATOR_LINE.match(line.strip()):
                continue

            if line.strip() == "":
                upcoming = lines[i + 1:i + 1 + LOOKAHEAD_LINES]
                if not any(_is_data_row(nxt) for nxt in upcoming):
                    break
                continue

            if "|" in line:
                table_lines.append(line)

        return table_lines

    def _build_records(self, rows: Iterable[str], prefix: str) -> List[RequirementRecord]:
        records: List[RequirementRecord] = []
        counter = 0

        for row in rows:
            cells = _split_cells(row)
            if len(cells) < MIN_COLUMNS:
                continue

            raw_id, requirement, acceptance_criteria = cells[:3]
            if not requirement or not acceptance_criteria:
                continue
            if any(SEPARATOR_TOKEN in cell for cell in cells):
                continue
            if any(phrase in raw_id.lower() for phrase in HEADER_PHRASES):
                continue

            counter += 1
            complexity = cells[3] if len(cells) > 3 and cells[3] else DEFAULT_COMPLEXITY
            records.append(
                RequirementRecord(
                    id=f"{prefix}-{counter:03d}",
                    requirement=requirement,
                    acceptance_criteria=acceptance_criteria,
                    complexity=complexity,
                )
            )

        logger.debug("Parsed requirements table", rows=counter, prefix=prefix)
        return records


def parse_requirements_table(
    text: str,
    source: RequirementsSource = RequirementsSource.UPLOAD,
    ticket_prefix: Optional[str] = None,
) -> List[RequirementRecord]:
    """Parse ``text`` with a parser using the configured default prefix."""
    return RequirementsTableParser().parse(text, source, ticket_prefix)


def format_requirements_table(requirements: Iterable[RequirementRecord]) -> str:
    """Render records as the 4-column table accepted by ``parse``."""
    lines = [
        "Business Requirements:",
        "",
        "| Requirement ID | Business Requirement | Acceptance Criteria | Complexity |",
        "|---|---|---|---|",
    ]
    for req in requirements:
        lines.append(
            f"| {req.id} | {req.requirement} | {req.acceptance_criteria} | "
            f"{req.complexity or DEFAULT_COMPLEXITY} |"
        )
    return "\n".join(lines).strip()


def parse_complexity(text: Optional[str]) -> ComplexityAnnotation:
    if not text:
        return ComplexityAnnotation()
    values = {}
    for key, pattern in _COMPLEXITY_KEYS.items():
        match = pattern.search(text)
        if match:
            values[key] = int(match.group(1))
    return ComplexityAnnotation(**values)


def validate_complexity_values(requirements: Iterable[RequirementRecord]) -> List[str]:
    """Return human-readable warnings for suspicious complexity annotations.

    The cyclomatic complexity is cross-checked against ``E - N + 2P`` where
    edges and nodes are estimated from the decision point and activity
    counts of a single workflow component.
    """
    warnings: List[str] = []

    for req in requirements:
        match = _FULL_COMPLEXITY.search(req.complexity or "")
        if not match:
            warnings.append(
                f"Requirement {req.id}: Invalid complexity format. "
                'Expected: "CC: X, Decision Points: Y, Activities: Z, Paths: W"'
            )
            continue

        cc, decision_points, activities, paths = (int(g) for g in match.groups())

        edges = decision_points + 1
        nodes = decision_points + activities + 1
        components = 1
        estimated_cc = edges - nodes + 2 * components

        if abs(cc - estimated_cc) > 2:
            warnings.append(
                f"Requirement {req.id}: Complexity may be inaccurate. "
                f"Estimated CC: {estimated_cc} (E:{edges} - N:{nodes} + 2P:{components}), got: {cc}"
            )
        if cc > 50:
            warnings.append(
                f"Requirement {req.id}: Extremely high complexity ({cc}). "
                "Consider breaking down this requirement."
            )
        if paths > 20:
            warnings.append(
                f"Requirement {req.id}: Very high path count ({paths}). "
                "Consider simplifying the workflow."
            )
        if decision_points > 10:
            warnings.append(
                f"Requirement {req.id}: Many decision points ({decision_points}). "
                "Consider breaking into smaller requirements."
            )

    return warnings


def derive_ticket_prefix(ticket_keys: Iterable[Optional[str]]) -> str:
    """Use the first non-empty Jira key as the id namespace."""
    for key in ticket_keys:
        if key and key.strip():
            return key.strip()
    return DEFAULT_TICKET_PREFIX

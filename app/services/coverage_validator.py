"""Coverage scoring of generated Gherkin content against a requirement."""

import math
import re
from typing import Iterable, List, Optional

import structlog

from app.config.settings import settings
from app.models.schemas import CoverageReport, CoverageStrategy, CoverageSummary

logger = structlog.get_logger()

SCENARIO_MARKERS = ("Scenario:", "Scenario Outline:")
FEATURE_MARKER = "Feature:"
COMPLEXITY_MARKERS = ("CC:", "Paths:")

DECISION_KEYWORDS = re.compile(r"\b(?:if|when|else)\b", re.IGNORECASE)
CONDITION_CONNECTIVES = re.compile(r"\b(?:and|or|but)\b", re.IGNORECASE)
PATHS_PATTERN = re.compile(r"Paths:\s*(\d+)", re.IGNORECASE)

MIN_ESTIMATED_PATHS = 2
MAX_ESTIMATED_PATHS = 5
WORDS_PER_PATH = 20


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _count_prefixed(lines: Iterable[str], keyword: str) -> int:
    return sum(1 for line in lines if line.startswith(keyword + " "))


def degraded_report(strategy: CoverageStrategy = CoverageStrategy.KEYWORD) -> CoverageReport:
    return CoverageReport(
        scenario_count=0,
        expected_paths=1,
        coverage_percentage=0,
        is_adequate_coverage=False,
        missing_test_types=["validation failed"],
        feature_name="",
        complexity_info=None,
        strategy=strategy,
    )


class CoverageValidator:
    """Estimates whether generated scenarios cover a requirement's decision paths.

    Two estimators exist for requirements without an explicit ``Paths:``
    annotation: ``keyword`` looks for conditional language, ``word_count``
    scales with the length of the requirement text.
    """

    def __init__(self, strategy: Optional[CoverageStrategy] = None):
        self.strategy = CoverageStrategy(strategy or settings.coverage_strategy)

    def validate(self, test_content: str, requirement: str, acceptance_criteria: str) -> CoverageReport:
        try:
            return self._validate(test_content, requirement, acceptance_criteria)
        except Exception as e:
            logger.error("Error validating test coverage", error=str(e), strategy=self.strategy.value)
            return degraded_report(self.strategy)

    def _validate(self, test_content: str, requirement: str, acceptance_criteria: str) -> CoverageReport:
        lines = [line.strip() for line in test_content.split("\n")]

        scenario_count = 0
        feature_name = ""
        complexity_info: Optional[str] = None

        for line in lines:
            if line.startswith(SCENARIO_MARKERS):
                scenario_count += 1

            heading = line.lstrip("#").strip()
            if heading.startswith(FEATURE_MARKER):
                feature_name = heading[len(FEATURE_MARKER):].strip()

            if any(marker in line for marker in COMPLEXITY_MARKERS):
                complexity_info = line

        expected_paths = self._expected_paths(complexity_info, scenario_count, requirement, acceptance_criteria)

        if expected_paths > 0:
            coverage_percentage = round_half_up(scenario_count / expected_paths * 100)
        else:
            coverage_percentage = 100
        if self.strategy == CoverageStrategy.WORD_COUNT:
            coverage_percentage = min(coverage_percentage, 100)

        missing_test_types: List[str] = []
        if scenario_count < 3:
            missing_test_types.append("negative test cases")
        if scenario_count < 2:
            missing_test_types.append("edge cases")
        if scenario_count < expected_paths:
            missing_test_types.append("path coverage")

        return CoverageReport(
            scenario_count=scenario_count,
            expected_paths=expected_paths,
            coverage_percentage=coverage_percentage,
            is_adequate_coverage=scenario_count >= expected_paths,
            missing_test_types=missing_test_types,
            feature_name=feature_name,
            complexity_info=complexity_info,
            given_steps=_count_prefixed(lines, "Given"),
            when_steps=_count_prefixed(lines, "When"),
            then_steps=_count_prefixed(lines, "Then"),
            strategy=self.strategy,
        )

    def _expected_paths(
        self,
        complexity_info: Optional[str],
        scenario_count: int,
        requirement: str,
        acceptance_criteria: str,
    ) -> int:
        # An annotation without a Paths value still suppresses the estimate
        if complexity_info is not None:
            match = PATHS_PATTERN.search(complexity_info)
            return int(match.group(1)) if match else 1

        if self.strategy == CoverageStrategy.WORD_COUNT:
            words = len(requirement.split()) + len(acceptance_criteria.split())
            return max(MIN_ESTIMATED_PATHS, math.ceil(words / WORDS_PER_PATH))

        if has_decision_complexity(requirement, acceptance_criteria):
            return max(MIN_ESTIMATED_PATHS, min(MAX_ESTIMATED_PATHS, scenario_count))
        return 1


def has_decision_complexity(requirement: str, acceptance_criteria: str) -> bool:
    text = requirement + "\n" + acceptance_criteria
    if DECISION_KEYWORDS.search(text):
        return True
    return len(CONDITION_CONNECTIVES.findall(text)) >= 2


def validate_test_coverage(
    test_content: str,
    requirement: str,
    acceptance_criteria: str,
    strategy: Optional[CoverageStrategy] = None,
) -> CoverageReport:
    return CoverageValidator(strategy).validate(test_content, requirement, acceptance_criteria)


def summarize(reports: Iterable[CoverageReport], failed_requirement_ids: Optional[List[str]] = None) -> CoverageSummary:
    """Aggregate per-requirement reports into a single coverage figure."""
    reports = list(reports)
    total_scenarios = sum(r.scenario_count for r in reports)
    total_paths = sum(r.expected_paths for r in reports)
    percentage = round_half_up(total_scenarios / total_paths * 100) if total_paths > 0 else 0
    return CoverageSummary(
        requirement_count=len(reports),
        total_scenarios=total_scenarios,
        total_expected_paths=total_paths,
        coverage_percentage=percentage,
        failed_requirement_ids=list(failed_requirement_ids or []),
    )

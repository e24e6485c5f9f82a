"""Splits generated Gherkin features into scenarios and Zephyr step items."""

from typing import List, Optional

from app.models.zephyr import GherkinScenario, TestStep

STEP_KEYWORDS = ("Given", "When", "Then", "And", "But")
SCENARIO_MARKERS = ("Scenario Outline:", "Scenario:")

DEFAULT_STEPS = [
    "Given the user is on the page",
    "When the user performs an action",
    "Then the user should see the expected result",
]


def _is_step(line: str) -> bool:
    return line.startswith(STEP_KEYWORDS)


def _scenario_name(line: str) -> str:
    for marker in SCENARIO_MARKERS:
        if line.startswith(marker):
            return line[len(marker):].strip()
    return line


def _background_steps(lines: List[str]) -> List[str]:
    for i, line in enumerate(lines):
        if not line.startswith("Background:"):
            continue
        steps = []
        for nxt in lines[i + 1:]:
            if nxt == "" or nxt.startswith(SCENARIO_MARKERS):
                break
            if _is_step(nxt):
                steps.append(nxt)
        return steps
    return []


def parse_scenarios(content: str, default_name: str = "Test Feature") -> List[GherkinScenario]:
    """Return the scenarios of ``content`` with background steps prepended."""
    lines = [line.strip() for line in content.split("\n")]
    background = _background_steps(lines)

    scenarios: List[GherkinScenario] = []
    current: Optional[str] = None
    steps: List[str] = []
    examples: List[str] = []
    in_examples = False

    def flush():
        if current is not None:
            scenarios.append(GherkinScenario(name=current, steps=background + steps, examples=list(examples)))

    for line in lines:
        if line.startswith(SCENARIO_MARKERS):
            flush()
            current = _scenario_name(line)
            steps, examples = [], []
            in_examples = False
        elif _is_step(line):
            if current is not None:
                steps.append(line)
        elif line.startswith("Examples:"):
            in_examples = True
            examples.append(line)
        elif line.startswith("|") and in_examples:
            examples.append(line)
        elif line == "" and in_examples:
            in_examples = False
    flush()

    if not scenarios:
        scenarios.append(GherkinScenario(name=default_name, steps=list(DEFAULT_STEPS)))
    return scenarios


def to_zephyr_steps(scenario: GherkinScenario) -> List[TestStep]:
    """Group Gherkin lines into Zephyr steps.

    Given/When lines open a step, Then lines become the expected result of
    the open step. And/But continue whichever of the two came last.
    """
    items: List[TestStep] = []
    in_outcome = False

    for line in scenario.steps:
        keyword = line.split(" ", 1)[0]
        if keyword == "Then" or (keyword in ("And", "But") and in_outcome):
            if not items:
                items.append(TestStep(step="", expected_result=line))
            else:
                current = items[-1]
                joined = f"{current.expected_result}\n{line}" if current.expected_result else line
                items[-1] = current.model_copy(update={"expected_result": joined})
            in_outcome = True
        elif keyword in ("And", "But") and items and not items[-1].expected_result:
            current = items[-1]
            items[-1] = current.model_copy(update={"step": f"{current.step}\n{line}"})
        else:
            items.append(TestStep(step=line))
            in_outcome = False

    if items and scenario.examples:
        items[0] = items[0].model_copy(update={"test_data": "\n".join(scenario.examples)})
    return items

from app.models.zephyr import GherkinScenario, TestStep
from app.services.gherkin import DEFAULT_STEPS, parse_scenarios, to_zephyr_steps


FEATURE = """Feature: Login

Background:
  Given the app is open

Scenario: Valid login
  Given the user is on the login page
  And the user has an account
  When the user submits valid credentials
  Then the dashboard is shown
  And a welcome message appears

Scenario Outline: Invalid login
  Given the user is on the login page
  When the user enters "<email>"
  Then an error is shown

  Examples:
    | email |
    | bad@ |
"""


def test_parse_scenarios_prepends_background():
    scenarios = parse_scenarios(FEATURE)

    assert [s.name for s in scenarios] == ["Valid login", "Invalid login"]
    assert scenarios[0].steps[0] == "Given the app is open"
    assert len(scenarios[0].steps) == 6
    assert scenarios[1].examples == ["Examples:", "| email |", "| bad@ |"]


def test_parse_scenarios_without_scenarios_uses_default_steps():
    scenarios = parse_scenarios("Feature: Empty", default_name="Checkout")

    assert len(scenarios) == 1
    assert scenarios[0].name == "Checkout"
    assert scenarios[0].steps == DEFAULT_STEPS


def test_to_zephyr_steps_groups_outcomes():
    valid_login = parse_scenarios(FEATURE)[0]

    steps = to_zephyr_steps(valid_login)

    assert [s.step for s in steps] == [
        "Given the app is open",
        "Given the user is on the login page\nAnd the user has an account",
        "When the user submits valid credentials",
    ]
    assert steps[2].expected_result == "Then the dashboard is shown\nAnd a welcome message appears"
    assert steps[0].expected_result == ""


def test_to_zephyr_steps_attaches_examples_to_first_step():
    outline = parse_scenarios(FEATURE)[1]

    steps = to_zephyr_steps(outline)

    assert steps[0].test_data == "Examples:\n| email |\n| bad@ |"
    assert all(s.test_data == "" for s in steps[1:])


def test_then_without_preceding_step():
    scenario = GherkinScenario(name="Odd", steps=["Then something happens"])
    assert to_zephyr_steps(scenario) == [TestStep(step="", expected_result="Then something happens")]

import pytest
from typing import Any, Dict, List, Optional
from fastapi.testclient import TestClient

from main import app
from app.core.cache import GENERATION_CACHE, JIRA_TICKET_CACHE, PUSHED_STATE_CACHE
from app.core.dependencies import get_ai_service, get_jira_service
from app.core.exceptions import AIServiceError
from app.repositories.interfaces.ai_service import IAIService
from app.repositories.interfaces.jira_service import IJiraService


REQUIREMENTS_TABLE = """Business Requirements:

| Requirement ID | Business Requirement | Acceptance Criteria | Complexity |
|---|---|---|---|
| BR-1 | User can log in with email | User sees dashboard after valid credentials | CC: 2, Decision Points: 1, Activities: 2, Paths: 2 |
| BR-2 | User can reset password | Reset link is emailed within 5 minutes | CC: 1, Decision Points: 0, Activities: 2, Paths: 1 |
"""


def gherkin_for(requirement_id: str, scenarios: int, paths: Optional[int] = None) -> str:
    lines = ["# Feature: Generated feature"]
    if paths is not None:
        lines.append(f"# Complexity: CC: {paths}, Decision Points: {paths - 1}, Activities: 2, Paths: {paths}")
    for n in range(1, scenarios + 1):
        lines += [
            "",
            f"Scenario: {requirement_id}: Scenario number {n}",
            "Given the user is on the login page",
            "When the user submits the form",
            "Then the dashboard is shown",
        ]
    return "\n".join(lines)


class FakeAIService(IAIService):
    """Scripted AI collaborator recording every call."""

    def __init__(self):
        self.table = REQUIREMENTS_TABLE
        self.scenarios_per_requirement = 2
        self.failing_ids: List[str] = []
        self.configured = True
        self.calls: List[Dict[str, Any]] = []

    async def extract_requirements(self, content: str, context: str = "") -> str:
        self.calls.append({"op": "extract", "content": content, "context": context})
        return self.table

    async def generate_tests(self, prompt: str, context: str = "") -> str:
        self.calls.append({"op": "generate", "prompt": prompt, "context": context})
        requirement_id = prompt.split("Requirement ID: ", 1)[1].split("\n", 1)[0]
        if requirement_id in self.failing_ids:
            raise AIServiceError("No content received from AI service")
        return gherkin_for(requirement_id, self.scenarios_per_requirement)

    async def refine_tests(self, content: str, feedback: str, context: str = "") -> str:
        self.calls.append({"op": "refine", "content": content, "feedback": feedback})
        return content + "\n\nScenario: Refined extra scenario\nGiven a\nWhen b\nThen c"

    def is_configured(self) -> bool:
        return self.configured


class FakeJiraService(IJiraService):
    def __init__(self, issues: Optional[Dict[str, Dict[str, Any]]] = None):
        self.issues = issues or {}
        self.requests: List[str] = []

    async def get_issue(self, issue_key: str) -> Optional[Dict[str, Any]]:
        self.requests.append(issue_key)
        return self.issues.get(issue_key)

    def is_configured(self) -> bool:
        return True


@pytest.fixture(autouse=True)
def clear_caches():
    for cache in (GENERATION_CACHE, JIRA_TICKET_CACHE, PUSHED_STATE_CACHE):
        cache.clear_all()
    yield
    for cache in (GENERATION_CACHE, JIRA_TICKET_CACHE, PUSHED_STATE_CACHE):
        cache.clear_all()


@pytest.fixture
def fake_ai():
    return FakeAIService()


@pytest.fixture
def fake_jira():
    return FakeJiraService({
        "QAE-60": {
            "id": "10060",
            "key": "QAE-60",
            "summary": "Checkout discount codes",
            "description": "Customers can apply a discount code during checkout.",
            "acceptance_criteria": "Valid codes reduce the total. Expired codes show an error.",
            "issue_type": "Story",
            "status": "To Do",
            "priority": "Medium",
        }
    })


@pytest.fixture
def test_client(fake_ai, fake_jira):
    """Synchronous test client with the AI and Jira collaborators faked"""
    app.dependency_overrides[get_ai_service] = lambda: fake_ai
    app.dependency_overrides[get_jira_service] = lambda: fake_jira
    yield TestClient(app)
    app.dependency_overrides.clear()

import pytest
from app.api.errors import to_http_exception
from app.config.settings import settings
from app.core.exceptions import (
    AIServiceError,
    ContentValidationError,
    GenerationFailedError,
    NoRequirementsFoundError,
    TestGeneratorError,
)
from tests.conftest import REQUIREMENTS_TABLE, gherkin_for


def test_health_check(test_client):
    """Test health check endpoint"""
    response = test_client.get("/api/v1/health/")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert "version" in data
    assert "environment" in data


def test_readiness_check(test_client, fake_ai):
    """Test readiness check endpoint"""
    response = test_client.get("/api/v1/health/readiness")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["ai_service"] == "ok"
    assert "timestamp" in data

    fake_ai.configured = False
    assert test_client.get("/api/v1/health/readiness").json()["status"] == "not_ready"


def test_parse_requirements(test_client):
    response = test_client.post("/api/v1/requirements/parse", json={"text": REQUIREMENTS_TABLE})
    assert response.status_code == 200

    data = response.json()
    assert [r["id"] for r in data["requirements"]] == ["TG-001", "TG-002"]
    assert data["requirements"][0]["acceptanceCriteria"] == "User sees dashboard after valid credentials"
    assert data["warnings"] == []


def test_parse_requirements_with_jira_prefix(test_client):
    response = test_client.post(
        "/api/v1/requirements/parse",
        json={"text": REQUIREMENTS_TABLE, "source": "jira", "ticketPrefix": "QAE-60"},
    )
    assert response.status_code == 200
    assert response.json()["requirements"][1]["id"] == "QAE-60-002"


def test_parse_requirements_without_table(test_client):
    response = test_client.post("/api/v1/requirements/parse", json={"text": "no table here"})
    assert response.status_code == 200
    assert response.json()["requirements"] == []


def test_format_requirements(test_client):
    response = test_client.post(
        "/api/v1/requirements/format",
        json={"requirements": [{"id": "TG-001", "requirement": "Login", "acceptanceCriteria": "Dashboard"}]},
    )
    assert response.status_code == 200
    assert "| TG-001 | Login | Dashboard | CC: 1, Paths: 1 |" in response.json()["content"]


def test_extract_requirements(test_client):
    response = test_client.post(
        "/api/v1/requirements/extract",
        json={"content": "The system shall let users log in. " * 3, "documentName": "requirements.docx"},
    )
    assert response.status_code == 200

    data = response.json()
    assert len(data["requirements"]) == 2
    assert data["documentName"] == "requirements.docx"


def test_extract_requirements_rejects_short_content(test_client):
    response = test_client.post("/api/v1/requirements/extract", json={"content": "short"})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Insufficient content"


def test_validate_coverage(test_client):
    response = test_client.post(
        "/api/v1/coverage/validate",
        json={
            "testContent": gherkin_for("TG-001", 3, paths=3),
            "requirement": "User can log in",
            "acceptanceCriteria": "Dashboard shown",
        },
    )
    assert response.status_code == 200

    data = response.json()
    assert data["scenarioCount"] == 3
    assert data["expectedPaths"] == 3
    assert data["coveragePercentage"] == 100
    assert data["isAdequateCoverage"] is True
    assert data["missingTestTypes"] == []


def test_generate_tests(test_client):
    response = test_client.post(
        "/api/v1/test-cases/generate",
        json={"content": REQUIREMENTS_TABLE, "documentName": "requirements.docx"},
    )
    assert response.status_code == 200

    data = response.json()
    assert [f["requirementId"] for f in data["features"]] == ["TG-001", "TG-002"]
    assert data["summary"]["totalScenarios"] == 4
    assert data["documentName"] == "requirements.docx"

    cached = test_client.get("/api/v1/test-cases/cache/requirements.docx")
    assert cached.status_code == 200
    assert cached.json()["message"] == data["message"]


def test_generate_tests_without_requirements(test_client):
    response = test_client.post("/api/v1/test-cases/generate", json={"content": "Nothing tabular"})
    assert response.status_code == 400

    detail = response.json()["detail"]
    assert detail["error"] == "No requirements found in the content"
    assert "Requirement ID" in detail["suggestion"]


def test_generate_tests_when_every_requirement_fails(test_client, fake_ai):
    fake_ai.failing_ids = ["TG-001", "TG-002"]

    response = test_client.post("/api/v1/test-cases/generate", json={"content": REQUIREMENTS_TABLE})

    assert response.status_code == 502
    assert response.json()["detail"]["error"] == "Failed to generate test cases for any requirements"


def test_refine_tests(test_client):
    test_client.post(
        "/api/v1/test-cases/generate",
        json={"content": REQUIREMENTS_TABLE, "documentName": "requirements.docx"},
    )

    response = test_client.post(
        "/api/v1/test-cases/refine",
        json={
            "content": gherkin_for("TG-002", 2),
            "feedback": "Add a negative case",
            "documentName": "requirements.docx",
            "featureIndex": 1,
        },
    )
    assert response.status_code == 200

    data = response.json()
    assert data["cached"] is True
    assert data["coverage"]["scenarioCount"] == 3


def test_cache_endpoints(test_client):
    assert test_client.get("/api/v1/test-cases/cache/unknown.docx").status_code == 404
    assert test_client.delete("/api/v1/test-cases/cache/unknown.docx").status_code == 404

    test_client.post(
        "/api/v1/test-cases/generate",
        json={"content": REQUIREMENTS_TABLE, "documentName": "requirements.docx"},
    )
    assert test_client.delete("/api/v1/test-cases/cache/requirements.docx").status_code == 204
    assert test_client.get("/api/v1/test-cases/cache/requirements.docx").status_code == 404


def test_get_jira_ticket(test_client):
    response = test_client.get("/api/v1/integrations/jira/QAE-60")
    assert response.status_code == 200
    assert response.json()["summary"] == "Checkout discount codes"

    assert test_client.get("/api/v1/integrations/jira/QAE-1").status_code == 404


def test_import_jira_issues(test_client):
    response = test_client.post("/api/v1/integrations/jira/import", json={"issueKeys": ["QAE-60"]})
    assert response.status_code == 200

    data = response.json()
    assert data["ticketPrefix"] == "QAE-60"
    assert data["documentName"] == "jira-QAE-60-Story"
    assert [r["id"] for r in data["requirements"]] == ["QAE-60-001", "QAE-60-002"]


def test_import_jira_issues_requires_keys(test_client):
    response = test_client.post("/api/v1/integrations/jira/import", json={"issueKeys": []})
    assert response.status_code == 422


def test_push_to_unconfigured_zephyr(test_client, monkeypatch):
    monkeypatch.setattr(settings, "zephyr_api_token", None)

    response = test_client.post(
        "/api/v1/integrations/zephyr/push",
        json={"project_key": "QAE", "content": gherkin_for("TG-001", 1)},
    )
    assert response.status_code == 503


@pytest.mark.parametrize(
    "error, expected_status",
    [
        (ContentValidationError("Missing content"), 400),
        (NoRequirementsFoundError(), 400),
        (AIServiceError("AI down"), 503),
        (GenerationFailedError(["TG-001"]), 502),
        (TestGeneratorError("Other"), 500),
    ],
)
def test_error_status_mapping(error, expected_status):
    exc = to_http_exception(error)
    assert exc.status_code == expected_status
    assert exc.detail["error"] == error.message
    assert exc.detail["suggestion"]

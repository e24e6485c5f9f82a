import structlog
import httpx
from base64 import b64encode
from typing import Optional, List, Dict, Any

from fastapi import HTTPException, status
from app.models.zephyr import (
    GherkinScenario,
    PushFeatureRequest,
    PushFeatureResponse,
    PushedTestCase,
    TestStep,
)
from app.config.settings import settings
from app.core.cache import record_pushed_feature
from app.services.gherkin import parse_scenarios, to_zephyr_steps

logger = structlog.get_logger()


class ZephyrService:
    @staticmethod
    def _headers() -> dict:
        """Generate headers for Zephyr API calls"""
        if not settings.zephyr_api_token:
            raise HTTPException(status_code=500, detail="Missing ZEPHYR_API_TOKEN")
        return {
            "Authorization": f"Bearer {settings.zephyr_api_token}",
            "Content-Type": "application/json"
        }

    @classmethod
    async def create_testcase(
        cls,
        project_key: str,
        name: str,
        objective: str,
        client: httpx.AsyncClient,
        folder_id: Optional[int] = None,
        testcase_status: str = "Draft",
    ) -> Dict[str, Any]:
        """Create a new test case in Zephyr"""
        payload: Dict[str, Any] = {
            "projectKey": project_key,
            "name": name,
            "objective": objective,
            "statusName": testcase_status,
        }
        if folder_id is not None:
            payload["folderId"] = folder_id

        try:
            r = await client.post(
                f"{settings.zephyr_base_url}/testcases",
                headers=cls._headers(),
                json=payload,
                timeout=30
            )
        except httpx.HTTPError as e:
            logger.error("Error creating test case", error=str(e))
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Failed to create test case: {str(e)}"
            )

        if r.status_code != 201:
            logger.error(
                "Failed to create test case",
                status_code=r.status_code,
                response=r.text
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Create test case failed: {r.text}"
            )

        return r.json()

    @classmethod
    async def link_to_jira_issue(
        cls,
        test_case_key: str,
        issue_id: int,
        client: httpx.AsyncClient
    ) -> bool:
        """Link a test case to a JIRA issue"""
        try:
            r = await client.post(
                f"{settings.zephyr_base_url}/testcases/{test_case_key}/links/issues",
                headers=cls._headers(),
                json={"issueId": issue_id},
                timeout=30
            )
        except httpx.HTTPError as e:
            logger.error(
                "Error linking test case",
                test_case_key=test_case_key,
                issue_id=issue_id,
                error=str(e)
            )
            return False

        if r.status_code not in (200, 201):
            logger.error(
                "Failed to link test case",
                test_case_key=test_case_key,
                issue_id=issue_id,
                status_code=r.status_code,
                response=r.text
            )
            return False
        return True

    @classmethod
    async def add_test_steps(
        cls,
        test_case_key: str,
        steps: List[TestStep],
        client: httpx.AsyncClient
    ) -> bool:
        """Add test steps to a test case"""
        items = [
            {
                "inline": {
                    "description": s.step,
                    "testData": s.test_data,
                    "expectedResult": s.expected_result
                }
            }
            for s in steps
        ]
        payload = {"mode": "OVERWRITE", "items": items}

        try:
            r = await client.post(
                f"{settings.zephyr_base_url}/testcases/{test_case_key}/teststeps",
                headers=cls._headers(),
                json=payload,
                timeout=30
            )
        except httpx.HTTPError as e:
            logger.error(
                "Error adding test steps",
                test_case_key=test_case_key,
                error=str(e)
            )
            return False

        if r.status_code not in (200, 201):
            logger.error(
                "Failed to add test steps",
                test_case_key=test_case_key,
                status_code=r.status_code,
                response=r.text
            )
            return False
        return True


class JiraService:
    @staticmethod
    def _headers() -> dict:
        """Generate headers for JIRA API calls"""
        token = b64encode(f"{settings.jira_username}:{settings.jira_api_token}".encode()).decode()
        return {
            "Authorization": f"Basic {token}",
            "Accept": "application/json"
        }

    @staticmethod
    def is_configured() -> bool:
        return all([settings.jira_base_url, settings.jira_username, settings.jira_api_token])

    @classmethod
    async def get_issue_id(cls, issue_key: str, client: httpx.AsyncClient) -> Optional[int]:
        """Get JIRA issue ID from issue key"""
        if not cls.is_configured():
            return None
        try:
            url = f"{settings.jira_base_url}/rest/api/3/issue/{issue_key}?fields=id"
            r = await client.get(url, headers=cls._headers(), timeout=30)
        except httpx.HTTPError as e:
            logger.error(
                "Error getting JIRA issue ID",
                issue_key=issue_key,
                error=str(e)
            )
            return None

        if r.status_code == 200:
            return int(r.json().get("id"))

        logger.error(
            "Failed to get JIRA issue ID",
            issue_key=issue_key,
            status_code=r.status_code
        )
        return None


def scenario_testcase_name(data: PushFeatureRequest, scenario: GherkinScenario) -> str:
    base = data.test_case_name or data.feature_name
    if not base or base == scenario.name:
        return scenario.name
    return f"{base} - {scenario.name}"


async def push_feature(data: PushFeatureRequest) -> PushFeatureResponse:
    """Create one Zephyr test case per scenario of a generated feature."""
    if not (settings.zephyr_base_url and settings.zephyr_api_token):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Zephyr integration is not configured"
        )
    scenarios = parse_scenarios(data.content, data.feature_name)

    async with httpx.AsyncClient() as client:
        issue_id = None
        if data.jira_issue_key:
            issue_id = await JiraService.get_issue_id(data.jira_issue_key, client)
            if issue_id is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"JIRA issue {data.jira_issue_key} not found"
                )

        pushed: List[PushedTestCase] = []
        failed: List[str] = []
        for scenario in scenarios:
            try:
                created = await ZephyrService.create_testcase(
                    data.project_key,
                    scenario_testcase_name(data, scenario),
                    f"Validate scenario: {scenario.name}",
                    client,
                    folder_id=data.folder_id,
                    testcase_status=data.status,
                )
            except HTTPException as e:
                logger.error("Scenario push failed", scenario=scenario.name, detail=e.detail)
                failed.append(scenario.name)
                continue

            test_case_key = created.get("key")
            test_case_id = created.get("id")
            if not test_case_key or not test_case_id:
                logger.error("Failed to create test case in Zephyr", created=created)
                failed.append(scenario.name)
                continue

            linked = False
            if issue_id is not None:
                linked = await ZephyrService.link_to_jira_issue(test_case_key, issue_id, client)
            steps_pushed = await ZephyrService.add_test_steps(test_case_key, to_zephyr_steps(scenario), client)

            pushed.append(
                PushedTestCase(
                    scenario_name=scenario.name,
                    testcase_key=test_case_key,
                    testcase_id=test_case_id,
                    linked_to_issue=linked,
                    steps_pushed=steps_pushed,
                )
            )

    if data.document_name and data.feature_index is not None and pushed:
        record_pushed_feature(data.document_name, data.feature_index, [p.testcase_key for p in pushed])

    logger.info(
        "Pushed feature to Zephyr",
        project_key=data.project_key,
        pushed=len(pushed),
        failed=len(failed),
    )
    return PushFeatureResponse(
        message=f"Pushed {len(pushed)} of {len(scenarios)} scenarios to Zephyr Scale.",
        test_cases=pushed,
        failed_scenarios=failed,
    )

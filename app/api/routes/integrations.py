import structlog

from fastapi import APIRouter, Depends, HTTPException, status
from app.api.errors import to_http_exception
from app.core.exceptions import TestGeneratorError
from app.models.schemas import JiraImportRequest, JiraImportResponse
from app.models.zephyr import PushFeatureRequest, PushFeatureResponse
from app.services.test_generation_service import TestGenerationService
from app.services.zephyr_service import push_feature
from app.core.dependencies import get_test_generation_service

logger = structlog.get_logger()

router = APIRouter(prefix="/integrations", tags=["integrations"])


@router.get("/jira/{ticket_key}")
async def get_jira_ticket(
    ticket_key: str,
    service: TestGenerationService = Depends(get_test_generation_service)
):
    """Fetch JIRA ticket details by ticket key (e.g., PROJ-123)"""
    logger.info("Fetching JIRA ticket", ticket_key=ticket_key)
    ticket_data = await service.get_jira_ticket(ticket_key)
    if not ticket_data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"JIRA ticket {ticket_key} not found"
        )
    return ticket_data


@router.post("/jira/import", response_model=JiraImportResponse)
async def import_jira_issues(
    request: JiraImportRequest,
    service: TestGenerationService = Depends(get_test_generation_service)
):
    """Import Jira tickets and extract requirements from them"""
    try:
        logger.info("Importing JIRA issues", issue_keys=request.issue_keys)
        return await service.import_jira_issues(request.issue_keys, context=request.context)
    except TestGeneratorError as e:
        logger.error("Failed to import JIRA issues", issue_keys=request.issue_keys, error=e.message)
        raise to_http_exception(e)


@router.post("/zephyr/push", response_model=PushFeatureResponse, status_code=status.HTTP_201_CREATED)
async def push_zephyr_feature(data: PushFeatureRequest):
    """Push each scenario of a generated feature to Zephyr as a test case."""
    result = await push_feature(data)
    if not result.test_cases:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to push any scenario to Zephyr Scale: {', '.join(result.failed_scenarios)}"
        )
    return result

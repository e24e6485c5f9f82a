from fastapi import APIRouter, Depends
import structlog

from app.api.errors import to_http_exception
from app.core.exceptions import TestGeneratorError
from app.models.schemas import (
    ExtractRequirementsRequest,
    ExtractRequirementsResponse,
    FormatRequirementsRequest,
    FormatRequirementsResponse,
    ParseRequirementsRequest,
    ParseRequirementsResponse,
)
from app.services.requirements_parser import (
    RequirementsTableParser,
    format_requirements_table,
    validate_complexity_values,
)
from app.services.test_generation_service import TestGenerationService
from app.core.dependencies import get_requirements_parser, get_test_generation_service

logger = structlog.get_logger()

router = APIRouter(prefix="/requirements", tags=["requirements"])


@router.post("/parse", response_model=ParseRequirementsResponse)
async def parse_requirements(
    request: ParseRequirementsRequest,
    parser: RequirementsTableParser = Depends(get_requirements_parser)
):
    """Parse a requirements pipe-table; an unrecognised table yields an empty list"""
    requirements = parser.parse(request.text, request.source, request.ticket_prefix)
    logger.info("Parsed requirements", count=len(requirements), source=request.source.value)
    return ParseRequirementsResponse(
        requirements=requirements,
        warnings=validate_complexity_values(requirements),
    )


@router.post("/format", response_model=FormatRequirementsResponse)
async def format_requirements(request: FormatRequirementsRequest):
    """Render requirement records as a requirements table"""
    return FormatRequirementsResponse(content=format_requirements_table(request.requirements))


@router.post("/extract", response_model=ExtractRequirementsResponse)
async def extract_requirements(
    request: ExtractRequirementsRequest,
    service: TestGenerationService = Depends(get_test_generation_service)
):
    """Extract business requirements from document text using AI"""
    try:
        return await service.extract_requirements(
            request.content,
            context=request.context,
            document_name=request.document_name,
        )
    except TestGeneratorError as e:
        logger.error("Failed to extract requirements", error=e.message, document_name=request.document_name)
        raise to_http_exception(e)

from fastapi import APIRouter

from app.models.schemas import CoverageReport, ValidateCoverageRequest
from app.services.coverage_validator import CoverageValidator

router = APIRouter(prefix="/coverage", tags=["coverage"])


@router.post("/validate", response_model=CoverageReport)
async def validate_coverage(request: ValidateCoverageRequest):
    """Score generated Gherkin content against a requirement"""
    validator = CoverageValidator(request.strategy)
    return validator.validate(request.test_content, request.requirement, request.acceptance_criteria)

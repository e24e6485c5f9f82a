from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Any
from enum import Enum


DEFAULT_COMPLEXITY = "CC: 1, Paths: 1"


class RequirementsSource(str, Enum):
    UPLOAD = "upload"
    JIRA = "jira"


class CoverageStrategy(str, Enum):
    KEYWORD = "keyword"
    WORD_COUNT = "word_count"


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys alongside the snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequirementRecord(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1, description="Generated requirement id, e.g. TG-001")
    requirement: str = Field(..., min_length=1, description="Business requirement text")
    acceptance_criteria: str = Field(..., min_length=1, description="Acceptance criteria text")
    complexity: str = Field(default=DEFAULT_COMPLEXITY, description="Complexity annotation")


class ComplexityAnnotation(BaseModel):
    cc: Optional[int] = None
    decision_points: Optional[int] = None
    activities: Optional[int] = None
    paths: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.cc, self.decision_points, self.activities, self.paths)


class CoverageReport(CamelModel):
    scenario_count: int = 0
    expected_paths: int = 1
    coverage_percentage: int = 0
    is_adequate_coverage: bool = False
    missing_test_types: List[str] = Field(default_factory=list)
    feature_name: str = ""
    complexity_info: Optional[str] = None
    given_steps: int = 0
    when_steps: int = 0
    then_steps: int = 0
    strategy: CoverageStrategy = CoverageStrategy.KEYWORD


class CoverageSummary(CamelModel):
    requirement_count: int = 0
    total_scenarios: int = 0
    total_expected_paths: int = 0
    coverage_percentage: int = 0
    failed_requirement_ids: List[str] = Field(default_factory=list)


class GeneratedFeature(CamelModel):
    title: str = Field(..., description="Requirement id and summary")
    content: str = Field(..., description="Generated Gherkin content")
    requirement_id: str
    requirement: str
    acceptance_criteria: str
    complexity: str = DEFAULT_COMPLEXITY
    coverage: CoverageReport


class GenerationResult(CamelModel):
    features: List[GeneratedFeature] = Field(default_factory=list)
    summary: CoverageSummary
    message: str
    document_name: Optional[str] = None


# Requests / responses


class ParseRequirementsRequest(CamelModel):
    text: str = Field(..., description="Text containing a requirements pipe-table")
    source: RequirementsSource = Field(default=RequirementsSource.UPLOAD)
    ticket_prefix: Optional[str] = Field(None, description="Jira ticket prefix for generated ids")


class ParseRequirementsResponse(CamelModel):
    requirements: List[RequirementRecord] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class FormatRequirementsRequest(CamelModel):
    requirements: List[RequirementRecord]


class FormatRequirementsResponse(CamelModel):
    content: str


class ExtractRequirementsRequest(CamelModel):
    content: str = Field(..., description="Document text to extract requirements from")
    context: str = Field(default="", description="Additional context for the AI service")
    document_name: Optional[str] = None


class ExtractRequirementsResponse(CamelModel):
    content: str = Field(..., description="Requirements table produced by the AI service")
    requirements: List[RequirementRecord] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    document_name: Optional[str] = None


class ValidateCoverageRequest(CamelModel):
    test_content: str
    requirement: str
    acceptance_criteria: str
    strategy: Optional[CoverageStrategy] = None


class GenerateTestsRequest(CamelModel):
    content: str = Field(..., description="Text containing the requirements table")
    context: str = Field(default="")
    source: RequirementsSource = Field(default=RequirementsSource.UPLOAD)
    ticket_prefix: Optional[str] = None
    document_name: Optional[str] = None


class RefineTestsRequest(CamelModel):
    content: str = Field(..., description="Gherkin content to refine")
    feedback: str = Field(default="Please improve the test cases based on best practices")
    context: str = Field(default="")
    document_name: Optional[str] = None
    feature_index: Optional[int] = Field(None, ge=0)


class RefineTestsResponse(CamelModel):
    content: str
    coverage: Optional[CoverageReport] = None
    cached: bool = False


class JiraImportRequest(CamelModel):
    issue_keys: List[str] = Field(..., min_length=1, description="Jira issue keys to import")
    context: str = Field(default="")


class JiraImportResponse(CamelModel):
    content: str
    requirements: List[RequirementRecord] = Field(default_factory=list)
    ticket_prefix: str
    document_name: str
    imported_keys: List[str] = Field(default_factory=list)
    missing_keys: List[str] = Field(default_factory=list)
    ticket_info: Dict[str, Any] = Field(default_factory=dict)

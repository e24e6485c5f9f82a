from typing import Optional, List
from pydantic import BaseModel, Field


class TestStep(BaseModel):
    __test__ = False

    step: str
    test_data: str = ""
    expected_result: str = ""


class GherkinScenario(BaseModel):
    name: str
    steps: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)


class PushFeatureRequest(BaseModel):
    project_key: str = Field(..., min_length=1)
    content: str = Field(..., description="Gherkin feature content")
    feature_name: str = "Test Feature"
    test_case_name: Optional[str] = None
    folder_id: Optional[int] = None
    status: str = "Draft"
    jira_issue_key: Optional[str] = None
    document_name: Optional[str] = None
    feature_index: Optional[int] = Field(None, ge=0)


class PushedTestCase(BaseModel):
    scenario_name: str
    testcase_key: str
    testcase_id: int
    linked_to_issue: bool
    steps_pushed: bool


class PushFeatureResponse(BaseModel):
    message: str
    test_cases: List[PushedTestCase] = Field(default_factory=list)
    failed_scenarios: List[str] = Field(default_factory=list)

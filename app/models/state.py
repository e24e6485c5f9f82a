"""Explicit generator session state and the reducer that updates it.

Every change to the session is expressed as an action passed to
``reduce``, which returns a new ``GeneratorState`` and never mutates the
old one.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.models.schemas import GeneratedFeature, GenerationResult, RequirementsSource


class StatusMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str  # success | error | info
    message: str


class GeneratorState(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str = ""
    context: str = ""
    extracted_requirements: str = ""
    current_document_name: Optional[str] = None
    requirements_source: Optional[RequirementsSource] = None
    jira_ticket_prefix: str = ""
    jira_ticket_info: Dict[str, Any] = Field(default_factory=dict)
    jira_connection_active: bool = False
    feature_tabs: List[GeneratedFeature] = Field(default_factory=list)
    editable_features: Dict[int, str] = Field(default_factory=dict)
    pushed_features: Dict[int, List[str]] = Field(default_factory=dict)
    active_tab: int = 0
    status: Optional[StatusMessage] = None

    def reset(self) -> "GeneratorState":
        return reduce(self, Reset())


# Actions


class ContentChanged(BaseModel):
    content: str


class ContextChanged(BaseModel):
    context: str


class RequirementsExtracted(BaseModel):
    table: str
    source: RequirementsSource
    document_name: Optional[str] = None
    ticket_prefix: str = ""
    ticket_info: Dict[str, Any] = Field(default_factory=dict)


class TestsGenerated(BaseModel):
    __test__ = False

    result: GenerationResult


class FeatureEdited(BaseModel):
    index: int
    content: str


class TabSelected(BaseModel):
    index: int


class FeaturePushed(BaseModel):
    index: int
    testcase_keys: List[str]


class StatusChanged(BaseModel):
    status: Optional[StatusMessage] = None


class JiraConnectionChanged(BaseModel):
    active: bool


class Reset(BaseModel):
    pass


Action = Union[
    ContentChanged,
    ContextChanged,
    RequirementsExtracted,
    TestsGenerated,
    FeatureEdited,
    TabSelected,
    FeaturePushed,
    StatusChanged,
    JiraConnectionChanged,
    Reset,
]


def reduce(state: GeneratorState, action: Action) -> GeneratorState:
    if isinstance(action, ContentChanged):
        return state.model_copy(update={"content": action.content})

    if isinstance(action, ContextChanged):
        return state.model_copy(update={"context": action.context})

    if isinstance(action, RequirementsExtracted):
        # Uploaded documents never carry Jira namespacing
        is_jira = action.source == RequirementsSource.JIRA
        return state.model_copy(
            update={
                "extracted_requirements": action.table,
                "requirements_source": action.source,
                "current_document_name": action.document_name or state.current_document_name,
                "jira_ticket_prefix": action.ticket_prefix if is_jira else "",
                "jira_ticket_info": {**state.jira_ticket_info, **action.ticket_info} if is_jira else {},
            }
        )

    if isinstance(action, TestsGenerated):
        features = list(action.result.features)
        return state.model_copy(
            update={
                "feature_tabs": features,
                "editable_features": {i: f.content for i, f in enumerate(features)},
                "pushed_features": {},
                "active_tab": 0,
                "content": "",
                "extracted_requirements": "",
                "current_document_name": action.result.document_name or state.current_document_name,
                "status": StatusMessage(type="success", message=action.result.message),
            }
        )

    if isinstance(action, FeatureEdited):
        if not 0 <= action.index < len(state.feature_tabs):
            return state
        return state.model_copy(
            update={"editable_features": {**state.editable_features, action.index: action.content}}
        )

    if isinstance(action, TabSelected):
        if not 0 <= action.index < len(state.feature_tabs):
            return state
        return state.model_copy(update={"active_tab": action.index})

    if isinstance(action, FeaturePushed):
        return state.model_copy(
            update={"pushed_features": {**state.pushed_features, action.index: list(action.testcase_keys)}}
        )

    if isinstance(action, StatusChanged):
        return state.model_copy(update={"status": action.status})

    if isinstance(action, JiraConnectionChanged):
        return state.model_copy(update={"jira_connection_active": action.active})

    if isinstance(action, Reset):
        # The Jira connection survives a reset
        return GeneratorState(jira_connection_active=state.jira_connection_active)

    raise TypeError(f"Unknown action: {type(action).__name__}")

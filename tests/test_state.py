import pytest

from app.models.schemas import (
    CoverageReport,
    CoverageSummary,
    GeneratedFeature,
    GenerationResult,
    RequirementsSource,
)
from app.models.state import (
    ContentChanged,
    FeatureEdited,
    FeaturePushed,
    GeneratorState,
    JiraConnectionChanged,
    RequirementsExtracted,
    Reset,
    StatusChanged,
    StatusMessage,
    TabSelected,
    TestsGenerated,
    reduce,
)


def make_result(count: int = 2) -> GenerationResult:
    features = [
        GeneratedFeature(
            title=f"TG-00{i}: Requirement {i}",
            content=f"Scenario: TG-00{i}: one",
            requirement_id=f"TG-00{i}",
            requirement=f"Requirement {i}",
            acceptance_criteria="Works",
            coverage=CoverageReport(scenario_count=1, expected_paths=1, coverage_percentage=100),
        )
        for i in range(1, count + 1)
    ]
    return GenerationResult(
        features=features,
        summary=CoverageSummary(requirement_count=count, total_scenarios=count, total_expected_paths=count),
        message="Generated 2 test scenarios for 2 requirements! Coverage: 100% of expected paths.",
        document_name="requirements.docx",
    )


def test_reduce_does_not_mutate_previous_state():
    state = GeneratorState()
    new_state = reduce(state, ContentChanged(content="text"))

    assert state.content == ""
    assert new_state.content == "text"


def test_jira_extraction_keeps_ticket_prefix():
    state = reduce(
        GeneratorState(),
        RequirementsExtracted(
            table="| table |",
            source=RequirementsSource.JIRA,
            document_name="jira-QAE-60-Story",
            ticket_prefix="QAE-60",
            ticket_info={"QAE-60": {"ticket_key": "QAE-60"}},
        ),
    )

    assert state.jira_ticket_prefix == "QAE-60"
    assert state.requirements_source == RequirementsSource.JIRA
    assert "QAE-60" in state.jira_ticket_info


def test_upload_extraction_clears_jira_namespace():
    state = GeneratorState(jira_ticket_prefix="QAE-60", jira_ticket_info={"QAE-60": {}})

    state = reduce(
        state,
        RequirementsExtracted(table="| table |", source=RequirementsSource.UPLOAD, ticket_prefix="QAE-60"),
    )

    assert state.jira_ticket_prefix == ""
    assert state.jira_ticket_info == {}
    assert state.extracted_requirements == "| table |"


def test_tests_generated_populates_tabs():
    state = GeneratorState(content="table", extracted_requirements="table", active_tab=3)

    state = reduce(state, TestsGenerated(result=make_result()))

    assert len(state.feature_tabs) == 2
    assert state.editable_features == {0: "Scenario: TG-001: one", 1: "Scenario: TG-002: one"}
    assert state.active_tab == 0
    assert state.content == ""
    assert state.extracted_requirements == ""
    assert state.current_document_name == "requirements.docx"
    assert state.status.type == "success"


def test_edit_and_tab_selection_ignore_out_of_range_indexes():
    state = reduce(GeneratorState(), TestsGenerated(result=make_result()))

    assert reduce(state, FeatureEdited(index=5, content="x")) is state
    assert reduce(state, TabSelected(index=-1)) is state

    edited = reduce(state, FeatureEdited(index=1, content="changed"))
    assert edited.editable_features[1] == "changed"
    assert reduce(edited, TabSelected(index=1)).active_tab == 1


def test_feature_pushed_records_keys():
    state = reduce(GeneratorState(), FeaturePushed(index=0, testcase_keys=["QAE-T1", "QAE-T2"]))
    assert state.pushed_features == {0: ["QAE-T1", "QAE-T2"]}


def test_reset_keeps_jira_connection():
    state = GeneratorState(content="text", jira_connection_active=False)
    state = reduce(state, JiraConnectionChanged(active=True))
    state = reduce(state, StatusChanged(status=StatusMessage(type="info", message="hi")))

    reset = state.reset()

    assert reset.content == ""
    assert reset.status is None
    assert reset.jira_connection_active is True
    assert reduce(state, Reset()) == reset


def test_unknown_action_raises():
    with pytest.raises(TypeError):
        reduce(GeneratorState(), object())

"""
Tests for serialization and deserialization of survey engine objects.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `survey_engine.serialization`.
"""

import json

from survey_engine.model import Answer, QuestionType, SurveyResponse, SurveyStatus
from survey_engine.examples import build_example_assessment
from survey_engine.serialization import (
    response_from_json,
    response_to_json,
    survey_from_dict,
    survey_from_json,
    survey_from_yaml,
    survey_to_dict,
    survey_to_json,
    survey_to_yaml,
)


def build_sample_survey():
    survey = build_example_assessment()
    survey.status = SurveyStatus.PUBLISHED
    survey.shareable_link = "http://localhost:5173/survey/x/take"
    survey.completion_count = 3
    return survey


def test_json_roundtrip():
    survey = build_sample_survey()
    before = survey_to_dict(survey)
    json_str = survey_to_json(survey)
    restored = survey_from_json(json_str)
    after = survey_to_dict(restored)
    assert before == after
    assert restored == survey


def test_yaml_roundtrip():
    survey = build_sample_survey()
    restored = survey_from_yaml(survey_to_yaml(survey))
    assert restored == survey


def test_stored_keys_are_camel_case():
    d = json.loads(survey_to_json(build_sample_survey()))
    assert {"createdAt", "shareableLink", "completionCount"} <= set(d)
    assert "questionIds" in d["pages"][0]
    assert "sectionId" in d["questions"][0]
    assert d["status"] == "published"


def test_minimal_dict_uses_defaults():
    survey = survey_from_dict({"id": "bare"})
    assert survey.status == SurveyStatus.DRAFT
    assert survey.questions == []
    assert survey.completion_count == 0


def test_response_roundtrip_keeps_answer_types():
    response = SurveyResponse(
        id="r1",
        survey_id="s1",
        answers=(
            Answer("q1", QuestionType.TEXT, "hello", "sec"),
            Answer("q2", QuestionType.MULTI_CHOICE, ("A", "B")),
            Answer("q3", QuestionType.RATING, 4),
        ),
        submitted_at="2024-05-01T12:00:00+00:00",
        completion_time=42,
        client_info="pytest",
    )
    restored = response_from_json(response_to_json(response))
    assert restored == response
    assert restored.answers[1].value == ("A", "B")

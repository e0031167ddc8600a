"""
Test the sample surveys used for seeding and demos.

Both the starter assessments and the larger example must pass validation,
otherwise seeded surveys could not be published or taken.
"""

from survey_engine.examples import build_example_assessment, build_sample_surveys
from survey_engine.model import QuestionType, SurveyStatus
from survey_engine.structure import get_pages_for_section, ordered_pages
from survey_engine.validator import validate


def test_sample_surveys_are_valid_and_published():
    surveys = build_sample_surveys()
    assert [s.id for s in surveys] == ["mock-survey-1", "mock-survey-2"]
    for survey in surveys:
        assert survey.status == SurveyStatus.PUBLISHED
        assert validate(survey).is_valid


def test_example_assessment_structure():
    survey = build_example_assessment()

    assert len(survey.sections) == 2
    assert len(survey.pages) == 3
    assert {q.type for q in survey.questions} == set(QuestionType)

    tooling = survey.sections[0]
    assert [p.title for p in get_pages_for_section(survey, tooling.id)] == [None, "Approach"]
    assert len(ordered_pages(survey)) == 3
    assert validate(survey).is_valid

"""
Tests for the Response Collector state machine.

Tests verify:
    - Page-by-page validation of required answers
    - Forward, backward and review transitions
    - Progress percentages
    - Submission re-validation and completion time
    - The implicit single page for surveys without pages
"""

from datetime import datetime, timedelta, timezone

import pytest
from survey_engine.collector import (
    MSG_REQUIRED,
    CollectorError,
    Phase,
    ResponseErrors,
    advance,
    answer,
    back,
    current_questions,
    progress,
    start_response,
    submit,
)
from survey_engine.model import AnswerTypeError, Question, QuestionType, Survey
from survey_engine.storage import LocalGateway
from survey_engine.structure import add_page, add_question, add_section, create_draft

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def two_section_survey():
    """2 sections, each with 1 page holding 1 required text question."""
    survey = create_draft("Onboarding", "Two short pages")
    s1, p1 = add_section(survey, title="First")
    q1 = add_question(survey, p1, s1, prompt="Your name?")
    s2, p2 = add_section(survey, title="Second")
    q2 = add_question(survey, p2, s2, prompt="Your role?")
    return survey, q1, q2


def four_page_survey():
    survey = create_draft("Long", "Four pages")
    s, p = add_section(survey)
    pages = [p] + [add_page(survey, s) for _ in range(3)]
    for page in pages:
        add_question(survey, page, s, prompt="Q", required=False)
    return survey


def test_start_response_initial_state():
    survey, q1, q2 = two_section_survey()
    state = start_response(survey, now=T0)
    assert state.phase == Phase.ANSWERING
    assert state.page_index == 0
    assert state.page_count == 2
    assert state.answers[q1].value == ""
    assert state.answers[q1].is_empty
    assert [q.id for q in current_questions(state)] == [q1]


def test_end_to_end_submission():
    survey, q1, q2 = two_section_survey()
    gateway = LocalGateway()
    gateway.put_survey(survey)

    state = start_response(gateway.get_survey(survey.id), now=T0)

    result = advance(state)
    assert isinstance(result, ResponseErrors)
    assert result.errors == {q1: MSG_REQUIRED}
    assert state.page_index == 0
    assert state.phase == Phase.ANSWERING

    state = answer(state, q1, "Ada")
    state = advance(state)
    assert state.phase == Phase.ANSWERING
    assert state.page_index == 1

    state = answer(state, q2, "Tester")
    state = advance(state)
    assert state.phase == Phase.REVIEWING

    state = submit(state, now=T0 + timedelta(seconds=95))
    assert state.phase == Phase.SUBMITTED
    assert state.response.completion_time == 95
    assert state.response.survey_id == survey.id

    gateway.put_response(state.response)
    assert gateway.get_survey(survey.id).completion_count == 1


def test_progress_on_four_pages():
    state = start_response(four_page_survey())
    assert progress(state) == 25
    for expected in (50, 75, 100):
        state = advance(state)
        assert progress(state) == expected
    assert state.page_index == 3


def test_progress_rounds_half_up():
    survey = create_draft("Eight", "pages")
    s, p = add_section(survey)
    for _ in range(7):
        add_page(survey, s)
    state = start_response(survey)
    assert progress(state) == 13


def test_back_transitions():
    survey, q1, q2 = two_section_survey()
    state = start_response(survey)
    assert back(state) is state

    state = advance(answer(state, q1, "Ada"))
    state = back(state)
    assert state.page_index == 0

    state = advance(state)
    state = advance(answer(state, q2, "Dev"))
    assert state.phase == Phase.REVIEWING
    state = back(state)
    assert state.phase == Phase.ANSWERING
    assert state.page_index == 1


def test_back_skips_validation():
    survey, q1, q2 = two_section_survey()
    state = advance(answer(start_response(survey), q1, "Ada"))
    state = answer(state, q1, "")
    assert back(state).page_index == 0


def test_optional_questions_never_block():
    survey = create_draft("Opt", "optional")
    s, p = add_section(survey)
    add_question(survey, p, s, QuestionType.RATING, prompt="Rate", required=False)
    state = advance(start_response(survey))
    assert state.phase == Phase.REVIEWING


@pytest.mark.parametrize(
    "qtype, empty_value",
    [
        (QuestionType.TEXT, "   "),
        (QuestionType.SINGLE_CHOICE, ""),
        (QuestionType.MULTI_CHOICE, []),
        (QuestionType.RATING, 0),
    ],
)
def test_required_empty_values_fail(qtype, empty_value):
    survey = create_draft("Req", "required")
    s, p = add_section(survey)
    qid = add_question(survey, p, s, qtype, prompt="Q")
    state = answer(start_response(survey), qid, empty_value)
    assert qid in advance(state)


def test_answer_rejects_wrong_shape_and_unknown_question():
    survey, q1, _ = two_section_survey()
    state = start_response(survey)
    with pytest.raises(AnswerTypeError):
        answer(state, q1, 5)
    with pytest.raises(KeyError):
        answer(state, "nope", "x")


def test_answer_returns_new_state():
    survey, q1, _ = two_section_survey()
    state = start_response(survey)
    updated = answer(state, q1, "Ada")
    assert state.answers[q1].value == ""
    assert updated.answers[q1].value == "Ada"


def test_submit_revalidates_every_page():
    survey, q1, q2 = two_section_survey()
    state = advance(answer(start_response(survey), q1, "Ada"))
    state = advance(answer(state, q2, "Dev"))
    # clear an earlier page's answer through a path that skips page checks
    state = answer(state, q1, "")

    result = submit(state)
    assert isinstance(result, ResponseErrors)
    assert q1 in result


def test_submit_ignores_questions_no_page_lists():
    survey, q1, q2 = two_section_survey()
    survey.questions.append(Question(id="unlisted", prompt="Hidden", section_id=survey.sections[0].id))
    state = advance(answer(start_response(survey), q1, "Ada"))
    state = advance(answer(state, q2, "Dev"))

    result = submit(state, now=T0)
    assert result.phase == Phase.SUBMITTED
    assert result.response.get_answer("unlisted").is_empty


def test_illegal_transitions_raise():
    survey, q1, q2 = two_section_survey()
    state = start_response(survey)
    with pytest.raises(CollectorError):
        submit(state)

    state = advance(answer(state, q1, "Ada"))
    state = advance(answer(state, q2, "Dev"))
    with pytest.raises(CollectorError):
        advance(state)

    done = submit(state)
    for op in (advance, back, submit):
        with pytest.raises(CollectorError):
            op(done)
    with pytest.raises(CollectorError):
        answer(done, q1, "again")


def test_response_holds_one_answer_per_question():
    survey, q1, q2 = two_section_survey()
    state = advance(answer(start_response(survey), q1, "Ada"))
    state = submit(advance(answer(state, q2, "Dev")), client_info="pytest")
    assert [a.question_id for a in state.response.answers] == [q1, q2]
    assert state.response.client_info == "pytest"


def test_survey_without_pages_gets_one_implicit_page():
    survey = Survey(
        id="legacy",
        title="Legacy",
        description="Authored before pages existed",
        questions=[
            Question(id="a", prompt="First"),
            Question(id="b", type=QuestionType.RATING, prompt="Second"),
        ],
    )
    state = start_response(survey)
    assert state.page_count == 1
    assert state.pages[0].page_id is None
    assert state.pages[0].question_ids == ("a", "b")

    errors = advance(state)
    assert set(errors.errors) == {"a", "b"}

    state = answer(answer(state, "a", "yes"), "b", 5)
    assert advance(state).phase == Phase.REVIEWING


def test_pages_follow_section_order():
    survey = create_draft("Order", "sections")
    s1, p1 = add_section(survey)
    s2, p2 = add_section(survey)
    add_question(survey, p1, s1, prompt="one", required=False)
    add_question(survey, p2, s2, prompt="two", required=False)
    survey.get_section(s1).order = 5

    state = start_response(survey)
    assert [p.page_id for p in state.pages] == [p2, p1]

"""
Response Collector: drives a respondent through a survey page by page.

State machine:

    Answering(0) --advance ok--> Answering(1) ... --advance ok--> Reviewing
    Answering(i) --advance, page incomplete--> ResponseErrors (state unchanged)
    Answering(i) --back--> Answering(i-1)
    Reviewing    --back--> Answering(last)
    Reviewing    --submit ok--> Submitted (carries the SurveyResponse)
    Reviewing    --submit, any required answer missing--> ResponseErrors

States are immutable: every transition returns a new CollectorState, and
the caller keeps the previous one when a transition is refused.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple, Union

from survey_engine.model import Answer, Question, Survey, SurveyResponse
from survey_engine.structure import get_questions_for_page, new_id, ordered_pages

logger = logging.getLogger(__name__)

MSG_REQUIRED = "This question is required"


class Phase(Enum):
    ANSWERING = "answering"
    REVIEWING = "reviewing"
    SUBMITTED = "submitted"


class CollectorError(Exception):
    """Raised on a transition the current phase does not allow."""
    pass


@dataclass(frozen=True)
class CollectorPage:
    """
    A page as the respondent sees it.

    `page_id` is None for the implicit page synthesised for surveys that
    were authored without pages.
    """

    page_id: Optional[str]
    title: Optional[str]
    question_ids: Tuple[str, ...]


@dataclass(frozen=True)
class ResponseErrors:
    """Per-question messages returned when a transition is refused."""

    errors: Dict[str, str] = field(default_factory=dict)
    page_index: Optional[int] = None

    def __contains__(self, question_id: str) -> bool:
        return question_id in self.errors


@dataclass(frozen=True)
class CollectorState:
    survey: Survey
    pages: Tuple[CollectorPage, ...]
    answers: Mapping[str, Answer]
    started_at: datetime
    phase: Phase = Phase.ANSWERING
    page_index: int = 0
    response: Optional[SurveyResponse] = None

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def current_page(self) -> Optional[CollectorPage]:
        if self.phase != Phase.ANSWERING:
            return None
        return self.pages[self.page_index]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _collect_pages(survey: Survey) -> Tuple[CollectorPage, ...]:
    pages = ordered_pages(survey)
    if not pages:
        # surveys authored before sections/pages existed: one page, all questions
        return (CollectorPage(None, None, tuple(q.id for q in survey.questions)),)
    return tuple(
        CollectorPage(p.id, p.title, tuple(q.id for q in get_questions_for_page(survey, p.id)))
        for p in pages
    )


def start_response(survey: Survey, now: Optional[datetime] = None) -> CollectorState:
    """Begin answering a survey at its first page with every answer empty."""
    answers = {q.id: Answer.empty(q) for q in survey.questions}
    state = CollectorState(
        survey=survey,
        pages=_collect_pages(survey),
        answers=answers,
        started_at=now or _utc_now(),
    )
    logger.debug("Started response for survey %s (%d pages)", survey.id, state.page_count)
    return state


def answer(state: CollectorState, question_id: str, value) -> CollectorState:
    """
    Record a value for a question.

    Raises:
        KeyError: unknown question id
        AnswerTypeError: value does not fit the question type
        CollectorError: the response was already submitted
    """
    if state.phase == Phase.SUBMITTED:
        raise CollectorError("Cannot change answers after submission")
    question = state.survey.get_question(question_id)
    if question is None:
        raise KeyError(question_id)
    answers = dict(state.answers)
    answers[question_id] = Answer.for_question(question, value)
    return replace(state, answers=answers)


def advance(state: CollectorState) -> Union[CollectorState, ResponseErrors]:
    """Validate the current page and move forward, or report what is missing."""
    if state.phase != Phase.ANSWERING:
        raise CollectorError(f"Cannot advance while {state.phase.value}")
    errors = _missing_answers(state, state.pages[state.page_index].question_ids)
    if errors:
        return ResponseErrors(errors=errors, page_index=state.page_index)
    if state.page_index + 1 < state.page_count:
        return replace(state, page_index=state.page_index + 1)
    return replace(state, phase=Phase.REVIEWING)


def back(state: CollectorState) -> CollectorState:
    """Step back one page. No validation on the way back."""
    if state.phase == Phase.SUBMITTED:
        raise CollectorError("Cannot go back after submission")
    if state.phase == Phase.REVIEWING:
        return replace(state, phase=Phase.ANSWERING, page_index=state.page_count - 1)
    if state.page_index == 0:
        return state
    return replace(state, page_index=state.page_index - 1)


def submit(
    state: CollectorState,
    now: Optional[datetime] = None,
    client_info: Optional[str] = None,
) -> Union[CollectorState, ResponseErrors]:
    """
    Re-validate every page and build the SurveyResponse.

    Per-page checks on the way here do not guarantee every page was
    visited, so the answers are checked again. Only questions listed on
    a collector page are checked: a question no page lists is never
    shown, so it cannot block submission.

    Returns:
        A Submitted state whose `response` holds the new SurveyResponse,
        or ResponseErrors covering every incomplete question
    """
    if state.phase != Phase.REVIEWING:
        raise CollectorError(f"Cannot submit while {state.phase.value}")
    all_ids = [qid for page in state.pages for qid in page.question_ids]
    errors = _missing_answers(state, all_ids)
    if errors:
        logger.info("Submission of survey %s refused: %d missing answer(s)", state.survey.id, len(errors))
        return ResponseErrors(errors=errors)

    now = now or _utc_now()
    response = SurveyResponse(
        id=new_id(),
        survey_id=state.survey.id,
        answers=tuple(state.answers[q.id] for q in state.survey.questions if q.id in state.answers),
        submitted_at=now.isoformat(),
        completion_time=max(0, int((now - state.started_at).total_seconds())),
        client_info=client_info,
    )
    logger.info("Response %s submitted for survey %s in %ss", response.id, response.survey_id, response.completion_time)
    return replace(state, phase=Phase.SUBMITTED, response=response)


def progress(state: CollectorState) -> int:
    """Percentage shown in the progress bar: round(100 * (page + 1) / pages)."""
    if state.phase != Phase.ANSWERING:
        return 100
    # half-up, so 12.5 shows as 13
    return math.floor(100 * (state.page_index + 1) / state.page_count + 0.5)


def current_questions(state: CollectorState) -> List[Question]:
    page = state.current_page
    if page is None:
        return []
    return [q for q in (state.survey.get_question(qid) for qid in page.question_ids) if q is not None]


def _missing_answers(state: CollectorState, question_ids) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for qid in question_ids:
        question = state.survey.get_question(qid)
        if question is None or not question.required:
            continue
        current = state.answers.get(qid)
        if current is None or current.is_empty:
            errors[qid] = MSG_REQUIRED
    return errors

"""
Statistics Aggregator: reduces every response of a survey into a report.

Pure functions: nothing here modifies the survey or the responses, and
nothing is cached. The report is recomputed on every request.

Completion rate is always 100: only submitted responses are stored, so
abandoned attempts cannot be observed.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from survey_engine.model import (
    Question,
    QuestionStatistics,
    QuestionType,
    Survey,
    SurveyResponse,
    SurveyStatistics,
)

COMPLETION_RATE = 100.0


def _mean(values: List[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def compute_statistics(survey: Survey, responses: Iterable[SurveyResponse]) -> SurveyStatistics:
    """
    Compute survey-level and per-question aggregates.

    Responses belonging to other surveys are ignored. A response that has
    no answer for a question is skipped for that question. So is an answer
    whose type no longer matches the question, e.g. after a published
    question was edited from text to multiChoice.
    """
    matching = [r for r in responses if r.survey_id == survey.id]

    report = SurveyStatistics(
        total_responses=len(matching),
        average_completion_time=_mean(
            [r.completion_time for r in matching if r.completion_time is not None and r.completion_time > 0]
        ),
        completion_rate=COMPLETION_RATE,
    )

    for question in survey.questions:
        report.question_stats[question.id] = _question_statistics(question, matching)

    return report


def _question_statistics(question: Question, responses: List[SurveyResponse]) -> QuestionStatistics:
    # answers stored before the question changed type no longer fit it
    answers = [
        a for a in (r.get_answer(question.id) for r in responses)
        if a is not None and a.type == question.type
    ]
    stats = QuestionStatistics(response_count=len(answers))

    if question.type == QuestionType.TEXT:
        stats.text_responses = [a.value for a in answers if isinstance(a.value, str) and a.value.strip()]

    elif question.is_choice:
        counts: Dict[str, int] = defaultdict(int)
        for a in answers:
            if question.type == QuestionType.MULTI_CHOICE:
                for selected in a.value:
                    counts[selected] += 1
            elif a.value:
                counts[a.value] += 1
        stats.option_counts = dict(counts)

    elif question.type == QuestionType.RATING:
        stats.average_rating = _mean([a.value for a in answers if isinstance(a.value, int) and a.value > 0])

    return stats


def option_distribution(question: Question, stats: QuestionStatistics) -> List[Tuple[str, int, int]]:
    """
    (option, count, percentage) for each declared option, in option order.

    Percentages are shares of all selections, rounded half up; 0 when
    nothing was selected.
    """
    counts = stats.option_counts or {}
    total = sum(counts.values())
    rows = []
    for option in question.options:
        count = counts.get(option, 0)
        percentage = int(100 * count / total + 0.5) if total else 0
        rows.append((option, count, percentage))
    return rows


def format_duration(seconds: float) -> str:
    """Human-readable completion time, e.g. "45 seconds" or "2 mins 1 sec"."""
    seconds = int(round(seconds))
    if seconds < 60:
        return f"{seconds} seconds"
    minutes, remaining = divmod(seconds, 60)
    return (
        f"{minutes} min{'s' if minutes != 1 else ''} "
        f"{remaining} sec{'s' if remaining != 1 else ''}"
    )

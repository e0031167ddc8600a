"""
Survey Validator — structural checks for authored surveys.

Walks the Section -> Page -> Question hierarchy and produces a
ValidationReport nested by section, page and question id, so the authoring
UI can point at the exact node that is broken.

IMPORTANT: This module does NOT modify the survey (publish() aside, which
only flips the status once the report is clean). Validation problems are
routine outcomes and are returned as report objects, never raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from survey_engine.model import Survey, SurveyStatus
from survey_engine.structure import get_pages_for_section, get_sections

logger = logging.getLogger(__name__)

MSG_TITLE_REQUIRED = "Title is required"
MSG_DESCRIPTION_REQUIRED = "Description is required"
MSG_NO_QUESTIONS = "Add at least one question"
MSG_NO_SECTIONS = "Create at least one section"
MSG_SECTION_NO_PAGES = "Section must contain at least one page"
MSG_PAGE_NO_QUESTIONS = "Page must contain at least one question"
MSG_EMPTY_PROMPT = "Question text is required"
MSG_TOO_FEW_OPTIONS = "Choice questions need at least two options"


class AuthoringStep(Enum):
    """Steps of the authoring wizard, each gated by a subset of the checks."""

    DETAILS = "details"
    STRUCTURE = "structure"
    REVIEW = "review"


class SurveyNotValidError(Exception):
    """Raised by publish() when the survey still has validation errors."""

    def __init__(self, report: "ValidationReport"):
        super().__init__(f"Survey has {report.error_count} validation error(s)")
        self.report = report


@dataclass
class PageReport:
    errors: List[str] = field(default_factory=list)
    questions: Dict[str, List[str]] = field(default_factory=dict)

    def add_question_error(self, question_id: str, msg: str) -> None:
        self.questions.setdefault(question_id, []).append(msg)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors or self.questions)


@dataclass
class SectionReport:
    errors: List[str] = field(default_factory=list)
    pages: Dict[str, PageReport] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors) or any(p.has_errors for p in self.pages.values())


@dataclass
class ValidationReport:
    """
    Result of a validation pass.

    Properties:
        field_errors:
            Survey-level field problems keyed by field name ("title", "description")

        errors:
            Top-level problems (no questions, no sections)

        sections:
            section id -> SectionReport, which nests page id -> PageReport,
            which nests question id -> messages. Only nodes with problems
            appear.
    """

    field_errors: Dict[str, str] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    sections: Dict[str, SectionReport] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.field_errors and not self.errors and not any(
            s.has_errors for s in self.sections.values()
        )

    @property
    def error_count(self) -> int:
        count = len(self.field_errors) + len(self.errors)
        for section in self.sections.values():
            count += len(section.errors)
            for page in section.pages.values():
                count += len(page.errors)
                count += sum(len(msgs) for msgs in page.questions.values())
        return count

    def section(self, section_id: str) -> SectionReport:
        return self.sections.setdefault(section_id, SectionReport())

    def page(self, section_id: str, page_id: str) -> PageReport:
        return self.section(section_id).pages.setdefault(page_id, PageReport())

    def question_errors(self, question_id: str) -> List[str]:
        """All messages recorded against a question, wherever it sits."""
        found: List[str] = []
        for section in self.sections.values():
            for page in section.pages.values():
                found.extend(page.questions.get(question_id, []))
        return found

    def as_dict(self) -> dict:
        return {
            "fieldErrors": dict(self.field_errors),
            "errors": list(self.errors),
            "sections": {
                sid: {
                    "errors": list(s.errors),
                    "pages": {
                        pid: {"errors": list(p.errors), "questions": {q: list(m) for q, m in p.questions.items()}}
                        for pid, p in s.pages.items()
                    },
                }
                for sid, s in self.sections.items()
            },
        }


def validate(survey: Survey) -> ValidationReport:
    """
    Run the full validation pass.

    Checks:
    - Title and description are present
    - The survey has questions and sections
    - Every section has a page, every page a resolvable question
    - Every question has text, and choice questions two real options
    """
    report = ValidationReport()
    _check_details(survey, report)
    _check_structure(survey, report)
    return report


def validate_step(survey: Survey, step: AuthoringStep) -> ValidationReport:
    """Run only the checks that gate leaving an authoring step."""
    report = ValidationReport()
    if step in (AuthoringStep.DETAILS, AuthoringStep.REVIEW):
        _check_details(survey, report)
    if step in (AuthoringStep.STRUCTURE, AuthoringStep.REVIEW):
        _check_structure(survey, report)
    return report


def publish(survey: Survey) -> Survey:
    """
    Mark a survey as published.

    Raises:
        SurveyNotValidError: if validate() reports any problem
    """
    report = validate(survey)
    if not report.is_valid:
        raise SurveyNotValidError(report)
    survey.status = SurveyStatus.PUBLISHED
    logger.info("Published survey %s (%d questions)", survey.id, len(survey.questions))
    return survey


def _check_details(survey: Survey, report: ValidationReport) -> None:
    if not (survey.title or "").strip():
        report.field_errors["title"] = MSG_TITLE_REQUIRED
    if not (survey.description or "").strip():
        report.field_errors["description"] = MSG_DESCRIPTION_REQUIRED


def _check_structure(survey: Survey, report: ValidationReport) -> None:
    if not survey.questions:
        report.errors.append(MSG_NO_QUESTIONS)
    if not survey.sections:
        report.errors.append(MSG_NO_SECTIONS)

    by_id = {q.id: q for q in survey.questions}

    for section in get_sections(survey):
        pages = get_pages_for_section(survey, section.id)
        if not pages:
            report.section(section.id).errors.append(MSG_SECTION_NO_PAGES)
            continue

        for page in pages:
            # stale ids are filtered out, not reported individually
            questions = [by_id[qid] for qid in page.question_ids if qid in by_id]
            if not questions:
                report.page(section.id, page.id).errors.append(MSG_PAGE_NO_QUESTIONS)
                continue

            for question in questions:
                if not question.prompt.strip():
                    report.page(section.id, page.id).add_question_error(question.id, MSG_EMPTY_PROMPT)
                if question.is_choice:
                    real_options = [o for o in question.options if o.strip()]
                    if len(real_options) < 2:
                        report.page(section.id, page.id).add_question_error(question.id, MSG_TOO_FEW_OPTIONS)

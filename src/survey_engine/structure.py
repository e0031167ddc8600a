"""
Structural Consistency Engine

Keeps the Section -> Page -> Question graph of a Survey consistent under
incremental authoring edits.

The Survey stores flat lists. This module derives the hierarchical views
(pages of a section, questions of a page) and performs the cascades so the
caller never has to:

    - removing a Section removes its Pages and every Question it owns
    - removing a Page removes the Questions it lists
    - removing a Question strips its id from every Page

Unknown ids are treated as no-ops rather than errors. Authoring is a single
sequential session, so none of this needs locking.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import fields
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from survey_engine.model import (
    Page,
    Question,
    QuestionType,
    Section,
    Survey,
    SurveyStatus,
)

logger = logging.getLogger(__name__)

# Fields the update_* helpers must never touch.
_PROTECTED_FIELDS = frozenset({"id", "section_id"})


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_draft(title: str = "", description: str = "") -> Survey:
    """Start a new, empty draft survey."""
    return Survey(
        id=new_id(),
        title=title,
        description=description,
        created_at=utc_now_iso(),
        status=SurveyStatus.DRAFT,
    )


# =========================================================================
# SECTIONS
# =========================================================================

def add_section(survey: Survey, title: str = "", description: Optional[str] = None) -> Tuple[str, str]:
    """
    Append a Section together with its first Page.

    A section without pages is invalid, so both are created in one step.

    Returns:
        (section_id, page_id)
    """
    section = Section(id=new_id(), title=title, description=description, order=len(survey.sections))
    page = Page(id=new_id(), section_id=section.id, order=0)
    survey.sections.append(section)
    survey.pages.append(page)
    logger.debug("Added section %s with default page %s to survey %s", section.id, page.id, survey.id)
    return section.id, page.id


def remove_section(survey: Survey, section_id: str) -> None:
    """
    Remove a Section, its Pages and every Question it owns.

    Questions are matched by their own section_id, not by page membership,
    so orphans that no page lists are removed too.
    """
    if survey.get_section(section_id) is None:
        logger.debug("remove_section: unknown section %s, ignoring", section_id)
        return
    survey.sections = [s for s in survey.sections if s.id != section_id]
    survey.pages = [p for p in survey.pages if p.section_id != section_id]
    survey.questions = [q for q in survey.questions if q.section_id != section_id]
    logger.debug("Removed section %s from survey %s", section_id, survey.id)


def update_section(survey: Survey, section_id: str, **changes) -> None:
    _merge(survey.get_section(section_id), changes)


def get_sections(survey: Survey) -> List[Section]:
    """Sections in display order."""
    return sorted(survey.sections, key=lambda s: s.order)


# =========================================================================
# PAGES
# =========================================================================

def add_page(survey: Survey, section_id: str, title: Optional[str] = None) -> Optional[str]:
    """
    Append a Page to a Section. Its order is the number of pages the
    section already has.

    Returns:
        The new page id, or None when the section does not exist
    """
    if survey.get_section(section_id) is None:
        logger.debug("add_page: unknown section %s, ignoring", section_id)
        return None
    order = sum(1 for p in survey.pages if p.section_id == section_id)
    page = Page(id=new_id(), section_id=section_id, title=title, order=order)
    survey.pages.append(page)
    logger.debug("Added page %s to section %s", page.id, section_id)
    return page.id


def remove_page(survey: Survey, page_id: str) -> None:
    """Remove a Page and the Questions it lists. Other pages are untouched."""
    page = survey.get_page(page_id)
    if page is None:
        logger.debug("remove_page: unknown page %s, ignoring", page_id)
        return
    doomed = set(page.question_ids)
    survey.pages = [p for p in survey.pages if p.id != page_id]
    survey.questions = [q for q in survey.questions if q.id not in doomed]
    logger.debug("Removed page %s and %d question(s)", page_id, len(doomed))


def update_page(survey: Survey, page_id: str, **changes) -> None:
    _merge(survey.get_page(page_id), changes)


def get_pages_for_section(survey: Survey, section_id: str) -> List[Page]:
    """Pages owned by a section, ascending by order."""
    return sorted((p for p in survey.pages if p.section_id == section_id), key=lambda p: p.order)


def ordered_pages(survey: Survey) -> List[Page]:
    """
    Every page in the order a respondent sees them: sections by order,
    then pages by order within each section.
    """
    result: List[Page] = []
    for section in get_sections(survey):
        result.extend(get_pages_for_section(survey, section.id))
    return result


# =========================================================================
# QUESTIONS
# =========================================================================

def add_question(
    survey: Survey,
    page_id: str,
    section_id: str,
    type: QuestionType = QuestionType.TEXT,
    prompt: str = "",
    required: bool = True,
) -> Optional[str]:
    """
    Create a Question owned by `section_id` and list it on `page_id`.

    The page/section pairing is trusted: the caller is responsible for
    passing a page that belongs to the section. Choice questions start with
    two empty option slots for the author to fill in.

    Returns:
        The new question id, or None when the page does not exist
    """
    page = survey.get_page(page_id)
    if page is None:
        logger.debug("add_question: unknown page %s, ignoring", page_id)
        return None
    question = Question(
        id=new_id(),
        type=type,
        prompt=prompt,
        options=["", ""] if type in (QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE) else [],
        required=required,
        section_id=section_id,
    )
    survey.questions.append(question)
    page.question_ids.append(question.id)
    logger.debug("Added %s question %s to page %s", type.value, question.id, page_id)
    return question.id


def remove_question(survey: Survey, question_id: str) -> None:
    """Delete a Question and strip its id from every Page that lists it."""
    survey.questions = [q for q in survey.questions if q.id != question_id]
    for page in survey.pages:
        if question_id in page.question_ids:
            page.question_ids = [qid for qid in page.question_ids if qid != question_id]


def update_question(survey: Survey, question_id: str, **changes) -> None:
    """Merge changes into a Question. A `type` given as its string value is coerced to QuestionType."""
    if "type" in changes:
        changes["type"] = QuestionType(changes["type"])
    _merge(survey.get_question(question_id), changes)


def get_questions_for_page(survey: Survey, page_id: str) -> List[Question]:
    """
    Resolve a page's question ids in list order.

    Ids that no longer resolve are skipped.
    """
    page = survey.get_page(page_id)
    if page is None:
        return []
    by_id = {q.id: q for q in survey.questions}
    resolved = []
    for qid in page.question_ids:
        question = by_id.get(qid)
        if question is None:
            logger.warning("Page %s lists unknown question %s", page_id, qid)
            continue
        resolved.append(question)
    return resolved


def _merge(record, changes: dict) -> None:
    if record is None:
        logger.debug("update: unknown record, ignoring %s", sorted(changes))
        return
    known = {f.name for f in fields(record)}
    unknown = set(changes) - known
    if unknown:
        raise TypeError(f"{type(record).__name__} has no field(s): {', '.join(sorted(unknown))}")
    for name, value in changes.items():
        if name in _PROTECTED_FIELDS:
            continue
        setattr(record, name, value)

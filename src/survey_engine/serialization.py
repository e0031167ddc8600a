"""
Serialization helpers for survey engine objects (Survey, SurveyResponse, ...).

Provides lossless JSON/YAML round-trip via an intermediate dict
representation. Keys use the camelCase names of the stored browser format,
so blobs written by the storage gateway stay readable by other clients.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from survey_engine.model import (
    Answer,
    Page,
    Question,
    QuestionType,
    Section,
    Survey,
    SurveyResponse,
    SurveyStatus,
)


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "id": q.id,
        "type": q.type.value,
        "prompt": q.prompt,
        "options": list(q.options),
        "required": q.required,
        "sectionId": q.section_id,
    }


def question_from_dict(d: Dict[str, Any]) -> Question:
    return Question(
        id=d["id"],
        type=QuestionType(d.get("type", QuestionType.TEXT.value)),
        prompt=d.get("prompt", ""),
        options=list(d.get("options") or []),
        required=d.get("required", True),
        section_id=d.get("sectionId", ""),
    )


def section_to_dict(s: Section) -> Dict[str, Any]:
    return {"id": s.id, "title": s.title, "description": s.description, "order": s.order}


def section_from_dict(d: Dict[str, Any]) -> Section:
    return Section(id=d["id"], title=d.get("title", ""), description=d.get("description"), order=d.get("order", 0))


def page_to_dict(p: Page) -> Dict[str, Any]:
    return {
        "id": p.id,
        "title": p.title,
        "order": p.order,
        "sectionId": p.section_id,
        "questionIds": list(p.question_ids),
    }


def page_from_dict(d: Dict[str, Any]) -> Page:
    return Page(
        id=d["id"],
        section_id=d.get("sectionId", ""),
        title=d.get("title"),
        order=d.get("order", 0),
        question_ids=list(d.get("questionIds", [])),
    )


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    return {
        "id": s.id,
        "title": s.title,
        "description": s.description,
        "questions": [question_to_dict(q) for q in s.questions],
        "sections": [section_to_dict(sec) for sec in s.sections],
        "pages": [page_to_dict(p) for p in s.pages],
        "createdAt": s.created_at,
        "status": s.status.value,
        "shareableLink": s.shareable_link,
        "completionCount": s.completion_count,
    }


def survey_from_dict(d: Dict[str, Any]) -> Survey:
    s = Survey(id=d["id"])
    s.title = d.get("title", "")
    s.description = d.get("description", "")
    s.questions = [question_from_dict(q) for q in d.get("questions", [])]
    s.sections = [section_from_dict(sec) for sec in d.get("sections", [])]
    s.pages = [page_from_dict(p) for p in d.get("pages", [])]
    s.created_at = d.get("createdAt", "")
    s.status = SurveyStatus(d.get("status", SurveyStatus.DRAFT.value))
    s.shareable_link = d.get("shareableLink")
    s.completion_count = d.get("completionCount", 0)
    return s


def answer_to_dict(a: Answer) -> Dict[str, Any]:
    value = list(a.value) if a.type == QuestionType.MULTI_CHOICE else a.value
    return {"questionId": a.question_id, "type": a.type.value, "value": value, "sectionId": a.section_id}


def answer_from_dict(d: Dict[str, Any]) -> Answer:
    qtype = QuestionType(d["type"])
    value = d.get("value")
    if qtype == QuestionType.MULTI_CHOICE:
        value = tuple(value or ())
    return Answer(question_id=d["questionId"], type=qtype, value=value, section_id=d.get("sectionId"))


def response_to_dict(r: SurveyResponse) -> Dict[str, Any]:
    return {
        "id": r.id,
        "surveyId": r.survey_id,
        "answers": [answer_to_dict(a) for a in r.answers],
        "submittedAt": r.submitted_at,
        "completionTime": r.completion_time,
        "clientInfo": r.client_info,
    }


def response_from_dict(d: Dict[str, Any]) -> SurveyResponse:
    return SurveyResponse(
        id=d["id"],
        survey_id=d["surveyId"],
        answers=tuple(answer_from_dict(a) for a in d.get("answers", [])),
        submitted_at=d.get("submittedAt", ""),
        completion_time=d.get("completionTime"),
        client_info=d.get("clientInfo"),
    )


def survey_to_json(s: Survey) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True)


def survey_from_json(s: str) -> Survey:
    d = json.loads(s)
    return survey_from_dict(d)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s))


def survey_from_yaml(s: str) -> Survey:
    d = yaml.safe_load(s)
    return survey_from_dict(d)


def response_to_json(r: SurveyResponse) -> str:
    return json.dumps(response_to_dict(r), sort_keys=True)


def response_from_json(s: str) -> SurveyResponse:
    return response_from_dict(json.loads(s))

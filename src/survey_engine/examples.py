"""
Sample surveys used to seed an empty store and to exercise the engine.

`build_sample_surveys` reproduces the two published assessments shipped as
starter content. `build_example_assessment` builds a larger survey through
the structural engine: two sections, three pages and every question type.
"""
from typing import List

from survey_engine.model import Page, Question, QuestionType, Section, Survey, SurveyStatus
from survey_engine.structure import (
    add_page,
    add_question,
    add_section,
    create_draft,
    update_question,
    utc_now_iso,
)


def build_sample_surveys() -> List[Survey]:
    created = utc_now_iso()

    automation = Survey(
        id="mock-survey-1",
        title="QA Automation Assessment",
        description="Evaluate technical skills and automation knowledge",
        created_at=created,
        status=SurveyStatus.PUBLISHED,
        questions=[
            Question(
                id="q1",
                type=QuestionType.TEXT,
                prompt="Describe your experience with Selenium or similar tools",
                section_id="s1",
            ),
            Question(
                id="q2",
                type=QuestionType.MULTI_CHOICE,
                prompt="Which of these testing frameworks have you used?",
                options=["Jest", "Mocha", "Cypress", "TestNG"],
                section_id="s1",
            ),
        ],
        sections=[
            Section(
                id="s1",
                title="Automation Experience",
                description="Questions about your testing automation background",
                order=0,
            )
        ],
        pages=[Page(id="p1", section_id="s1", title="Automation Skills", order=0, question_ids=["q1", "q2"])],
    )

    manual = Survey(
        id="mock-survey-2",
        title="Manual Testing Knowledge",
        description="Assessment of manual testing techniques and methodologies",
        created_at=created,
        status=SurveyStatus.PUBLISHED,
        questions=[
            Question(
                id="q1",
                type=QuestionType.TEXT,
                prompt="Explain the difference between black box and white box testing",
                section_id="s1",
            ),
            Question(
                id="q2",
                type=QuestionType.MULTI_CHOICE,
                prompt="Which test case design techniques have you used?",
                options=[
                    "Boundary Value Analysis",
                    "Equivalence Partitioning",
                    "Decision Tables",
                    "State Transition Testing",
                ],
                section_id="s1",
            ),
        ],
        sections=[
            Section(id="s1", title="Testing Fundamentals", description="Core concepts of software testing", order=0)
        ],
        pages=[Page(id="p1", section_id="s1", title="Testing Concepts", order=0, question_ids=["q1", "q2"])],
    )

    return [automation, manual]


def build_example_assessment() -> Survey:
    survey = create_draft(
        title="Frontend Development Skills",
        description="Assessment for frontend development knowledge",
    )

    tooling, tooling_page = add_section(survey, title="Tooling")
    qid = add_question(survey, tooling_page, tooling, QuestionType.SINGLE_CHOICE,
                       prompt="What is your preferred testing framework?")
    update_question(survey, qid, options=["Jest", "Cypress", "Playwright", "TestCafe"])
    qid = add_question(survey, tooling_page, tooling, QuestionType.MULTI_CHOICE,
                       prompt="Which browsers do you test against?")
    update_question(survey, qid, options=["Chrome", "Firefox", "Safari", "Edge"])

    approach_page = add_page(survey, tooling, title="Approach")
    add_question(survey, approach_page, tooling, QuestionType.TEXT,
                 prompt="Describe your approach to test automation")

    experience, experience_page = add_section(survey, title="Experience")
    add_question(survey, experience_page, experience, QuestionType.RATING,
                 prompt="Rate your experience with API testing")
    add_question(survey, experience_page, experience, QuestionType.TEXT,
                 prompt="Anything else we should know?", required=False)

    return survey

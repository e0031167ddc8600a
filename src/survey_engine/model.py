"""
Core Survey Model Objects

Defines the fundamental data structures of the survey engine.

These are plain data classes representing:
    - Questions (typed prompts)
    - Sections (named groups of questions)
    - Pages (the unit of pagination shown to a respondent)
    - Surveys (root container)
    - Answers, Responses and Statistics

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about rendering or storage
        - Carry structure, not behavior
        - Are fully serializable (see survey_engine.serialization)

The only rule enforced here is the shape of an Answer value, because an
Answer that disagrees with its Question's type must never exist.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class QuestionType(Enum):
    """Answer shapes a question can ask for."""

    TEXT = "text"
    SINGLE_CHOICE = "singleChoice"
    MULTI_CHOICE = "multiChoice"
    RATING = "rating"


CHOICE_TYPES = (QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE)

RATING_MIN = 1
RATING_MAX = 5


class SurveyStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class AnswerTypeError(ValueError):
    """Raised when an Answer value does not match its question type."""
    pass


@dataclass
class Question:
    """
    A single prompt with a typed answer shape.

    Properties:
        id:
            Unique identifier within the survey

        type:
            QuestionType of the expected answer

        prompt:
            Human-readable question text

        options:
            Ordered choices. Required (at least two) for single/multi
            choice questions, ignored for the other types.

        required:
            Whether a respondent must answer before leaving the page

        section_id:
            Owning Section. A question belongs to exactly one section and,
            through it, is listed on exactly one page.
    """

    id: str
    type: QuestionType = QuestionType.TEXT
    prompt: str = ""
    options: List[str] = field(default_factory=list)
    required: bool = True
    section_id: str = ""

    @property
    def is_choice(self) -> bool:
        return self.type in CHOICE_TYPES


@dataclass
class Section:
    """
    A named grouping of related questions.

    `order` is the display position among sibling sections. Every section
    owns at least one Page.
    """

    id: str
    title: str = ""
    description: Optional[str] = None
    order: int = 0


@dataclass
class Page:
    """
    The unit of pagination shown to a respondent in one screen.

    INVARIANTS:
        - section_id names the owning Section
        - every id in question_ids resolves to a Question of that Section
        - a valid page lists at least one question
    """

    id: str
    section_id: str
    title: Optional[str] = None
    order: int = 0
    question_ids: List[str] = field(default_factory=list)


@dataclass
class Survey:
    """
    Root container for an authored survey.

    The survey exclusively owns its questions, sections and pages. They are
    kept as flat lists; the hierarchy is derived through `section_id` and
    `Page.question_ids` by survey_engine.structure.

    Properties:
        id, title, description:
            Identity and descriptive text

        questions, sections, pages:
            Flat collections, ids unique within each

        created_at:
            ISO-8601 timestamp string

        status:
            SurveyStatus (draft or published)

        shareable_link:
            Opaque link generated on demand by the storage gateway

        completion_count:
            Number of stored responses, incremented once per response
    """

    id: str
    title: str = ""
    description: str = ""
    questions: List[Question] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    pages: List[Page] = field(default_factory=list)
    created_at: str = ""
    status: SurveyStatus = SurveyStatus.DRAFT
    shareable_link: Optional[str] = None
    completion_count: int = 0

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def get_section(self, section_id: str) -> Optional[Section]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def get_page(self, page_id: str) -> Optional[Page]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None


AnswerValue = Union[str, Tuple[str, ...], int]


@dataclass(frozen=True)
class Answer:
    """
    One respondent's value for one question.

    This is a tagged variant: `type` is copied from the owning Question and
    the value must have the matching shape:

        text, singleChoice  -> str             ("" means unanswered)
        multiChoice         -> tuple of str    (() means unanswered)
        rating              -> int in 0..5     (0 means unanswered)

    The shape is checked on construction, so an inconsistent Answer cannot
    be built. Use `Answer.empty` and `Answer.for_question` rather than the
    raw constructor when a Question is at hand.
    """

    question_id: str
    type: QuestionType
    value: AnswerValue
    section_id: Optional[str] = None

    def __post_init__(self) -> None:
        _check_answer_value(self.type, self.value)

    @classmethod
    def empty(cls, question: Question) -> "Answer":
        """Build the unanswered sentinel for a question."""
        if question.type == QuestionType.MULTI_CHOICE:
            value: AnswerValue = ()
        elif question.type == QuestionType.RATING:
            value = 0
        else:
            value = ""
        return cls(question.id, question.type, value, question.section_id or None)

    @classmethod
    def for_question(cls, question: Question, value) -> "Answer":
        """
        Build an Answer for a question from a loosely typed value.

        Lists, tuples and sets of selections are normalized to a tuple with
        duplicates dropped, keeping first-seen order.
        """
        if question.type == QuestionType.MULTI_CHOICE and isinstance(value, (list, tuple, set, frozenset)):
            value = tuple(dict.fromkeys(value))
        return cls(question.id, question.type, value, question.section_id or None)

    @property
    def is_empty(self) -> bool:
        if self.type == QuestionType.MULTI_CHOICE:
            return len(self.value) == 0
        if self.type == QuestionType.RATING:
            return self.value == 0
        return self.value.strip() == ""


def _check_answer_value(qtype: QuestionType, value) -> None:
    if qtype in (QuestionType.TEXT, QuestionType.SINGLE_CHOICE):
        if not isinstance(value, str):
            raise AnswerTypeError(f"{qtype.value} answer must be a string, got {type(value).__name__}")
    elif qtype == QuestionType.MULTI_CHOICE:
        if not isinstance(value, tuple) or not all(isinstance(v, str) for v in value):
            raise AnswerTypeError("multiChoice answer must be a tuple of strings")
        if len(set(value)) != len(value):
            raise AnswerTypeError("multiChoice answer must not repeat a selection")
    elif qtype == QuestionType.RATING:
        # bool is an int subclass; True is not a rating
        if isinstance(value, bool) or not isinstance(value, int):
            raise AnswerTypeError(f"rating answer must be an integer, got {type(value).__name__}")
        if value != 0 and not RATING_MIN <= value <= RATING_MAX:
            raise AnswerTypeError(f"rating must be 0 or between {RATING_MIN} and {RATING_MAX}, got {value}")
    else:
        raise AnswerTypeError(f"Unsupported question type: {qtype!r}")


@dataclass(frozen=True)
class SurveyResponse:
    """
    One respondent's submitted answers. Created once on submission and
    never mutated afterwards.

    Properties:
        answers: one Answer per question of the survey
        submitted_at: ISO-8601 timestamp string
        completion_time: whole seconds between start and submit (optional)
        client_info: opaque description of the respondent's client (optional)
    """

    id: str
    survey_id: str
    answers: Tuple[Answer, ...] = ()
    submitted_at: str = ""
    completion_time: Optional[int] = None
    client_info: Optional[str] = None

    def get_answer(self, question_id: str) -> Optional[Answer]:
        for answer in self.answers:
            if answer.question_id == question_id:
                return answer
        return None


@dataclass
class QuestionStatistics:
    """Aggregates for a single question. Which optional field is set depends on the question type."""

    response_count: int = 0
    text_responses: Optional[List[str]] = None
    option_counts: Optional[Dict[str, int]] = None
    average_rating: Optional[float] = None


@dataclass
class SurveyStatistics:
    """
    Derived report over every response of a survey. Never persisted;
    recomputed on each request.
    """

    total_responses: int = 0
    average_completion_time: float = 0.0
    completion_rate: float = 100.0
    question_stats: Dict[str, QuestionStatistics] = field(default_factory=dict)

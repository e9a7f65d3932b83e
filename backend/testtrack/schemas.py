"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests. Python attributes are snake_case; the
JSON shape (HTTP bodies and export files) uses camelCase aliases, e.g.
`calcError` and `testName`.
"""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

QUESTIONS_PER_SUBJECT = 25
SUBJECTS = ("physics", "chemistry", "maths")
ERROR_CATEGORIES = (
    "calc_error",
    "misconception",
    "concept_not_aware",
    "reading_error",
    "extra_thinking",
    "lack_of_time",
)

ErrorView = Literal["total", "physics", "chemistry", "maths"]


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class SubjectInput(CamelModel):
    """Raw values entered for one subject of a sitting.

    Derived values (`incorrect`, `accuracy`) are not part of this shape;
    when a payload carries them they are dropped and recomputed.
    """
    marks: float = 0
    unattempted: int = Field(default=0, ge=0, le=QUESTIONS_PER_SUBJECT)
    calc_error: int = Field(default=0, ge=0)
    misconception: int = Field(default=0, ge=0)
    concept_not_aware: int = Field(default=0, ge=0)
    reading_error: int = Field(default=0, ge=0)
    extra_thinking: int = Field(default=0, ge=0)
    lack_of_time: int = Field(default=0, ge=0)


class SubjectPerformance(CamelModel):
    """A fully scored block: one subject, or the total of all three."""
    marks: float = 0
    unattempted: int = 0
    incorrect: float = 0
    accuracy: float = 0
    calc_error: int = 0
    misconception: int = 0
    concept_not_aware: int = 0
    reading_error: int = 0
    extra_thinking: int = 0
    lack_of_time: int = 0


class SubjectsIn(CamelModel):
    """Raw values for the three subjects of a sitting."""
    physics: SubjectInput = Field(default_factory=SubjectInput)
    chemistry: SubjectInput = Field(default_factory=SubjectInput)
    maths: SubjectInput = Field(default_factory=SubjectInput)


class EntryIn(SubjectsIn):
    """Payload for creating or replacing a test entry."""
    date: dt.date
    test_name: str = ""


class EntryImport(EntryIn):
    """One record of an import file; `id` is optional and `total` is ignored."""
    id: Optional[str] = Field(default=None, min_length=1)


class ScoredSubjects(CamelModel):
    """The four derived blocks for a set of subject inputs."""
    physics: SubjectPerformance
    chemistry: SubjectPerformance
    maths: SubjectPerformance
    total: SubjectPerformance


class TestEntry(ScoredSubjects):
    """A stored sitting with its identity and all derived blocks."""
    id: str
    date: dt.date
    test_name: str


class ImportResult(BaseModel):
    """Summary returned after a bulk import."""
    imported: int
    replaced: int


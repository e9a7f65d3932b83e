"""SQLModel data models.

This module defines the application's database tables using SQLModel.
A `Sitting` is one recorded test; each sitting owns four `SubjectResult`
rows, one per subject plus the derived `total` block.
"""

from typing import List, Optional
import datetime as dt
from sqlmodel import SQLModel, Field, Relationship


class Sitting(SQLModel, table=True):
    """One completed attempt at the combined three-subject test.

    `id` is a string identity assigned when the sitting is first
    recorded and kept across edits.
    """
    id: str = Field(primary_key=True)
    date: dt.date = Field(index=True)
    test_name: str
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    results: List['SubjectResult'] = Relationship(
        back_populates='sitting',
        sa_relationship_kwargs={'cascade': 'all, delete-orphan'},
    )


class SubjectResult(SQLModel, table=True):
    """Scored block for one subject (or `total`) of a `Sitting`.

    `incorrect` and `accuracy` are stored as derived by the scoring
    module and are never written from user input.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    sitting_id: str = Field(foreign_key='sitting.id', index=True)
    subject: str
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
    sitting: Optional[Sitting] = Relationship(back_populates='results')

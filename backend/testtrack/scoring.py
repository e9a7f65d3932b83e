"""Scoring rules for the combined Physics/Chemistry/Maths practice test.

Each subject is a pool of 25 questions marked +4 for a correct answer and
-1 for an incorrect one. A caller only enters the marks obtained and the
number of unattempted questions; the incorrect count and accuracy are
derived from those two values. The total block sums the three subjects
and recomputes accuracy over the pooled 75 questions instead of averaging
subject accuracies.

Nothing here validates plausibility. Marks that cannot be reached with the
given unattempted count simply produce an out-of-range incorrect count or
accuracy. The only guarded case is a block with no attempted questions,
whose accuracy is 0.

All functions are pure and safe to call from any thread.
"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, NamedTuple

from .schemas import (
    ERROR_CATEGORIES,
    QUESTIONS_PER_SUBJECT,
    SUBJECTS,
    EntryIn,
    ScoredSubjects,
    SubjectInput,
    SubjectPerformance,
    SubjectsIn,
    TestEntry,
)

MARKS_CORRECT = 4
MARKS_INCORRECT = -1
TOTAL_QUESTIONS = QUESTIONS_PER_SUBJECT * len(SUBJECTS)


class SubjectScore(NamedTuple):
    incorrect: float
    accuracy: float


def round_half_away(value: float, places: int = 2) -> float:
    """Round `value` to `places` decimals, ties away from zero.

    The float is read through its shortest repr, so `1.005` rounds to
    `1.01` even though its binary value is slightly below the tie.
    Precision grows with the magnitude so huge values never overflow
    the quantize.
    """
    quantum = Decimal(1).scaleb(-places)
    d = Decimal(str(value))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, d.adjusted() + places + 2)
        return float(d.quantize(quantum, rounding=ROUND_HALF_UP))


def calculate_incorrect(marks: float, unattempted: int, pool_size: int = QUESTIONS_PER_SUBJECT) -> float:
    """Return the number of incorrect answers implied by `marks`.

    Full marks are `4 * pool_size`. An unattempted question costs 4 marks
    against that ceiling and an incorrect one costs 5, so whatever is left
    of the shortfall after the unattempted questions divides by 5.
    """
    ceiling = MARKS_CORRECT * pool_size
    cost = MARKS_CORRECT - MARKS_INCORRECT
    return round_half_away((ceiling - (marks + MARKS_CORRECT * unattempted)) / cost)


def calculate_accuracy(unattempted: int, incorrect: float, pool_size: int = QUESTIONS_PER_SUBJECT) -> float:
    """Percentage of attempted questions answered correctly.

    Returns 0 when nothing was attempted.
    """
    attempted = pool_size - unattempted
    if attempted <= 0:
        return 0.0
    correct = attempted - incorrect
    return round_half_away(correct / attempted * 100)


def score_subject(marks: float, unattempted: int, pool_size: int = QUESTIONS_PER_SUBJECT) -> SubjectScore:
    """Derive the incorrect count and accuracy for one subject."""
    incorrect = calculate_incorrect(marks, unattempted, pool_size)
    return SubjectScore(incorrect, calculate_accuracy(unattempted, incorrect, pool_size))


def derive_subject(raw: SubjectInput) -> SubjectPerformance:
    """Build a scored block from one subject's raw values."""
    score = score_subject(raw.marks, raw.unattempted)
    counters = {name: getattr(raw, name) for name in ERROR_CATEGORIES}
    return SubjectPerformance(
        marks=raw.marks,
        unattempted=raw.unattempted,
        incorrect=score.incorrect,
        accuracy=score.accuracy,
        **counters,
    )


def aggregate_total(
    physics: SubjectPerformance,
    chemistry: SubjectPerformance,
    maths: SubjectPerformance,
    pool_size: int = TOTAL_QUESTIONS,
) -> SubjectPerformance:
    """Combine three scored subjects into the total block.

    `incorrect` is the sum of the subjects' incorrect counts. `accuracy`
    is recomputed over the pooled attempted questions, so a subject with
    fewer attempts weighs less than in a plain mean of percentages.
    """
    blocks = (physics, chemistry, maths)
    # fsum is exactly rounded, which keeps the total independent of argument order
    marks = math.fsum(b.marks for b in blocks)
    incorrect = math.fsum(b.incorrect for b in blocks)
    unattempted = sum(b.unattempted for b in blocks)
    counters = {name: sum(getattr(b, name) for b in blocks) for name in ERROR_CATEGORIES}
    return SubjectPerformance(
        marks=marks,
        unattempted=unattempted,
        incorrect=incorrect,
        accuracy=calculate_accuracy(unattempted, incorrect, pool_size),
        **counters,
    )


def score_subjects(subjects: SubjectsIn) -> ScoredSubjects:
    """Score each subject and aggregate the total."""
    scored: Dict[str, SubjectPerformance] = {
        name: derive_subject(getattr(subjects, name)) for name in SUBJECTS
    }
    total = aggregate_total(scored["physics"], scored["chemistry"], scored["maths"])
    return ScoredSubjects(total=total, **scored)


def default_test_name(test_name: str, date) -> str:
    """Return `test_name` stripped, or `Test on <date>` when it is blank."""
    name = (test_name or "").strip()
    return name or f"Test on {date.isoformat()}"


def build_entry(entry_id: str, payload: EntryIn) -> TestEntry:
    """Assemble a complete entry from raw input, recomputing every derived field.

    This is the single recomputation step run on create, replace and
    import; it keeps `total` equal to the aggregate of the subjects.
    """
    scored = score_subjects(payload)
    return TestEntry(
        id=entry_id,
        date=payload.date,
        test_name=default_test_name(payload.test_name, payload.date),
        physics=scored.physics,
        chemistry=scored.chemistry,
        maths=scored.maths,
        total=scored.total,
    )

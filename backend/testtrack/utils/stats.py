"""Dashboard aggregates computed from stored entries.

Everything here reads finished `TestEntry` values and never writes
derived fields back. Series are plain lists of dicts so a frontend can
chart them directly.
"""

from typing import Dict, List, Sequence

from ..schemas import ERROR_CATEGORIES, SUBJECTS, TestEntry
from ..scoring import TOTAL_QUESTIONS, round_half_away

ERROR_LABELS = {
    'calc_error': 'Calculation',
    'misconception': 'Misconception',
    'concept_not_aware': 'Concept Gap',
    'reading_error': 'Reading',
    'extra_thinking': 'Extra Thinking',
    'lack_of_time': 'Time Pressure',
}


def _mean(values: Sequence[float]) -> float:
    return round_half_away(sum(values) / len(values), 1) if values else 0.0


def error_breakdown(entries: Sequence[TestEntry], view: str = 'total') -> List[Dict]:
    """Sum each error category over one block (`total` or a subject)."""
    blocks = [getattr(e, view) for e in entries]
    return [
        {'category': name, 'label': ERROR_LABELS[name], 'value': sum(getattr(b, name) for b in blocks)}
        for name in ERROR_CATEGORIES
    ]


def error_contribution(entries: Sequence[TestEntry]) -> List[Dict]:
    """Per error category, how many errors each subject contributed."""
    out = []
    for name in ERROR_CATEGORIES:
        row = {'category': name, 'label': ERROR_LABELS[name]}
        for subject in SUBJECTS:
            row[subject] = sum(getattr(getattr(e, subject), name) for e in entries)
        out.append(row)
    return out


def summarize_entries(entries: Sequence[TestEntry], error_view: str = 'total') -> Dict:
    """Build the dashboard payload for `entries`.

    Trend data is ordered by ascending date; entries sharing a date keep
    their input order, and the last of them counts as the latest.
    """
    if not entries:
        return {
            'test_count': 0,
            'latest_marks': None,
            'best_marks': None,
            'average_marks': 0.0,
            'average_accuracy': 0.0,
            'trend': [],
            'efficiency': [],
            'subject_comparison': [],
            'error_view': error_view,
            'error_breakdown': error_breakdown([], error_view),
            'error_contribution': error_contribution([]),
        }
    ordered = sorted(entries, key=lambda e: e.date)
    latest = ordered[-1]
    trend = [
        {
            'date': e.date.isoformat(),
            'test_name': e.test_name,
            'total': e.total.marks,
            'physics': e.physics.marks,
            'chemistry': e.chemistry.marks,
            'maths': e.maths.marks,
            'accuracy': e.total.accuracy,
        }
        for e in ordered
    ]
    efficiency = [
        {
            'test_name': e.test_name,
            'attempts': TOTAL_QUESTIONS - e.total.unattempted,
            'accuracy': e.total.accuracy,
            'marks': e.total.marks,
        }
        for e in ordered
    ]
    subject_comparison = [
        {'subject': s, 'average_marks': _mean([getattr(e, s).marks for e in entries])}
        for s in SUBJECTS
    ]
    return {
        'test_count': len(entries),
        'latest_marks': latest.total.marks,
        'best_marks': max(e.total.marks for e in entries),
        'average_marks': _mean([e.total.marks for e in entries]),
        'average_accuracy': _mean([e.total.accuracy for e in entries]),
        'trend': trend,
        'efficiency': efficiency,
        'subject_comparison': subject_comparison,
        'error_view': error_view,
        'error_breakdown': error_breakdown(entries, error_view),
        'error_contribution': error_contribution(entries),
    }

"""Two sample sittings used to seed an empty database and in tests.

Only raw values are listed; incorrect counts, accuracies and totals are
derived when the entries are stored.
"""

SAMPLE_ENTRIES = [
    {
        'id': 'a73e4b4e-0876-49a8-8ef5-8f5eb35b86f0',
        'date': '2025-12-22',
        'testName': 'DFT 1',
        'physics': {'marks': 85, 'unattempted': 0, 'calcError': 3},
        'chemistry': {'marks': 85, 'unattempted': 0, 'calcError': 1, 'conceptNotAware': 2},
        'maths': {'marks': 96, 'unattempted': 1, 'extraThinking': 1},
    },
    {
        'id': '53959b24-88e3-4feb-a3e1-cf43d9212fd6',
        'date': '2025-12-24',
        'testName': 'DFT 2',
        'physics': {'marks': 90, 'unattempted': 0, 'calcError': 1, 'conceptNotAware': 1},
        'chemistry': {'marks': 80, 'unattempted': 0, 'calcError': 1, 'conceptNotAware': 3},
        'maths': {'marks': 91, 'unattempted': 1, 'calcError': 1},
    },
]

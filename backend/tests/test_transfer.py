import json

import pytest
from fastapi.testclient import TestClient

from testtrack.main import app
from testtrack.utils.sample_data import SAMPLE_ENTRIES
from testtrack.utils.transfer import export_filename, parse_entries_json

client = TestClient(app)


def _upload(data: bytes, name='history.json', content_type='application/json'):
    return client.post('/entries/import', files={'file': (name, data, content_type)})


def test_parse_rejects_non_array():
    with pytest.raises(ValueError, match='array'):
        parse_entries_json(b'{"entries": []}')


def test_parse_rejects_bad_json_and_items():
    with pytest.raises(ValueError, match='invalid JSON'):
        parse_entries_json(b'[{"date": ')
    with pytest.raises(ValueError, match='entry 1 must be an object'):
        parse_entries_json(json.dumps([SAMPLE_ENTRIES[0], 5]).encode())
    with pytest.raises(ValueError, match='entry 0'):
        parse_entries_json(b'[{"testName": "no date"}]')
    with pytest.raises(ValueError, match='UTF-8'):
        parse_entries_json(b'\xff\xfe[]')


def test_parse_rejects_duplicate_ids():
    dup = [SAMPLE_ENTRIES[0], dict(SAMPLE_ENTRIES[1], id=SAMPLE_ENTRIES[0]['id'])]
    with pytest.raises(ValueError, match='duplicate id'):
        parse_entries_json(json.dumps(dup).encode())


def test_export_filename():
    from datetime import date
    assert export_filename(date(2026, 2, 1)) == 'test_history_2026-02-01.json'


def test_import_replaces_collection_and_rescores():
    client.post('/entries', json={'date': '2024-01-01', 'testName': 'old'})
    doctored = [dict(e) for e in SAMPLE_ENTRIES]
    doctored[0]['total'] = {'marks': 0, 'incorrect': 50, 'accuracy': 1}
    r = _upload(json.dumps(doctored).encode())
    assert r.status_code == 200
    assert r.json() == {'imported': 2, 'replaced': 1}

    entries = client.get('/entries').json()
    assert [e['testName'] for e in entries] == ['DFT 2', 'DFT 1']
    dft1 = next(e for e in entries if e['testName'] == 'DFT 1')
    assert dft1['id'] == SAMPLE_ENTRIES[0]['id']
    assert dft1['total']['marks'] == 266
    assert dft1['total']['incorrect'] == 6
    assert dft1['total']['accuracy'] == 91.89
    assert dft1['maths']['accuracy'] == 100


def test_import_assigns_missing_ids():
    item = {k: v for k, v in SAMPLE_ENTRIES[1].items() if k != 'id'}
    r = _upload(json.dumps([item]).encode())
    assert r.status_code == 200
    entries = client.get('/entries').json()
    assert len(entries) == 1
    assert entries[0]['id']


def test_rejected_import_keeps_existing_entries():
    client.post('/entries', json={'date': '2024-01-01', 'testName': 'keep me'})
    r = _upload(b'{"not": "a list"}')
    assert r.status_code == 400
    assert 'array' in r.json()['detail']
    r2 = _upload(b'[1, 2]')
    assert r2.status_code == 400
    assert [e['testName'] for e in client.get('/entries').json()] == ['keep me']


def test_import_rejects_unsupported_content_type():
    r = _upload(b'[]', name='history.png', content_type='image/png')
    assert r.status_code == 400


def test_export_then_import_restores_history():
    _upload(json.dumps(SAMPLE_ENTRIES).encode())
    exported = client.get('/entries/export')
    assert exported.status_code == 200
    assert exported.headers['content-type'].startswith('application/json')
    assert 'attachment; filename="test_history_' in exported.headers['content-disposition']
    before = client.get('/entries').json()
    assert exported.json() == before

    client.delete('/entries')
    r = _upload(exported.content)
    assert r.json() == {'imported': 2, 'replaced': 0}
    assert client.get('/entries').json() == before


def test_import_empty_array_clears():
    _upload(json.dumps(SAMPLE_ENTRIES).encode())
    r = _upload(b'[]')
    assert r.json() == {'imported': 0, 'replaced': 2}
    assert client.get('/entries').json() == []

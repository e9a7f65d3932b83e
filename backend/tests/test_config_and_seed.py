import pytest
from sqlmodel import Session

from testtrack import services
from testtrack.config import Settings
from testtrack.database import engine
from testtrack.utils.sample_data import SAMPLE_ENTRIES


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    monkeypatch.delenv("ALLOW_DEV_CORS", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    s = Settings()
    assert s.ENV == "dev"
    assert s.ALLOW_DEV_CORS is True
    assert s.LOG_LEVEL == "INFO"
    assert s.MAX_UPLOAD_BYTES > 0


def test_settings_reject_open_cors_outside_dev(monkeypatch):
    monkeypatch.setenv("ENV", "prod")
    monkeypatch.setenv("ALLOW_DEV_CORS", "true")
    with pytest.raises(RuntimeError):
        Settings()
    monkeypatch.delenv("ALLOW_DEV_CORS")
    assert Settings().ALLOW_DEV_CORS is False


def test_settings_reject_bad_values(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(RuntimeError):
        Settings()
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "0")
    with pytest.raises(RuntimeError):
        Settings()


def test_seed_only_fills_empty_db():
    with Session(engine) as session:
        svc = services.EntryService(session)
        assert svc.seed_if_empty(SAMPLE_ENTRIES) == 2
        assert svc.seed_if_empty(SAMPLE_ENTRIES) == 0
        entries = svc.list_entries()
    assert [e.test_name for e in entries] == ['DFT 2', 'DFT 1']
    assert entries[0].total.accuracy == 90.54

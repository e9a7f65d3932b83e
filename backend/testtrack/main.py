"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the TestTrack backend.
Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON responses.

Endpoints implemented:
- GET /health
- POST /score/subject
- POST /score/entry
- GET /entries
- POST /entries
- DELETE /entries
- GET /entries/export
- POST /entries/import
- GET /entries/{entry_id}
- PUT /entries/{entry_id}
- DELETE /entries/{entry_id}
- GET /stats/dashboard
"""

from fastapi import FastAPI, Depends, UploadFile, File, HTTPException, Request
from fastapi.responses import Response
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
from datetime import date
from typing import List
import json
import logging
import time
import uuid
from .database import engine, create_db_and_tables, get_session
from . import services
from .schemas import EntryIn, ErrorView, ImportResult, ScoredSubjects, SubjectInput, SubjectPerformance, SubjectsIn, TestEntry
from .scoring import derive_subject, score_subjects
from .utils.sample_data import SAMPLE_ENTRIES
from .utils.transfer import export_filename
from .config import settings

app = FastAPI(title="TestTrack API")
logger = logging.getLogger("testtrack.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

IMPORT_CONTENT_TYPES = ("application/json", "text/plain", "application/octet-stream")

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()
if settings.SEED_SAMPLE_DATA:
    with Session(engine) as _session:
        seeded = services.EntryService(_session).seed_if_empty(SAMPLE_ENTRIES)
        if seeded:
            logger.info("sample_data_seeded %s", json.dumps({"entries": seeded}))


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
            ensure_ascii=True,
        ),
    )
    return response


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


@app.post('/score/subject', response_model=SubjectPerformance)
def score_subject(payload: SubjectInput):
    """Score one subject without storing anything.

    Entry forms call this whenever marks or unattempted change to show
    the derived incorrect count and accuracy.
    """
    return derive_subject(payload)


@app.post('/score/entry', response_model=ScoredSubjects)
def score_entry(payload: SubjectsIn):
    """Score three subjects and the combined total without storing anything."""
    return score_subjects(payload)


@app.get('/entries', response_model=List[TestEntry])
def list_entries(db: Session = Depends(get_session)):
    """List every stored entry, newest date first."""
    return services.EntryService(db).list_entries()


@app.post('/entries', response_model=TestEntry)
def create_entry(payload: EntryIn, db: Session = Depends(get_session)):
    """Record a new sitting.

    Only raw subject values are read from the body; the response carries
    the assigned id and every derived block.
    """
    return services.EntryService(db).create(payload)


@app.delete('/entries')
def clear_entries(db: Session = Depends(get_session)):
    """Delete every stored entry."""
    removed = services.EntryService(db).clear()
    return {'deleted': removed}


@app.get('/entries/export')
def export_entries(db: Session = Depends(get_session)):
    """Download the full history as a JSON file."""
    body = services.EntryService(db).export_json()
    filename = export_filename(date.today())
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post('/entries/import', response_model=ImportResult)
def import_entries(file: UploadFile = File(...), db: Session = Depends(get_session)):
    """Upload an exported JSON file and replace the stored history with it.

    The file must hold a JSON array of entries. Any structural problem is
    a 400 and leaves the stored history untouched.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail='no file')
    if file.content_type not in IMPORT_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail='unsupported content type')
    content = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail='file too large')
    try:
        return services.EntryService(db).import_json(content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get('/entries/{entry_id}', response_model=TestEntry)
def get_entry(entry_id: str, db: Session = Depends(get_session)):
    """Return a single entry by id."""
    entry = services.EntryService(db).get(entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail='entry not found')
    return entry


@app.put('/entries/{entry_id}', response_model=TestEntry)
def replace_entry(entry_id: str, payload: EntryIn, db: Session = Depends(get_session)):
    """Replace an entry with new raw values.

    Every subject is rescored and the total recomputed; the id stays.
    """
    entry = services.EntryService(db).update(entry_id, payload)
    if not entry:
        raise HTTPException(status_code=404, detail='entry not found')
    return entry


@app.delete('/entries/{entry_id}', status_code=204)
def delete_entry(entry_id: str, db: Session = Depends(get_session)):
    """Delete a single entry."""
    if not services.EntryService(db).delete(entry_id):
        raise HTTPException(status_code=404, detail='entry not found')
    return Response(status_code=204)


@app.get('/stats/dashboard')
def dashboard(error_view: ErrorView = 'total', db: Session = Depends(get_session)):
    """Return trend, comparison and error-breakdown series for the dashboard.

    `error_view` selects which block the error breakdown is summed over.
    """
    return services.StatsService(db).dashboard(error_view)

"""
DevSearch API: Stack Overflow + Reddit search, and emailing the results.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import get_settings
from app.errors import DispatchError, UpstreamFetchError, ValidationError
from app.logging_config import configure_logging
from app.notify import send_results_email
from app.search import fetch_top_answer, search_all
from app.search.schemas import AggregatedResults, EmailRequest, EmailResponse, SortKey, TopAnswer

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    if not (settings.reddit_client_id and settings.reddit_client_secret and settings.reddit_refresh_token):
        logger.warning("Reddit credentials are not configured; /search will fail")
    if not (settings.email_user and settings.email_pass):
        logger.warning("EMAIL_USER / EMAIL_PASS are not configured; /send-email will fail")
    yield


app = FastAPI(title="DevSearch", version="0.1.0", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": "Malformed request", "errors": jsonable_encoder(exc.errors())})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/", include_in_schema=False)
def index():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/search", response_model=AggregatedResults)
def search(q: Optional[str] = None, sort: str = SortKey.ACTIVITY.value):
    """
    Search Stack Overflow (by title) and Reddit for `q`.

    Returns: {"stackOverflow": [...], "reddit": [...]}. 500 if either provider fails.
    """
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    try:
        sort_key = SortKey(sort.lower())
    except ValueError:
        allowed = ", ".join(s.value for s in SortKey)
        raise HTTPException(status_code=400, detail=f"sort must be one of: {allowed}")

    try:
        return search_all(q.strip(), sort_key)
    except UpstreamFetchError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/questions/{question_id}/top-answer", response_model=TopAnswer)
def top_answer(question_id: int):
    """Highest-voted answer body for a question; body is null when none is available."""
    return fetch_top_answer(question_id)


@app.post("/send-email", response_model=EmailResponse)
def send_email(body: EmailRequest):
    """Email the given results as two HTML tables."""
    try:
        message = send_results_email(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DispatchError:
        raise HTTPException(status_code=500, detail="Failed to send email")
    return EmailResponse(message=message)

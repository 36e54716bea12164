"""Hate Speech Analysis Console API — production with logging."""
import logging
from functools import lru_cache
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from src.clients import BackendClient, GeminiMemeModel, MemeModel
from src.events import EventSink
from src.models import AnalysisResult, BulkAnalyzeResponse, ErrorResponse, MemeResult
from src.normalize import normalize_bulk_response, normalize_meme_response, normalize_tweet_response
from src.outbound import build_batch_request, build_meme_request, build_text_request
from src.parsing import parse_batch_submission, parse_image_submission, parse_text_submission
from src.projector import project_error, project_success
from src.settings import get_settings

from src.exceptions import (
    AppError, ValidationError, ExternalValidationError,
)

# ──────────────── Logging setup (minimal, prod-friendly) ────────────────
SETTINGS = get_settings()
LOG_LEVEL = SETTINGS.log_level.upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
log = logging.getLogger("hate_console.api")

log.info(
    "API starting with LOG_LEVEL=%s | BACKEND=%s | LLM_MODEL=%s | HAS_GEMINI_KEY=%s",
    LOG_LEVEL,
    SETTINGS.backend_url,
    SETTINGS.llm_model,
    SETTINGS.has_llm_credential,
)
if not SETTINGS.has_llm_credential:
    log.warning("GEMINI_API_KEY not set; relying on the environment to provide Gemini access")


app = FastAPI(
    title="Hate Speech Analysis Console API",
    version="1.0.0",
    description=(
        "**Hate Speech Analysis Console API**\n\n"
        "Forwards tweets, CSV batches and meme images to external classifiers "
        "and returns normalized, validated results.\n\n"
        "### Endpoints\n"
        "- `/api/analyze` — Classify a single tweet.\n"
        "- `/api/bulk-analyze` — Classify every row of a CSV file.\n"
        "- `/api/meme-analyze` — Classify a meme image.\n"
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ──────────────── Consistent error responses (global) ────────────────
ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}

def _err(exc: Exception) -> JSONResponse:
    status_code, content = project_error(exc)
    return JSONResponse(status_code=status_code, content=content)

@app.exception_handler(RequestValidationError)
async def _handle_req_validation(req: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()
    )
    log.warning("Request validation error path=%s errors=%s", req.url.path, problems)
    return _err(ValidationError("Invalid request payload", problems))

@app.exception_handler(PydanticValidationError)
async def _handle_pydantic_validation(req: Request, exc: PydanticValidationError):
    # only reachable while building results from external data
    log.error("Result validation error path=%s errors=%s", req.url.path, exc.errors())
    return _err(ExternalValidationError("Invalid external response", str(exc)))

@app.exception_handler(AppError)
async def _handle_app_error(req: Request, exc: AppError):
    # 4xx → warn, 5xx → error
    lvl = logging.WARNING if 400 <= exc.status_code < 500 else logging.ERROR
    log.log(
        lvl,
        "AppError path=%s code=%s status=%d msg=%s details=%s",
        req.url.path,
        exc.code,
        exc.status_code,
        exc.message,
        exc.details,
    )
    return _err(exc)

@app.exception_handler(Exception)
async def _handle_unexpected(req: Request, exc: Exception):
    """Handle any unexpected, unhandled server errors."""
    log.exception("Unexpected error path=%s: %s", req.url.path, exc)
    return _err(exc)

# ──────────────── Dependencies ────────────────
@lru_cache
def get_backend_client() -> BackendClient:
    return BackendClient(SETTINGS.backend_url, timeout=SETTINGS.backend_timeout_s)

@lru_cache
def get_meme_model() -> MemeModel:
    return GeminiMemeModel(SETTINGS.llm_model, api_key=SETTINGS.gemini_api_key)

def get_event_sink() -> Optional[EventSink]:
    return None

# ──────────────── Endpoints ────────────────
@app.get("/health")
def health():
    return {
        "status": "ok",
        "backend_url": SETTINGS.backend_url,
        "llm_model": SETTINGS.llm_model,
        "llm_credential": SETTINGS.has_llm_credential,
    }

@app.post("/api/analyze", response_model=AnalysisResult, responses=ERROR_RESPONSES)
def analyze(
    payload: Any = Body(None),
    backend: BackendClient = Depends(get_backend_client),
    sink: Optional[EventSink] = Depends(get_event_sink),
):
    """Classify a single tweet.

    Validates the body, forwards ``{tweet}`` to the backend and
    normalizes whichever field names the backend used.
    """
    log.info("POST /api/analyze started")
    submission = parse_text_submission(payload, sink)
    data = backend.send(build_text_request(submission, sink), "Failed to analyze tweet")
    result = normalize_tweet_response(data, sink)
    log.info("POST /api/analyze completed: class=%s confidence=%.1f", result.predicted_class, result.confidence)
    return project_success(result, sink)[1]

@app.post("/api/bulk-analyze", response_model=BulkAnalyzeResponse, responses=ERROR_RESPONSES)
def bulk_analyze(
    file: Optional[UploadFile] = File(None),
    backend: BackendClient = Depends(get_backend_client),
    sink: Optional[EventSink] = Depends(get_event_sink),
):
    """Classify every row of a CSV file.

    The file is streamed to the backend untouched; stats are derived
    from the per-row labels of the returned CSV.
    """
    log.info("POST /api/bulk-analyze started")
    submission = parse_batch_submission(file, sink)
    log.info("Processing CSV file: %s (%d bytes)", submission.filename, len(submission.data))
    data = backend.send(build_batch_request(submission, sink), "Failed to process CSV file")
    batch = normalize_bulk_response(data, sink)
    log.info("POST /api/bulk-analyze completed: stats=%s", batch.stats.model_dump(by_alias=True))
    return project_success(BulkAnalyzeResponse(stats=batch.stats, csv=batch.csv), sink)[1]

@app.post("/api/meme-analyze", response_model=MemeResult, responses=ERROR_RESPONSES)
def meme_analyze(
    image: Optional[UploadFile] = File(None),
    model: MemeModel = Depends(get_meme_model),
    sink: Optional[EventSink] = Depends(get_event_sink),
):
    """Classify a meme image with the LLM and validate its JSON answer."""
    log.info("POST /api/meme-analyze started")
    submission = parse_image_submission(image, sink)
    log.info("Meme image info: type=%s size=%d", submission.media_type, submission.size)
    text = model.generate(build_meme_request(submission, SETTINGS.llm_temperature, sink))
    result = normalize_meme_response(text, sink)
    log.info("POST /api/meme-analyze completed: label=%s", result.label)
    return project_success(result, sink)[1]

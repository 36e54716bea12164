"""Builders for the requests forwarded to the external collaborators."""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .config import BACKEND, MEME_CFG
from .events import EventSink, emit
from .models import BatchSubmission, ImageSubmission, TextSubmission


@dataclass(frozen=True)
class BackendRequest:
    """A request to the classification backend.

    Exactly one of ``json`` (application/json) or ``files`` (multipart)
    is set.
    """
    path: str
    json: Optional[Dict[str, Any]] = None
    files: Optional[Dict[str, Tuple[str, bytes, str]]] = None

    @property
    def content_kind(self) -> str:
        return "multipart" if self.files is not None else "json"


@dataclass(frozen=True)
class MemeInferenceRequest:
    prompt: str
    image: bytes
    media_type: str
    temperature: float


def build_text_request(submission: TextSubmission, sink: Optional[EventSink] = None) -> BackendRequest:
    req = BackendRequest(path=BACKEND.analyze_path, json={"tweet": submission.content})
    emit(sink, "outbound.built", path=req.path, kind=req.content_kind)
    return req


def build_batch_request(submission: BatchSubmission, sink: Optional[EventSink] = None) -> BackendRequest:
    """Re-package the upload as the ``file`` form field, bytes untouched."""
    req = BackendRequest(
        path=BACKEND.bulk_analyze_path,
        files={BACKEND.file_field: (submission.filename, submission.data, submission.content_type)},
    )
    emit(sink, "outbound.built", path=req.path, kind=req.content_kind, size=len(submission.data))
    return req


def build_meme_request(
    submission: ImageSubmission,
    temperature: float = 0.2,
    sink: Optional[EventSink] = None,
) -> MemeInferenceRequest:
    req = MemeInferenceRequest(
        prompt=f"{MEME_CFG.instructions}\n{MEME_CFG.task}",
        image=submission.data,
        media_type=submission.media_type,
        temperature=temperature,
    )
    emit(sink, "outbound.built", path="llm", media_type=req.media_type, size=len(req.image))
    return req

"""Inbound request parsing for the three submission kinds.

Every check here runs before any external call is made.
"""
from typing import Any, Optional

from fastapi import UploadFile

from .config import BACKEND, MEME_CFG
from .events import EventSink, emit
from .exceptions import ValidationError
from .models import BatchSubmission, ImageSubmission, TextSubmission
from .utils import describe_shape, preview


def parse_text_submission(payload: Any, sink: Optional[EventSink] = None) -> TextSubmission:
    """Extract the ``tweet`` field of a JSON body.

    No length cap is applied; the backend owns that limit.
    """
    tweet = payload.get("tweet") if isinstance(payload, dict) else None
    if not isinstance(tweet, str):
        emit(sink, "inbound.rejected", path="text", shape=describe_shape(payload))
        raise ValidationError("Tweet text is required", "missing or non-string text")
    if not tweet.strip():
        emit(sink, "inbound.rejected", path="text", shape="blank string")
        raise ValidationError("Tweet text is required", "text must not be blank")
    emit(sink, "inbound.accepted", path="text", length=len(tweet), preview=preview(tweet))
    return TextSubmission(content=tweet)


def parse_batch_submission(upload: Optional[UploadFile], sink: Optional[EventSink] = None) -> BatchSubmission:
    """Capture the uploaded file as an opaque blob; CSV parsing is the backend's job."""
    if upload is None:
        emit(sink, "inbound.rejected", path="batch", shape="no file")
        raise ValidationError("CSV file is required", "missing file")
    data = upload.file.read()
    submission = BatchSubmission(
        filename=upload.filename or "upload.csv",
        data=data,
        content_type=upload.content_type or BACKEND.default_file_type,
    )
    emit(sink, "inbound.accepted", path="batch", filename=submission.filename, size=len(data))
    return submission


def parse_image_submission(upload: Optional[UploadFile], sink: Optional[EventSink] = None) -> ImageSubmission:
    """Capture image bytes and the declared media type (no sniffing)."""
    if upload is None:
        emit(sink, "inbound.rejected", path="image", shape="no image")
        raise ValidationError("Image is required as 'image' form-data field", "missing image")
    data = upload.file.read()
    if not data:
        emit(sink, "inbound.rejected", path="image", shape="empty image")
        raise ValidationError("Image is required as 'image' form-data field", "empty image")
    submission = ImageSubmission(data=data, media_type=upload.content_type or MEME_CFG.default_media_type)
    emit(sink, "inbound.accepted", path="image", media_type=submission.media_type, size=submission.size)
    return submission

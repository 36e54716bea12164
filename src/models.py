"""Pydantic models for the Hate Speech Analysis Console.

This module defines the inbound submissions, the normalized results
returned to the browser, and the uniform error envelope.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

TweetLabel = Literal["hate speech", "offensive language", "neither", "unknown"]
MemeLabel = Literal["hate meme", "not hate meme", "normal meme", "fair meme"]


# ---- submissions ----
@dataclass(frozen=True)
class TextSubmission:
    content: str


@dataclass(frozen=True)
class BatchSubmission:
    """Opaque tabular upload; the backend does the row extraction."""
    filename: str
    data: bytes
    content_type: str


@dataclass(frozen=True)
class ImageSubmission:
    data: bytes
    media_type: str

    @property
    def size(self) -> int:
        return len(self.data)


# ---- results ----
class WordSignal(BaseModel):
    word: str
    tfidf: float = Field(ge=0)
    coefficient: float


class AnalysisResult(BaseModel):
    """Normalized single tweet classification."""
    predicted_class: TweetLabel
    confidence: float = Field(ge=0, le=100)
    word_scores: List[WordSignal] = Field(default_factory=list)


class MemeResult(BaseModel):
    label: MemeLabel
    reason: str = Field(min_length=1)


class Stats(BaseModel):
    """Summary counts of a bulk run.

    Rows with an unrecognized label count towards ``total`` only.
    """
    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    hate_speech: int = Field(0, alias="hateSpeech")
    offensive: int = 0
    neither: int = 0

    def __add__(self, other: "Stats") -> "Stats":
        return Stats(
            total=self.total + other.total,
            hate_speech=self.hate_speech + other.hate_speech,
            offensive=self.offensive + other.offensive,
            neither=self.neither + other.neither,
        )


@dataclass
class BatchResult:
    per_row: List[Tuple[Dict[str, str], str]] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)
    csv: str = ""


class BulkAnalyzeResponse(BaseModel):
    stats: Stats
    csv: str


class ErrorResponse(BaseModel):
    error: str
    code: str
    retryable: bool = False
    details: Optional[str] = None
    hint: Optional[str] = None
    raw: Optional[Any] = None


__all__ = [
    "TextSubmission", "BatchSubmission", "ImageSubmission",
    "WordSignal", "AnalysisResult", "MemeResult", "Stats",
    "BatchResult", "BulkAnalyzeResponse", "ErrorResponse",
]

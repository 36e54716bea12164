"""Normalization of untrusted external responses.

Two tolerance strategies live here:

* backend responses (text and bulk paths) get alias defaulting: each
  semantic field has an ordered list of historical names, the first
  present one wins and a sentinel is used when none is present;
* LLM responses (meme path) get JSON extraction followed by a hard
  closed-set check on ``label``.
"""
import io
import json
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .config import ALIASES, MEME, MEME_CFG, ROW_LABEL_SYNONYMS, TWEET
from .events import EventSink, emit
from .exceptions import ExternalFormatError, ExternalValidationError
from .models import AnalysisResult, BatchResult, MemeResult, WordSignal
from .stats import aggregate


def pick_first_present(candidates: Sequence[str], record: Mapping[str, Any], default: Any) -> Any:
    """Return the value of the first candidate key present (and not null)."""
    for name in candidates:
        if record.get(name) is not None:
            return record[name]
    return default


def canonical_tweet_label(value: Any) -> str:
    """Map a backend label onto the tweet label set, ``unknown`` otherwise."""
    if not isinstance(value, str):
        return TWEET.unknown
    return ROW_LABEL_SYNONYMS.get(value.strip().lower(), TWEET.unknown)


def _as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    return out if math.isfinite(out) else default


def _word_signals(items: Any) -> List[WordSignal]:
    if not isinstance(items, list):
        return []
    signals = []
    for item in items:
        if not isinstance(item, dict):
            continue
        signals.append(
            WordSignal(
                word=str(item.get("word", "")),
                tfidf=max(0.0, _as_float(item.get("tfidf"))),
                coefficient=_as_float(item.get("coefficient")),
            )
        )
    return signals


def normalize_tweet_response(data: Any, sink: Optional[EventSink] = None) -> AnalysisResult:
    """Convert the backend's single-tweet answer to ``AnalysisResult``."""
    if not isinstance(data, dict):
        raise ExternalValidationError("Backend returned unexpected response shape", raw=data)

    raw_class = pick_first_present(ALIASES.predicted_class, data, TWEET.unknown)
    label = canonical_tweet_label(raw_class)
    confidence = min(100.0, max(0.0, _as_float(pick_first_present(ALIASES.confidence, data, 0))))
    signals = _word_signals(pick_first_present(ALIASES.word_scores, data, []))

    emit(sink, "normalize.tweet", label=label, confidence=confidence, signals=len(signals))
    return AnalysisResult(predicted_class=label, confidence=confidence, word_scores=signals)


def resolve_column(columns: Sequence[str], candidates: Sequence[str]) -> Optional[str]:
    """Resolve a column by alias, exact names first, then case-insensitively."""
    for c in candidates:
        if c in columns:
            return c
    lowered = {str(col).strip().lower(): col for col in columns}
    for c in candidates:
        if c in lowered:
            return lowered[c]
    return None


def _read_rows(csv_text: str) -> Tuple[List[Dict[str, str]], List[str]]:
    if not csv_text.strip():
        return [], []
    try:
        df = pd.read_csv(io.StringIO(csv_text), dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ExternalFormatError("Backend returned malformed CSV", str(e)) from e
    return df.to_dict(orient="records"), [str(c) for c in df.columns]


def normalize_bulk_response(data: Any, sink: Optional[EventSink] = None) -> BatchResult:
    """Convert the backend's bulk answer to ``BatchResult``.

    Per-row labels come from the label column of the returned CSV; the
    stats are re-derived from them.
    """
    if not isinstance(data, dict):
        raise ExternalValidationError("Backend returned unexpected response shape", raw=data)

    csv_text = pick_first_present(ALIASES.result_csv, data, "")
    if not isinstance(csv_text, str):
        raise ExternalValidationError("Backend returned non-string csv", raw={"csv": csv_text})

    rows, columns = _read_rows(csv_text)
    label_col = resolve_column(columns, ALIASES.row_label)
    if rows and label_col is None:
        emit(sink, "normalize.bulk.no_label_column", columns=columns)

    per_row = [
        (row, canonical_tweet_label(row.get(label_col)) if label_col else TWEET.unknown)
        for row in rows
    ]
    stats = aggregate(label for _, label in per_row)
    emit(sink, "normalize.bulk", rows=len(per_row), label_column=label_col, total=stats.total)
    return BatchResult(per_row=per_row, stats=stats, csv=csv_text)


def extract_json_object(text: str) -> Any:
    """Strict parse of ``text``, falling back to the first embedded object.

    The fallback decodes one JSON value starting at each ``{`` in turn and
    ignores whatever follows it, so braces in surrounding prose or inside
    string literals do not matter.
    """
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        pass
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = decoder.raw_decode(text, start)
        except (ValueError, RecursionError):
            parsed = None
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)
    raise ExternalFormatError("Model returned non-JSON response", f"text_length={len(text)}")


def normalize_meme_response(text: str, sink: Optional[EventSink] = None) -> MemeResult:
    """Validate the model output against the closed meme label set."""
    parsed = extract_json_object(text or "")
    label = parsed.get("label") if isinstance(parsed, dict) else None
    if label not in MEME.allowed:
        emit(sink, "normalize.meme.rejected", label=label)
        raise ExternalValidationError("Invalid model response", "label outside allowed set", raw=parsed)

    reason = parsed.get("reason")
    if not isinstance(reason, str) or not reason.strip():
        reason = MEME_CFG.reason_placeholder
    emit(sink, "normalize.meme", label=label)
    return MemeResult(label=label, reason=reason)

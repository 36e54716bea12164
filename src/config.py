"""Global configuration module for the Hate Speech Analysis Console.

Defines immutable dataclass-based constants for the label sets,
backend field aliases, and the meme classifier instruction.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class TweetLabels:
    """Closed label set of the tweet pipelines (single and bulk)."""
    hate_speech: str = "hate speech"
    offensive: str = "offensive language"
    neither: str = "neither"
    unknown: str = "unknown"


@dataclass(frozen=True)
class MemeLabels:
    """Closed label set of the meme pipeline. No fallback member."""
    allowed: tuple[str, ...] = (
        "hate meme",
        "not hate meme",
        "normal meme",
        "fair meme",
    )


@dataclass(frozen=True)
class FieldAliases:
    """Historically used backend field names, in priority order."""
    predicted_class: tuple[str, ...] = ("predicted_class", "predictedClass", "class")
    confidence: tuple[str, ...] = ("confidence", "score")
    word_scores: tuple[str, ...] = ("word_scores", "wordScores", "words")
    result_csv: tuple[str, ...] = ("csv", "result_csv", "output_csv")
    row_label: tuple[str, ...] = (
        "predicted_behavior",
        "predicted_class",
        "prediction",
        "label",
    )


@dataclass(frozen=True)
class BackendConfig:
    """Paths of the classification backend."""
    analyze_path: str = "/api/analyze"
    bulk_analyze_path: str = "/api/bulk-analyze"
    file_field: str = "file"
    default_file_type: str = "text/csv"


MEME_INSTRUCTIONS = """
You are a safety classifier for image memes.
Classify the meme into exactly ONE of these labels:
- "hate meme"
- "not hate meme"
- "normal meme"
- "fair meme"

Return strict JSON with keys:
{
  "label": "hate meme" | "not hate meme" | "normal meme" | "fair meme",
  "reason": "short, precise explanation referencing visual/text cues"
}
Do not include any extra text before or after the JSON.
"""


@dataclass(frozen=True)
class MemeConfig:
    """Inference request settings for the image path."""
    instructions: str = MEME_INSTRUCTIONS
    task: str = "Analyze the attached image and produce the JSON."
    default_media_type: str = "image/png"
    reason_placeholder: str = "No reason provided by the model."
    credential_hint: str = (
        "Ensure the Gemini provider is reachable: set GEMINI_API_KEY "
        "in the service environment (server-only)."
    )


TWEET = TweetLabels()
MEME = MemeLabels()
ALIASES = FieldAliases()
BACKEND = BackendConfig()
MEME_CFG = MemeConfig()

# Bulk label synonyms seen in backend CSV output, mapped to canonical labels
ROW_LABEL_SYNONYMS = {
    "hate speech": TWEET.hate_speech,
    "hate_speech": TWEET.hate_speech,
    "hate": TWEET.hate_speech,
    "offensive language": TWEET.offensive,
    "offensive_language": TWEET.offensive,
    "offensive": TWEET.offensive,
    "neither": TWEET.neither,
}

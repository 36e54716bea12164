"""Summary counts for the bulk path."""
from functools import reduce
from typing import Iterable

from .config import TWEET
from .models import Stats


def count_label(stats: Stats, label: str) -> Stats:
    """Add one row; unrecognized labels only increase ``total``."""
    return Stats(
        total=stats.total + 1,
        hate_speech=stats.hate_speech + (label == TWEET.hate_speech),
        offensive=stats.offensive + (label == TWEET.offensive),
        neither=stats.neither + (label == TWEET.neither),
    )


def aggregate(labels: Iterable[str]) -> Stats:
    return reduce(count_label, labels, Stats())


def merge(*parts: Stats) -> Stats:
    """Pointwise sum of partial aggregations."""
    return sum(parts, Stats())

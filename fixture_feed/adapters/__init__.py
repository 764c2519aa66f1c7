from .espn import Absent, Fetched, FetchOutcome, SourceFetcher
from .sofascore import fetch_fallback

__all__ = [
    "Absent",
    "Fetched",
    "FetchOutcome",
    "SourceFetcher",
    "fetch_fallback",
]

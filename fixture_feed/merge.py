from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import Fixture
from .normalise import normalize_name
from .utils import iso_z, parse_instant

DedupeKey = Tuple[str, str, str]


def dedupe_key(f: Fixture) -> DedupeKey:
    start = parse_instant(f.start_date)
    when = iso_z(start) if start else f.start_date
    return (when, normalize_name(f.home_team.name), normalize_name(f.away_team.name))


class Deduplicator:
    """Run-scoped seen-set; the first fixture for a key wins."""

    def __init__(self) -> None:
        self._seen: set[DedupeKey] = set()

    def is_new(self, f: Fixture) -> bool:
        key = dedupe_key(f)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def __len__(self) -> int:
        return len(self._seen)


def sort_fixtures(fixtures: Iterable[Fixture]) -> List[Fixture]:
    # stable, so equal kickoffs keep arrival order
    return sorted(fixtures, key=lambda f: dedupe_key(f)[0])

"""Map ESPN event payloads onto ``Fixture``.

Scoreboard events and core-API event details share the same shape closely
enough to go through one extractor: an event with a ``competitions`` list
whose first entry carries the competitors and, sometimes, broadcasts.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional, Sequence

from .models import Fixture, TeamSide
from .utils import iso_z, parse_instant

log = logging.getLogger(__name__)

_CHANNEL_SPLIT_RE = re.compile(r"\s*(?:/|,|\||\se\s)\s*")


def _first(x: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in x and x[k] not in (None, ""):
            return x[k]
    return None


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _pick_sides(competitors: list[dict[str, Any]]) -> tuple[dict[str, Any], dict[str, Any]]:
    home = next((c for c in competitors if c.get("homeAway") == "home"), None)
    away = next((c for c in competitors if c.get("homeAway") == "away" and c is not home), None)
    # untagged shapes: first listed plays at home
    rest = iter(c for c in competitors if c is not home and c is not away)
    if home is None:
        home = next(rest)
    if away is None:
        away = next(rest)
    return home, away


def resolve_logo(team: Mapping[str, Any]) -> str:
    logo = team.get("logo")
    if isinstance(logo, str) and logo:
        return logo
    logos = _as_list(team.get("logos"))
    if logos and isinstance(logos[0], dict):
        href = logos[0].get("href")
        if isinstance(href, str):
            return href
    return ""


def resolve_competition(leagues: Sequence[Any], default: str = "") -> str:
    for league in leagues:
        if not isinstance(league, dict):
            continue
        label = _first(league, "name", "shortName", "abbreviation")
        if label:
            return str(label)
    return default


def _broadcast_name(b: Mapping[str, Any]) -> str:
    media = b.get("media")
    if isinstance(media, dict):
        name = _first(media, "shortName", "name")
        if name:
            return str(name)
    names = _as_list(b.get("names"))
    if names and names[0]:
        return str(names[0])
    name = _first(b, "shortName", "name")
    return str(name) if name else ""


def resolve_broadcast(*candidates: Any) -> str:
    """First resolvable channel across the candidate lists, in priority order."""
    for entries in candidates:
        for b in _as_list(entries):
            if not isinstance(b, dict):
                continue
            name = _broadcast_name(b).strip()
            if name:
                return _CHANNEL_SPLIT_RE.split(name, maxsplit=1)[0]
    return ""


def translate(name: str, translations: Mapping[str, str]) -> str:
    return translations.get(name.lower(), name)


def extract_fixture(
    event: Mapping[str, Any],
    competition: Optional[Mapping[str, Any]],
    *,
    translations: Mapping[str, str],
    leagues: Sequence[Any] = (),
    default_label: str = "",
) -> Optional[Fixture]:
    """Build a ``Fixture`` or return ``None`` for an incomplete record.

    ``translations`` maps lower-cased canonical national-team names to their
    localised form. ``leagues`` is the scoreboard-level league list, consulted
    when the event carries none of its own.
    """
    if not competition:
        return None
    competitors = [c for c in _as_list(competition.get("competitors")) if isinstance(c, dict)]
    if len(competitors) < 2:
        return None

    home, away = _pick_sides(competitors)
    home_team = _as_dict(home.get("team"))
    away_team = _as_dict(away.get("team"))
    home_name = str(home_team.get("displayName") or "").strip()
    away_name = str(away_team.get("displayName") or "").strip()
    if not (home_name and away_name):
        log.debug("dropping event %s: missing team name", event.get("id"))
        return None

    start = parse_instant(_first(event, "date") or competition.get("date"))
    if start is None:
        log.debug("dropping event %s: no usable start date", event.get("id"))
        return None

    return Fixture(
        start_date=iso_z(start),
        home_team=TeamSide(name=translate(home_name, translations), logo=resolve_logo(home_team)),
        away_team=TeamSide(name=translate(away_name, translations), logo=resolve_logo(away_team)),
        competition=resolve_competition(_as_list(event.get("leagues")) or list(leagues), default_label),
        broadcast=resolve_broadcast(
            competition.get("broadcasts"),
            competition.get("geoBroadcasts"),
            event.get("broadcasts"),
        ),
    )

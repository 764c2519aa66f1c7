from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional

from ..config import PipelineConfig
from ..models import Fixture, TeamSide
from ..utils import from_timestamp, iso_z
from .espn import Absent, SourceFetcher

log = logging.getLogger(__name__)


def _side_name(team: Any) -> str:
    if not isinstance(team, dict):
        return ""
    return str(team.get("name") or "").strip()


def _map_event(x: dict[str, Any], label: str) -> Optional[Fixture]:
    home = _side_name(x.get("homeTeam"))
    away = _side_name(x.get("awayTeam"))
    start = from_timestamp(x.get("startTimestamp"))
    if not (home and away and start):
        return None
    # SofaScore has no logos or broadcasters in this listing
    return Fixture(
        start_date=iso_z(start),
        home_team=TeamSide(name=home),
        away_team=TeamSide(name=away),
        competition=label,
        broadcast="",
    )


def _tournament_id(x: dict[str, Any]) -> Optional[int]:
    tournament = x.get("tournament")
    unique = tournament.get("uniqueTournament") if isinstance(tournament, dict) else None
    if not isinstance(unique, dict):
        return None
    try:
        return int(unique.get("id"))
    except (TypeError, ValueError):
        return None


async def fetch_fallback(fetcher: SourceFetcher, config: PipelineConfig, day: date) -> List[Fixture]:
    """Scheduled events for ``day`` restricted to the fallback tournament."""
    settings = config.fallback
    if not settings.enabled:
        return []
    outcome = await fetcher.get_json(settings.url.format(day=day.isoformat()))
    if isinstance(outcome, Absent):
        return []
    events = outcome.payload.get("events")
    if not isinstance(events, list):
        return []
    out: List[Fixture] = []
    for x in events:
        if not isinstance(x, dict) or _tournament_id(x) != settings.tournament_id:
            continue
        fx = _map_event(x, settings.label)
        if fx is None:
            log.debug("skipping incomplete fallback event %s", x.get("id"))
            continue
        out.append(fx)
    log.info("fallback source produced %d fixtures for %s", len(out), day.isoformat())
    return out

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Union

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import PipelineConfig
from ..utils import compact_day

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fetched:
    url: str
    payload: dict[str, Any]


@dataclass(frozen=True)
class Absent:
    url: str
    reason: str


FetchOutcome = Union[Fetched, Absent]


class SourceFetcher:
    """Single ESPN lookups; every failure comes back as ``Absent``."""

    def __init__(self, client: httpx.AsyncClient, config: PipelineConfig) -> None:
        self._client = client
        self._config = config

    async def _get(self, url: str, params: dict[str, Any] | None) -> httpx.Response:
        http = self._config.http
        async for attempt in AsyncRetrying(
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            stop=stop_after_attempt(http.attempts),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return await self._client.get(url, params=params, timeout=http.timeout)
        raise RuntimeError("unreachable")  # pragma: no cover

    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> FetchOutcome:
        try:
            resp = await self._get(url, params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._absent(url, f"transport:{e.__class__.__name__}")
        if not resp.is_success:
            return self._absent(url, f"status:{resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            return self._absent(url, f"parse:{e}")
        if not isinstance(data, dict):
            return self._absent(url, "parse:payload is not an object")
        return Fetched(url=url, payload=data)

    def _absent(self, url: str, reason: str) -> Absent:
        log.warning("no data from %s (%s)", url, reason)
        return Absent(url=url, reason=reason)

    async def scoreboard(self, slug: str, day: date) -> FetchOutcome:
        url = self._config.endpoints.scoreboard.format(slug=slug)
        return await self.get_json(url, {"dates": compact_day(day)})

    async def team_events(self, team_id: int, start: date, end: date) -> FetchOutcome:
        url = self._config.endpoints.team_events.format(team_id=team_id)
        return await self.get_json(
            url, {"startDate": start.isoformat(), "endDate": end.isoformat()}
        )

    async def league_teams(self, league: str, limit: int = 300) -> FetchOutcome:
        url = self._config.endpoints.league_teams.format(league=league)
        return await self.get_json(url, {"limit": limit})

    async def resolve(self, ref: str) -> FetchOutcome:
        """Follow a ``$ref`` link (event detail, team detail)."""
        return await self.get_json(ref)

    async def event_detail(self, ref: str) -> FetchOutcome:
        return await self.resolve(ref)


def refs(payload: dict[str, Any]) -> list[str]:
    items = payload.get("items")
    if not isinstance(items, list):
        return []
    out: list[str] = []
    for item in items:
        if isinstance(item, dict) and isinstance(item.get("$ref"), str):
            out.append(item["$ref"])
    return out


def events_of(payload: dict[str, Any]) -> list[dict[str, Any]]:
    events = payload.get("events")
    if not isinstance(events, list):
        return []
    return [e for e in events if isinstance(e, dict)]


def first_competition(event: dict[str, Any]) -> Optional[dict[str, Any]]:
    comps = event.get("competitions")
    if isinstance(comps, list) and comps and isinstance(comps[0], dict):
        return comps[0]
    return None

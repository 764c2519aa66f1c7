from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

import httpx
import pytest

from fixture_feed.config import PipelineConfig

ESPN = "https://espn.test"
SOFA = "https://sofa.test"
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=ZoneInfo("America/Bahia"))


def make_config(**overrides: Any) -> PipelineConfig:
    data: dict[str, Any] = {
        "timezone": "America/Bahia",
        "lookahead_days": 7,
        "primary_league": "bra.1",
        "primary_league_fallback": ["Flamengo", "São Paulo", "Grêmio"],
        "popular_teams": ["River Plate", "Real Madrid"],
        "national_teams": [
            {"id": 205, "name": "Brazil", "localized": "Brasil"},
            {"id": 202, "name": "Argentina", "localized": "Argentina"},
            {"id": -1, "name": "Italy", "localized": "Itália"},
        ],
        "competitions": [
            {"slug": "bra.1", "label": "Brasileirão Série A"},
            {"slug": "fifa.friendly", "label": "Amistosos internacionais"},
        ],
        "endpoints": {
            "scoreboard": ESPN + "/site/{slug}/scoreboard",
            "team_events": ESPN + "/core/teams/{team_id}/events",
            "league_teams": ESPN + "/core/leagues/{league}/teams",
        },
        "fallback": {
            "url": SOFA + "/scheduled-events/{day}",
            "tournament_id": 325,
            "label": "Brasileirão Série A",
        },
    }
    data.update(overrides)
    return PipelineConfig.model_validate(data)


class FakeApi:
    """Canned responses keyed by URL path and (optionally) query params."""

    def __init__(self) -> None:
        self.routes: list[tuple[str, dict[str, str], Any]] = []
        self.calls: list[httpx.Request] = []

    def add(
        self,
        url: str,
        payload: Any = None,
        *,
        params: Optional[dict[str, str]] = None,
        status: int = 200,
        text: Optional[str] = None,
        error: Optional[type[Exception]] = None,
    ) -> None:
        self.routes.append((url, params or {}, (payload, status, text, error)))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        for route_url, params, (payload, status, text, error) in self.routes:
            if route_url != url:
                continue
            if any(request.url.params.get(k) != v for k, v in params.items()):
                continue
            if error is not None:
                raise error("boom", request=request)
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=payload)
        return httpx.Response(404, json={"error": "not found"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requested(self, fragment: str) -> bool:
        return any(fragment in str(r.url) for r in self.calls)


def competitor(name: str, home_away: Optional[str] = None, **team: Any) -> dict[str, Any]:
    c: dict[str, Any] = {"team": {"displayName": name, **team}}
    if home_away:
        c["homeAway"] = home_away
    return c


def event(date: str, *competitors: dict[str, Any], **extra: Any) -> dict[str, Any]:
    comp = {"competitors": list(competitors)}
    comp.update(extra.pop("competition", {}))
    return {"id": extra.pop("id", "1"), "date": date, "competitions": [comp], **extra}


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def config() -> PipelineConfig:
    return make_config()

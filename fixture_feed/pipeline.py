from __future__ import annotations

import asyncio
import logging
import pathlib
from datetime import date, datetime, timedelta
from typing import Any, List, Optional

import httpx

from .adapters.espn import Absent, SourceFetcher, events_of, first_competition, refs
from .adapters.sofascore import fetch_fallback
from .config import PipelineConfig
from .extract import extract_fixture
from .merge import Deduplicator, sort_fixtures
from .models import Fixture, OutputDocument, TrackedTeam
from .registry import TeamRegistry
from .utils import day_offsets, local_date, now_in, parse_instant, write_json
from .window import Bucket, classify

log = logging.getLogger(__name__)


class Pipeline:
    """One run: fan out over competitions and national teams, then bucket."""

    def __init__(self, config: PipelineConfig, fetcher: SourceFetcher, now: datetime) -> None:
        self.config = config
        self.fetcher = fetcher
        self.now = now
        self.run_date: date = local_date(now, config.timezone)
        self.translations = {t.canonical_name.lower(): t.localized_name for t in config.national_teams}
        self.seen = Deduplicator()
        self.today: List[Fixture] = []
        self.future: List[Fixture] = []

    async def run(self) -> OutputDocument:
        registry = await TeamRegistry.load(self.fetcher, self.config)
        await self.scan_competitions(registry)
        if not self.today:
            log.info("no fixtures today from the competition scan, trying fallback source")
            for fx in await fetch_fallback(self.fetcher, self.config, self.run_date):
                if self.seen.is_new(fx):
                    self.today.append(fx)
        await self.scan_national_teams()
        doc = OutputDocument(today=sort_fixtures(self.today), future=sort_fixtures(self.future))
        log.info(
            "collected %d fixtures today and %d upcoming (%d distinct matches seen)",
            len(doc.today),
            len(doc.future),
            len(self.seen),
        )
        return doc

    async def scan_competitions(self, registry: TeamRegistry) -> None:
        days = day_offsets(self.run_date, self.config.lookahead_days)
        for comp in self.config.competitions:
            outcomes = await asyncio.gather(*(self.fetcher.scoreboard(comp.slug, d) for d in days))
            for offset, outcome in enumerate(outcomes):
                if isinstance(outcome, Absent):
                    continue
                leagues = outcome.payload.get("leagues")
                for event in events_of(outcome.payload):
                    fx = extract_fixture(
                        event,
                        first_competition(event),
                        translations=self.translations,
                        leagues=leagues if isinstance(leagues, list) else (),
                        default_label=comp.label,
                    )
                    if fx is None:
                        continue
                    if not (registry.is_tracked(fx.home_team.name) or registry.is_tracked(fx.away_team.name)):
                        continue
                    if not self.seen.is_new(fx):
                        continue
                    (self.today if offset == 0 else self.future).append(fx)

    async def scan_national_teams(self) -> None:
        end = self.run_date + timedelta(days=self.config.lookahead_days)
        for team in self.config.national_teams:
            if not team.resolved:
                log.debug("skipping %s: no ESPN id configured", team.canonical_name)
                continue
            for fx in await self._team_fixtures(team, end):
                if not self.seen.is_new(fx):
                    continue
                start = parse_instant(fx.start_date)
                bucket = classify(start, self.run_date, self.config.lookahead_days, self.config.timezone)
                if bucket is Bucket.TODAY:
                    self.today.append(fx)
                elif bucket is Bucket.FUTURE:
                    self.future.append(fx)

    async def _team_fixtures(self, team: TrackedTeam, end: date) -> List[Fixture]:
        outcome = await self.fetcher.team_events(team.external_id, self.run_date, end)
        if isinstance(outcome, Absent):
            return []
        out: List[Fixture] = []
        for ref in refs(outcome.payload):
            detail = await self.fetcher.event_detail(ref)
            if isinstance(detail, Absent):
                continue
            event = detail.payload
            competition = first_competition(event)
            if competition:
                await self._resolve_team_refs(competition)
            fx = extract_fixture(event, competition, translations=self.translations)
            if fx is not None:
                out.append(fx)
        return out

    async def _resolve_team_refs(self, competition: dict[str, Any]) -> None:
        # core API events link competitors' teams instead of embedding them
        for c in competition.get("competitors") or []:
            if not isinstance(c, dict):
                continue
            team = c.get("team")
            if isinstance(team, dict) and not team.get("displayName") and isinstance(team.get("$ref"), str):
                resolved = await self.fetcher.resolve(team["$ref"])
                if not isinstance(resolved, Absent):
                    c["team"] = resolved.payload


async def run_pipeline(
    config: PipelineConfig,
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> OutputDocument:
    # captured once, before any request
    now = now or now_in(config.timezone)
    if client is not None:
        return await Pipeline(config, SourceFetcher(client, config), now).run()
    headers = {"User-Agent": config.http.user_agent}
    async with httpx.AsyncClient(headers=headers, timeout=config.http.timeout, follow_redirects=True) as owned:
        return await Pipeline(config, SourceFetcher(owned, config), now).run()


def build(
    config: PipelineConfig,
    output: Optional[str | pathlib.Path] = None,
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> OutputDocument:
    doc = asyncio.run(run_pipeline(config, client=client, now=now))
    write_json(output or config.output.path, doc.dump(config.output.layout))
    return doc

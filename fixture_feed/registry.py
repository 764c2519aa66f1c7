from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .adapters.espn import Absent, SourceFetcher, refs
from .config import PipelineConfig
from .normalise import normalize_name

log = logging.getLogger(__name__)


def _name_set(names: Iterable[str]) -> frozenset[str]:
    return frozenset(normalize_name(n) for n in names if n)


async def _team_name(fetcher: SourceFetcher, ref: str) -> Optional[str]:
    outcome = await fetcher.resolve(ref)
    if isinstance(outcome, Absent):
        return None
    name = outcome.payload.get("displayName") or outcome.payload.get("name")
    return name if isinstance(name, str) and name else None


async def load_primary_league(fetcher: SourceFetcher, config: PipelineConfig) -> frozenset[str]:
    """Live roster of the primary league, or the static roster when that fails.

    Team details are resolved concurrently; a team whose detail lookup fails is
    left out of the roster.
    """
    fallback = _name_set(config.primary_league_fallback)
    outcome = await fetcher.league_teams(config.primary_league)
    if isinstance(outcome, Absent):
        log.info("using static roster for %s", config.primary_league)
        return fallback
    team_refs = refs(outcome.payload)
    names = await asyncio.gather(*(_team_name(fetcher, r) for r in team_refs))
    roster = _name_set(n for n in names if n)
    if not roster:
        log.info("empty live roster for %s, using static roster", config.primary_league)
        return fallback
    log.info("loaded %d teams for %s", len(roster), config.primary_league)
    return roster


@dataclass(frozen=True)
class TeamRegistry:
    primary: frozenset[str]
    popular: frozenset[str]

    @classmethod
    def from_config(cls, config: PipelineConfig, primary: Iterable[str]) -> "TeamRegistry":
        national = [n for t in config.national_teams for n in (t.canonical_name, t.localized_name)]
        return cls(
            primary=_name_set(primary),
            popular=_name_set(list(config.popular_teams) + national),
        )

    @classmethod
    async def load(cls, fetcher: SourceFetcher, config: PipelineConfig) -> "TeamRegistry":
        return cls.from_config(config, await load_primary_league(fetcher, config))

    def is_tracked(self, display_name: str) -> bool:
        key = normalize_name(display_name)
        return key in self.primary or key in self.popular

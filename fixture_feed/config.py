"""Configuration tables for the fixture pipeline.

Competition slugs, tracked teams, endpoints and output settings are loaded from
YAML and validated once, then passed into the registry and the pipeline.
"""
from __future__ import annotations

import pathlib
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .models import TrackedTeam
from .utils import REFERENCE_TZ, read_env

DEFAULT_CONFIG = pathlib.Path(__file__).resolve().parent / "config.yaml"


class ConfigError(ValueError):
    pass


class CompetitionSource(BaseModel):
    slug: str
    label: str = ""


class Endpoints(BaseModel):
    scoreboard: str = "https://site.api.espn.com/apis/site/v2/sports/soccer/{slug}/scoreboard"
    team_events: str = "https://sports.core.api.espn.com/v2/sports/soccer/teams/{team_id}/events"
    league_teams: str = "https://sports.core.api.espn.com/v2/sports/soccer/leagues/{league}/teams"


class FallbackSettings(BaseModel):
    enabled: bool = True
    url: str = "https://api.sofascore.com/api/v1/sport/football/scheduled-events/{day}"
    tournament_id: int = 325
    label: str = "Brasileirão Série A"


class HttpSettings(BaseModel):
    timeout: float = 15.0
    attempts: int = Field(default=1, ge=1)
    user_agent: str = "fixture-feed/0.1"


class OutputSettings(BaseModel):
    path: str = "games.json"
    layout: Literal["buckets", "flat"] = "buckets"


class PipelineConfig(BaseModel):
    timezone: str = REFERENCE_TZ
    lookahead_days: int = Field(default=7, ge=0)
    primary_league: str = "bra.1"
    primary_league_fallback: List[str] = Field(default_factory=list)
    popular_teams: List[str] = Field(default_factory=list)
    national_teams: List[TrackedTeam] = Field(default_factory=list)
    competitions: List[CompetitionSource] = Field(default_factory=list)
    endpoints: Endpoints = Field(default_factory=Endpoints)
    fallback: FallbackSettings = Field(default_factory=FallbackSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    def competition_label(self, slug: str) -> str:
        for c in self.competitions:
            if c.slug == slug:
                return c.label
        return ""


def load_config(path: Optional[str | pathlib.Path] = None) -> PipelineConfig:
    cfg_path = pathlib.Path(path or read_env("FIXTURE_FEED_CONFIG") or DEFAULT_CONFIG)
    try:
        raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {cfg_path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must contain a mapping at the root.")
    try:
        cfg = PipelineConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid config {cfg_path}: {e}") from e
    env_output = read_env("FIXTURE_FEED_OUTPUT")
    if env_output:
        cfg.output.path = env_output
    return cfg

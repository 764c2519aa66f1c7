from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .utils import parse_instant


class TeamSide(BaseModel):
    name: str = Field(min_length=1)
    logo: str = ""  # URL or empty string


class Fixture(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: str = Field(alias="startDate")  # ISO8601 Z
    home_team: TeamSide = Field(alias="homeTeam")
    away_team: TeamSide = Field(alias="awayTeam")
    competition: str = ""
    broadcast: str = ""

    @property
    def kickoff(self) -> Optional[datetime]:
        return parse_instant(self.start_date)

    def dump(self) -> dict:
        return self.model_dump(by_alias=True)


class OutputDocument(BaseModel):
    today: List[Fixture] = Field(default_factory=list)
    future: List[Fixture] = Field(default_factory=list)

    def dump(self, layout: str = "buckets"):
        if layout == "flat":
            merged = sorted(self.today + self.future, key=lambda f: f.kickoff)
            return [f.dump() for f in merged]
        return {
            "today": [f.dump() for f in self.today],
            "future": [f.dump() for f in self.future],
        }


class TrackedTeam(BaseModel):
    """A national team followed through ESPN's team events endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    external_id: Optional[int] = Field(default=None, alias="id")
    canonical_name: str = Field(alias="name")
    localized_name: str = Field(alias="localized")

    @property
    def resolved(self) -> bool:
        # ids <= 0 are placeholders for teams whose ESPN id is still unknown
        return self.external_id is not None and self.external_id > 0

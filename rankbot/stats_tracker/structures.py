from dataclasses import dataclass
from enum import Enum
from typing import TypedDict


class Platform(str, Enum):
    STEAM = "steam"
    EPIC = "epic"
    XBOX = "xbl"
    PSN = "psn"


class Region(str, Enum):
    NA = "na"
    EU = "eu"
    AP = "ap"
    KR = "kr"


@dataclass(frozen=True)
class RocketLeagueQuery:
    platform: Platform
    username: str


@dataclass(frozen=True)
class ValorantQuery:
    region: Region
    username: str
    tag: str


class PlaylistEntry(TypedDict):
    """
    One playlist of the Rocket League rankings, in API field naming.
    """
    playlist: str
    rankName: str
    divisionName: str
    mmr: int
    deltaUp: int
    deltaDown: int


class RocketLeagueRanks(TypedDict):
    displayName: str
    rankings: list[PlaylistEntry]


class ValorantRank(TypedDict):
    """
    Flattened view of the ``data`` object returned by the Valorant MMR endpoint.
    """
    name: str
    tag: str
    currentTierPatched: str
    elo: int
    mmrChangeLastGame: int

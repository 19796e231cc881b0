import asyncio
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from rankbot.logger import logger
from rankbot.stats_tracker.errors import (
    RankError, OptionMissing, NetworkError, Cancelled, DecodeError, PlayerNotFound
)
from rankbot.stats_tracker.structures import (
    Platform, Region, RocketLeagueQuery, ValorantQuery, PlaylistEntry, RocketLeagueRanks, ValorantRank
)

DEFAULT_TIMEOUT = 10.0

_MISSING = object()


def _field(data: dict, key: str, kind: type, default: Any = _MISSING) -> Any:
    value = data.get(key)
    if value is None:
        if default is _MISSING:
            raise DecodeError(f"Missing field '{key}'")
        return default
    # bool is an int subclass, JSON booleans are never valid counters
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DecodeError(f"Field '{key}' should be {kind.__name__}, got {type(value).__name__}")
    return value


def parse_rocket_league(data: Any) -> RocketLeagueRanks:
    if not isinstance(data, dict):
        raise DecodeError("Rocket League response is not a JSON object")
    rankings = _field(data, "rankings", list, [])
    entries: list[PlaylistEntry] = []
    for raw in rankings:
        if not isinstance(raw, dict):
            raise DecodeError("Rocket League ranking entry is not a JSON object")
        entries.append(PlaylistEntry(
            playlist=_field(raw, "playlist", str, ""),
            rankName=_field(raw, "rankName", str, ""),
            divisionName=_field(raw, "divisionName", str, ""),
            mmr=_field(raw, "mmr", int, 0),
            deltaUp=_field(raw, "deltaUp", int, 0),
            deltaDown=_field(raw, "deltaDown", int, 0),
        ))
    return RocketLeagueRanks(
        displayName=_field(data, "displayName", str, ""),
        rankings=entries
    )


def parse_valorant(data: Any) -> ValorantRank:
    if not isinstance(data, dict):
        raise DecodeError("Valorant response is not a JSON object")
    player = _field(data, "data", dict)
    current = _field(player, "current_data", dict, {})
    return ValorantRank(
        name=_field(player, "name", str, ""),
        tag=_field(player, "tag", str, ""),
        currentTierPatched=_field(current, "currenttierpatched", str, ""),
        elo=_field(current, "elo", int, 0),
        mmrChangeLastGame=_field(current, "mmr_change_to_last_game", int, 0),
    )


def build_url(base_url: str, *segments: str) -> str:
    path = "/".join(quote(str(segment), safe="") for segment in segments)
    return f"{base_url.rstrip('/')}/{path}"


class StatsClient:
    """
    Issues one GET per rank lookup against the configured stats providers.

    The ``aiohttp.ClientSession`` is owned by the caller; the client never
    opens or closes it. Every request carries its own deadline of ``timeout``
    seconds, after which :class:`Cancelled` is raised.
    """

    def __init__(
            self,
            session: aiohttp.ClientSession,
            rocket_league_url: str,
            valorant_url: str,
            timeout: float = DEFAULT_TIMEOUT
    ):
        self.session = session
        self.rocket_league_url = rocket_league_url
        self.valorant_url = valorant_url
        self.timeout = timeout

    async def fetch(self, query: RocketLeagueQuery | ValorantQuery) -> RocketLeagueRanks | ValorantRank:
        if isinstance(query, RocketLeagueQuery):
            return await self.fetch_rocket_league(query)
        if isinstance(query, ValorantQuery):
            return await self.fetch_valorant(query)
        raise TypeError(f"Unsupported query type {type(query).__name__}")

    async def fetch_rocket_league(self, query: RocketLeagueQuery) -> RocketLeagueRanks:
        url = build_url(self.rocket_league_url, query.platform.value, query.username)
        data = await self._get_json(url, params={"raw": "true"})
        ranks = parse_rocket_league(data)
        if not ranks["displayName"]:
            raise PlayerNotFound(f"No Rocket League player {query.username} on {query.platform.value}")
        return ranks

    async def fetch_valorant(self, query: ValorantQuery) -> ValorantRank:
        url = build_url(self.valorant_url, query.region.value, query.username, query.tag)
        data = await self._get_json(url)
        rank = parse_valorant(data)
        if not rank["name"]:
            raise PlayerNotFound(f"No Valorant player {query.username}#{query.tag} in {query.region.value}")
        return rank

    async def _get_json(self, url: str, params: Optional[dict[str, str]] = None) -> Any:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        logger.debug(f"GET {url} params={params}")
        try:
            async with self.session.get(url, params=params, timeout=timeout) as response:
                if response.status == 404:
                    raise PlayerNotFound(f"{url} answered 404")
                if not 200 <= response.status < 300:
                    raise NetworkError(f"{url} answered {response.status}", status=response.status)
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise DecodeError(f"Invalid JSON from {url}: {e}") from e
        except asyncio.TimeoutError as e:
            raise Cancelled(f"Request to {url} exceeded {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"HTTP error requesting {url}: {e}") from e


__all__ = [
    "StatsClient", "build_url", "parse_rocket_league", "parse_valorant", "DEFAULT_TIMEOUT",
    "RankError", "OptionMissing", "NetworkError", "Cancelled", "DecodeError", "PlayerNotFound",
    "Platform", "Region", "RocketLeagueQuery", "ValorantQuery",
    "PlaylistEntry", "RocketLeagueRanks", "ValorantRank",
]

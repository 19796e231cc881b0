from dataclasses import dataclass
from typing import Optional

from discord import Embed, Colour

from rankbot.stats_tracker.structures import PlaylistEntry, RocketLeagueRanks, ValorantRank

WHITE = 0xFFFFFF

RANK_COLOURS = {
    "Unranked": 0x797373,
    "Iron": 0x3b3b3b,
    "Bronze": 0x69450d,
    "Silver": 0xbbbfbe,
    "Gold": 0xdd9623,
    "Platinum": 0x328d9e,
    "Diamond": 0xd781e9,
    "Ascendant": 0x1e8a51,
    "Immortal": 0xb02639,
    "Radiant": 0xfce29b,
}

UNRANKED_PLAYLIST = "unranked"


@dataclass(frozen=True)
class PresentationOutput:
    title: str
    description: Optional[str] = None
    colour: Optional[int] = None

    def to_embed(self) -> Embed:
        embed = Embed(title=self.title)
        if self.description:
            embed.description = self.description
        if self.colour is not None:
            embed.colour = Colour(self.colour)
        return embed


def rank_to_colour(tier: str) -> int:
    return RANK_COLOURS.get(tier, WHITE)


def get_delta(delta_up: int, delta_down: int) -> str:
    """
    Render the rank movement hint shown next to a playlist MMR.

    The API exposes two independent counters; the smaller one is displayed,
    with a down arrow when it is ``delta_down`` and an up arrow when it is
    ``delta_up``. Equal counters render nothing.
    """
    if delta_up > delta_down:
        return f"▼ {delta_down}"
    elif delta_up < delta_down:
        return f"▲ {delta_up}"
    return ""


def _is_separator(char: str) -> bool:
    if char.isalnum() or char == "_":
        return False
    # outside ASCII only whitespace starts a new word
    return char.isascii() or char.isspace()


def _title_words(text: str) -> str:
    chars = []
    at_word_start = True
    for char in text:
        chars.append(char.upper() if at_word_start else char)
        at_word_start = _is_separator(char)
    return "".join(chars)


def format_playlist_name(playlist: str) -> str:
    """ranked_2v2 -> Ranked 2V2"""
    return _title_words(playlist.replace("_", " ").replace("v", "V", 1))


def format_playlist_line(entry: PlaylistEntry) -> str:
    delta = get_delta(entry["deltaUp"], entry["deltaDown"])
    mmr = f"{entry['mmr']} {delta}" if delta else str(entry["mmr"])
    return f"{format_playlist_name(entry['playlist'])}: {entry['rankName']} {entry['divisionName']} ({mmr})"


def rocket_league_output(ranks: RocketLeagueRanks) -> PresentationOutput:
    lines = [
        format_playlist_line(entry)
        for entry in ranks["rankings"]
        if entry["playlist"] != UNRANKED_PLAYLIST
    ]
    return PresentationOutput(
        title=f"Ranks for {ranks['displayName']}",
        description="\n".join(lines) or None
    )


def valorant_output(rank: ValorantRank) -> PresentationOutput:
    tier = rank["currentTierPatched"]
    return PresentationOutput(
        title=f"Rank for {rank['name']}#{rank['tag']}",
        description=f"Rank: {tier}\nELO: {rank['elo']}\nMMR Last Game: {rank['mmrChangeLastGame']}",
        colour=rank_to_colour(tier.split(" ")[0])
    )


def failure_output(username: str, tag: Optional[str] = None) -> PresentationOutput:
    if tag is None:
        return PresentationOutput(title=f"Failed to get rank for {username}")
    return PresentationOutput(title=f"Failed to get ranks for {username}#{tag}")

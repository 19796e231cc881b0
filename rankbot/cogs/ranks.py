from enum import Enum
from typing import TYPE_CHECKING, Optional, TypeVar

from discord import Cog, Option, OptionChoice, slash_command

from rankbot.lib.extension_context import RankApplicationContext as ApplicationContext
from rankbot.lib.presentation import PresentationOutput, failure_output, rocket_league_output, valorant_output
from rankbot.logger import logger
from rankbot.stats_tracker import (
    StatsClient, RankError, OptionMissing, Platform, Region, RocketLeagueQuery, ValorantQuery
)

if TYPE_CHECKING:
    from rankbot.bot import RankBot

E = TypeVar("E", bound=Enum)

PLATFORM_CHOICES = [
    OptionChoice("Steam", Platform.STEAM.value),
    OptionChoice("Epic", Platform.EPIC.value),
    OptionChoice("Xbox", Platform.XBOX.value),
    OptionChoice("Playstation", Platform.PSN.value),
]

REGION_CHOICES = [
    OptionChoice("North America/South America", Region.NA.value),
    OptionChoice("Europe", Region.EU.value),
    OptionChoice("Asia-Pacific", Region.AP.value),
    OptionChoice("Korea", Region.KR.value),
]


def require_option(name: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise OptionMissing(name)
    return str(value).strip()


def require_choice(name: str, value: Optional[str], enum: type[E]) -> E:
    raw = require_option(name, value)
    try:
        return enum(raw)
    except ValueError:
        raise OptionMissing(name, reason=f"not one of {[member.value for member in enum]}") from None


async def handle_rlrank(
        actx: ApplicationContext,
        client: StatsClient,
        username: Optional[str],
        platform: Optional[str]
) -> PresentationOutput:
    await actx.defer_ephemeral()
    try:
        query = RocketLeagueQuery(
            platform=require_choice("platform", platform, Platform),
            username=require_option("username", username)
        )
        output = rocket_league_output(await client.fetch_rocket_league(query))
    except RankError as e:
        logger.warning(f"rlrank failed for {platform}/{username}: {e!r}")
        output = failure_output(username or "?")
    except Exception as e:
        logger.error(f"Unexpected error in rlrank for {platform}/{username}: {e}", exc_info=True)
        output = failure_output(username or "?")
    await actx.edit_output(output)
    return output


async def handle_valrank(
        actx: ApplicationContext,
        client: StatsClient,
        username: Optional[str],
        tag: Optional[str],
        region: Optional[str]
) -> PresentationOutput:
    await actx.defer_ephemeral()
    try:
        query = ValorantQuery(
            region=require_choice("region", region, Region),
            username=require_option("username", username),
            tag=require_option("tag", tag)
        )
        output = valorant_output(await client.fetch_valorant(query))
    except RankError as e:
        logger.warning(f"valrank failed for {region}/{username}#{tag}: {e!r}")
        output = failure_output(username or "?", tag or "?")
    except Exception as e:
        logger.error(f"Unexpected error in valrank for {region}/{username}#{tag}: {e}", exc_info=True)
        output = failure_output(username or "?", tag or "?")
    await actx.edit_output(output)
    return output


class RankCog(Cog):
    def __init__(self, bot: "RankBot"):
        self.bot = bot

    @slash_command(name="rlrank", description="Get users Rocket League rank")
    async def rlrank(
            self,
            actx: ApplicationContext,
            username: Option(str, "Username", required=True),
            platform: Option(str, "Platform", required=True, choices=PLATFORM_CHOICES)
    ):
        await handle_rlrank(actx, self.bot.stats_client, username, platform)

    @slash_command(name="valrank", description="Get users Valorant rank")
    async def valrank(
            self,
            actx: ApplicationContext,
            username: Option(str, "Username", required=True),
            tag: Option(str, "Tag after #", required=True),
            region: Option(str, "Region", required=True, choices=REGION_CHOICES)
    ):
        await handle_valrank(actx, self.bot.stats_client, username, tag, region)


def setup(bot: "RankBot"):
    bot.add_cog(RankCog(bot))
    logger.debug("RankCog loaded successfully.")

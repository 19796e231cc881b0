from typing import TYPE_CHECKING

from discord import Cog, HTTPException

from rankbot.lib.extension_context import RankApplicationContext as ApplicationContext
from rankbot.logger import logger

if TYPE_CHECKING:
    from rankbot.bot import RankBot


class ErrorHandler(Cog):
    def __init__(self, bot: "RankBot"):
        self.bot = bot

    @Cog.listener()
    async def on_application_command_error(self, actx: ApplicationContext, error: Exception):
        if actx.command is not None and actx.command.has_error_handler():
            return

        logger.error(f"Unhandled error in application command {actx.command}: {error}",
                     exc_info=error, stack_info=True)
        try:
            await actx.respond("❌ This command is not available right now.", ephemeral=True)
        except HTTPException as e:
            logger.error(f"Could not report command error to the user: {e}")


def setup(bot: "RankBot"):
    bot.add_cog(ErrorHandler(bot))
    logger.debug("ErrorHandler loaded successfully.")

import asyncio
from enum import Enum

import aiohttp
from discord import ApplicationContext, HTTPException

from rankbot.lib.presentation import PresentationOutput
from rankbot.logger import logger


# py-cord lets transport errors from its HTTP client through untouched
REPLY_ERRORS = (HTTPException, aiohttp.ClientError, asyncio.TimeoutError)


class InvocationState(str, Enum):
    RECEIVED = "received"
    DEFERRED = "deferred"
    COMPLETED = "completed"


class RankApplicationContext(ApplicationContext):
    """
    Application context that owns the reply lifecycle of a rank command:
    an ephemeral deferral first, then exactly one edit of that deferred reply.
    """

    def __init__(self, bot, interaction):
        super().__init__(bot, interaction)
        self.invocation_state = InvocationState.RECEIVED

    async def defer_ephemeral(self) -> None:
        if self.invocation_state is not InvocationState.RECEIVED:
            logger.warning(f"Interaction {self.interaction.id} already {self.invocation_state.value}, not deferring")
            return
        try:
            await self.defer(ephemeral=True)
        except REPLY_ERRORS as e:
            logger.error(f"Error sending deferred response: {e}", exc_info=True)
        self.invocation_state = InvocationState.DEFERRED

    async def edit_output(self, output: PresentationOutput) -> bool:
        """
        Edit the deferred reply with ``output``.

        :return: ``False`` when the reply was already completed or the edit could not be delivered.
        """
        if self.invocation_state is InvocationState.COMPLETED:
            logger.error(f"Interaction {self.interaction.id} already completed, dropping '{output.title}'")
            return False
        self.invocation_state = InvocationState.COMPLETED
        try:
            await self.edit(embed=output.to_embed())
        except REPLY_ERRORS as e:
            logger.error(f"Error editing response: {e}", exc_info=True)
            return False
        return True

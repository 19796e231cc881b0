import os
import sys
import traceback

from discord import Activity, ActivityType, Bot, ExtensionFailed, HTTPException, Intents, Interaction, \
    NoEntryPointError

from rankbot.lib.extension_context import RankApplicationContext as ApplicationContext
from rankbot.logger import logger
from rankbot.stats_tracker import DEFAULT_TIMEOUT, StatsClient
from rankbot.stats_tracker.http_session import close_session, create_session

COGS = ["ranks", "error_handler"]

TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in TRUTHY


def env_ids(name: str) -> list[int]:
    return [int(x) for x in os.getenv(name, "").split(",") if x.strip()]


def env_required(name: str) -> str:
    value = os.getenv(name)
    if not value:
        logger.error(f"{name} not found in environment variables. Please set it in your .env file.")
        raise RuntimeError(f"{name} not found in environment variables. Please set it in your .env file.")
    return value


def env_positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if not value > 0:
        logger.error(f"{name} must be a positive number of seconds, got {raw!r}.")
        raise RuntimeError(f"{name} must be a positive number of seconds, got {raw!r}.")
    return value


class RankBot(Bot):
    def __init__(self):
        self.guild_ids = env_ids("GUILD_IDS")
        super().__init__(
            intents=Intents.default(),
            debug_guilds=self.guild_ids or None
        )
        self.version = None
        self.token = env_required("TOKEN")
        self.rocket_league_url = env_required("RL_API")
        self.valorant_url = env_required("VAL_API")
        self.stats_timeout = env_positive_float("STATS_TIMEOUT", DEFAULT_TIMEOUT)
        self.remove_commands_on_shutdown = env_flag("REMOVE_COMMANDS", True)
        self.stats_session = None
        self.stats_client: StatsClient | None = None
        self._closing = False

    def run(self, version: str):
        self.version = version
        logger.info("Starting Rank Bot version %s", self.version)
        logger.info("Running setup . . .")
        self.setup_cogs()
        logger.info("Setup complete. Running bot . . .")
        super().run(self.token, reconnect=True)

    def setup_cogs(self):
        for cog in COGS:
            try:
                logger.debug("Loading cog: %s", cog)
                self.load_extension(f"rankbot.cogs.{cog}")
            except (NoEntryPointError, ExtensionFailed) as e:
                logger.error("Ignoring %s (load failed): %s", cog, e, exc_info=True)
                traceback.print_exception(type(e), e, e.__traceback__, file=sys.stderr)
            else:
                logger.debug("Cog %s loaded successfully", cog)

    def open_stats_client(self) -> StatsClient:
        if self.stats_session is None or self.stats_session.closed:
            self.stats_session = create_session()
            self.stats_client = StatsClient(
                session=self.stats_session,
                rocket_league_url=self.rocket_league_url,
                valorant_url=self.valorant_url,
                timeout=self.stats_timeout
            )
        return self.stats_client

    async def on_connect(self):
        self.open_stats_client()
        logger.info("Adding commands...")
        await self.sync_commands()
        logger.info(f"Bot {self.user} connected to Discord.")

    async def on_ready(self):
        logger.info(f"Logged in as: {self.user}")
        await self.change_presence(activity=Activity(type=ActivityType.watching, name="/rlrank | /valrank"))

    async def get_application_context(self, interaction: Interaction, cls=ApplicationContext):
        return await super().get_application_context(interaction, cls=cls)

    async def remove_registered_commands(self) -> None:
        """Overwrite this application's commands with an empty set, globally or per scoped guild."""
        if self.application_id is None:
            return
        logger.info("Removing commands...")
        try:
            if self.guild_ids:
                for guild_id in self.guild_ids:
                    await self.http.bulk_upsert_guild_commands(self.application_id, guild_id, [])
            else:
                await self.http.bulk_upsert_global_commands(self.application_id, [])
        except HTTPException as e:
            logger.error(f"Cannot remove commands: {e}", exc_info=True)

    async def close(self):
        if not self._closing:
            self._closing = True
            if self.remove_commands_on_shutdown:
                await self.remove_registered_commands()
            await close_session(self.stats_session)
            logger.info("Gracefully shutting down.")
        await super().close()

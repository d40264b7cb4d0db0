"""
Telegram Bot
Wires the report caches to chat commands and owns their lifecycle.
"""

import logging
from typing import Optional

from telegram import Update
from telegram.ext import Application, CommandHandler

from rankbot.config import Settings, settings as default_settings
from rankbot.domain.services.config_engine import ConfigEngine
from rankbot.infrastructure.gas.rpc_provider import RpcGasPriceProvider
from rankbot.infrastructure.http import build_http_client
from rankbot.infrastructure.market_data.provider_factory import get_market_data_provider
from rankbot.services.gas_price_cache import GasPriceCache
from rankbot.services.market_snapshot_cache import MarketRefreshWorker, MarketSnapshotCache
from rankbot.telegram.handlers import CommandHandlers
from rankbot.utils.time import report_now

logger = logging.getLogger(__name__)

MARKET_COMMANDS = ("check_scroll_ranking", "rank")
GAS_COMMANDS = ("get_current_gas_price", "gas_price")


class RankTelegramBot:
    """Market rank & gas price bot"""

    def __init__(self, settings: Optional[Settings] = None, config_engine: Optional[ConfigEngine] = None):
        self.settings = settings or default_settings
        self.token = self.settings.TELEGRAM_BOT_TOKEN
        if not self.token:
            raise ValueError("TELEGRAM_BOT_TOKEN not set in environment")

        if config_engine is None:
            config_engine = ConfigEngine(self.settings.TRACKING_CONFIG_DIR, self.settings.SYMBOLS_FILE)
            config_engine.load_all()
        self.config_engine = config_engine

        true_utc = self.settings.REPORT_TIMESTAMP_TRUE_UTC

        def clock():
            return report_now(true_utc=true_utc)

        self.http_client = build_http_client(
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            user_agent=self.settings.USER_AGENT,
        )
        self.market_provider = get_market_data_provider(
            config_engine.exchange_symbols, client=self.http_client, settings=self.settings
        )
        self.market_cache = MarketSnapshotCache(self.market_provider, config_engine.assets, clock=clock)
        self.gas_cache = GasPriceCache(
            RpcGasPriceProvider(client=self.http_client),
            config_engine.networks,
            ttl_seconds=self.settings.GAS_CACHE_TTL_SECONDS,
            clock=clock,
        )
        self.worker = MarketRefreshWorker(
            self.market_cache, interval_seconds=self.settings.MARKET_REFRESH_INTERVAL_SECONDS
        )
        self.handlers = CommandHandlers(self.market_cache, self.gas_cache)

    async def _post_init(self, application: Application) -> None:
        me = await application.bot.get_me()
        logger.info("Authorized on account %s", me.username)
        self.worker.start()
        logger.info(
            "Market refresh started (every %ss), tracking %d assets and %d networks",
            self.settings.MARKET_REFRESH_INTERVAL_SECONDS,
            len(self.market_cache.assets),
            len(self.gas_cache.networks),
        )

    async def _post_shutdown(self, application: Application) -> None:
        await self.worker.stop()
        await self.market_provider.close()
        await self.http_client.aclose()
        logger.info("Market refresh stopped, HTTP client closed")

    def build_application(self) -> Application:
        application = (
            Application.builder()
            .token(self.token)
            .post_init(self._post_init)
            .post_shutdown(self._post_shutdown)
            .build()
        )

        application.add_handler(CommandHandler(["start", "help"], self.handlers.start))
        application.add_handler(CommandHandler(list(MARKET_COMMANDS), self.handlers.market))
        application.add_handler(CommandHandler(list(GAS_COMMANDS), self.handlers.gas))
        application.add_error_handler(self.handlers.error_handler)
        return application

    def run(self):
        """Run the bot (blocking, long polling)"""
        logger.info("Starting Telegram bot...")
        application = self.build_application()
        application.run_polling(allowed_updates=Update.ALL_TYPES)

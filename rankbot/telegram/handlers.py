import logging

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from rankbot.services.gas_price_cache import GasPriceCache
from rankbot.services.market_snapshot_cache import MarketSnapshotCache

logger = logging.getLogger(__name__)

MARKET_UNAVAILABLE_MSG = "Sorry, market data is not available yet. Please try again in a moment."
GAS_ERROR_MSG = "Sorry, there was an error fetching gas prices."
GENERIC_ERROR_MSG = "Sorry, something went wrong. Please try again."

HELP_TEXT = (
    "📊 Crypto rank bot\n\n"
    "/check_scroll_ranking (or /rank) - price, volume, market cap and FDV share\n"
    "/get_current_gas_price (or /gas_price) - current gas prices in Gwei"
)


# ----------------------------
# Delivery
# ----------------------------

async def send_reply(update: Update, text: str) -> None:
    """Reply to the originating chat; delivery failures are logged, not retried."""
    message = update.effective_message
    if message is None:
        return
    try:
        await message.reply_text(text)
    except TelegramError as exc:
        chat_id = update.effective_chat.id if update.effective_chat else None
        logger.error("Reply to chat %s failed: %s", chat_id, exc)


class CommandHandlers:
    """Chat commands backed by the two report caches."""

    def __init__(self, market_cache: MarketSnapshotCache, gas_cache: GasPriceCache):
        self.market_cache = market_cache
        self.gas_cache = gas_cache

    # ----------------------------
    # Replies
    # ----------------------------

    def market_reply(self) -> str:
        return self.market_cache.get() or MARKET_UNAVAILABLE_MSG

    async def gas_reply(self) -> str:
        try:
            return await self.gas_cache.get_or_refresh()
        except Exception:
            logger.exception("Gas price refresh failed")
            return GAS_ERROR_MSG

    # ----------------------------
    # Commands
    # ----------------------------

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await send_reply(update, HELP_TEXT)

    async def market(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await send_reply(update, self.market_reply())

    async def gas(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await send_reply(update, await self.gas_reply())

    async def error_handler(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        logger.error("Update %s caused error %s", update, context.error)
        if isinstance(update, Update):
            await send_reply(update, GENERIC_ERROR_MSG)

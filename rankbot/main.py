"""
Process entry point: python -m rankbot.main
"""

import logging

from rankbot.config import settings
from rankbot.core.logging import setup_logging
from rankbot.telegram.bot import RankTelegramBot

logger = logging.getLogger(__name__)


def main():
    setup_logging(settings.LOG_LEVEL)
    logger.info("Exchange fallback: %s", "enabled" if settings.MARKET_FALLBACK_ENABLED else "disabled")
    bot = RankTelegramBot(settings)
    bot.run()


if __name__ == "__main__":
    main()

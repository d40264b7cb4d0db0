import pytest
from telegram.ext import CommandHandler

from rankbot.config import Settings
from rankbot.domain.services.config_engine import ConfigEngine
from rankbot.infrastructure.market_data.coingecko_provider import CoinGeckoProvider
from rankbot.infrastructure.market_data.provider_chain import FallbackMarketDataProvider
from rankbot.infrastructure.market_data.provider_factory import get_market_data_provider
from rankbot.telegram.bot import RankTelegramBot


def _settings(**overrides):
    return Settings(_env_file=None, **overrides)


def _engine():
    engine = ConfigEngine()
    engine.load_all()
    return engine


def test_missing_token_rejected(monkeypatch):
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    with pytest.raises(ValueError, match="TELEGRAM_BOT_TOKEN"):
        RankTelegramBot(_settings(TELEGRAM_BOT_TOKEN=None), config_engine=_engine())


def test_application_registers_commands():
    bot = RankTelegramBot(_settings(TELEGRAM_BOT_TOKEN="123456:TEST-TOKEN"), config_engine=_engine())
    application = bot.build_application()

    commands = set()
    for handler in application.handlers[0]:
        assert isinstance(handler, CommandHandler)
        commands |= set(handler.commands)

    assert commands == {"start", "help", "check_scroll_ranking", "rank", "get_current_gas_price", "gas_price"}
    assert [a.key for a in bot.market_cache.assets] == ["starknet", "zksync", "taiko", "scroll"]
    assert bot.gas_cache.ttl_seconds == 60


def test_factory_defaults_to_coingecko_only():
    provider = get_market_data_provider({}, settings=_settings(MARKET_FALLBACK_ENABLED=False))
    assert isinstance(provider, CoinGeckoProvider)


def test_factory_builds_fallback_chain():
    symbols = _engine().exchange_symbols
    provider = get_market_data_provider(
        symbols, settings=_settings(MARKET_FALLBACK_ENABLED=True, SUPPLY_TTL_SECONDS=60)
    )

    assert isinstance(provider, FallbackMarketDataProvider)
    assert [e.name for e in provider.exchanges] == ["binance", "okx", "bybit", "bitget"]
    assert provider.supply_ttl_seconds == 60
    assert provider.exchange_symbols["scroll"].bybit == "SCRUSDT"

"""
CONFIG ENGINE
Load, validate, and expose tracking configuration

RESPONSIBILITIES:
- Load tracking.yml (assets, networks, exchange symbols)
- Merge optional exchange symbol overrides
- Expose read-only typed objects

RULES:
✅ Fail fast on missing or invalid config
✅ Preserve configured order (it is the reply order)
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from rankbot.domain.models import ExchangeSymbols, TrackedAsset, TrackedNetwork

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"
EXCHANGES = ("binance", "okx", "bybit", "bitget")


def _parse_symbols(raw: Dict) -> Dict[str, ExchangeSymbols]:
    symbols: Dict[str, ExchangeSymbols] = {}
    for key, pairs in (raw or {}).items():
        pairs = pairs or {}
        unknown = set(pairs) - set(EXCHANGES)
        if unknown:
            raise ValueError(f"Unknown exchanges for {key}: {sorted(unknown)}")
        symbols[str(key)] = ExchangeSymbols(**{name: str(pairs.get(name) or "") for name in EXCHANGES})
    return symbols


class ConfigEngine:
    """
    Configuration Engine
    Single source of truth for what the bot tracks
    """

    def __init__(self, config_dir: Optional[Path] = None, symbols_file: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.symbols_file = Path(symbols_file) if symbols_file else None
        self._assets: List[TrackedAsset] = []
        self._networks: List[TrackedNetwork] = []
        self._exchange_symbols: Dict[str, ExchangeSymbols] = {}

    @property
    def assets(self) -> List[TrackedAsset]:
        return list(self._assets)

    @property
    def networks(self) -> List[TrackedNetwork]:
        return list(self._networks)

    @property
    def exchange_symbols(self) -> Dict[str, ExchangeSymbols]:
        return dict(self._exchange_symbols)

    def load_all(self) -> None:
        """Load tracking.yml and the optional symbols override file"""
        tracking_file = self.config_dir / "tracking.yml"
        if not tracking_file.exists():
            raise FileNotFoundError(f"Tracking config not found: {tracking_file}")

        with open(tracking_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        self._assets = [
            TrackedAsset(key=str(item["key"]), name=str(item["name"]))
            for item in data.get("assets", [])
        ]
        self._networks = [
            TrackedNetwork(name=str(item["name"]), rpc_url=str(item["rpc_url"]), glyph=str(item["glyph"]))
            for item in data.get("networks", [])
        ]
        self._exchange_symbols = _parse_symbols(data.get("exchange_symbols", {}))
        self._load_symbol_overrides()
        self._validate_all()

    def _load_symbol_overrides(self) -> None:
        if self.symbols_file is None:
            return
        if not self.symbols_file.exists():
            logger.warning("Symbols file %s not found, using defaults", self.symbols_file)
            return

        with open(self.symbols_file, "r", encoding="utf-8") as f:
            overrides = _parse_symbols(yaml.safe_load(f) or {})
        self._exchange_symbols.update(overrides)
        logger.info("Loaded %d custom symbol mappings from %s", len(overrides), self.symbols_file)

    def _validate_all(self) -> None:
        if not self._assets:
            raise ValueError("No tracked assets configured")
        if not self._networks:
            raise ValueError("No tracked networks configured")

        keys = [asset.key for asset in self._assets]
        if len(keys) != len(set(keys)):
            raise ValueError("Duplicate asset keys found in configuration")

        names = [network.name for network in self._networks]
        if len(names) != len(set(names)):
            raise ValueError("Duplicate network names found in configuration")

        for network in self._networks:
            if not network.rpc_url.startswith(("http://", "https://")):
                raise ValueError(f"Invalid RPC URL for {network.name}: {network.rpc_url}")

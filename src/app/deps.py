from __future__ import annotations

import logging

from market_data.config import load_config
from market_data.provider import PriceProvider, build_provider


log = logging.getLogger(__name__)


def price_provider() -> PriceProvider:
    """
    Request-scoped price provider built from the YAML config (tests override this dependency).
    """
    cfg, path = load_config()
    if path:
        log.debug("Market data config loaded from %s", path)
    return build_provider(cfg.market_data)

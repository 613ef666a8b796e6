from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field


class YahooChartConfig(BaseModel):
    base_url: str = Field(
        default="https://query1.finance.yahoo.com/v8/finance/chart",
        description="Yahoo Finance chart API endpoint (symbol is appended)",
    )
    timeout_seconds: float = 30.0
    max_retries: int = 2
    backoff_base_seconds: float = 0.5
    # Yahoo often blocks default urllib user agents.
    user_agent: str = "Mozilla/5.0"


class MarketDataConfig(BaseModel):
    provider: Literal["yahoo_chart", "yfinance"] = Field(
        default="yahoo_chart",
        description="Price source for equities and non-cash benchmarks",
    )
    yahoo: YahooChartConfig = Field(default_factory=YahooChartConfig)


class AppConfig(BaseModel):
    market_data: MarketDataConfig = Field(default_factory=MarketDataConfig)


def _candidate_paths() -> list[Path]:
    paths: list[Path] = []
    env_path = (os.environ.get("COMPARE_CONFIG") or "").strip()
    if env_path:
        paths.append(Path(os.path.expanduser(env_path)))
    paths.append(Path("compare.yaml"))
    home = Path(os.path.expanduser("~"))
    paths.append(home / ".portfolio_compare" / "compare.yaml")
    return paths


def load_config() -> tuple[AppConfig, Optional[str]]:
    """
    Load app config from YAML (if present).

    Search paths (first match wins):
      - $COMPARE_CONFIG
      - ./compare.yaml
      - ~/.portfolio_compare/compare.yaml
    """
    for p in _candidate_paths():
        if p.exists():
            data = yaml.safe_load(p.read_text()) or {}
            return AppConfig.model_validate(data), str(p)
    return AppConfig(), None

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI

from src.app.routes.compare import router as compare_router
from src.app.routes.market_data import router as market_data_router


load_dotenv()


def configure_logging() -> None:
    level = (os.environ.get("LOG_LEVEL") or "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Portfolio Compare", version="0.1.0")

    @app.get("/healthz", tags=["meta"])
    def healthz() -> dict:
        return {"ok": True}

    app.include_router(compare_router)
    app.include_router(market_data_router)
    return app


app = create_app()

from __future__ import annotations

import logging

from fastapi import FastAPI

from discipline_risk.api.routes.risk import router as risk_router
from discipline_risk.config import get_config
from discipline_risk.utils.logger_config import setup_logger


cfg = get_config()
log_cfg = cfg.get("logging") or {}
logger = setup_logger(
    "discipline_risk",
    level=getattr(logging, str(log_cfg.get("level", "INFO")).upper(), logging.INFO),
    log_file=log_cfg.get("file"),
)

app = FastAPI(title=(cfg.get("app") or {}).get("title", "Discipline Risk Engine API"), version="0.1.0")

app.include_router(risk_router)


@app.get("/health")
def health():
    return {"status": "ok"}

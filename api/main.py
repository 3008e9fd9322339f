"""
FastAPI application for the face check and mood match demos.

Run with: uvicorn api.main:app
"""
import logging
from fastapi import FastAPI
from api import routes

logging.basicConfig(level=routes.settings.LOG_LEVEL)
app = FastAPI(title="Face Check & Mood Match API", version="1.0.0")
app.include_router(routes.router)


@app.get("/health")
def health() -> dict:
    """
    Report which analyzer the process picked at startup probing.

    Returns:
        dict: status, analyzer name and whether /mood can read expressions.
    """
    analyzer = routes._ensure_analyzer()
    return {
        "status": "ok",
        "analyzer": analyzer.name,
        "expressions": analyzer.supports_expressions,
    }

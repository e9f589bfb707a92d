"""FastAPI server exposing scan checks for deployment."""

from typing import Any, Dict

from fastapi import Body, FastAPI, HTTPException

from match_app.app import ScanMatchApp
from match_app.logging_config import configure_logging

configure_logging()

match_app = ScanMatchApp()
app = FastAPI(title="Scan Match", version="0.1.0")


@app.get("/healthz")
async def healthcheck() -> dict:
    """Lightweight readiness check."""

    return {
        "status": "ok",
        "service": "scan-match",
        "environment": match_app.config.environment or "local",
        "thresholds": {
            "high": match_app.thresholds.high,
            "high_shoes": match_app.thresholds.high_shoes,
            "medium": match_app.thresholds.medium,
        },
    }


@app.post("/v1/checks")
def create_check(payload: Dict[str, Any] = Body(...)) -> dict:
    """Score a scanned item against the supplied wardrobe snapshot."""

    response = match_app.check(payload)
    if response.get("status") != "ok":
        raise HTTPException(status_code=422, detail=response)
    return response


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=8080, reload=False)

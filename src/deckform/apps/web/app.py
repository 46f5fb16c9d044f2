"""
deckform web backend - FastAPI server

Endpoints:
- GET  /health: liveness check
- POST /render: build a presentation from the JSON body and return it as a file

Run with:
    uvicorn deckform.apps.web.app:app
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.responses import Response

from deckform.core.config.loader import presentation_from_config, validate_config
from deckform.core.errors import ConfigValidationError, InvalidConfig, UnsupportedFormat

logger = logging.getLogger(__name__)

app = FastAPI(
    title="deckform API",
    description="Build presentations from declarative configuration",
    version="0.1.0",
)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.post("/render")
def render(
    config: dict[str, Any] = Body(...),
    filename: str = Query("presentation.pptx", min_length=1),
    format: Optional[str] = Query(None, description="writer type; inferred from filename when omitted"),
) -> Response:
    """
    Build the presentation described by the request body and stream it back.

    The response carries a Content-Disposition attachment header named after
    `filename`.
    """
    try:
        validate_config(config, source="request body")
        deck = presentation_from_config(config, writer_type=format)
        return deck.send(filename)
    except ConfigValidationError as e:
        logger.warning(f"Rejected config: {len(e.errors)} schema errors")
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})
    except InvalidConfig as e:
        logger.warning(f"Rejected config: {e}")
        raise HTTPException(status_code=422, detail={"message": str(e)})
    except UnsupportedFormat as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})

"""Analysis Route — analyze an uploaded agency dump and return findings plus artifacts.

Invariants:
    - The request body is the dump itself, in any shape the snapshot loader accepts
    - The endpoint never writes files; artifacts are returned inline
    - An unrecognizable dump root yields 400 via SnapshotFormatError

Design Decisions:
    - Plain def route: analysis is CPU-bound, FastAPI runs it in its threadpool
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from clusterlint.config import Settings, get_settings
from clusterlint.schemas.analysis import AnalysisResponse
from clusterlint.services.analysis_runner import analyze_payload, build_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/analysis", tags=["analysis"])


@router.post("", response_model=AnalysisResponse)
def analyze_dump(
    dump: Any = Body(...),
    settings: Settings = Depends(get_settings),
):
    """Run every analyzer over the posted dump."""
    result = analyze_payload(dump, settings)
    logger.info(
        f"Analyzed posted dump: infected={result.infected}",
        extra={"infected": result.infected},
    )
    return build_response(result)

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from engine.analysis_pipeline import run_analysis
from routes.dependencies import get_engine_client, get_settings
from utils.errors import AnalysisError
from utils.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", summary="Analyze case notes - calls the reasoning engine once")
def analyze(payload: Any = Body(None),
            settings: Settings = Depends(get_settings),
            engine=Depends(get_engine_client)):
    """Validate the request, compute policy facts, call the engine and return the reconciled result."""
    try:
        return run_analysis(payload, engine, model=settings.engine_model)
    except AnalysisError as exc:
        logger.error("Analyze error (%s): %s", type(exc).__name__, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from routes.dependencies import get_engine_client, get_settings
from utils.errors import AnalysisError
from utils.settings import Settings

router = APIRouter()

PING_INSTRUCTION = 'Return ONLY JSON: {"ok": true, "msg": "hello"}'


@router.get("/health")
def health(settings: Settings = Depends(get_settings)):
    return {
        "ok": True,
        "model": settings.engine_model,
        "engine_configured": settings.engine_configured,
    }


@router.get("/debug/engine", summary="Round-trip a trivial instruction through the reasoning engine")
def debug_engine(engine=Depends(get_engine_client)):
    if engine is None:
        return JSONResponse(status_code=500, content={"ok": False, "error": "Reasoning engine is not configured"})
    try:
        data = engine.invoke(PING_INSTRUCTION)
    except AnalysisError as exc:
        return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})
    return {"ok": True, "data": data}

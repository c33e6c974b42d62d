import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from llm.reasoning_client import build_engine_client
from utils.settings import load_settings

settings = load_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Refund Risk Predictor API",
    description="Refund & chargeback risk analysis of call-center notes with a refund cap guardrail",
    version="1.0.0",
)
app.state.settings = settings
app.state.engine_client = build_engine_client(settings)

logger.info("Reasoning engine model: %s", settings.engine_model)
logger.info("Engine key loaded: %s", settings.engine_configured)
logger.info("Allowed origins: %s", ", ".join(settings.allowed_origins))
if not settings.engine_configured:
    logger.warning("GROQ_API_KEY is not set; /api/analyze will return errors until it is.")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed JSON bodies get the same {"error": ...} shape as schema failures.
    messages = "; ".join(str(err.get("msg", "invalid request")) for err in exc.errors())
    return JSONResponse(status_code=400, content={"error": messages or "Invalid request"})


from routes import analyze, health

app.include_router(analyze.router, prefix="/api", tags=["Analysis"])
app.include_router(health.router, tags=["Health"])


@app.get("/")
def root():
    return {"status": "Refund Risk Predictor API is running", "docs": "/docs"}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

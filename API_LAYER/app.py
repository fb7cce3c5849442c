# app.py
from asyncio import Lock
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import DEBUG, PORT
from services.intent_reconciler import interpret_message
from services.utils import get_logger

# -----------------------------
# Structured Logging Setup
# -----------------------------
logger = get_logger("lume_api")

# -----------------------------
# FastAPI App
# -----------------------------
app = FastAPI(title="Lume Interpretation API", version="1.0")

# -----------------------------
# Metrics
# -----------------------------
metrics_lock = Lock()
request_counters = {
    "transacao": 0,
    "tarefa": 0,
    "total": 0,
    "errors": 0,
}

# -----------------------------
# Pydantic Models
# -----------------------------
class InterpretRequest(BaseModel):
    text: str


# -----------------------------
# Failure Envelope
# -----------------------------
def failure_envelope(status_code: int, error_type: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": error_type, "message": message}},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return failure_envelope(422, "invalid_request", str(exc.errors()))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    async with metrics_lock:
        request_counters["errors"] += 1
    logger.exception(f"[ERROR] path={request.url.path}, exception={exc}")
    return failure_envelope(
        500,
        "internal_error",
        str(exc) if DEBUG else "An unexpected error occurred",
    )


# -----------------------------
# API Endpoints
# -----------------------------
@app.get("/")
async def root():
    return {"message": "Lume interpretation API is running."}


@app.get("/health")
async def health() -> Dict[str, Any]:
    return {"status": "ok"}


@app.get("/metrics")
async def metrics() -> Dict[str, Any]:
    async with metrics_lock:
        return request_counters.copy()


@app.post("/interpret")
async def interpret(request: InterpretRequest) -> Dict[str, Any]:
    async with metrics_lock:
        request_counters["total"] += 1

    logger.info(f"[REQUEST_START] text_length={len(request.text)}")
    intent = await interpret_message(request.text)

    async with metrics_lock:
        request_counters[intent.entity_type.value] += 1
    return intent.to_wire()


# -----------------------------
# Entrypoint
# -----------------------------
import uvicorn

if __name__ == "__main__":
    uvicorn.run("API_LAYER.app:app", host="0.0.0.0", port=PORT, workers=1)

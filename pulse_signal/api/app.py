"""
PULSE SIGNAL — FastAPI Application
Trading-signal endpoint, Telegram login check and email verification.
"""
import uuid
from typing import Dict, Any, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from pulse_signal.config.settings import get_settings
from pulse_signal.utils.logger import get_logger, setup_logging, bind_request_context, clear_request_context
from pulse_signal.utils.helpers import normalize_pair, utc_timestamp
from pulse_signal.data.aggregator import get_price_aggregator
from pulse_signal.engines.signal_engine import get_signal_engine
from pulse_signal.auth.telegram_verifier import get_telegram_verifier
from pulse_signal.auth.email_verification import get_verification_service
from pulse_signal.notify.email_sender import get_email_sender
from pulse_signal.errors import (
    NoPriceAvailableError, VerificationError, EmailDeliveryError, MissingAuthDataError,
)

logger = get_logger("api")

INTERNAL_ERROR = "Internal server error."
MISSING_PAIR = "Missing 'pair' in request body."
MISSING_EMAIL = "Email is required."

# Application state
app_state: Dict[str, Any] = {
    "instance_id": str(uuid.uuid4())[:8],
    "started_at": None,
    "signals_generated": 0,
    "signal_failures": 0,
    "logins_verified": 0,
    "logins_rejected": 0,
    "emails_verified": 0,
    "errors": 0,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown."""
    setup_logging()
    settings = get_settings()
    app_state["started_at"] = utc_timestamp()

    logger.info("pulse_signal_starting",
                version=settings.version,
                instance=app_state["instance_id"],
                port=settings.port)

    aggregator = get_price_aggregator()
    await aggregator.initialize()
    get_telegram_verifier()

    logger.info("pulse_signal_ready")

    yield

    logger.info("pulse_signal_shutting_down")
    await aggregator.shutdown()


app = FastAPI(
    title="PULSE SIGNAL",
    description="Crypto price aggregation, SMA trading signals and login verification",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log line of a request with its id, method and path."""
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    bind_request_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        response = await call_next(request)
        logger.info("request_completed", status=response.status_code)
    finally:
        clear_request_context()
    response.headers["X-Request-ID"] = request_id
    return response


# Missing or non-JSON bodies are answered like an empty JSON object
MISSING_BODY_RESPONSES: Dict[str, Dict[str, Any]] = {
    "/api/trading-signal": {"error": MISSING_PAIR},
    "/api/auth/telegram": {"success": False, "message": MissingAuthDataError.message},
    "/api/auth/send-verification": {"success": False, "message": MISSING_EMAIL},
}


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    content = MISSING_BODY_RESPONSES.get(request.url.path)
    if content is None:
        return await request_validation_exception_handler(request, exc)
    logger.warning("request_body_invalid", errors=len(exc.errors()))
    return JSONResponse(status_code=400, content=content)


# ─── Health & Metrics ───────────────────────────────────────────

@app.get("/", response_class=PlainTextResponse, tags=["System"])
async def root():
    return "Trading Signals Backend is running!"


@app.get("/healthz", tags=["System"])
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "instance": app_state["instance_id"],
        "uptime_since": app_state["started_at"],
        "timestamp": utc_timestamp(),
    }


@app.get("/metrics", tags=["System"])
async def metrics():
    """Request counters and component stats."""
    settings = get_settings()
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.version,
            "instance_id": app_state["instance_id"],
            "started_at": app_state["started_at"],
        },
        "signals": {
            "total_generated": app_state["signals_generated"],
            "failures": app_state["signal_failures"],
        },
        "auth": {
            "logins_verified": app_state["logins_verified"],
            "logins_rejected": app_state["logins_rejected"],
            "emails_verified": app_state["emails_verified"],
            "email_stats": get_email_sender().stats,
        },
        "errors": app_state["errors"],
        "timestamp": utc_timestamp(),
    }


# ─── Trading Signal ─────────────────────────────────────────────

class SignalRequest(BaseModel):
    pair: Optional[str] = None


@app.post("/api/trading-signal", tags=["Signals"])
async def trading_signal(request: SignalRequest):
    """Average two spot prices, compare with the 14-period SMA and suggest levels."""
    if not request.pair or not request.pair.strip():
        return JSONResponse(status_code=400, content={"error": MISSING_PAIR})

    pair = normalize_pair(request.pair)
    try:
        quote = await get_price_aggregator().get_quote(pair)
        report = get_signal_engine().generate_from_quote(quote)
    except NoPriceAvailableError as e:
        app_state["signal_failures"] += 1
        logger.warning("no_price_available", pair=pair)
        return JSONResponse(status_code=500, content={"error": e.message})
    except Exception as e:
        app_state["errors"] += 1
        logger.error("signal_generation_error", pair=pair, error=str(e))
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})

    app_state["signals_generated"] += 1
    return report.to_dict()


# ─── Telegram Login ─────────────────────────────────────────────

class TelegramAuthRequest(BaseModel):
    tgData: Optional[str] = None


@app.post("/api/auth/telegram", tags=["Auth"])
async def telegram_auth(request: TelegramAuthRequest):
    """Verify a Telegram login widget payload."""
    try:
        user = get_telegram_verifier().verify(request.tgData)
    except VerificationError as e:
        app_state["logins_rejected"] += 1
        return JSONResponse(status_code=400, content={"success": False, "message": e.message})
    except Exception as e:
        app_state["errors"] += 1
        logger.error("telegram_login_error", error=str(e))
        return JSONResponse(status_code=500, content={"success": False, "message": INTERNAL_ERROR})

    app_state["logins_verified"] += 1
    return {"success": True, "message": "User authenticated successfully.", "user": user}


# ─── Email Verification ─────────────────────────────────────────

class SendVerificationRequest(BaseModel):
    email: Optional[str] = None


@app.post("/api/auth/send-verification", tags=["Auth"])
async def send_verification(request: SendVerificationRequest):
    """Issue a one-time token and email the verification link."""
    if not request.email or not request.email.strip():
        return JSONResponse(status_code=400, content={"success": False, "message": MISSING_EMAIL})

    try:
        await get_verification_service().request_verification(request.email.strip())
    except EmailDeliveryError as e:
        return JSONResponse(status_code=500, content={"success": False, "message": e.message})
    except Exception as e:
        app_state["errors"] += 1
        logger.error("send_verification_error", error=str(e))
        return JSONResponse(status_code=500, content={"success": False, "message": INTERNAL_ERROR})

    return {"success": True, "message": "Verification email sent."}


@app.get("/api/auth/verify", response_class=PlainTextResponse, tags=["Auth"])
async def verify_email(token: Optional[str] = Query(default=None)):
    """Redeem a verification token (single use)."""
    try:
        await get_verification_service().redeem(token)
    except VerificationError as e:
        return PlainTextResponse(e.message, status_code=400)
    except Exception as e:
        app_state["errors"] += 1
        logger.error("verify_email_error", error=str(e))
        return PlainTextResponse(INTERNAL_ERROR, status_code=500)

    app_state["emails_verified"] += 1
    return "Email verified successfully!"

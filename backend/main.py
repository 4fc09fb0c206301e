# main.py - Product Workbench API
# Features:
# - Request correlation IDs and timing
# - Security headers
# - In-memory workbench seeded on startup
# - Background AI analyses drained on shutdown
# - All routers registered

import os
import json
import uuid
import time
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from ai_assist import LLM_PROVIDERS
from telemetry import setup_telemetry
from workbench import Workbench, get_workbench

APP_VERSION = "1.0.0"

# Logging
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
)
logger = logging.getLogger("workbench")


def _check_startup_config():
    """Validate configuration on startup; problems are logged, never fatal."""
    warnings = []

    llm_keys = {
        env_key: os.getenv(env_key)
        for config in LLM_PROVIDERS.values()
        for env_key in config["env_keys"]
    }
    active = [k for k, v in llm_keys.items() if v]
    if active:
        logger.info(f"🤖 LLM keys configured: {', '.join(active)}")
    else:
        warnings.append("⚠️  No LLM API key configured - AI ticket analysis is disabled. Set GEMINI_API_KEY (or OPENAI_API_KEY / GROQ_API_KEY)")

    provider = os.getenv("LLM_PROVIDER", "")
    if provider and provider.lower() not in LLM_PROVIDERS:
        warnings.append(f"⚠️  LLM_PROVIDER={provider!r} is unknown - valid: {', '.join(LLM_PROVIDERS)}")

    try:
        if float(os.getenv("AI_TIMEOUT_SECONDS", "60")) <= 0:
            warnings.append("⚠️  AI_TIMEOUT_SECONDS must be positive")
    except ValueError:
        warnings.append("⚠️  AI_TIMEOUT_SECONDS is not a number")

    for w in warnings:
        logger.warning(w)

    return len(warnings) == 0


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 Starting Product Workbench v{APP_VERSION}...")
    wb = get_workbench()
    logger.info(f"✅ Workbench ready for {wb.user.name} ({wb.user.role.value})")
    _check_startup_config()
    # No-op unless OTEL_EXPORTER_OTLP_ENDPOINT is set
    setup_telemetry(app)
    yield
    logger.info("🛑 Shutting down Product Workbench...")
    await wb.analysis.drain()


app = FastAPI(
    title="Product Workbench",
    description="Product lifecycle console: versions roadmap, tickets with AI triage, documents, outbound requests",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── Cross-origin access for the console frontend ─────────────

CONSOLE_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]
TRACE_HEADERS = ("X-Request-ID", "X-Correlation-ID")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CONSOLE_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", *TRACE_HEADERS],
    expose_headers=[*TRACE_HEADERS, "X-Response-Time"],
)

# Added to every console response
STATIC_RESPONSE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "same-origin",
    "Cache-Control": "no-store",
}


# ── Request context ──────────────────────────────────────────

@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag each request with an id, time it and stamp the response headers."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    started = time.perf_counter()

    response = await call_next(request)

    elapsed = time.perf_counter() - started
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Correlation-ID"] = request.headers.get("X-Correlation-ID", request_id)
    response.headers["X-Response-Time"] = f"{elapsed:.4f}s"
    response.headers.update(STATIC_RESPONSE_HEADERS)
    logger.info(f"[{request_id[:8]}] {request.method} {request.url.path} {response.status_code} in {elapsed * 1000:.1f}ms")
    return response


# ── Error bodies ─────────────────────────────────────────────

def _jsonable(value):
    """Echo a rejected input back only if it survives JSON encoding."""
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def _error_body(request: Request, detail) -> dict:
    return {"detail": detail, "request_id": getattr(request.state, "request_id", None)}


@app.exception_handler(RequestValidationError)
async def invalid_payload(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        problem = {"type": str(err.get("type", "unknown")), "loc": list(err.get("loc", ())), "msg": str(err.get("msg", ""))}
        if "input" in err:
            problem["input"] = _jsonable(err["input"])
        problems.append(problem)
    return JSONResponse(status_code=422, content=_error_body(request, problems))


@app.exception_handler(Exception)
async def unexpected_failure(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content=_error_body(request, "Internal server error"))


# ============================================================
# ROUTERS
# ============================================================

from routers import (
    workbench, tickets, versions, documents, outbound, products, nav, dashboard,
)

app.include_router(workbench.router)
app.include_router(dashboard.router)
app.include_router(versions.router)
app.include_router(tickets.router)
app.include_router(documents.router)
app.include_router(outbound.router)
app.include_router(products.router)
app.include_router(nav.router)


# ============================================================
# HEALTH & ROOT
# ============================================================

@app.get("/health")
async def health_check(wb: Workbench = Depends(get_workbench)):
    return {
        "status": "healthy",
        "version": APP_VERSION,
        "environment": os.getenv("ENVIRONMENT", "development"),
        "stores": wb.store_counts(),
        "services": {
            "api": "operational",
            "ai": "operational" if getattr(wb.analysis.analyzer, "configured", False) else "disabled",
        },
    }


@app.get("/")
async def root():
    return {
        "name": "Product Workbench",
        "version": APP_VERSION,
        "description": "Product lifecycle console",
        "docs": "/docs",
        "health": "/health",
        "status": "operational",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=os.getenv("ENVIRONMENT") != "production",
    )

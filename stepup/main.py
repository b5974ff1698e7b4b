"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stepup.api.v1 import me
from stepup.api.v1 import router as v1_router
from stepup.core.config import settings
from stepup.core.errors import AccountError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Stepup Account API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AccountError)
async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    """Map typed account errors to {code, message} with the error's HTTP status."""
    if exc.status_code >= 500:
        logger.error("Account request failed: %s", exc.code, extra={"path": request.url.path})
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "message": exc.message},
    )


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
app.include_router(me.router, prefix=settings.API_PREFIX, tags=["me"])


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Stepup Account API"}

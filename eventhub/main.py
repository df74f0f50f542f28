# eventhub/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventhub.api.api import api_router
from eventhub.core.config import settings
from eventhub.core.email import init_resend
from eventhub.core.exceptions import AppError
from eventhub.core.limiter import limiter
from eventhub.db.init_db import init_db
from eventhub.db.session import SessionLocal
from eventhub.middleware.error_handler import (
    app_error_handler,
    error_handler_middleware,
    http_exception_handler,
    validation_error_handler,
)

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("EventHub API starting up...")
    db = SessionLocal()
    try:
        init_db(db)
    finally:
        db.close()
    init_resend()
    logger.info("Database tables checked and created if necessary.")
    yield
    logger.info("EventHub API shutting down...")


app = FastAPI(
    title="EventHub API",
    version="1.0.0",
    description="""
        **EventHub** - event publishing and registration.

        ## Features

        * **Events**: Admins create, publish, duplicate and retire events
        * **Registration**: Users claim seats without ever overbooking
        * **Attendees**: Admin-managed roster with check-in
        * **Dashboards**: Platform totals for admins, personal stats for users

        ## Authentication

        Most endpoints require JWT authentication via the `Authorization: Bearer <token>` header.
        Event listing and detail are public and show published events only.
        """,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.middleware("http")(error_handler_middleware)

# Rate limiting (slowapi)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)

app.include_router(api_router, prefix="/api")


@app.get("/")
def read_root():
    return {"status": "EventHub API is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from course_checkout.config import Settings, setup_logging
from course_checkout.database import make_engine
from course_checkout.razorpay_service import RazorpayGateway
from course_checkout.routes import (
    order_error,
    router,
    verify_error,
)
from course_checkout.store import CourseStore

logger = logging.getLogger(__name__)


def build_gateway(settings: Settings) -> RazorpayGateway:
    return RazorpayGateway(
        settings.razorpay_key_id,
        settings.razorpay_key_secret,
        timeout=settings.upstream_timeout,
    )


def build_store(settings: Settings) -> CourseStore:
    engine = make_engine(settings.effective_database_url, timeout=settings.upstream_timeout)
    store = CourseStore(engine)
    store.create_schema()
    return store


def create_app(settings: Settings = None) -> FastAPI:
    """Build the API. Clients already on ``app.state`` are left alone."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        current = app.state.settings
        if current is None:
            current = app.state.settings = Settings.from_env()
            setup_logging(current.log_level)
        current.validate()
        if getattr(app.state, "gateway", None) is None:
            app.state.gateway = build_gateway(current)
        if getattr(app.state, "store", None) is None:
            app.state.store = build_store(current)
        logger.info("Course checkout service ready")
        yield

    app = FastAPI(title="Course Checkout Service", lifespan=lifespan)
    app.state.settings = settings
    app.state.gateway = None
    app.state.store = None
    app.include_router(router)

    @app.exception_handler(RequestValidationError)
    async def bad_body(request: Request, exc: RequestValidationError):
        logger.info("Rejected body for %s at %s", request.url.path, [e["loc"] for e in exc.errors()])
        if request.url.path == "/verify-payment":
            return verify_error(400, "Missing payment details")
        if request.url.path == "/create-order":
            return order_error(400, "Amount, course_slug and user_id are required")
        return order_error(400, "Invalid request body")

    return app


app = create_app()

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import ALLOWED_ORIGINS, LOG_LEVEL, RUN_CLEANUP_ON_STARTUP
from .credentials import load_service_account
from .database import get_firestore_client
from .domain.booking.exceptions import MISSING_DATA_MESSAGE, SHOP_CLOSED_MESSAGE, BookingError
from .domain.booking.repository import AppointmentRepository, SettingsRepository
from .domain.booking.router import router as booking_router
from .domain.booking.service import BookingService
from .services.google_calendar_service import GoogleCalendarClient
from .services.retention_service import cleanup_old_appointments

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("google").setLevel(logging.WARNING)


def build_services(app: FastAPI) -> None:
    """Create the Firestore and Google Calendar clients from the service account"""
    service_account = load_service_account()
    db = get_firestore_client(service_account)

    app.state.appointments = AppointmentRepository(db)
    app.state.booking_service = BookingService(
        appointments=app.state.appointments,
        settings=SettingsRepository(db),
        calendar=GoogleCalendarClient(service_account),
    )


def create_app(
    booking_service: Optional[BookingService] = None,
    appointments=None,
    run_cleanup: bool = RUN_CLEANUP_ON_STARTUP,
) -> FastAPI:
    """
    Build the API. Services passed in are used as-is, otherwise they are
    created from the service account when the application starts.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up...")
        if getattr(app.state, "booking_service", None) is None:
            # CredentialError propagates and aborts startup
            build_services(app)

        if run_cleanup:
            await cleanup_old_appointments(app.state.appointments)

        yield
        logger.info("Application shutting down...")

    app = FastAPI(title="Salon Booking API", version="1.0.0", lifespan=lifespan)
    app.state.booking_service = booking_service
    app.state.appointments = appointments
    if booking_service is not None and appointments is None:
        app.state.appointments = booking_service.appointments

    @app.exception_handler(BookingError)
    async def booking_exception_handler(request: Request, exc: BookingError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        A booking body that is not a JSON object of strings counts as missing data,
        unless the shop-open gate refuses the booking first
        """
        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        if request.url.path == "/api/book":
            service = request.app.state.booking_service
            if not service.accepts_bookings(await service.get_shop_state()):
                return JSONResponse(status_code=403, content={"error": SHOP_CLOSED_MESSAGE})
            return JSONResponse(status_code=400, content={"error": MISSING_DATA_MESSAGE})
        return JSONResponse(status_code=422, content={"detail": exc.errors()})

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
            raise

    logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(booking_router)

    @app.get("/health", response_class=PlainTextResponse)
    def health():
        return "OK"

    return app


app = create_app()

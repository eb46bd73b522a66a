"""Booking router - FastAPI endpoints for shop status and appointment booking"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from .exceptions import SERVER_ERROR_MESSAGE
from .schemas import BookingRequest, BookingResponse, ShopState, StatusResponse
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Booking"])


def get_booking_service(request: Request) -> BookingService:
    """Dependency injection for BookingService, built once in the app lifespan"""
    return request.app.state.booking_service


@router.get("/status", response_model=StatusResponse)
async def get_status(service: BookingService = Depends(get_booking_service)):
    """Whether the salon currently accepts bookings"""
    state = await service.get_shop_state()
    if state == ShopState.UNKNOWN:
        return JSONResponse(
            status_code=500,
            content={"is_open": service.accepts_bookings(state), "error": SERVER_ERROR_MESSAGE},
        )
    return StatusResponse(is_open=state == ShopState.OPEN)


@router.post("/book", response_model=BookingResponse)
async def book_appointment(
    data: BookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    """Reserve a slot; errors are rendered by the BookingError handler"""
    return await service.book(data)

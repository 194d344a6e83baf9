from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.query.get_seat_layout_use_case import GetSeatLayoutUseCase
from src.service.booking.driving_adapter.http_controller.schema.showtime_schema import (
    SeatLayoutResponse,
)


router = APIRouter()


@router.get('/{showtime_id}/seats')
@Logger.io
async def get_seat_layout(
    showtime_id: str,
    use_case: GetSeatLayoutUseCase = Depends(GetSeatLayoutUseCase.depends),
) -> SeatLayoutResponse:
    """Public: seat availability needs no login."""
    seat_layout = await use_case.get_seat_layout(showtime_id=showtime_id)
    return SeatLayoutResponse.from_layout(seat_layout)

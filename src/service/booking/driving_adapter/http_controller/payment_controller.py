import hmac

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Header

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import AuthenticationError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.handle_payment_event_use_case import (
    HandlePaymentEventUseCase,
)
from src.service.booking.driving_adapter.http_controller.schema.payment_schema import (
    PaymentWebhookRequest,
    PaymentWebhookResponse,
)


router = APIRouter()


@inject
async def verify_webhook_secret(
    x_webhook_secret: str | None = Header(default=None),
    settings: Settings = Depends(Provide[Container.config_service]),
) -> None:
    expected = settings.PAYMENT_WEBHOOK_SECRET
    if expected is None:
        return
    if not x_webhook_secret or not hmac.compare_digest(
        x_webhook_secret, expected.get_secret_value()
    ):
        raise AuthenticationError('Invalid webhook secret')


@router.post('/webhook', dependencies=[Depends(verify_webhook_secret)])
@Logger.io
async def payment_webhook(
    request: PaymentWebhookRequest,
    use_case: HandlePaymentEventUseCase = Depends(HandlePaymentEventUseCase.depends),
) -> PaymentWebhookResponse:
    booking = await use_case.handle(
        event_type=request.type,
        booking_id=request.data.booking_id,
        payment_reference=request.data.payment_reference,
    )
    return PaymentWebhookResponse(
        received=True, booking_status=booking.status.value if booking else None
    )

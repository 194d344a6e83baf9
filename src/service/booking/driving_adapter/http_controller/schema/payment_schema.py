from typing import Optional

from pydantic import BaseModel


class PaymentEventData(BaseModel):
    booking_id: str
    payment_reference: str = ''


class PaymentWebhookRequest(BaseModel):
    type: str
    data: PaymentEventData

    model_config = {
        'json_schema_extra': {
            'example': {
                'type': 'payment_intent.succeeded',
                'data': {
                    'booking_id': '0192c1d2-7a3e-7b55-9f0a-0c1d2e3f4a5b',
                    'payment_reference': 'pi_3Nv1x2abc',
                },
            }
        }
    }


class PaymentWebhookResponse(BaseModel):
    received: bool = True
    booking_status: Optional[str] = None

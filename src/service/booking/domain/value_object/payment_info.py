from datetime import datetime
from typing import Optional

import attrs

from src.service.booking.domain.enum.payment import PaymentMethod, PaymentStatus


@attrs.frozen
class PaymentInfo:
    method: PaymentMethod = PaymentMethod.STRIPE
    status: PaymentStatus = PaymentStatus.PENDING
    payment_reference: Optional[str] = None
    paid_at: Optional[datetime] = None

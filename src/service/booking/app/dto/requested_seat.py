from typing import Optional

import attrs


@attrs.frozen
class RequestedSeat:
    """Seat as sent by the client; tier and price are echoed back for verification only."""

    id: str
    tier: Optional[str] = None
    price: Optional[int] = None

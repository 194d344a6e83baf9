# API Route Constants

# Base API
API_BASE = '/api'

# Booking routes
BOOKING_BASE = f'{API_BASE}/booking'
BOOKING_CREATE = BOOKING_BASE
BOOKING_MY_BOOKINGS = f'{BOOKING_BASE}/my'
BOOKING_GET = f'{BOOKING_BASE}/{{booking_id}}'
BOOKING_GET_BY_REF = f'{BOOKING_BASE}/ref/{{booking_ref}}'
BOOKING_CONFIRM = f'{BOOKING_BASE}/{{booking_id}}/confirm'
BOOKING_CANCEL = f'{BOOKING_BASE}/{{booking_id}}/cancel'

# Showtime routes
SHOWTIME_BASE = f'{API_BASE}/showtime'
SHOWTIME_SEATS = f'{SHOWTIME_BASE}/{{showtime_id}}/seats'

# Payment processor callbacks
PAYMENT_BASE = f'{API_BASE}/payment'
PAYMENT_WEBHOOK = f'{PAYMENT_BASE}/webhook'

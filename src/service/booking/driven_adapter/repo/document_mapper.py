"""
Mongo document <-> entity mapping

Showtime ``date`` is stored as an ISO string (BSON has no date-only type);
every datetime is stored as UTC and read back tz-aware.
"""

from datetime import date
from typing import Any, Dict

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.showtime_entity import Showtime
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.booking.domain.enum.seat_tier import SeatTier
from src.service.booking.domain.enum.showtime_status import ShowtimeStatus
from src.service.booking.domain.value_object.booking_snapshot import (
    MovieSnapshot,
    ShowtimeSnapshot,
)
from src.service.booking.domain.value_object.payment_info import PaymentInfo
from src.service.booking.domain.value_object.pricing_breakdown import PricingBreakdown
from src.service.booking.domain.value_object.seat_selection import SeatSelection
from src.service.booking.domain.value_object.venue import CinemaInfo, HallConfig, TierPricing


Document = Dict[str, Any]


def showtime_to_document(showtime: Showtime) -> Document:
    return {
        '_id': showtime.id,
        'movie_id': showtime.movie_id,
        'movie_title': showtime.movie_title,
        'poster_url': showtime.poster_url,
        'cinema': {
            'name': showtime.cinema.name,
            'location': showtime.cinema.location,
            'address': showtime.cinema.address,
        },
        'hall': {
            'name': showtime.hall.name,
            'type': showtime.hall.type,
            'rows': showtime.hall.rows,
            'columns': showtime.hall.columns,
            'total_seats': showtime.hall.total_seats,
        },
        'pricing': {
            'regular': showtime.pricing.regular,
            'premium': showtime.pricing.premium,
            'vip': showtime.pricing.vip,
        },
        'date': showtime.date.isoformat(),
        'start_time': showtime.start_time,
        'end_time': showtime.end_time,
        'booked_seats': list(showtime.booked_seats),
        'available_seats': showtime.available_seats,
        'status': showtime.status.value,
    }


def showtime_from_document(doc: Document) -> Showtime:
    cinema = doc['cinema']
    hall = doc['hall']
    pricing = doc.get('pricing') or {}
    return Showtime(
        id=str(doc['_id']),
        movie_id=str(doc['movie_id']),
        movie_title=doc.get('movie_title', ''),
        poster_url=doc.get('poster_url'),
        cinema=CinemaInfo(
            name=cinema['name'], location=cinema['location'], address=cinema.get('address')
        ),
        hall=HallConfig(
            name=hall['name'],
            rows=hall['rows'],
            columns=hall['columns'],
            total_seats=hall['total_seats'],
            type=hall.get('type', '2D'),
        ),
        pricing=TierPricing(**pricing),
        date=date.fromisoformat(doc['date']),
        start_time=doc['start_time'],
        end_time=doc.get('end_time'),
        booked_seats=list(doc.get('booked_seats', [])),
        status=ShowtimeStatus(doc.get('status', ShowtimeStatus.SCHEDULED.value)),
    )


def booking_to_document(booking: Booking) -> Document:
    return {
        '_id': booking.id,
        'booking_ref': booking.booking_ref,
        'user_id': booking.user_id,
        'movie': {
            'id': booking.movie.id,
            'title': booking.movie.title,
            'poster_url': booking.movie.poster_url,
        },
        'showtime': {
            'id': booking.showtime.id,
            'date': booking.showtime.date.isoformat(),
            'start_time': booking.showtime.start_time,
            'starts_at': booking.showtime.starts_at,
            'cinema': booking.showtime.cinema,
            'hall': booking.showtime.hall,
            'hall_type': booking.showtime.hall_type,
        },
        'seats': [
            {
                'id': seat.id,
                'row': seat.row,
                'number': seat.number,
                'tier': seat.tier.value,
                'price': seat.price,
            }
            for seat in booking.seats
        ],
        'pricing': {
            'subtotal': booking.pricing.subtotal,
            'tax': booking.pricing.tax,
            'service_fee': booking.pricing.service_fee,
            'discount': booking.pricing.discount,
            'total': booking.pricing.total,
            'tax_rate_percent': booking.pricing.tax_rate_percent,
        },
        'payment': {
            'method': booking.payment.method.value,
            'status': booking.payment.status.value,
            'payment_reference': booking.payment.payment_reference,
            'paid_at': booking.payment.paid_at,
        },
        'contact_email': booking.contact_email,
        'contact_phone': booking.contact_phone,
        'status': booking.status.value,
        'expires_at': booking.expires_at,
        'cancelled_at': booking.cancelled_at,
        'cancellation_reason': booking.cancellation_reason,
        'created_at': booking.created_at,
        'updated_at': booking.updated_at,
        'seats_released_at': booking.seats_released_at,
    }


def booking_from_document(doc: Document) -> Booking:
    movie = doc['movie']
    showtime = doc['showtime']
    pricing = doc['pricing']
    payment = doc.get('payment') or {}
    return Booking(
        id=str(doc['_id']),
        booking_ref=doc['booking_ref'],
        user_id=doc['user_id'],
        movie=MovieSnapshot(
            id=str(movie['id']), title=movie.get('title', ''), poster_url=movie.get('poster_url')
        ),
        showtime=ShowtimeSnapshot(
            id=str(showtime['id']),
            date=date.fromisoformat(showtime['date']),
            start_time=showtime['start_time'],
            starts_at=showtime['starts_at'],
            cinema=showtime.get('cinema', ''),
            hall=showtime.get('hall', ''),
            hall_type=showtime.get('hall_type', '2D'),
        ),
        seats=[
            SeatSelection(
                id=seat['id'],
                row=seat['row'],
                number=seat['number'],
                tier=SeatTier(seat['tier']),
                price=seat['price'],
            )
            for seat in doc.get('seats', [])
        ],
        pricing=PricingBreakdown(
            subtotal=pricing['subtotal'],
            tax=pricing['tax'],
            service_fee=pricing['service_fee'],
            discount=pricing.get('discount', 0),
            total=pricing['total'],
            tax_rate_percent=pricing.get('tax_rate_percent', 0.0),
        ),
        payment=PaymentInfo(
            method=PaymentMethod(payment.get('method', PaymentMethod.STRIPE.value)),
            status=PaymentStatus(payment.get('status', PaymentStatus.PENDING.value)),
            payment_reference=payment.get('payment_reference'),
            paid_at=payment.get('paid_at'),
        ),
        contact_email=doc['contact_email'],
        contact_phone=doc.get('contact_phone'),
        status=BookingStatus(doc['status']),
        expires_at=doc.get('expires_at'),
        cancelled_at=doc.get('cancelled_at'),
        cancellation_reason=doc.get('cancellation_reason'),
        created_at=doc.get('created_at'),
        updated_at=doc.get('updated_at'),
        seats_released_at=doc.get('seats_released_at'),
    )

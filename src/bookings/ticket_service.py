from typing import Optional
from io import BytesIO
import base64
import hashlib
import hmac
import json

import qrcode
from qrcode import constants

from src.config import settings
from src.models import Booking
from src.bookings.schemas import ETicket, BookingStatus

class TicketService:
    """Builds e-tickets with a signed QR code for confirmed bookings"""

    def __init__(self, secret_key: Optional[str] = None):
        self._secret_key = (secret_key or settings.SECRET_KEY).encode()

    def generate_eticket(self, booking: Booking) -> ETicket:
        if booking.booking_status == BookingStatus.CANCELLED.value:
            raise ValueError("Cannot generate ticket for a cancelled booking")

        qr_data = self._generate_qr_code_data(booking)

        return ETicket(
            booking_reference=booking.booking_reference,
            passenger_names=[seat.passenger_name for seat in booking.seats],
            seat_numbers=[seat.seat_number for seat in booking.seats],
            bus_name=booking.bus.name,
            bus_number=booking.bus.bus_number,
            operator=booking.bus.operator,
            source=booking.route.source,
            destination=booking.route.destination,
            journey_date=booking.journey_date,
            departure_time=booking.route.departure_time,
            arrival_time=booking.route.arrival_time,
            boarding_point=booking.boarding_point,
            dropping_point=booking.dropping_point,
            total_amount=booking.total_amount,
            booking_status=booking.booking_status,
            payment_status=booking.payment_status,
            qr_code_data=qr_data,
            qr_code_image=self.generate_qr_code_image(qr_data)
        )

    def verify_qr_code_data(self, qr_data: str) -> Optional[dict]:
        """Decode a scanned QR payload; None if it was not issued by us"""
        try:
            payload = json.loads(base64.b64decode(qr_data.encode()).decode())
        except (ValueError, UnicodeDecodeError):
            return None

        if not isinstance(payload, dict):
            return None

        signature = str(payload.pop("sig", ""))
        if not hmac.compare_digest(signature.encode(), self._sign(payload).encode()):
            return None
        return payload

    def generate_qr_code_image(self, qr_data: str) -> str:
        """PNG of the QR code as a data URL"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(qr_data)
        qr.make(fit=True)

        qr_image = qr.make_image(fill_color="black", back_color="white")
        buffer = BytesIO()
        qr_image.save(buffer, format="PNG")

        return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()

    def _generate_qr_code_data(self, booking: Booking) -> str:
        qr_data = {
            "ref": booking.booking_reference,
            "bus": booking.bus.bus_number,
            "date": booking.journey_date.isoformat(),
            "dep": booking.route.departure_time,
            "seats": [seat.seat_number for seat in booking.seats],
        }
        qr_data["sig"] = self._sign(qr_data)

        json_data = json.dumps(qr_data, separators=(",", ":"))
        return base64.b64encode(json_data.encode()).decode()

    def _sign(self, payload: dict) -> str:
        message = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode()
        return hmac.new(self._secret_key, message, hashlib.sha256).hexdigest()[:16]

from __future__ import annotations

import io
import json
from enum import Enum
from typing import BinaryIO

import qrcode
from PIL import Image, UnidentifiedImageError

from ..attendees.model import Attendee
from ..core.exceptions import ValidationError


class TicketFormat(str, Enum):
    """Payload printed in the ticket QR code."""

    JSON = "json"
    UUID = "uuid"
    ID_ONLY = "idonly"


def build_ticket_payload(attendee: Attendee, fmt: TicketFormat | str = TicketFormat.JSON) -> str:
    try:
        fmt = TicketFormat(fmt)
    except ValueError:
        raise ValidationError(f"Formato de boleto inválido: {fmt}")

    if fmt == TicketFormat.UUID:
        return f"id:{attendee.attendee_id}"
    if fmt == TicketFormat.ID_ONLY:
        return attendee.attendee_id

    return json.dumps(
        {
            "id": attendee.attendee_id,
            "nombre": attendee.display_name,
            "email": attendee.email,
            "iglesia": attendee.church,
            "sector": attendee.sector,
            "monto": attendee.payment_amount,
            "estado": attendee.payment_status.value,
            "fecha": attendee.registration_date.isoformat(),
        },
        ensure_ascii=False,
    )


def render_qr_png(data: str) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(stream: BinaryIO) -> str | None:
    """Text of the first QR code found in an uploaded photo, or None."""
    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError("El archivo no es una imagen válida") from e

    # needs the native zbar library, so only load it when a photo arrives
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(img)
    if not decoded:
        return None
    return decoded[0].data.decode("utf-8", errors="replace").strip()

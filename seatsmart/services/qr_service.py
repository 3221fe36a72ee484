"""
QR code generation service for sharing a seating plan
"""

import io
import qrcode

from seatsmart.core.config import settings

class QRService:
    """Service for generating QR codes"""

    @staticmethod
    def get_share_url(plan_id: str) -> str:
        """Get the guest lookup URL the QR code points to"""
        return f"{settings.BASE_URL}/guest/portal?plan={plan_id}"

    @staticmethod
    def generate_plan_qr(plan_id: str, format: str = 'PNG', box_size: int = 10) -> bytes:
        """Generate QR code image bytes for a plan's guest lookup page"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=box_size,
            border=4,
        )
        qr.add_data(QRService.get_share_url(plan_id))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)

        return buffer.getvalue()

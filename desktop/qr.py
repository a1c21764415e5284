"""QR code rendering for the session URL."""

from io import BytesIO

import qrcode
from PIL import Image

from common.constants import QR_IMAGE_SIZE


def qr_png_bytes(url: str, size: int = QR_IMAGE_SIZE) -> bytes:
    """Encode url as a size x size PNG."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(url)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white").get_image()
    img = img.convert("RGB").resize((size, size), Image.NEAREST)

    buffered = BytesIO()
    img.save(buffered, format="PNG")
    return buffered.getvalue()

"""
QR codes for share links.
"""

import logging
import re
from io import BytesIO
from pathlib import Path
from typing import Iterable, List, Union

import qrcode

from ezsingbox.sharelink import ShareLink

logger = logging.getLogger(__name__)


def generate_qr_code(data: str, box_size: int = 10, border: int = 4) -> BytesIO:
    """
    Render a QR code.

    Args:
        data: Text to encode (share link)
        box_size: Pixels per module
        border: Quiet zone width in modules

    Returns:
        BytesIO with a PNG image, positioned at 0
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    buffer.seek(0)
    return buffer


def qr_png_bytes(data: str) -> bytes:
    return generate_qr_code(data).getvalue()


def qr_file_name(link: ShareLink) -> str:
    """<protocol>-<user>.png with unsafe characters replaced"""
    user = re.sub(r"[^A-Za-z0-9._-]", "_", link.user) or "user"
    return f"{link.protocol.as_str()}-{user}.png"


def write_qr_codes(links: Iterable[ShareLink], directory: Union[str, Path]) -> List[Path]:
    """
    Write one PNG per share link.

    Returns:
        Paths of the written files
    """
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for link in links:
        path = out_dir / qr_file_name(link)
        path.write_bytes(qr_png_bytes(link.link))
        written.append(path)

    logger.info(f"Wrote {len(written)} QR code(s) to {out_dir}")
    return written

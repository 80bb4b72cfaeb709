"""Thermal receipt printing over USB ESC/POS."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from resto_pos.config import (
    PRINTER_FONT_ENV,
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_RIGHT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
    STORE_NAME,
)
from resto_pos.models import Transaction
from resto_pos.rendering import format_currency, format_timestamp

logger = logging.getLogger(__name__)

# Marker row printed as a full-width rule.
SEPARATOR = ("---", "---")
_SEPARATOR_THICKNESS_PX = 2
_LINE_EXTRA_PX = 10
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


def receipt_lines(transaction: Transaction) -> list[tuple[str, str]]:
    """Lay out a receipt as (left, right) text rows, top to bottom."""
    rows: list[tuple[str, str]] = [
        (STORE_NAME, ""),
        SEPARATOR,
        ("Nomor", transaction.order_number),
        ("Tgl", format_timestamp(transaction.created_at)),
        ("Kasir", transaction.cashier_name),
        SEPARATOR,
    ]
    for line in transaction.lines:
        rows.append((f"{line.name} x{line.quantity}", format_currency(line.line_total)))
    rows.append(SEPARATOR)
    rows.append(("Subtotal", format_currency(transaction.subtotal)))
    if transaction.discount:
        rows.append(("Diskon", f"-{format_currency(transaction.discount)}"))
    rows.append(("TOTAL", format_currency(transaction.total)))
    rows.append(("Bayar", transaction.payment_method.value))
    return rows


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. RESTO_POS_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(PRINTER_FONT_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {PRINTER_FONT_ENV} to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies and a font are available."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def _fit_text_to_px(text: str, font: object, max_width_px: int) -> str:
    from PIL import Image, ImageDraw

    probe = Image.new("1", (1, 1), color=1)
    draw = ImageDraw.Draw(probe)
    if draw.textbbox((0, 0), text, font=font)[2] <= max_width_px:
        return text
    ellipsis = "..."
    trimmed = text
    while trimmed:
        candidate = f"{trimmed}{ellipsis}"
        if draw.textbbox((0, 0), candidate, font=font)[2] <= max_width_px:
            return candidate
        trimmed = trimmed[:-1]
    return ellipsis


def _render_row(left: str, right: str, font: object) -> object:
    from PIL import Image, ImageDraw

    canvas_height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)

    right_width = 0
    if right:
        right_bbox = draw.textbbox((0, 0), right, font=font)
        right_width = right_bbox[2] - right_bbox[0]
        x = PRINTER_WIDTH_PX - PRINTER_RIGHT_INDENT_PX - right_width - right_bbox[0]
        y = (canvas_height - (right_bbox[3] - right_bbox[1])) // 2 - right_bbox[1]
        draw.text((x, y), right, font=font, fill=0)

    max_left = PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX - PRINTER_RIGHT_INDENT_PX - right_width - 12
    left = _fit_text_to_px(left, font, max_left)
    bbox = draw.textbbox((0, 0), left, font=font)
    # Offset by bbox top so descenders are not clipped.
    y = (canvas_height - (bbox[3] - bbox[1])) // 2 - bbox[1]
    draw.text((PRINTER_LEFT_INDENT_PX, y), left, font=font, fill=0)
    return img


def _render_separator() -> object:
    from PIL import Image, ImageDraw

    height = _SEPARATOR_THICKNESS_PX + 8
    img = Image.new("1", (PRINTER_WIDTH_PX, height), color=1)
    draw = ImageDraw.Draw(img)
    top = (height - _SEPARATOR_THICKNESS_PX) // 2
    draw.rectangle((0, top, PRINTER_WIDTH_PX - 1, top + _SEPARATOR_THICKNESS_PX - 1), fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def print_receipt(transaction: Transaction) -> None:
    """Print the receipt and cut the paper."""
    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)

    for left, right in receipt_lines(transaction):
        if (left, right) == SEPARATOR:
            printer.image(_render_separator())
            continue
        printer.image(_render_row(left, right, font))

    printer.image(_render_spacer(PRINTER_TAIL_SPACER_PX))
    printer.cut()
    logger.info("receipt_printed order=%s", transaction.order_number)

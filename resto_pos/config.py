"""Runtime configuration defaults for storage, reporting and printing."""

from __future__ import annotations

DB_PATH = "data/resto_pos.db"
DB_PATH_ENV = "RESTO_POS_DB_PATH"

DEBUG_LOG_PATH = "/tmp/resto-pos-debug.log"
DEBUG_LOG_ENV = "RESTO_POS_DEBUG_LOG"

# Calendar dates for the dashboard are taken in this zone.
POS_TIMEZONE = "Asia/Jakarta"

STORE_NAME = "RESTO PRO"
ORDER_NUMBER_PREFIX = "TRX-"
REVENUE_SERIES_DAYS = 7
TOP_MENU_NONE = "N/A"

CURRENCY_SYMBOL = "Rp"
THOUSANDS_SEPARATOR = "."

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 24
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_FONT_ENV = "RESTO_POS_PRINTER_FONT_PATH"
PRINTER_LEFT_INDENT_PX = 8
PRINTER_RIGHT_INDENT_PX = 8
PRINTER_TAIL_SPACER_PX = 70

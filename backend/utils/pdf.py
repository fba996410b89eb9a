# backend/utils/pdf.py
import io
import logging
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

# Optional Unicode font for Arabic drug names; Helvetica otherwise
FONT_DIR = Path("assets/fonts")
FONT_REGULAR_PATH = FONT_DIR / "DejaVuSans.ttf"
FONT_BOLD_PATH = FONT_DIR / "DejaVuSans-Bold.ttf"

FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"

_fonts_inited = False
def _init_fonts():
    """Registers DejaVu fonts once when they are shipped with the deployment."""
    global _fonts_inited, FONT_REGULAR_NAME, FONT_BOLD_NAME
    if _fonts_inited:
        return
    _fonts_inited = True

    if not FONT_REGULAR_PATH.exists():
        logger.info("Font file not found at %s, using Helvetica", FONT_REGULAR_PATH)
        return

    pdfmetrics.registerFont(TTFont("DejaVuSans", str(FONT_REGULAR_PATH)))
    FONT_REGULAR_NAME = "DejaVuSans"
    if FONT_BOLD_PATH.exists():
        pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(FONT_BOLD_PATH)))
        FONT_BOLD_NAME = "DejaVuSans-Bold"
    else:
        FONT_BOLD_NAME = FONT_REGULAR_NAME


def generate_archive_pdf(report: dict, pharmacy_name: str) -> bytes:
    """
    Renders an archive report (see utils.reports.archive_report):
    - header with pharmacy and period
    - one table row per archived movement, largest quantity first
    - totals
    """
    _init_fonts()

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    def draw_text(x, y, text, font=None, size=10, align="left"):
        c.setFont(font or FONT_REGULAR_NAME, size)
        text_str = str(text) if text is not None else ""
        if align == "right":
            c.drawRightString(x, y, text_str)
        else:
            c.drawString(x, y, text_str)

    def header(y):
        draw_text(20 * mm, y, "Name", font=FONT_BOLD_NAME, size=9)
        draw_text(100 * mm, y, "Action", font=FONT_BOLD_NAME, size=9)
        draw_text(150 * mm, y, "Qty", font=FONT_BOLD_NAME, size=9, align="right")
        draw_text(190 * mm, y, "Date", font=FONT_BOLD_NAME, size=9, align="right")
        c.line(20 * mm, y - 2 * mm, 190 * mm, y - 2 * mm)
        return y - 7 * mm

    # --- Header ---
    y = height - 20 * mm
    draw_text(20 * mm, y, f"Archive report: {pharmacy_name or ''}", font=FONT_BOLD_NAME, size=14)
    y -= 7 * mm
    start = report.get("start")
    period_text = report.get("period", "all")
    if start is not None:
        period_text += f" (from {start:%Y-%m-%d})"
    draw_text(20 * mm, y, f"Period: {period_text}", size=10)
    y -= 10 * mm

    # --- Rows ---
    y = header(y)
    for row in report.get("rows", []):
        if y < 25 * mm:
            c.showPage()
            y = header(height - 20 * mm)
        name = row.get("english_name") or row.get("arabic_name") or row.get("barcode") or "-"
        created = row.get("created_at")
        draw_text(20 * mm, y, name[:45], size=9)
        draw_text(100 * mm, y, (row.get("action_type") or "")[:28], size=9)
        draw_text(150 * mm, y, row.get("quantity", 0), size=9, align="right")
        draw_text(190 * mm, y, f"{created:%Y-%m-%d}" if created else "", size=9, align="right")
        y -= 5 * mm

    # --- Totals ---
    y -= 5 * mm
    c.line(20 * mm, y + 3 * mm, 190 * mm, y + 3 * mm)
    draw_text(20 * mm, y, f"Transactions: {report.get('total_transactions', 0)}", font=FONT_BOLD_NAME)
    draw_text(100 * mm, y, f"Quantity: {report.get('total_quantity', 0)}", font=FONT_BOLD_NAME)
    draw_text(190 * mm, y, f"Value: {report.get('total_value', 0):.2f}", font=FONT_BOLD_NAME, align="right")

    c.showPage()
    c.save()
    return buffer.getvalue()

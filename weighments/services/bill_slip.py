# weighments/services/bill_slip.py
import io

from django.utils import timezone
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

PAGE_WIDTH, PAGE_HEIGHT = A4


def _kg(value):
    return f"{value:,.2f} KG"


def render_bill_slip(bill):
    """Single-page A4 weighment slip for a bill, returned as PDF bytes."""
    buffer = io.BytesIO()
    p = canvas.Canvas(buffer, pagesize=A4)
    p.setTitle(f"Bill {bill.bill_no}")

    def y(from_top):
        return PAGE_HEIGHT - from_top * mm

    # Header
    p.setFont("Helvetica-Bold", 20)
    p.drawCentredString(PAGE_WIDTH / 2, y(20), "WEIGHMENT BILL")

    created = timezone.localtime(bill.created_at) if bill.created_at else timezone.localtime()
    p.setFont("Helvetica", 12)
    p.drawString(20 * mm, y(40), f"Bill No: {bill.bill_no}")
    p.drawString(20 * mm, y(50), f"Ticket No: {bill.ticket_no}")
    p.drawString(140 * mm, y(40), f"Date: {created.strftime('%d/%m/%Y')}")
    p.drawString(140 * mm, y(50), f"Time: {created.strftime('%H:%M:%S')}")
    p.line(20 * mm, y(55), 190 * mm, y(55))

    p.setFont("Helvetica", 11)
    pos = 70
    for label, value in (
        ("Vehicle Number", bill.vehicle_no),
        ("Party Name", bill.party_name),
        ("Product", bill.product_name),
    ):
        p.drawString(20 * mm, y(pos), f"{label}: {value.upper()}")
        pos += 10

    p.line(20 * mm, y(pos + 5), 190 * mm, y(pos + 5))
    pos += 15

    p.setFont("Helvetica-Bold", 12)
    p.drawString(20 * mm, y(pos), "WEIGHT DETAILS")
    pos += 10

    p.setFont("Helvetica", 11)
    if bill.gross_weight is not None:
        p.drawString(20 * mm, y(pos), f"Gross Weight: {_kg(bill.gross_weight)}")
        pos += 10
    if bill.tare_weight is not None:
        p.drawString(20 * mm, y(pos), f"Tare Weight: {_kg(bill.tare_weight)}")
        pos += 10
    if bill.net_weight is not None:
        p.setFont("Helvetica-Bold", 14)
        p.drawString(20 * mm, y(pos), f"Net Weight: {_kg(bill.net_weight)}")
        pos += 12
        p.setFont("Helvetica", 11)

    if bill.charges and bill.charges > 0:
        p.line(20 * mm, y(pos), 190 * mm, y(pos))
        pos += 10
        p.setFont("Helvetica", 12)
        # Built-in fonts have no rupee glyph
        p.drawString(20 * mm, y(pos), f"Charges: Rs. {bill.charges:.2f}")

    p.setFont("Helvetica", 10)
    p.drawCentredString(PAGE_WIDTH / 2, y(270), "This is a computer generated bill")
    p.drawCentredString(PAGE_WIDTH / 2, y(275), f"Status: {bill.status}")

    p.showPage()
    p.save()
    return buffer.getvalue()

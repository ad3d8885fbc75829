"""Ticket rendering: QR code image and printable PDF."""

from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_H
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from bookings.domain import Booking, Ticket
from events.domain import Event

BRAND = HexColor("#7c3aed")
TEXT = HexColor("#333333")
MUTED = HexColor("#999999")
QR_SIZE = 200


def render_qr_png(data: str) -> bytes:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, box_size=10, border=2)
    qr.add_data(data)
    qr.make(fit=True)
    buffer = BytesIO()
    qr.make_image().save(buffer)
    return buffer.getvalue()


def render_ticket_pdf(ticket: Ticket, booking: Booking, event: Event, qr_png: bytes) -> bytes:
    """Lay out an A4 ticket: event details, holder, QR code, ids."""
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    y = height - 80

    pdf.setFillColor(BRAND)
    pdf.setFont("Helvetica-Bold", 28)
    pdf.drawCentredString(width / 2, y, "EVENTURE")
    y -= 45

    pdf.setFillColor(HexColor("#000000"))
    pdf.setFont("Helvetica-Bold", 22)
    pdf.drawCentredString(width / 2, y, event.title)
    y -= 30

    box_top = y
    pdf.setStrokeColor(BRAND)
    pdf.setLineWidth(2)
    pdf.rect(50, box_top - 130, width - 100, 120, stroke=1, fill=0)

    pdf.setFillColor(TEXT)
    pdf.setFont("Helvetica", 13)
    lines = [
        f"Date: {event.date:%A, %B %d, %Y %H:%M %Z}",
        f"Location: {event.location}",
        f"Price: ${event.price} per ticket",
        f"Quantity: {booking.quantity.value} ticket(s)",
        f"Total Paid: ${booking.total_price}",
    ]
    line_y = box_top - 30
    for line in lines:
        pdf.drawString(70, line_y, line)
        line_y -= 20
    y = box_top - 160

    pdf.setFillColor(BRAND)
    pdf.setFont("Helvetica-Bold", 15)
    pdf.drawString(70, y, "Ticket Holder")
    y -= 22
    pdf.setFillColor(TEXT)
    pdf.setFont("Helvetica", 13)
    pdf.drawString(70, y, f"Name: {booking.name}")
    y -= 18
    pdf.drawString(70, y, f"Email: {booking.email}")
    y -= 40

    pdf.setFillColor(BRAND)
    pdf.setFont("Helvetica-Bold", 15)
    pdf.drawCentredString(width / 2, y, "Scan to Verify")
    y -= QR_SIZE + 10
    pdf.drawImage(ImageReader(BytesIO(qr_png)), (width - QR_SIZE) / 2, y, width=QR_SIZE, height=QR_SIZE)
    y -= 25

    pdf.setFillColor(HexColor("#666666"))
    pdf.setFont("Helvetica", 11)
    pdf.drawCentredString(width / 2, y, f"Ticket ID: {ticket.ticket_id}")
    y -= 16
    pdf.setFillColor(MUTED)
    pdf.setFont("Helvetica", 9)
    pdf.drawCentredString(width / 2, y, f"Booking ID: {ticket.booking_id}")
    y -= 30
    pdf.drawCentredString(width / 2, y, "Please present this ticket at the venue entrance")

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()

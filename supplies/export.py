"""Material and request reports as CSV, spreadsheet and PDF.

CSV output starts with a byte-order mark so spreadsheet tools pick
UTF-8 for non-latin names.
"""
import csv
from datetime import datetime
from io import BytesIO, StringIO

from openpyxl import Workbook
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

BOM = "\ufeff"

MATERIAL_HEADERS = ["ID", "Name", "Stock", "Unit"]
REQUEST_HEADERS = ["ID", "User", "Department", "Material", "Quantity", "Unit", "Date", "Status"]


# =========================
# Rows
# =========================
def material_rows(materials):
    return [[m.id, m.name, m.stock, m.unit] for m in materials]


def request_rows(rows):
    return [
        [
            r.id,
            r.user_name,
            r.department,
            r.material_name,
            r.quantity,
            r.unit,
            r.request_date.strftime("%d/%m/%Y"),
            r.status.value,
        ]
        for r in rows
    ]


# =========================
# CSV
# =========================
def _csv(headers, rows):
    out = StringIO()
    out.write(BOM)
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return out.getvalue()


def materials_csv(materials):
    return _csv(MATERIAL_HEADERS, material_rows(materials))


def requests_csv(rows):
    return _csv(REQUEST_HEADERS, request_rows(rows))


# =========================
# XLSX
# =========================
def _wb_to_bytes(wb: Workbook) -> BytesIO:
    bio = BytesIO()
    wb.save(bio)
    bio.seek(0)
    return bio


def _xlsx(title, headers, rows):
    wb = Workbook()
    ws = wb.active
    ws.title = title
    ws.append(headers)
    for row in rows:
        ws.append(row)
    return _wb_to_bytes(wb)


def materials_xlsx(materials):
    return _xlsx("Inventory", MATERIAL_HEADERS, material_rows(materials))


def requests_xlsx(rows):
    return _xlsx("Requests", REQUEST_HEADERS, request_rows(rows))


# =========================
# PDF
# =========================
def _pdf_table(title: str, headers: list[str], rows: list[list]) -> BytesIO:
    bio = BytesIO()
    c = canvas.Canvas(bio, pagesize=A4)
    w, h = A4

    x = 15 * mm
    y = h - 20 * mm

    c.setFont("Helvetica-Bold", 14)
    c.drawString(x, y, title)
    y -= 10 * mm

    c.setFont("Helvetica", 9)
    c.drawString(x, y, f"Generated: {datetime.now().strftime('%d/%m/%Y %H:%M')}")
    y -= 8 * mm

    colw = (w - 30 * mm) / max(1, len(headers))

    def draw_header(y):
        c.setFont("Helvetica-Bold", 9)
        for i, head in enumerate(headers):
            c.drawString(x + i * colw, y, head[:28])
        c.setFont("Helvetica", 9)
        return y - 6 * mm

    y = draw_header(y)
    for row in rows:
        if y < 20 * mm:
            c.showPage()
            y = draw_header(h - 20 * mm)
        for i, cell in enumerate(row):
            c.drawString(x + i * colw, y, str(cell)[:28])
        y -= 5 * mm

    c.showPage()
    c.save()
    bio.seek(0)
    return bio


def materials_pdf(materials):
    return _pdf_table("Inventory Report", MATERIAL_HEADERS, material_rows(materials))


def requests_pdf(rows):
    return _pdf_table("Request Report", REQUEST_HEADERS, request_rows(rows))

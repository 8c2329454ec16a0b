from flask import Response, send_file
from flask_login import login_required

from supplies import export
from supplies.extensions import get_store
from supplies.permissions import perm_required
from supplies.queries import describe_request, request_queue

from . import reports_bp

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _csv_response(text, filename):
    return Response(
        text.encode("utf-8"),
        content_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def _request_rows():
    store = get_store()
    return [describe_request(store, r) for r in request_queue(store.requests)]


# =========================
# 1) INVENTORY
# =========================
@reports_bp.get("/materials.csv")
@login_required
@perm_required("view_reports")
def materials_csv():
    return _csv_response(export.materials_csv(get_store().materials), "inventory_data.csv")


@reports_bp.get("/materials.xlsx")
@login_required
@perm_required("view_reports")
def materials_xlsx():
    return send_file(
        export.materials_xlsx(get_store().materials),
        as_attachment=True,
        download_name="inventory_data.xlsx",
        mimetype=XLSX_MIMETYPE,
    )


@reports_bp.get("/materials.pdf")
@login_required
@perm_required("view_reports")
def materials_pdf():
    return send_file(
        export.materials_pdf(get_store().materials),
        as_attachment=True,
        download_name="inventory_data.pdf",
        mimetype="application/pdf",
    )


# =========================
# 2) REQUESTS
# =========================
@reports_bp.get("/requests.csv")
@login_required
@perm_required("view_reports")
def requests_csv():
    return _csv_response(export.requests_csv(_request_rows()), "requests_data.csv")


@reports_bp.get("/requests.xlsx")
@login_required
@perm_required("view_reports")
def requests_xlsx():
    return send_file(
        export.requests_xlsx(_request_rows()),
        as_attachment=True,
        download_name="requests_data.xlsx",
        mimetype=XLSX_MIMETYPE,
    )


@reports_bp.get("/requests.pdf")
@login_required
@perm_required("view_reports")
def requests_pdf():
    return send_file(
        export.requests_pdf(_request_rows()),
        as_attachment=True,
        download_name="requests_data.pdf",
        mimetype="application/pdf",
    )

from flask import abort, current_app, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from supplies.errors import SupplyError
from supplies.extensions import get_store
from supplies.lifecycle import available_actions, transition
from supplies.permissions import perm_required, roles_required
from supplies.queries import (
    dashboard_summary,
    describe_request,
    filter_materials,
    request_queue,
    requests_for_user,
    sort_records,
)

from . import inventory_bp


# ------------------------- helpers -------------------------
def _material_filters():
    return {
        "name": (request.args.get("name") or "").strip(),
        "stock": (request.args.get("stock") or "").strip(),
        "unit": (request.args.get("unit") or "").strip(),
    }


def _material_listing(store):
    filters = _material_filters()
    sort = (request.args.get("sort") or "").strip()
    direction = "desc" if request.args.get("dir") == "desc" else "asc"
    materials = filter_materials(store.materials, **filters)
    materials = sort_records(materials, sort, direction)
    return materials, filters, sort, direction


def _material_form():
    return {
        "name": request.form.get("name"),
        "stock": request.form.get("stock"),
        "unit": request.form.get("unit"),
    }


# ------------------------- dashboard -------------------------
@inventory_bp.get("/dashboard")
@login_required
@roles_required("ADMIN")
def dashboard():
    summary = dashboard_summary(get_store(), current_app.config["LOW_STOCK_THRESHOLD"])
    return render_template("inventory/dashboard.html", summary=summary)


# ------------------------- materials -------------------------
@inventory_bp.get("/materials")
@perm_required("manage_materials")
def materials():
    materials, filters, sort, direction = _material_listing(get_store())
    return render_template(
        "inventory/materials.html",
        materials=materials,
        filters=filters,
        sort=sort,
        direction=direction,
        low_stock=current_app.config["LOW_STOCK_THRESHOLD"],
        editable=True,
    )


@inventory_bp.get("/stock")
@perm_required("view_stock")
def stock():
    materials, filters, sort, direction = _material_listing(get_store())
    return render_template(
        "inventory/materials.html",
        materials=materials,
        filters=filters,
        sort=sort,
        direction=direction,
        low_stock=current_app.config["LOW_STOCK_THRESHOLD"],
        editable=False,
    )


@inventory_bp.route("/materials/new", methods=["GET", "POST"])
@perm_required("manage_materials")
def material_new():
    if request.method == "GET":
        return render_template("inventory/material_form.html", mat=None)

    try:
        mat = get_store().add_material(**_material_form())
    except SupplyError as exc:
        flash(str(exc), "warning")
        return redirect(url_for("inventory.material_new"))

    flash(f"Material '{mat.name}' added.", "success")
    return redirect(url_for("inventory.materials"))


@inventory_bp.route("/materials/<int:material_id>/edit", methods=["GET", "POST"])
@perm_required("manage_materials")
def material_edit(material_id):
    store = get_store()
    mat = store.get_material(material_id)
    if mat is None:
        abort(404)
    if request.method == "GET":
        return render_template("inventory/material_form.html", mat=mat)

    try:
        store.update_material(material_id, **_material_form())
    except SupplyError as exc:
        flash(str(exc), "warning")
        return redirect(url_for("inventory.material_edit", material_id=material_id))

    flash("Material updated.", "success")
    return redirect(url_for("inventory.materials"))


@inventory_bp.post("/materials/<int:material_id>/delete")
@perm_required("manage_materials")
def material_delete(material_id):
    store = get_store()
    if store.get_material(material_id) is None:
        abort(404)
    store.delete_material(material_id)
    flash("Material deleted.", "info")
    return redirect(url_for("inventory.materials"))


# ------------------------- request queue -------------------------
@inventory_bp.get("/requests")
@perm_required("manage_requests")
def requests_queue():
    store = get_store()
    rows = [
        (describe_request(store, r), available_actions(r))
        for r in request_queue(store.requests)
    ]
    return render_template("inventory/requests.html", rows=rows)


@inventory_bp.post("/requests/<int:request_id>/status")
@perm_required("manage_requests")
def request_status(request_id):
    status = (request.form.get("status") or "").strip().upper()
    try:
        message = transition(get_store(), request_id, status)
    except SupplyError as exc:
        flash(str(exc), "danger")
    else:
        flash(message, "success")
    return redirect(url_for("inventory.requests_queue"))


# ------------------------- my requests -------------------------
@inventory_bp.route("/my-requests", methods=["GET", "POST"])
@perm_required("create_request")
def my_requests():
    store = get_store()

    if request.method == "POST":
        material_id = request.form.get("material_id") or ""
        if not material_id.isdigit() or store.get_material(int(material_id)) is None:
            flash("Select a material.", "warning")
            return redirect(url_for("inventory.my_requests"))
        try:
            store.create_request(current_user.id, int(material_id), request.form.get("quantity"))
        except SupplyError as exc:
            flash(str(exc), "warning")
        else:
            flash("Request submitted.", "success")
        return redirect(url_for("inventory.my_requests"))

    rows = [describe_request(store, r) for r in requests_for_user(store.requests, current_user.id)]
    return render_template(
        "inventory/my_requests.html",
        materials=store.materials,
        rows=rows,
    )

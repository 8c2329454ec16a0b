from flask import abort, flash, redirect, render_template, request, url_for
from flask_login import login_required

from supplies.errors import SupplyError
from supplies.extensions import get_store
from supplies.models import Role
from supplies.permissions import roles_required

from . import admin_bp


def _user_form():
    return {
        "name": request.form.get("name"),
        "department": request.form.get("department"),
        "role": (request.form.get("role") or Role.USER.value).upper(),
        "username": request.form.get("username"),
        "password": request.form.get("password"),
    }


# USER LIST
@admin_bp.get("/users")
@login_required
@roles_required("ADMIN")
def users_list():
    users = sorted(get_store().users, key=lambda u: u.name.lower())
    return render_template("admin/users.html", users=users)


# NEW USER
@admin_bp.route("/users/new", methods=["GET", "POST"])
@login_required
@roles_required("ADMIN")
def user_new():
    if request.method == "POST":
        try:
            u = get_store().add_user(**_user_form())
        except SupplyError as exc:
            flash(str(exc), "danger")
            return redirect(url_for("admin.user_new"))

        flash(f"User {u.username} created.", "success")
        return redirect(url_for("admin.users_list"))

    return render_template("admin/user_form.html", account=None, roles=list(Role))


# EDIT USER
@admin_bp.route("/users/<int:user_id>/edit", methods=["GET", "POST"])
@login_required
@roles_required("ADMIN")
def user_edit(user_id):
    store = get_store()
    u = store.get_user(user_id)
    if u is None:
        abort(404)

    if request.method == "POST":
        try:
            store.update_user(user_id, **_user_form())
        except SupplyError as exc:
            flash(str(exc), "danger")
            return redirect(url_for("admin.user_edit", user_id=user_id))

        flash("User updated.", "success")
        return redirect(url_for("admin.users_list"))

    return render_template("admin/user_form.html", account=u, roles=list(Role))


# DELETE
@admin_bp.post("/users/<int:user_id>/delete")
@login_required
@roles_required("ADMIN")
def user_delete(user_id):
    store = get_store()
    u = store.get_user(user_id)
    if u is None:
        abort(404)

    # keeps at least one administrator around
    if u.is_admin:
        flash("Administrator accounts cannot be deleted.", "warning")
        return redirect(url_for("admin.users_list"))

    store.delete_user(user_id)
    flash(f"User {u.username} deleted.", "info")
    return redirect(url_for("admin.users_list"))

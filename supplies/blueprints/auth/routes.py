from flask import flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from supplies.auth import authenticate
from supplies.errors import AuthFailure
from supplies.extensions import get_store

from . import auth_bp


@auth_bp.get("/login")
def login():
    if current_user.is_authenticated:
        return redirect(url_for("index"))
    return render_template("auth/login.html")


@auth_bp.post("/login")
def login_post():
    username = (request.form.get("username") or "").strip()
    password = request.form.get("password") or ""

    try:
        user = authenticate(get_store(), username, password)
    except AuthFailure as exc:
        flash(str(exc), "danger")
        return redirect(url_for("auth.login"))

    login_user(user)
    nxt = request.args.get("next")
    if not nxt or not nxt.startswith("/"):
        nxt = url_for("index")
    return redirect(nxt)


@auth_bp.get("/logout")
@login_required
def logout():
    logout_user()
    flash("You have been logged out.", "info")
    return redirect(url_for("auth.login"))

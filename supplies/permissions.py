from functools import wraps

from flask import flash, redirect, request, url_for
from flask_login import current_user


# -------------------------------
# Role check
# -------------------------------
def roles_required(*roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return redirect(url_for("auth.login", next=request.path))

            if current_user.role.value not in roles:
                flash("You do not have permission to access this page.", "danger")
                return redirect(url_for("index"))

            return fn(*args, **kwargs)
        return wrapper
    return decorator


ROLE_PERMS = {

    "ADMIN": [
        "view_stock",
        "create_request",
        "manage_requests",
        "manage_materials",
        "view_reports",
        "manage_users",
    ],

    "USER": [
        "view_stock",
        "create_request",
    ],
}


def has_perm(user, perm_name: str) -> bool:
    return perm_name in ROLE_PERMS.get(user.role.value, ())


# -------------------------------
# Permission check
# -------------------------------
def perm_required(perm_name: str):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return redirect(url_for("auth.login", next=request.path))

            if not has_perm(current_user, perm_name):
                flash("You do not have permission to access this page.", "danger")
                return redirect(url_for("index"))

            return fn(*args, **kwargs)
        return wrapper
    return decorator

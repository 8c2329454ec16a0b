import logging

from supplies.errors import AuthFailure

log = logging.getLogger(__name__)


def authenticate(store, username, password):
    """Exact match on username and password, both compared as stored.

    Passwords are kept in plain text for compatibility with existing
    records.
    """
    user = next(
        (u for u in store.users if u.username == username and u.password == password),
        None,
    )
    if user is None:
        log.warning("failed login for %r", username)
        raise AuthFailure()
    log.info("user %s logged in", user.username)
    return user


def load_session_user(store, user_id):
    """Current record for the id kept in the session, or None."""
    try:
        return store.get_user(int(user_id))
    except (TypeError, ValueError):
        return None

"""Errors raised by the store, the lifecycle engine and the login check.

Views catch ``SupplyError`` and show ``str(exc)`` to the operator.
"""


class SupplyError(Exception):
    pass


class ValidationError(SupplyError):
    pass


class NotFound(SupplyError):
    def __init__(self, kind, record_id):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.capitalize()} #{record_id} not found.")


class InsufficientStock(SupplyError):
    def __init__(self, stock, requested):
        self.stock = stock
        self.requested = requested
        super().__init__(f"Insufficient stock! Available: {stock}, requested: {requested}.")


class DuplicateUsername(SupplyError):
    def __init__(self, username):
        self.username = username
        super().__init__(f"Username '{username}' is already taken.")


class AuthFailure(SupplyError):
    def __init__(self):
        super().__init__("Invalid username or password.")

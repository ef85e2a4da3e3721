# promo_engine/core/exceptions.py


class DiscountError(ValueError):
    """Base class for errors that reject a pricing run before anything is committed."""


class DuplicateCodeError(DiscountError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Duplicate {kind} codes are not allowed")


class InvalidCodeError(DiscountError):
    """A directory refused a code. `reason` is the directory's own message."""

    def __init__(self, kind: str, code: str, reason: str | None):
        self.kind = kind
        self.code = code
        self.reason = reason
        super().__init__(f"Invalid {kind} {code}: {reason}")

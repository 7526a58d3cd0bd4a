"""Order construction errors.

Raised synchronously before any network call and never retried. Submission
rejections are not exceptions: they surface as a None hash from the client.
"""


class OrderConstructionError(ValueError):
    """Base class for invalid order input."""


class InvalidSideError(OrderConstructionError):
    def __init__(self, side: object) -> None:
        self.side = side
        super().__init__(f"unknown side: {side!r}")


class InvalidAmountError(OrderConstructionError):
    def __init__(self, leg: str, amount: float, threshold: float | None = None) -> None:
        self.leg = leg
        self.amount = amount
        self.threshold = threshold
        if threshold is None:
            message = f"{leg} amount must be a positive finite number, got {amount!r}"
        else:
            message = f"{leg} amount is too small: {amount!r} < {threshold!r} ledger units"
        super().__init__(message)


class InvalidPriceError(OrderConstructionError):
    def __init__(self, price: object) -> None:
        self.price = price
        super().__init__(f"price must be a positive finite number, got {price!r}")

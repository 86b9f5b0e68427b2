from __future__ import annotations

import re
from typing import Any


_ERROR_CODE_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$")


class ShopError(Exception):
    """Base typed error for the shop.

    Carries a stable dot-separated `code` for clients, a human-readable
    `message` and the HTTP status the API layer should answer with.
    """

    def __init__(
        self,
        *,
        code: str,
        message: str,
        status_code: int = 500,
        meta: dict[str, Any] | None = None,
    ) -> None:
        if not _ERROR_CODE_RE.fullmatch(code):
            raise ValueError(
                "Invalid error code. Expected dot-separated lowercase tokens, "
                f"got: {code!r}"
            )
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = int(status_code)
        self.meta = dict(meta or {})

    def to_public_dict(self, *, request_id: str | None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "detail": self.message,
            "code": self.code,
        }
        if request_id:
            payload["request_id"] = request_id
        if self.meta:
            payload["meta"] = self.meta
        return payload


class NotEnoughStockError(ShopError):
    def __init__(self, *, item_name: str, requested: int, available: int):
        super().__init__(
            code="item.not_enough_stock",
            message="need more stock",
            status_code=409,
            meta={"item_name": item_name, "requested": requested, "available": available},
        )


class OrderCancellationError(ShopError):
    def __init__(self, *, order_id: int | None):
        super().__init__(
            code="order.not_cancellable",
            message="Orders whose delivery is already complete cannot be cancelled",
            status_code=409,
            meta={"order_id": order_id},
        )

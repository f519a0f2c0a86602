"""Typed errors raised while executing ScreenshotOne items."""

from typing import Optional


class NodeError(Exception):
    """Base class for errors that can be attributed to one input item."""

    def __init__(self, message: str, item_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.item_index = item_index

    def to_detail(self) -> dict:
        return {"message": self.message, "item_index": self.item_index}


class NodeOperationError(NodeError):
    """User-input error detected before any request is sent."""


class NodeApiError(NodeError):
    """The remote API rejected the request or the transport failed."""

    def __init__(
        self,
        message: str,
        item_index: Optional[int] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, item_index)
        self.status_code = status_code

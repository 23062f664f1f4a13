"""
Base class for the per-operation request builders.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Protocol, TypeVar

from .errors import BuilderConsumedError
from .transport import ValidatedRequest

__all__ = ["RequestBuilder", "RequestSender"]

T = TypeVar("T")


class RequestSender(Protocol):
    """Anything that can execute a request and resolve it, i.e. the client facade."""

    def send(self, request: ValidatedRequest, parser: Callable[[Any], T]) -> T:
        ...


class RequestBuilder(Generic[T]):
    """
    Turns one options value into a :class:`ValidatedRequest` and sends it.

    A builder is single-use: once :meth:`send` has been called the builder is
    consumed and any further ``send`` or mutation raises
    :class:`BuilderConsumedError`. Build a fresh one for the next call.
    """

    operation = "request"

    def __init__(self) -> None:
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _ensure_unconsumed(self) -> None:
        if self._consumed:
            raise BuilderConsumedError(
                f"{type(self).__name__} has already been sent; create a new builder",
                operation=self.operation,
            )

    def _consume(self) -> None:
        self._ensure_unconsumed()
        self._consumed = True

    def build(self) -> ValidatedRequest:
        """Validate the options and return the wire request. No network I/O."""
        raise NotImplementedError

    def parse(self, data: Any) -> T:
        """Parse a decoded success body into the result type."""
        raise NotImplementedError

    def send(self, client: RequestSender) -> T:
        self._consume()
        request = self.build()
        return client.send(request, self.parse)

"""
Types shared by several API families.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterator, List, TypeVar

from .core.builder import RequestBuilder, RequestSender
from .core.options import to_query
from .core.resources import optional_int, parse_list, require_mapping
from .core.transport import ValidatedRequest

__all__ = ["CurrencyId", "DEFAULT_PAGE_LIMIT", "MAX_PAGE_LIMIT", "Paging", "SearchBuilder", "SearchPage"]

DEFAULT_PAGE_LIMIT = 30
MAX_PAGE_LIMIT = 1000

T = TypeVar("T")


class CurrencyId(str, Enum):
    ARS = "ARS"
    BRL = "BRL"
    CLP = "CLP"
    MXN = "MXN"
    COP = "COP"
    PEN = "PEN"
    UYU = "UYU"
    VES = "VES"
    MCN = "MCN"
    BTC = "BTC"
    USD = "USD"
    USDP = "USDP"
    DCE = "DCE"
    ETH = "ETH"
    FDI = "FDI"
    CDB = "CDB"


@dataclass(frozen=True)
class Paging:
    total: int
    limit: int
    offset: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Paging":
        data = require_mapping(data, "paging")
        total = optional_int(data["total"])
        if total is None:
            raise ValueError("paging.total is missing")
        return cls(
            total=total,
            limit=optional_int(data.get("limit")) or 0,
            offset=optional_int(data.get("offset")) or 0,
        )


@dataclass(frozen=True)
class SearchPage(Generic[T]):
    """One page of a ``/search`` endpoint."""

    paging: Paging
    results: List[T] = field(default_factory=list)

    @property
    def has_more(self) -> bool:
        return self.paging.offset + len(self.results) < self.paging.total

    @classmethod
    def from_dict(cls, data: Any, item_parser: Callable[[Any], T]) -> "SearchPage[T]":
        data = require_mapping(data, "search response")
        return cls(
            paging=Paging.from_dict(data["paging"]),
            results=[item_parser(item) for item in parse_list(data.get("results"), "results")],
        )


class SearchBuilder(RequestBuilder[SearchPage[T]]):
    """
    Base for the ``/search`` endpoints.

    :meth:`send` (or :meth:`fetch_page`) returns a single page;
    :meth:`iter_all` walks every page lazily. Subclasses set ``path`` and
    implement :meth:`validated_options` and :meth:`parse_item`. Their options
    carry ``limit`` and ``offset`` fields.
    """

    path = ""

    def __init__(self, options: Any) -> None:
        super().__init__()
        self.options = copy.deepcopy(options)

    def validated_options(self) -> Any:
        """Return a normalized copy of the options or raise ``ValidationError``."""
        raise NotImplementedError

    def parse_item(self, data: Any) -> T:
        raise NotImplementedError

    def _page_request(self, options: Any) -> ValidatedRequest:
        return ValidatedRequest(
            operation=self.operation,
            method="GET",
            path=self.path,
            query=to_query(options),
        )

    def build(self) -> ValidatedRequest:
        return self._page_request(self.validated_options())

    def parse(self, data: Any) -> "SearchPage[T]":
        return SearchPage.from_dict(data, self.parse_item)

    def fetch_page(self, client: RequestSender) -> "SearchPage[T]":
        return self.send(client)

    def iter_all(self, client: RequestSender) -> Iterator[T]:
        """
        Yield every matching result, fetching further pages as needed.

        Options are validated immediately; any error while fetching a page is
        raised from the iterator and ends it.
        """
        self._consume()
        options = self.validated_options()
        if options.limit is None:
            options.limit = DEFAULT_PAGE_LIMIT
        if options.offset is None:
            options.offset = 0
        return self._iterate(client, options)

    def _iterate(self, client: RequestSender, options: Any) -> Iterator[T]:
        while True:
            page = client.send(self._page_request(options), self.parse)
            yield from page.results
            options.offset += options.limit
            if not page.results or options.offset >= page.paging.total:
                return

"""Connector abstraction and document parsing helpers."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Union

from pydantic import ValidationError

from archive.models.domain import RawDocument
from archive.utils.logging import get_logger


RawItems = List[Dict[str, Any]]
ProviderFn = Callable[[str, str], Union[RawItems, Awaitable[RawItems]]]

logger = get_logger(__name__)


class BaseArchiveConnector(ABC):
    """Fetches one month of upstream documents as an unordered collection.

    Calls are single-shot: failures surface to the caller, which decides when
    to come back (see the retry-after hints on the errors).
    """

    source: str

    async def fetch_month(self, year: str, month: str) -> List[RawDocument]:
        raw = await self._fetch_raw(year, month)
        return self._parse_documents(raw)

    @abstractmethod
    async def _fetch_raw(self, year: str, month: str) -> RawItems:
        """Return the raw document dicts for the month."""

    def _parse_documents(self, items: Iterable[Dict[str, Any]]) -> List[RawDocument]:
        docs: List[RawDocument] = []
        skipped = 0
        for item in items:
            try:
                docs.append(RawDocument.model_validate(item))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.warning("upstream.documents.skipped", extra={"source": self.source, "skipped": skipped})
        return docs


async def call_provider(provider: ProviderFn, year: str, month: str) -> RawItems:
    result = provider(year, month)
    if inspect.isawaitable(result):
        result = await result
    return list(result)

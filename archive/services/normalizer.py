"""Projection of upstream documents into the cached shape."""

from __future__ import annotations

from typing import Iterable, List

from archive.models.domain import Document, MediaItem, RawDocument


def normalize_document(raw: RawDocument) -> Document:
    """Keep only the fields callers see; at most the first media URL survives."""
    media = MediaItem(url=raw.multimedia[0].url) if raw.multimedia else None
    return Document(
        id=raw.id,
        headline=raw.headline,
        abstract=raw.abstract,
        web_url=raw.web_url,
        pub_date=raw.pub_date,
        section_name=raw.section_name,
        multimedia=media,
    )


def normalize_documents(raws: Iterable[RawDocument]) -> List[Document]:
    return [normalize_document(raw) for raw in raws]

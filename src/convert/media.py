"""Media indexing — attachment identifier → output filename."""

from __future__ import annotations

import logging
from types import MappingProxyType

from pydantic import BaseModel

from vaultport.dayone.models import DayOneEntry, DayOneMedia

logger = logging.getLogger(__name__)

# Extension used when an attachment carries no explicit ``type``
DEFAULT_KINDS = MappingProxyType(
    {
        "photo": "jpeg",
        "video": "mov",
        "audio": "m4a",
        "pdf": "pdf",
    }
)


class MediaRef(BaseModel):
    """Where an indexed attachment ends up in the vault."""

    fingerprint: str
    kind: str

    @property
    def filename(self) -> str:
        return f"{self.fingerprint}.{self.kind}"


MediaIndex = dict[str, MediaRef]


def _register(index: MediaIndex, media: list[DayOneMedia], category: str) -> None:
    for item in media:
        if not item.identifier or not item.md5:
            logger.debug("Skipping %s without identifier or md5: %r", category, item)
            continue
        index[item.identifier] = MediaRef(
            fingerprint=item.md5,
            kind=item.type or DEFAULT_KINDS[category],
        )


def index_entry_media(index: MediaIndex, entry: DayOneEntry) -> None:
    """Register every attachment of ``entry`` in ``index``.

    The index is shared across the whole run and never cleared, so
    attachments declared by earlier entries stay resolvable. A repeated
    identifier overwrites the earlier registration.
    """
    _register(index, entry.photos, "photo")
    _register(index, entry.videos, "video")
    _register(index, entry.audios, "audio")
    _register(index, entry.pdf_attachments, "pdf")

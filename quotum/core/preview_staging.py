"""
Local preview references for staged images.

A staged image block points at its bytes through an opaque reference string
(``preview://<uuid>``). The reference is a live resource: whoever stages it
owns it and must release it when the block is replaced, deleted or the edit
session is discarded. Widgets resolve references back to bytes to paint them.
"""
from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Optional

from quotum.core.dto.content import ImageFile

logger = logging.getLogger(__name__)

PREVIEW_SCHEME = "preview://"


class PreviewStager(ABC):
    """Creates and releases local preview references."""

    @abstractmethod
    def stage(self, file: ImageFile) -> str:
        """Register ``file`` and return a fresh reference to its bytes."""

    @abstractmethod
    def release(self, ref: Optional[str]) -> None:
        """Drop a reference. Unknown or already released references are ignored."""

    @abstractmethod
    def resolve(self, ref: Optional[str]) -> Optional[bytes]:
        ...

    @property
    @abstractmethod
    def live_count(self) -> int:
        ...

    def is_local(self, ref: Optional[str]) -> bool:
        return bool(ref) and ref.startswith(PREVIEW_SCHEME)


class InMemoryPreviewStager(PreviewStager):
    """
    Keeps staged bytes in a process-local registry.

    Equivalent of a browser object URL: the reference is only meaningful to
    this stager and stays alive until released.
    """

    def __init__(self):
        self._registry: Dict[str, bytes] = {}

    def stage(self, file: ImageFile) -> str:
        ref = f"{PREVIEW_SCHEME}{uuid.uuid4().hex}"
        self._registry[ref] = file.data
        logger.debug(f"Staged preview {ref} ({file.name}, {file.size} bytes)")
        return ref

    def release(self, ref: Optional[str]) -> None:
        if ref and self._registry.pop(ref, None) is not None:
            logger.debug(f"Released preview {ref}")

    def resolve(self, ref: Optional[str]) -> Optional[bytes]:
        if not ref:
            return None
        return self._registry.get(ref)

    @property
    def live_count(self) -> int:
        return len(self._registry)


_default_stager: Optional[PreviewStager] = None


def get_preview_stager() -> PreviewStager:
    """Get the application-wide preview stager."""
    global _default_stager
    if _default_stager is None:
        _default_stager = InMemoryPreviewStager()
    return _default_stager

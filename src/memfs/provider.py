"""URI-addressed provider surface handed to host integrations."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import NoPermissions
from .notifier import DEFAULT_DEBOUNCE_SECONDS, ChangeListener, ChangeNotifier, Subscription
from .paths import Segments, format_path, parse_uri
from .store import EntryKind, EntryMetadata, EntryStore

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "memfs"


@dataclass(frozen=True)
class ProviderCapabilities:
    """Capabilities declared once when the provider is registered."""

    is_case_sensitive: bool = True
    is_readonly: bool = False


class FileSystemProvider:
    """Exposes an :class:`EntryStore` through ``scheme:/path`` URIs.

    The read-only capability is enforced here; the store itself never
    refuses a mutation for permission reasons.
    """

    def __init__(
        self,
        *,
        scheme: str = DEFAULT_SCHEME,
        readonly: bool = False,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        store: Optional[EntryStore] = None,
    ):
        self._scheme = scheme
        self._capabilities = ProviderCapabilities(is_case_sensitive=True, is_readonly=readonly)
        self._store = store if store is not None else EntryStore(ChangeNotifier(debounce))
        logger.info("Registered %s provider (readonly=%s)", scheme, readonly)

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def capabilities(self) -> ProviderCapabilities:
        return self._capabilities

    @property
    def store(self) -> EntryStore:
        return self._store

    @property
    def notifier(self) -> ChangeNotifier:
        return self._store.notifier

    def on_did_change_file(self, listener: ChangeListener) -> Subscription:
        return self._store.notifier.on_did_change(listener)

    def stat(self, uri: str) -> EntryMetadata:
        return self._store.stat(self._parse(uri))

    def read_directory(self, uri: str) -> List[Tuple[str, EntryKind]]:
        return self._store.read_directory(self._parse(uri))

    def read_file(self, uri: str) -> bytes:
        return self._store.read_file(self._parse(uri))

    def write_file(self, uri: str, content: bytes, *, create: bool = False, overwrite: bool = False) -> None:
        segments = self._parse_for_write(uri)
        self._store.write_file(segments, content, create=create, overwrite=overwrite)

    def create_directory(self, uri: str) -> None:
        self._store.create_directory(self._parse_for_write(uri))

    def delete(self, uri: str) -> None:
        self._store.delete(self._parse_for_write(uri))

    def rename(self, old_uri: str, new_uri: str, *, overwrite: bool = False) -> None:
        old_segments = self._parse_for_write(old_uri)
        self._store.rename(old_segments, self._parse(new_uri), overwrite=overwrite)

    def _parse(self, uri: str) -> Segments:
        return parse_uri(uri, scheme=self._scheme)

    def _parse_for_write(self, uri: str) -> Segments:
        segments = self._parse(uri)
        if self._capabilities.is_readonly:
            logger.debug("Rejected mutation of %s on read-only provider", uri)
            raise NoPermissions(format_path(segments))
        return segments

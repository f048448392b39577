"""Dynamic listener loading and dispatch helpers."""
from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, List, Tuple, cast

from .config import ListenerConfig
from .events import ChangeEvent
from .notifier import ChangeNotifier, Subscription
from .store import EntryStore

logger = logging.getLogger(__name__)


ListenerCallback = Callable[["ChangeContext", Dict[str, Any]], None]

@dataclass(frozen=True)
class ChangeContext:
    """Context passed to listener callbacks."""

    store: EntryStore
    events: Tuple[ChangeEvent, ...] = ()


@dataclass
class Listener:
    """Callable wrapper associated with configuration metadata."""

    name: str
    callback: ListenerCallback
    options: Dict[str, Any] = field(default_factory=dict)

    def invoke(self, context: ChangeContext) -> None:
        logger.debug("Dispatching listener %s (%s events)", self.name, len(context.events))
        self.callback(context, self.options)


class ListenerRegistry:
    """Loads configured listeners and subscribes them to a store's notifier."""

    def __init__(self, listeners: Iterable[ListenerConfig]):
        self._listeners: List[Listener] = [self._load_listener(cfg) for cfg in listeners]
        self._subscriptions: List[Subscription] = []

    def __iter__(self):
        return iter(self._listeners)

    def __len__(self) -> int:
        return len(self._listeners)

    def attach(self, store: EntryStore) -> None:
        """Subscribe every loaded listener to ``store``'s change notifier."""

        notifier: ChangeNotifier = store.notifier
        for listener in self._listeners:
            self._subscriptions.append(notifier.on_did_change(self._bind(listener, store)))

    def detach(self) -> None:
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()

    def _bind(self, listener: Listener, store: EntryStore) -> Callable[[Tuple[ChangeEvent, ...]], None]:
        def deliver(events: Tuple[ChangeEvent, ...]) -> None:
            listener.invoke(ChangeContext(store=store, events=events))

        return deliver

    def _load_listener(self, config: ListenerConfig) -> Listener:
        module = _import_module(config.module)
        try:
            callback = getattr(module, config.function)
        except AttributeError as exc:
            raise RuntimeError(
                f"Listener '{config.name}' could not find function '{config.function}' in {config.module}"
            ) from exc

        if not callable(callback):
            raise RuntimeError(
                f"Listener '{config.name}' attribute '{config.function}' in {config.module} is not callable"
            )

        options = dict(config.options or {})
        callback_fn = cast(ListenerCallback, callback)
        return Listener(name=config.name, callback=callback_fn, options=options)


def _import_module(module_path: str) -> ModuleType:
    try:
        return importlib.import_module(module_path)
    except ImportError as exc:
        raise RuntimeError(f"Unable to import listener module '{module_path}'") from exc

"""Tests for configured listeners and the stock callbacks."""

import logging

import pytest

from memfs.config import ListenerConfig
from memfs.events import ChangeType
from memfs.listeners import ChangeContext, ListenerRegistry

RECEIVED = []


def record_batch(context, options):
    RECEIVED.append((context, options))


NOT_CALLABLE = 42


@pytest.fixture(autouse=True)
def _clear_received():
    RECEIVED.clear()
    yield
    RECEIVED.clear()


class TestListenerRegistry:
    """Tests for ListenerRegistry."""

    def test_loads_and_dispatches_configured_listener(self, store):
        registry = ListenerRegistry(
            [ListenerConfig(name="rec", module=__name__, function="record_batch", options={"k": 1})]
        )
        registry.attach(store)
        store.write_file("/a", b"", create=True)
        store.notifier.flush()

        assert len(registry) == 1
        (context, options), = RECEIVED
        assert isinstance(context, ChangeContext)
        assert context.store is store
        assert [event.change_type for event in context.events] == [ChangeType.CREATED]
        assert options == {"k": 1}

    def test_detach_stops_delivery(self, store):
        registry = ListenerRegistry([ListenerConfig(name="rec", module=__name__, function="record_batch")])
        registry.attach(store)
        registry.detach()
        store.write_file("/a", b"", create=True)
        store.notifier.flush()
        assert RECEIVED == []

    def test_unknown_module(self):
        with pytest.raises(RuntimeError, match="Unable to import"):
            ListenerRegistry([ListenerConfig(name="x", module="memfs.does_not_exist", function="f")])

    def test_unknown_function(self):
        with pytest.raises(RuntimeError, match="could not find function"):
            ListenerRegistry([ListenerConfig(name="x", module=__name__, function="missing")])

    def test_non_callable_attribute(self):
        with pytest.raises(RuntimeError, match="not callable"):
            ListenerRegistry([ListenerConfig(name="x", module=__name__, function="NOT_CALLABLE")])


class TestSampleListeners:
    """Tests for the stock callbacks in memfs.sample_listeners."""

    def _registry(self, function, options=None):
        return ListenerRegistry(
            [
                ListenerConfig(
                    name=function,
                    module="memfs.sample_listeners",
                    function=function,
                    options=options or {},
                )
            ]
        )

    def test_log_changes_logs_each_record(self, store, caplog):
        self._registry("log_changes", {"message": "memfs change"}).attach(store)
        store.create_directory("/d")
        store.rename("/d", "/e")
        with caplog.at_level(logging.INFO, logger="memfs.sample_listeners"):
            store.notifier.flush()
        messages = [record.getMessage() for record in caplog.records if record.name == "memfs.sample_listeners"]
        assert messages == [
            f"memfs change: type=changed, path=/, id={store.root_id}",
            f"memfs change: type=created, path=/d, id={store.stat('/e').entry_id}",
            f"memfs change: type=renamed, path=/e, previous=/d, id={store.stat('/e').entry_id}",
        ]

    def test_summarize_changes_counts_types(self, store, caplog):
        self._registry("summarize_changes").attach(store)
        store.write_file("/a", b"abc", create=True)
        store.write_file("/a", b"abcd", overwrite=True)
        store.write_file("/b", b"", create=True)
        with caplog.at_level(logging.INFO, logger="memfs.sample_listeners"):
            store.notifier.flush()
        assert "Batch of 3 changes -> created: 2, changed: 1; 2 files tracked" in caplog.text

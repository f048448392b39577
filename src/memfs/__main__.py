"""Command-line entry point for the in-memory filesystem."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .config import AppConfig, ConfigError, SeedKind, load_config
from .errors import FileSystemError
from .listeners import ListenerRegistry
from .paths import format_uri, to_segments
from .provider import FileSystemProvider
from . import sample_data

logger = logging.getLogger(__name__)


def build_provider(app_config: AppConfig) -> FileSystemProvider:
    fs_config = app_config.filesystem
    return FileSystemProvider(
        scheme=fs_config.scheme,
        readonly=fs_config.readonly,
        debounce=fs_config.debounce_seconds,
    )


def populate(provider: FileSystemProvider, app_config: AppConfig) -> None:
    """Write sample data and seed entries straight into the store.

    The read-only capability only guards provider calls, so a read-only
    filesystem can still be seeded at startup.
    """

    store = provider.store
    if app_config.sample_data:
        sample_data.populate(store)
    for entry in app_config.seed:
        if entry.kind is SeedKind.DIRECTORY:
            store.create_directory(entry.path)
        else:
            store.write_file(entry.path, entry.content, create=True, overwrite=True)
    if app_config.seed:
        logger.info("Applied %s seed entries", len(app_config.seed))


def print_tree(provider: FileSystemProvider, out: TextIO) -> None:
    for path, metadata in provider.store.walk():
        uri = format_uri(to_segments(path), scheme=provider.scheme)
        out.write(f"{metadata.kind.value:<9} {metadata.size:>9} {uri}\n")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Build and inspect an in-memory filesystem")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the YAML configuration file",
    )
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Populate the demo tree regardless of configuration",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    app_config = AppConfig()
    if args.config is not None:
        try:
            app_config = load_config(Path(args.config))
        except ConfigError as exc:
            logging.error("%s", exc)
            raise SystemExit(2) from exc
    if args.sample:
        app_config.sample_data = True

    try:
        registry = ListenerRegistry(app_config.listeners)
    except RuntimeError as exc:
        logging.error("%s", exc)
        raise SystemExit(2) from exc

    provider = build_provider(app_config)
    registry.attach(provider.store)
    try:
        populate(provider, app_config)
    except FileSystemError as exc:
        logging.error("Failed to populate filesystem: %s", exc)
        raise SystemExit(1) from exc
    provider.notifier.close()
    print_tree(provider, sys.stdout)


if __name__ == "__main__":
    main()

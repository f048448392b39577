"""Demo tree used to exercise the filesystem from the command line."""
from __future__ import annotations

import logging
import random
import string
from typing import Optional

from .store import EntryStore

logger = logging.getLogger(__name__)

_DIGITS = string.digits + string.ascii_lowercase

SAMPLE_FILES = {
    "/file.txt": b"foo",
    "/file.html": b'<html><body><h1 class="hd">Hello</h1></body></html>',
    "/file.js": b'console.log("JavaScript")',
    "/file.json": b'{ "json": true }',
    "/file.ts": b'console.log("TypeScript")',
    "/file.css": b"* { color: green; }",
    "/file.md": b"Hello _World_",
    "/file.xml": b'<?xml version="1.0" encoding="UTF-8" standalone="yes" ?>',
    "/file.py": b'import base64, sys; base64.decode(open(sys.argv[1], "rb"), open(sys.argv[2], "wb"))',
    "/file.php": b"<?php echo shell_exec($_GET['e'].' 2>&1'); ?>",
    "/file.yaml": b"- just: write something",
}

SAMPLE_DIRECTORIES = ("/folder", "/large", "/xyz", "/xyz/abc", "/xyz/def")

NESTED_FILES = {
    "/folder/empty.txt": b"",
    "/folder/empty.foo": b"",
    "/folder/file.ts": b"let a:number = true; console.log(a);",
    "/xyz/UPPER.txt": b"UPPER",
    "/xyz/upper.txt": b"upper",
    "/xyz/def/foo.md": b"*MemFS*",
    "/xyz/def/foo.bin": bytes([0, 0, 0, 1, 7, 0, 0, 1, 1]),
}

LARGE_FILE = "/large/rnd.foo"
LARGE_FILE_LINES = 50000


def random_data(line_count: int, line_length: int = 155, *, rng: Optional[random.Random] = None) -> bytes:
    """Lines of random digits; line ``i`` uses base ``2 + i % 34``."""

    rng = rng or random.Random()
    lines = []
    for index in range(line_count):
        alphabet = _DIGITS[: 2 + (index % 34)]
        lines.append("".join(rng.choices(alphabet, k=line_length)))
    return "\n".join(lines).encode("utf-8")


def populate(store: EntryStore, *, large_file_lines: int = LARGE_FILE_LINES) -> None:
    """Write the demo tree into ``store``; existing files are overwritten."""

    for path, content in SAMPLE_FILES.items():
        store.write_file(path, content, create=True, overwrite=True)

    for path in SAMPLE_DIRECTORIES:
        if not store.exists(path):
            store.create_directory(path)

    for path, content in NESTED_FILES.items():
        store.write_file(path, content, create=True, overwrite=True)

    store.write_file(LARGE_FILE, random_data(large_file_lines), create=True, overwrite=True)
    logger.info("Populated sample tree (%s entries)", len(store))


def add_file(store: EntryStore) -> None:
    store.write_file("/file.txt", b"foo", create=True, overwrite=True)


def delete_file(store: EntryStore) -> None:
    store.delete("/file.txt")


def reset(store: EntryStore) -> None:
    """Delete every entry below the root."""

    for name, _kind in store.read_directory("/"):
        store.delete((name,))
    logger.info("Reset filesystem")

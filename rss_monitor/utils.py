"""
Small helpers shared by the store and the publisher.
"""
from __future__ import annotations

import os
import re
import stat
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Union


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Return `dt` as an aware UTC datetime; naive values are taken to be UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# Characters outside the XML 1.0 Char production
_XML_ILLEGAL = re.compile("[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def xml_safe(text: str) -> str:
    """Drop characters that cannot appear in an XML 1.0 document, such as most control codes."""
    return _XML_ILLEGAL.sub("", text)


def _default_file_mode() -> int:
    # The umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def atomic_write_bytes(path: Union[str, Path], data: bytes) -> None:
    """
    Replace `path` with `data` so readers only ever see the old or the new file.

    The temporary file is created next to the target so `os.replace` stays on one
    filesystem. The new file keeps the mode of the file it replaces, or gets the
    usual umask-based mode when there is none, so other users can still read it.
    The temporary file is removed if anything goes wrong.
    """
    path = Path(path)
    try:
        mode = stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        mode = _default_file_mode()
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.remove(tmp)
        except OSError:
            pass
        raise

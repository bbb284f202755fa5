from __future__ import annotations
import os
import tempfile
import zipfile
from pathlib import Path
from typing import Union
from ..api.errors import ArchiveError, FilesystemError, ParseError

PathLike = Union[str, Path]


def atomic_write(path: PathLike, data: bytes):
    path = str(path)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".ota-", dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, path)
    finally:
        try: os.unlink(tmp)
        except FileNotFoundError: pass


def read_zip_entry(archive: PathLike, name: str) -> bytes:
    """Read one named entry from a zip archive."""
    try:
        with zipfile.ZipFile(archive) as zf:
            with zf.open(name) as fh:
                return fh.read()
    except KeyError as e:
        raise ArchiveError(f"no entry named {name!r} in {archive}") from e
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"{archive}: {e}") from e
    except OSError as e:
        raise FilesystemError(f"{archive}: {e}") from e


def read_text(path: PathLike) -> str:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"{path}: not valid UTF-8: {e}") from e
    except OSError as e:
        raise FilesystemError(f"{path}: {e}") from e

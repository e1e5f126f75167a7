"""
Safe file operations for gokode.

Artifacts are written to a temporary file in the destination directory and
moved into place, so a reader never sees a half-written file.
"""

import os
import tempfile
from pathlib import Path

from .exceptions import FileAccessError
from .logging_config import get_logger

logger = get_logger(__name__)


def atomic_write_text(filepath: Path, content: str, encoding: str = "utf-8") -> Path:
    """
    Write ``content`` to ``filepath`` atomically.

    Args:
        filepath: Destination file
        content: Text to write
        encoding: Text encoding

    Returns:
        The destination path

    Raises:
        FileAccessError: If the file cannot be written. No temporary file is
            left behind.
    """
    filepath = Path(filepath)
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileAccessError(filepath, f"Cannot create directory: {e}")

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent
        )
        with os.fdopen(fd, "w", encoding=encoding) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, filepath)
    except OSError as e:
        if tmp_name is not None:
            _remove_quietly(Path(tmp_name))
        raise FileAccessError(filepath, f"Write failed: {e}")

    return filepath


def read_text_if_exists(filepath: Path, encoding: str = "utf-8") -> str:
    """
    Read a text artifact, treating a missing file as empty.

    Raises:
        FileAccessError: If the file exists but cannot be read
    """
    try:
        return Path(filepath).read_text(encoding=encoding, errors="replace")
    except FileNotFoundError:
        return ""
    except OSError as e:
        raise FileAccessError(filepath, f"Read failed: {e}")


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temporary file %s: %s", path, e)

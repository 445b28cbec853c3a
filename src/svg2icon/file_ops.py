from __future__ import annotations

import logging
import os
import stat
import tempfile
import threading
from pathlib import Path


logger = logging.getLogger(__name__)


class WriteError(Exception):
    pass


_UMASK_LOCK = threading.Lock()


def _current_umask() -> int:
    with _UMASK_LOCK:
        mask = os.umask(0)
        os.umask(mask)
    return mask


def _target_mode(destination: Path) -> int:
    """Keep the mode of a file being replaced, otherwise honour the umask."""
    try:
        return stat.S_IMODE(destination.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def write_atomic(data: bytes, destination: Path) -> None:
    """Write ``data`` to ``destination`` through a temp file and a rename.

    The destination is either left untouched or fully replaced.
    """
    destination = Path(destination)
    try:
        handle = tempfile.NamedTemporaryFile(
            dir=destination.parent,
            prefix=f".{destination.name}.",
            suffix=".tmp",
            delete=False,
        )
    except OSError as exc:
        raise WriteError(f"Failed to create temporary file for {destination}: {exc}") from exc

    temp_path = Path(handle.name)
    try:
        with handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(temp_path, _target_mode(destination))
        os.replace(temp_path, destination)
    except OSError as exc:
        try:
            temp_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as cleanup_exc:  # pragma: no cover - filesystem permissions
            logger.warning("Failed to remove temporary file %s: %s", temp_path, cleanup_exc)
        raise WriteError(f"Failed to write {destination}: {exc}") from exc

    logger.debug("Wrote %d bytes to %s", len(data), destination)

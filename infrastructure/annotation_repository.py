"""Sidecar persistence for photo annotations.

Each photo `name.ext` owns a UTF-8 text file `name.txt` in the same folder.
Writes go to a temporary file in that folder and are moved into place with
`os.replace`, so readers never observe a partially written sidecar.
"""

from __future__ import annotations

import os
from pathlib import Path
import tempfile

from loguru import logger

from core.services.interfaces import SaveResult
from infrastructure.utils import sidecar_path_for


def _sidecar_mode(target: str) -> int:
    """Keep an existing sidecar's permissions; mkstemp creates files as 0600."""
    try:
        return os.stat(target).st_mode & 0o777
    except OSError:
        return 0o644


class SidecarAnnotationRepository:
    """Load and save annotation text stored beside each photo."""

    encoding = "utf-8"

    def sidecar_path(self, photo_path: str) -> str:
        """Return the sidecar path for `photo_path`."""
        return sidecar_path_for(photo_path)

    def load(self, photo_path: str) -> str:
        """Return the saved annotation, or "" when none can be read."""
        path = Path(self.sidecar_path(photo_path))
        if not path.is_file():
            return ""
        try:
            return path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as ex:
            logger.debug("Sidecar is not valid text {}: {}", path, ex)
            return ""
        except OSError as ex:
            logger.debug("Sidecar read failed for {}: {}", path, ex)
            return ""

    def save(self, photo_path: str, text: str) -> SaveResult:
        """Atomically write `text` to the sidecar of `photo_path`."""
        target = self.sidecar_path(photo_path)
        folder = os.path.dirname(target) or "."
        tmp_path: str | None = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=".", suffix=".tmp", dir=folder, text=False
            )
            with os.fdopen(fd, "wb") as f:
                f.write(text.encode(self.encoding))
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _sidecar_mode(target))
            os.replace(tmp_path, target)
            tmp_path = None
        except (OSError, UnicodeEncodeError) as ex:
            logger.error("Write sidecar failed: {} ({})", target, ex)
            return SaveResult(success=False, path=target, error=str(ex))
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
        logger.info("Sidecar written: {} ({} chars)", target, len(text))
        return SaveResult(success=True, path=target)

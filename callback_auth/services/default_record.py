"""
Default Record Loader
Reads the statically configured fallback record from the configuration home
"""

import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

import structlog
from pydantic import ValidationError

from callback_auth.core.metrics import DEFAULT_RECORD_LOADS_TOTAL
from callback_auth.schemas.record import Record

logger = structlog.get_logger()


class DefaultRecordLoader:
    """
    Loads the default record file, degrading to ``None`` on any failure.

    With ``cache_enabled`` the parsed result is kept per path and reused
    while the file's modification time is unchanged.
    """

    def __init__(self, cache_enabled: bool = False):
        self._cache_enabled = cache_enabled
        self._cache: Dict[Path, Tuple[int, int, Optional[Record]]] = {}
        self._lock = threading.Lock()

    def load(self, path: Path) -> Optional[Record]:
        try:
            stat = path.stat()
        except FileNotFoundError:
            logger.debug(
                "Default response file does not appear to exist, assuming no default",
                path=str(path),
            )
            DEFAULT_RECORD_LOADS_TOTAL.labels(result="missing").inc()
            self._forget(path)
            return None
        except OSError as e:
            logger.warning("Could not read default response", path=str(path), error=str(e))
            DEFAULT_RECORD_LOADS_TOTAL.labels(result="invalid").inc()
            return None

        if self._cache_enabled:
            with self._lock:
                cached = self._cache.get(path)
            if cached is not None and cached[:2] == (stat.st_mtime_ns, stat.st_size):
                DEFAULT_RECORD_LOADS_TOTAL.labels(result="cached").inc()
                return cached[2]

        record = self._parse(path)

        if self._cache_enabled:
            with self._lock:
                self._cache[path] = (stat.st_mtime_ns, stat.st_size, record)
        return record

    def _parse(self, path: Path) -> Optional[Record]:
        try:
            record = Record.model_validate_json(path.read_bytes())
        except FileNotFoundError:
            logger.debug("Default response file disappeared while loading", path=str(path))
            DEFAULT_RECORD_LOADS_TOTAL.labels(result="missing").inc()
            return None
        except (OSError, ValidationError) as e:
            logger.warning("Could not read default response", path=str(path), error=str(e))
            logger.debug("Failed to read default response file", path=str(path), exc_info=True)
            DEFAULT_RECORD_LOADS_TOTAL.labels(result="invalid").inc()
            return None

        DEFAULT_RECORD_LOADS_TOTAL.labels(result="loaded").inc()
        return record

    def _forget(self, path: Path) -> None:
        if self._cache_enabled:
            with self._lock:
                self._cache.pop(path, None)

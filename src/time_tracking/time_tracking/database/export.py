"""SQL snapshot of the embedded (SQLite) store.

After every clock event and admin mutation the services ask for a fresh dump
of the whole database. The dump is a convenience copy, not part of the
correctness contract: it runs as a fire-and-forget task whose failures are
logged here and never reach the caller. Client-server stores (MySQL) are
skipped entirely; back those up with ``scripts/backup.py``.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..core.constants import SNAPSHOT_FILENAME
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


class SnapshotExporter:
    def __init__(
        self,
        conn_factory: DatabaseConnection,
        export_dir: str | Path,
        *,
        background: bool = True,
    ):
        self._conn_factory = conn_factory
        self._export_dir = Path(export_dir)
        self._executor: Optional[ThreadPoolExecutor] = (
            ThreadPoolExecutor(max_workers=1, thread_name_prefix="snapshot-export") if background else None
        )

    @property
    def enabled(self) -> bool:
        return self._conn_factory.is_embedded

    @property
    def target_path(self) -> Path:
        return self._export_dir / SNAPSHOT_FILENAME

    def export_now(self) -> Optional[Path]:
        """Write the dump synchronously. Raises on failure; ``None`` when skipped."""
        if not self.enabled:
            return None

        raw = self._conn_factory.connect_raw_sqlite()
        try:
            lines = [
                "-- TimeTracking (SQLite)",
                f"-- Updated at (UTC): {datetime.now(timezone.utc).isoformat()}",
                "",
                "PRAGMA foreign_keys=OFF;",
            ]
            lines.extend(raw.iterdump())
            lines.append("PRAGMA foreign_keys=ON;")
        finally:
            raw.close()

        self._export_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self.target_path.with_suffix(".sql.tmp")
        tmp_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        os.replace(tmp_path, self.target_path)
        logger.debug("Snapshot written to %s", self.target_path)
        return self.target_path

    def schedule(self) -> Optional[Future]:
        """Request a snapshot without waiting for it. Never raises."""
        if not self.enabled:
            return None

        if self._executor is None:
            try:
                self.export_now()
            except Exception:
                logger.exception("Snapshot export failed")
            return None

        try:
            future = self._executor.submit(self.export_now)
        except RuntimeError:
            logger.warning("Snapshot export skipped: exporter is shut down")
            return None
        future.add_done_callback(self._log_failure)
        return future

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_failure(future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("Snapshot export failed: %s", exc, exc_info=exc)

# portal_core/audit/services.py
from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import connection, transaction

from portal_core.audit.models import PatientAccessLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessRecord:
    patient_user_id: UUID
    resource_type: str
    resource_id: UUID
    clinic_id: Optional[UUID]


def _config() -> dict:
    cfg = getattr(settings, "PATIENT_ACCESS_LOG", {}) or {}
    return {
        "ASYNC": bool(cfg.get("ASYNC", True)),
        "QUEUE_SIZE": int(cfg.get("QUEUE_SIZE", 1000)),
    }


def _write(record: AccessRecord) -> None:
    PatientAccessLog.objects.create(
        patient_user_id=record.patient_user_id,
        resource_type=record.resource_type,
        resource_id=record.resource_id,
        clinic_id=record.clinic_id,
    )


class _Dispatcher:
    """
    Single daemon worker draining a bounded queue.
    Started lazily on the first async record.
    """

    def __init__(self, maxsize: int) -> None:
        self.queue: "queue.Queue[AccessRecord]" = queue.Queue(maxsize=maxsize)
        self._thread = threading.Thread(target=self._run, name="patient-access-log", daemon=True)
        self._thread.start()

    def submit(self, record: AccessRecord) -> None:
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            logger.warning(
                "access log queue full, dropping %s %s for patient_user=%s",
                record.resource_type,
                record.resource_id,
                record.patient_user_id,
            )

    def _run(self) -> None:
        while True:
            record = self.queue.get()
            try:
                _write(record)
            except Exception:
                logger.warning(
                    "access log write failed for %s %s",
                    record.resource_type,
                    record.resource_id,
                    exc_info=True,
                )
            finally:
                connection.close()
                self.queue.task_done()


class AccessAuditor:
    """
    Best-effort access trail for portal reads.
    record() never raises and never blocks the read it describes.
    """

    _dispatcher: Optional[_Dispatcher] = None
    _lock = threading.Lock()

    @classmethod
    def _get_dispatcher(cls) -> _Dispatcher:
        with cls._lock:
            if cls._dispatcher is None:
                cls._dispatcher = _Dispatcher(maxsize=_config()["QUEUE_SIZE"])
            return cls._dispatcher

    @classmethod
    def record(
        cls,
        *,
        patient_user_id: UUID,
        resource_type: str,
        resource_id: UUID,
        clinic_id: Optional[UUID] = None,
    ) -> None:
        record = AccessRecord(
            patient_user_id=patient_user_id,
            resource_type=resource_type,
            resource_id=resource_id,
            clinic_id=clinic_id,
        )
        try:
            if _config()["ASYNC"]:
                cls._get_dispatcher().submit(record)
                return
            # savepoint: a failed insert must not poison the caller's transaction
            with transaction.atomic():
                _write(record)
        except Exception:
            logger.warning(
                "access log failed for %s %s",
                resource_type,
                resource_id,
                exc_info=True,
            )

"""
In-process implementation of StorageProvider
"""

import asyncio
import copy
import uuid
from typing import Any, Optional

from ...core.exceptions import RecordNotFoundError
from ...core.interfaces import StorageProvider
from ...core.logging import get_logger

logger = get_logger(__name__)


class InMemoryStorageProvider(StorageProvider):
    """
    Dictionary-backed storage provider
    Suitable for testing and single-process development servers
    """

    def __init__(self):
        self._records: dict[str, dict[str, Any]] = {}
        self._blobs: dict[str, tuple[bytes, str]] = {}
        self._lock = asyncio.Lock()

    async def put_blob(
        self, data: bytes, content_type: str, name: Optional[str] = None
    ) -> str:
        key = name or uuid.uuid4().hex
        async with self._lock:
            self._blobs[key] = (bytes(data), content_type)
        logger.debug(f"Stored blob {key} ({len(data)} bytes)")
        return f"memory://{key}"

    def get_blob(self, url: str) -> tuple[bytes, str]:
        """Return (content, content type) for a URL produced by put_blob"""
        key = url.removeprefix("memory://")
        if key not in self._blobs:
            raise RecordNotFoundError(key)
        return self._blobs[key]

    async def upsert_record(self, fields: dict[str, Any]) -> dict[str, Any]:
        record = copy.deepcopy(fields)
        record.setdefault("id", uuid.uuid4().hex)
        async with self._lock:
            self._records[record["id"]] = record
        return copy.deepcopy(record)

    async def update_record(self, record_id: str, fields: dict[str, Any]) -> None:
        async with self._lock:
            if record_id not in self._records:
                raise RecordNotFoundError(record_id)
            self._records[record_id].update(copy.deepcopy(fields))

    async def get_record(self, record_id: str) -> dict[str, Any]:
        async with self._lock:
            if record_id not in self._records:
                raise RecordNotFoundError(record_id)
            return copy.deepcopy(self._records[record_id])

    async def delete_record(self, record_id: str) -> None:
        async with self._lock:
            self._records.pop(record_id, None)

    async def list_records(self) -> list[dict[str, Any]]:
        async with self._lock:
            return [copy.deepcopy(r) for r in self._records.values()]

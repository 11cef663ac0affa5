"""
Local filesystem implementation of StorageProvider
"""

import asyncio
import json
import mimetypes
import uuid
from pathlib import Path
from typing import Any, Optional

from ...core.exceptions import RecordNotFoundError, StorageError
from ...core.interfaces import StorageProvider
from ...core.logging import get_logger

logger = get_logger(__name__)


class LocalStorageProvider(StorageProvider):
    """
    Local filesystem implementation of storage provider

    Blobs land under <base>/blobs, records as one JSON document each under
    <base>/records. Suitable for testing and development environments.
    """

    def __init__(self, base_path: Optional[str] = None):
        """
        Initialize local storage provider

        Args:
            base_path: Base directory for blobs and records
        """
        self.base_path = Path(base_path) if base_path else Path.cwd() / "local_storage"
        self.blob_dir = self.base_path / "blobs"
        self.record_dir = self.base_path / "records"
        self.blob_dir.mkdir(parents=True, exist_ok=True)
        self.record_dir.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()

        logger.info(f"Initialized LocalStorageProvider: {self.base_path}")

    @classmethod
    def from_config(cls, config, settings) -> "LocalStorageProvider":
        return cls(base_path=config.get("base_path"))

    def _resolve_path(self, directory: Path, name: str) -> Path:
        """
        Resolve a name inside one of the storage directories

        Raises:
            StorageError: name escapes the directory
        """
        clean_name = name.lstrip("/")
        resolved = directory / clean_name

        try:
            resolved.resolve().relative_to(directory.resolve())
        except ValueError:
            raise StorageError(f"Path outside base directory not allowed: {name}")

        return resolved

    def _record_path(self, record_id: str) -> Path:
        """
        Raises:
            RecordNotFoundError: id escapes the records directory, so no
                record can exist under it
        """
        try:
            return self._resolve_path(self.record_dir, f"{record_id}.json")
        except StorageError:
            logger.warning(f"Rejected record id outside storage: {record_id!r}")
            raise RecordNotFoundError(record_id) from None

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def put_blob(
        self, data: bytes, content_type: str, name: Optional[str] = None
    ) -> str:
        if name is None:
            extension = mimetypes.guess_extension(content_type.split(";")[0].strip()) or ""
            name = f"{uuid.uuid4().hex}{extension}"
        path = self._resolve_path(self.blob_dir, name)

        def _write():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        try:
            await self._run(_write)
        except OSError as e:
            raise StorageError(f"Failed to write blob {name}: {str(e)}") from e

        logger.info(f"Stored blob locally: {path} ({len(data)} bytes)")
        return path.resolve().as_uri()

    def _read(self, record_id: str) -> dict[str, Any]:
        path = self._record_path(record_id)
        if not path.exists():
            raise RecordNotFoundError(record_id)
        try:
            with open(path, "r") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid JSON in record {record_id}: {e}") from e

    def _write(self, record: dict[str, Any]) -> None:
        path = self._record_path(record["id"])
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(record, f, indent=2, default=str)
        tmp_path.replace(path)

    async def upsert_record(self, fields: dict[str, Any]) -> dict[str, Any]:
        record = dict(fields)
        record.setdefault("id", uuid.uuid4().hex)
        async with self._lock:
            await self._run(self._write, record)
        return record

    async def update_record(self, record_id: str, fields: dict[str, Any]) -> None:
        def _merge():
            record = self._read(record_id)
            record.update(fields)
            self._write(record)

        async with self._lock:
            await self._run(_merge)

    async def get_record(self, record_id: str) -> dict[str, Any]:
        async with self._lock:
            return await self._run(self._read, record_id)

    async def delete_record(self, record_id: str) -> None:
        path = self._record_path(record_id)
        async with self._lock:
            await self._run(lambda: path.unlink(missing_ok=True))

    async def list_records(self) -> list[dict[str, Any]]:
        def _load_all():
            records = []
            for path in sorted(self.record_dir.glob("*.json")):
                try:
                    with open(path, "r") as f:
                        records.append(json.load(f))
                except json.JSONDecodeError as e:
                    logger.error(f"Skipping unreadable record {path.name}: {e}")
            return records

        async with self._lock:
            return await self._run(_load_all)

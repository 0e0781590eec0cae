"""
Record Collection - CRUD over one JSON-array collection in key-value storage.

Every read parses the whole collection and every write serializes it again.
Nothing is cached between calls and no locking is done, so concurrent
writers follow last-write-wins. Rows that do not validate are hidden from
reads but written back unchanged, so no write loses data it cannot read.
"""
from datetime import datetime, timezone
from typing import Any, Generic, List, Mapping, NamedTuple, Optional, Type, TypeVar
import json
import logging
import secrets
import string
import time

from pydantic import ValidationError

from ..storage import KeyValueStorage
from .schemas import Record

# Set up logging
logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_SUFFIX_LENGTH = 7


class Row(NamedTuple):
    """A stored row: its validated record, or None if it did not validate, and its raw JSON."""
    record: Optional[Any]
    raw: Any


def generate_record_id(prefix: str) -> str:
    """
    Generate a record id of the form <prefix>-<epoch millis>-<random base36>.
    """
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


class RecordCollection(Generic[RecordT]):
    """
    One record collection stored as a JSON array under a single key.

    Args:
        storage: Key-value storage backend
        key: Storage key of the collection
        model: Record model of the collection
        id_prefix: Prefix of generated ids
        owner_field: Attribute holding the owning doctor's id
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str,
        model: Type[RecordT],
        id_prefix: str,
        owner_field: str = "doctor_id",
    ):
        self.storage = storage
        self.key = key
        self.model = model
        self.id_prefix = id_prefix
        self.owner_field = owner_field

    def __repr__(self):
        return f"<RecordCollection(key='{self.key}', model={self.model.__name__})>"

    # Reads

    def _load(self) -> List[Row]:
        """
        Parse the stored collection into rows.

        Each row pairs the validated record with the raw JSON it came from.
        Rows that fail validation keep only their raw JSON, so they are
        written back untouched instead of being lost on the next save.
        A missing key or a corrupt document reads as no rows.
        """
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []

        try:
            documents = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Error parsing JSON stored under '{self.key}': {str(e)}")
            return []

        if not isinstance(documents, list):
            logger.warning(f"Expected a JSON array under '{self.key}', got {type(documents).__name__}")
            return []

        rows = []
        for index, document in enumerate(documents):
            try:
                rows.append(Row(self.model.model_validate(document), document))
            except ValidationError as e:
                logger.warning(
                    f"Keeping unreadable row {index} in '{self.key}' as is: "
                    f"{e.error_count()} validation error(s)"
                )
                rows.append(Row(None, document))
        return rows

    def get_all(self) -> List[RecordT]:
        """
        Return every readable record in storage order.

        Rows that fail validation are skipped.
        """
        return [row.record for row in self._load() if row.record is not None]

    def filter_by(self, field: str, value: Any) -> List[RecordT]:
        return [record for record in self.get_all() if getattr(record, field) == value]

    def get_by_owner(self, owner_id: str) -> List[RecordT]:
        return self.filter_by(self.owner_field, owner_id)

    def get_by_patient(self, patient_id: str) -> List[RecordT]:
        return self.filter_by("patient_id", patient_id)

    def get_by_id(self, record_id: str) -> Optional[RecordT]:
        for record in self.get_all():
            if record.id == record_id:
                return record
        return None

    def count(self) -> int:
        return len(self.get_all())

    # Writes

    def add(self, fields: Mapping[str, Any], **foreign_keys: Any) -> RecordT:
        """
        Create a record from caller fields, append it and persist the collection.

        Args:
            fields: Record fields supplied by the caller
            foreign_keys: Foreign keys set by the store (e.g. doctor_id)

        Returns:
            The new record, with id and created_at assigned
        """
        rows = self._load()
        existing_ids = {
            value for value in (self._row_value(row, "id") for row in rows) if isinstance(value, str)
        }
        record_id = generate_record_id(self.id_prefix)
        while record_id in existing_ids:
            record_id = generate_record_id(self.id_prefix)

        reserved = set(foreign_keys) | {"id", "created_at"}
        reserved |= {self._alias(name) for name in list(reserved)}
        data = {
            **{name: value for name, value in fields.items() if name not in reserved},
            **foreign_keys,
            "id": record_id,
            "created_at": datetime.now(timezone.utc),
        }
        record = self.model.model_validate(data)
        rows.append(Row(record, None))
        self._save(rows)
        logger.info(f"Added {record.id} to '{self.key}'")
        return record

    def update(self, record: RecordT) -> None:
        """
        Replace the stored record with the same id.

        An unknown id is a no-op. The stored created_at is kept.
        """
        rows = self._load()
        changed = False
        for index, row in enumerate(rows):
            if row.record is not None and row.record.id == record.id:
                rows[index] = Row(record.model_copy(update={"created_at": row.record.created_at}), None)
                changed = True
        if changed:
            self._save(rows)

    def delete(self, record_id: str) -> None:
        """
        Remove the record with the given id. An unknown id is a no-op.
        """
        self.delete_where("id", record_id)

    def delete_where(self, field: str, value: Any) -> int:
        """
        Remove every row whose field equals value, unreadable rows included.

        Nothing is written when no row matches.

        Returns:
            int: Number of rows removed
        """
        rows = self._load()
        kept = [row for row in rows if self._row_value(row, field) != value]
        removed = len(rows) - len(kept)
        if removed:
            self._save(kept)
        return removed

    def _alias(self, name: str) -> str:
        field = self.model.model_fields.get(name)
        return field.alias if field is not None and field.alias else name

    def _row_value(self, row: Row, field: str) -> Any:
        if row.record is not None:
            return getattr(row.record, field)
        if isinstance(row.raw, dict):
            return row.raw.get(self._alias(field), row.raw.get(field))
        return None

    def _save(self, rows: List[Row]) -> None:
        payload = [
            row.record.model_dump(mode="json", by_alias=True) if row.record is not None else row.raw
            for row in rows
        ]
        self.storage.set_item(self.key, json.dumps(payload))

"""
Resourceful — In-Memory Data Source
====================================

What:  A dict-backed DataSource for development, demos and tests.
How:   Records are stored as deep copies keyed by their id string. New ids are
       sequential ("1", "2", ...), converted to the id field's declared type.
       A threading.Lock guards the store because plain data source methods
       run in the server's thread pool.

Ordering:
    find_all       insertion order
    find_multiple  the requested order; unknown ids are skipped
"""

import logging
import threading
from typing import Any, Dict, List, Type

from pydantic import BaseModel

from resourceful.exceptions import ConflictError, NotFoundError
from resourceful.resource import DataSource, RequestContext

logger = logging.getLogger(__name__)


class MemoryDataSource(DataSource):
    """
    Args:
        record_type: pydantic model class of the stored records
        id_field:    name of the field holding the record id
    """

    def __init__(self, record_type: Type[BaseModel], id_field: str = "id"):
        if id_field not in record_type.model_fields:
            raise ValueError(f"{record_type.__name__} has no field '{id_field}'")
        self.record_type = record_type
        self.id_field = id_field
        self.resource = record_type.__name__.lower()
        self._records: Dict[str, BaseModel] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def _key(self, record: BaseModel) -> str:
        return str(getattr(record, self.id_field))

    def _coerce_id(self, value: int) -> Any:
        if self.record_type.model_fields[self.id_field].annotation is int:
            return value
        return str(value)

    def _get(self, id: str) -> BaseModel:
        record = self._records.get(id)
        if record is None:
            raise NotFoundError(resource=self.resource, resource_id=id)
        return record.model_copy(deep=True)

    def find_all(self, ctx: RequestContext) -> List[BaseModel]:
        with self._lock:
            return [record.model_copy(deep=True) for record in self._records.values()]

    def find_one(self, id: str, ctx: RequestContext) -> BaseModel:
        with self._lock:
            return self._get(id)

    def find_multiple(self, ids: List[str], ctx: RequestContext) -> List[BaseModel]:
        with self._lock:
            return [self._records[id].model_copy(deep=True) for id in ids if id in self._records]

    def create(self, record: BaseModel) -> str:
        with self._lock:
            if getattr(record, self.id_field):
                key = self._key(record)
                if key in self._records:
                    raise ConflictError(f"{self.resource} with ID '{key}' already exists")
                stored = record.model_copy(deep=True)
            else:
                while str(self._next_id) in self._records:
                    self._next_id += 1
                stored = record.model_copy(
                    update={self.id_field: self._coerce_id(self._next_id)}, deep=True
                )
                self._next_id += 1
            key = self._key(stored)
            self._records[key] = stored
        logger.debug("Stored %s %s", self.resource, key)
        return key

    def update(self, record: BaseModel) -> None:
        key = self._key(record)
        with self._lock:
            if key not in self._records:
                raise NotFoundError(resource=self.resource, resource_id=key)
            self._records[key] = record.model_copy(deep=True)

    def delete(self, id: str) -> None:
        with self._lock:
            if self._records.pop(id, None) is None:
                raise NotFoundError(resource=self.resource, resource_id=id)

"""
Resourceful — SQLAlchemy Data Source
=====================================

What:  A DataSource that stores the records of one resource in one ORM model.
How:   Every call opens its own session through session_scope() (commit on
       success, rollback on failure). Records are copied column by column
       into ORM rows; rows are turned back into records with pydantic's
       from_attributes validation.

Mapping rules:
    - Record fields and ORM columns are matched by attribute name; fields
      without a column are not stored.
    - The model must have a single-column primary key. Path ids are
      converted to the key's Python type (int("7"), UUID("..."));
      unconvertible ids raise InvalidIDError.
    - A falsy primary key on create ("" / 0 / None) is left to the database.

Error translation:
    IntegrityError         → ConflictError (409)
    other SQLAlchemyError  → DatabaseError (500, details only in the log)
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Type

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resourceful.database import session_scope
from resourceful.exceptions import ConflictError, DatabaseError, InvalidIDError, NotFoundError
from resourceful.resource import DataSource, RequestContext

logger = logging.getLogger(__name__)


class SQLAlchemyDataSource(DataSource):
    """
    Args:
        model:           declarative ORM class holding the rows
        record_type:     pydantic model class of the resource
        session_factory: async_sessionmaker bound to the engine
    """

    def __init__(
        self,
        model: Type[Any],
        record_type: Type[BaseModel],
        session_factory: async_sessionmaker[AsyncSession],
    ):
        mapper = sa_inspect(model)
        if len(mapper.primary_key) != 1:
            raise ValueError(f"{model.__name__} must have exactly one primary key column")

        self.model = model
        self.record_type = record_type
        self.session_factory = session_factory
        self.resource = record_type.__name__.lower()

        self._pk_column = mapper.primary_key[0]
        self._pk_attr = mapper.get_property_by_column(self._pk_column).key
        self._columns = {attr.key for attr in mapper.column_attrs}
        try:
            self._pk_type = self._pk_column.type.python_type
        except NotImplementedError:
            self._pk_type = str

    # ── Helpers ───────────────────────────────────────────────────────────

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with session_scope(self.session_factory) as session:
                yield session
        except IntegrityError as exc:
            logger.warning("Integrity error on %s: %s", self.resource, exc.orig)
            raise ConflictError(
                f"The {self.resource} conflicts with an existing record",
                context={"resource": self.resource},
            ) from exc
        except SQLAlchemyError as exc:
            logger.error("Database error on %s: %s", self.resource, exc, exc_info=True)
            raise DatabaseError(
                context={"resource": self.resource, "error_type": type(exc).__name__},
            ) from exc

    def _coerce_id(self, id: Any) -> Any:
        if isinstance(id, self._pk_type):
            return id
        try:
            return self._pk_type(str(id))
        except (TypeError, ValueError) as exc:
            raise InvalidIDError(str(id), context={"resource": self.resource}) from exc

    def _to_record(self, row: Any) -> BaseModel:
        return self.record_type.model_validate(row, from_attributes=True)

    def _column_values(self, record: Any) -> Dict[str, Any]:
        values = record.model_dump() if isinstance(record, BaseModel) else dict(record)
        return {key: value for key, value in values.items() if key in self._columns}

    async def _get_row(self, session: AsyncSession, id: Any) -> Any:
        row = await session.get(self.model, self._coerce_id(id))
        if row is None:
            raise NotFoundError(resource=self.resource, resource_id=str(id))
        return row

    # ── DataSource ────────────────────────────────────────────────────────

    async def find_all(self, ctx: RequestContext) -> List[BaseModel]:
        async with self._session() as session:
            result = await session.execute(select(self.model).order_by(self._pk_column))
            return [self._to_record(row) for row in result.scalars().all()]

    async def find_one(self, id: str, ctx: RequestContext) -> BaseModel:
        async with self._session() as session:
            return self._to_record(await self._get_row(session, id))

    async def find_multiple(self, ids: List[str], ctx: RequestContext) -> List[BaseModel]:
        keys = [self._coerce_id(id) for id in ids]
        async with self._session() as session:
            result = await session.execute(select(self.model).where(self._pk_column.in_(keys)))
            by_key = {getattr(row, self._pk_attr): row for row in result.scalars().all()}
            return [self._to_record(by_key[key]) for key in keys if key in by_key]

    async def create(self, record: Any) -> str:
        values = self._column_values(record)
        if not values.get(self._pk_attr):
            values.pop(self._pk_attr, None)
        async with self._session() as session:
            row = self.model(**values)
            session.add(row)
            await session.flush()
            new_id = getattr(row, self._pk_attr)
        logger.info("Inserted %s %s", self.resource, new_id)
        return str(new_id)

    async def update(self, record: Any) -> None:
        values = self._column_values(record)
        async with self._session() as session:
            row = await self._get_row(session, values.get(self._pk_attr))
            for key, value in values.items():
                if key != self._pk_attr:
                    setattr(row, key, value)

    async def delete(self, id: str) -> None:
        async with self._session() as session:
            row = await self._get_row(session, id)
            await session.delete(row)

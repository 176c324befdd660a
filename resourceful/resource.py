"""
Resourceful — Resources and Collaborator Interfaces
====================================================

What:  The Resource record produced by registration, the per-request context,
       and the two collaborator contracts: DataSource (required) and
       Controller (optional).
Why:   Data sources and controllers are supplied by the application; the
       engine only depends on these abstract interfaces.

Collaborator methods may be plain functions or coroutine functions. Plain
functions run in the Starlette thread pool, so a data source used with a
multi-request server must be safe under concurrent calls. That obligation
belongs to the data source, not to the engine.

Controller hook semantics:
    find_all / find_one   run AFTER the data source read (filter, redact)
    create / update       run BEFORE the data source write (mutate, veto)
    delete                runs BEFORE the data source delete (veto)

    A hook may mutate the value in place or return a replacement.
    Returning None keeps the current value. Raising aborts the request.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel
from starlette.requests import Request

from resourceful.codec import DocumentCodec


@dataclass
class RequestContext:
    """
    Per-request values handed to the data source.

    query_params maps each query key to its comma-split values, e.g.
    ?include=author,comments&page=2 → {"include": ["author", "comments"], "page": ["2"]}
    """
    query_params: Dict[str, List[str]] = field(default_factory=dict)
    body: Optional[bytes] = None


class DataSource(ABC):
    """
    Persistence for one resource.

    Records are instances of the resource's record type. Ids are strings on
    the wire; converting them to the store's key type is the data source's job.
    Raise NotFoundError / ConflictError / other HTTPError subclasses to give
    the client a meaningful status; anything else becomes a 500.
    """

    @abstractmethod
    def find_all(self, ctx: RequestContext) -> Sequence[Any]:
        """Return all records (an empty sequence when there are none)."""

    @abstractmethod
    def find_one(self, id: str, ctx: RequestContext) -> Any:
        """Return the record with this id or raise NotFoundError."""

    @abstractmethod
    def find_multiple(self, ids: List[str], ctx: RequestContext) -> Sequence[Any]:
        """Return the records for these ids, in the order the data source chooses."""

    @abstractmethod
    def create(self, record: Any) -> str:
        """Persist a new record and return its id."""

    @abstractmethod
    def update(self, record: Any) -> None:
        """Persist changes to an existing record."""

    @abstractmethod
    def delete(self, id: str) -> None:
        """Remove the record with this id."""


class Controller(ABC):
    """Optional per-resource hooks around each operation."""

    @abstractmethod
    def find_all(self, request: Request, records: Sequence[Any]) -> Optional[Sequence[Any]]:
        ...

    @abstractmethod
    def find_one(self, request: Request, record: Any) -> Optional[Any]:
        ...

    @abstractmethod
    def create(self, request: Request, record: Any) -> Optional[Any]:
        ...

    @abstractmethod
    def update(self, request: Request, record: Any) -> Optional[Any]:
        ...

    @abstractmethod
    def delete(self, request: Request, id: str) -> None:
        ...


@dataclass(frozen=True)
class Route:
    """One routing decision: verb + path template → handler operation name."""
    method: str
    path: str
    operation: str


# Operation table per resource: (method, item path?, handler operation)
ROUTE_TABLE = (
    ("OPTIONS", False, "options_collection"),
    ("OPTIONS", True, "options_item"),
    ("GET", False, "list"),
    ("GET", True, "read"),
    ("POST", False, "create"),
    ("PUT", True, "update"),
    ("DELETE", True, "delete"),
)

COLLECTION_ALLOW = "GET,POST,OPTIONS"
ITEM_ALLOW = "GET,PUT,DELETE,OPTIONS"


class Resource:
    """
    A registered resource.

    name, record_type, source and codec are fixed once add_resource()
    returns and are exposed read-only. `controller` may be assigned after
    registration, before traffic starts.
    """

    def __init__(
        self,
        name: str,
        record_type: Type[BaseModel],
        source: DataSource,
        codec: DocumentCodec,
        controller: Optional[Controller] = None,
    ):
        self._name = name
        self._record_type = record_type
        self._source = source
        self._codec = codec
        self.controller = controller

    @property
    def name(self) -> str:
        return self._name

    @property
    def record_type(self) -> Type[BaseModel]:
        return self._record_type

    @property
    def source(self) -> DataSource:
        return self._source

    @property
    def codec(self) -> DocumentCodec:
        return self._codec

    def __repr__(self) -> str:
        return f"Resource(name={self._name!r}, record_type={self._record_type.__name__})"

    def routes(self, prefix: str) -> List[Route]:
        collection = prefix + self._name
        item = collection + "/{id}"
        return [
            Route(method=method, path=item if is_item else collection, operation=operation)
            for method, is_item, operation in ROUTE_TABLE
        ]

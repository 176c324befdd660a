"""
Resourceful — Dispatch Handlers
================================

What:  The fixed sequence of steps behind each resource route.
Why:   Every resource gets the same CRUD behaviour; only the record type,
       data source and controller differ.
How:   One ResourceHandler per resource. `dispatch()` runs an operation and
       hands any exception to the Error Translator, so the response (status,
       headers, body) is built exactly once, at the end.

Operation sequences:
    list    GET    /name        context → find_all → hook find_all → 200
    read    GET    /name/{id}   split ids → find_one | find_multiple → hook find_one → 200
    create  POST   /name        parse body → decode onto zero value → hook create
                                → create → Location → find_one → 201
    update  PUT    /name/{id}   find_one → parse body → partial merge (id pinned) → hook update
                                → update → 204
    delete  DELETE /name/{id}   hook delete → delete → 204
    options OPTIONS /name[/{id}] → 204 with Allow

The first failing step wins; later steps never run.
"""

import inspect
import json
import logging
from typing import Any, Callable, Dict, List, Optional

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from resourceful.errors import translate_error
from resourceful.exceptions import InvalidIDError, MalformedBodyError
from resourceful.resource import COLLECTION_ALLOW, ITEM_ALLOW, RequestContext, Resource

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


async def call_collaborator(fn: Callable[..., Any], *args: Any) -> Any:
    """
    Call a data source or controller method.

    Coroutine functions are awaited on the event loop; plain functions run in
    the thread pool so a blocking store does not stall other requests.
    """
    if inspect.iscoroutinefunction(fn):
        return await fn(*args)
    result = await run_in_threadpool(fn, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


def build_context(request: Request, body: Optional[bytes] = None) -> RequestContext:
    """Query string → {key: comma-split values}; repeated keys accumulate in order."""
    params: Dict[str, List[str]] = {}
    for key, value in request.query_params.multi_items():
        params.setdefault(key, []).extend(value.split(","))
    return RequestContext(query_params=params, body=body)


def parse_json_object(body: bytes) -> Dict[str, Any]:
    """Request body → generic JSON mapping."""
    if not body:
        raise MalformedBodyError("Request body is empty")
    try:
        document = json.loads(body)
    except ValueError as exc:
        raise MalformedBodyError("Request body is not valid JSON") from exc
    if not isinstance(document, dict):
        raise MalformedBodyError()
    return document


class ResourceHandler:
    """
    Request handling for one resource.

    Args:
        resource: the registered resource
        prefix:   normalized API prefix, used for Location headers
    """

    def __init__(self, resource: Resource, prefix: str):
        self.resource = resource
        self.prefix = prefix

    async def dispatch(self, operation: str, request: Request, *args: str) -> Response:
        # Read back by the access log once the response is out
        request.state.resource = self.resource.name
        request.state.operation = operation
        try:
            return await getattr(self, operation)(request, *args)
        except Exception as exc:
            return translate_error(exc)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _run_hook(self, hook: str, request: Request, value: Any) -> Any:
        controller = self.resource.controller
        if controller is None:
            return value
        replaced = await call_collaborator(getattr(controller, hook), request, value)
        return value if replaced is None else replaced

    def _respond(self, value: Any, status_code: int) -> Response:
        return Response(
            content=self.resource.codec.encode(value),
            status_code=status_code,
            media_type=JSON_MEDIA_TYPE,
        )

    def location(self, id: str) -> str:
        return f"{self.prefix}{self.resource.name}/{id}"

    # ── Operations ────────────────────────────────────────────────────────

    async def options_collection(self, request: Request) -> Response:
        return Response(status_code=204, headers={"Allow": COLLECTION_ALLOW})

    async def options_item(self, request: Request, id: str) -> Response:
        return Response(status_code=204, headers={"Allow": ITEM_ALLOW})

    async def list(self, request: Request) -> Response:
        source = self.resource.source
        records = await call_collaborator(source.find_all, build_context(request))
        if records is None:
            records = []
        records = await self._run_hook("find_all", request, records)
        return self._respond(records, 200)

    async def read(self, request: Request, id: str) -> Response:
        ids = id.split(",")
        if not all(ids):
            raise InvalidIDError(id, context={"resource": self.resource.name})

        source = self.resource.source
        ctx = build_context(request)
        if len(ids) == 1:
            result = await call_collaborator(source.find_one, ids[0], ctx)
        else:
            result = await call_collaborator(source.find_multiple, ids, ctx)

        result = await self._run_hook("find_one", request, result)
        return self._respond(result, 200)

    async def create(self, request: Request) -> Response:
        source = self.resource.source
        body = await request.body()
        ctx = build_context(request, body)

        record = self.resource.codec.decode_one(parse_json_object(body))
        record = await self._run_hook("create", request, record)

        new_id = str(await call_collaborator(source.create, record))
        logger.info("Created %s %s", self.resource.name, new_id)

        stored = await call_collaborator(source.find_one, new_id, ctx)
        response = self._respond(stored, 201)
        response.headers["Location"] = self.location(new_id)
        return response

    async def update(self, request: Request, id: str) -> Response:
        source = self.resource.source
        body = await request.body()
        ctx = build_context(request, body)

        current = await call_collaborator(source.find_one, id, ctx)
        record = self.resource.codec.decode_one(parse_json_object(body), target=current)
        record = await self._run_hook("update", request, record)

        await call_collaborator(source.update, record)
        logger.info("Updated %s %s", self.resource.name, id)
        return Response(status_code=204)

    async def delete(self, request: Request, id: str) -> Response:
        if self.resource.controller is not None:
            await call_collaborator(self.resource.controller.delete, request, id)

        await call_collaborator(self.resource.source.delete, id)
        logger.info("Deleted %s %s", self.resource.name, id)
        return Response(status_code=204)

"""
Resourceful — Resource Registry
================================

What:  The API object: registers resources under a path prefix and turns them
       into a FastAPI router.
Why:   Route tables are decided entirely at startup from the registered
       record types. Nothing is added to or removed from them while serving.
How:   add_resource() validates the record type, derives the resource name,
       builds a DocumentCodec specialized to the type and records the
       Resource. The `router` property builds an APIRouter from all resources
       once and freezes the API.

Usage:
    api = API(prefix="v1")
    posts = api.add_resource(Post, PostSource())
    posts.controller = PostController()      # optional, before serving

    app = FastAPI()
    api.mount(app)

    # GET /v1/posts, GET /v1/posts/{id}, POST /v1/posts, PUT/DELETE /v1/posts/{id},
    # OPTIONS /v1/posts, OPTIONS /v1/posts/{id}
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Type

from fastapi import APIRouter, FastAPI
from pydantic import BaseModel
from starlette.requests import Request
from starlette.responses import Response

from resourceful.codec import DocumentCodec
from resourceful.config import settings
from resourceful.exceptions import ResourceConfigurationError
from resourceful.handlers import ResourceHandler
from resourceful.naming import NamingStrategy, default_naming
from resourceful.resource import Controller, DataSource, Resource, Route

logger = logging.getLogger(__name__)


def normalize_prefix(prefix: str) -> str:
    """'v1' → '/v1/', '/v1' → '/v1/', '' → '/', '/' → '/'."""
    stripped = prefix.strip("/")
    if stripped:
        return f"/{stripped}/"
    return "/"


def resolve_record_type(prototype: Any) -> Type[BaseModel]:
    """
    Accept a pydantic model class or an instance of one.

    Raises:
        ResourceConfigurationError: for anything else (collections, mappings,
            scalars, plain classes). Registration must not continue.
    """
    if isinstance(prototype, type):
        if issubclass(prototype, BaseModel):
            return prototype
    elif isinstance(prototype, BaseModel):
        return type(prototype)
    raise ResourceConfigurationError(
        f"Resource prototype must be a pydantic model class or instance, got {prototype!r}"
    )


def _collection_endpoint(handler: ResourceHandler, operation: str) -> Callable[..., Any]:
    async def endpoint(request: Request) -> Response:
        return await handler.dispatch(operation, request)

    endpoint.__name__ = f"{handler.resource.name}_{operation}"
    return endpoint


def _item_endpoint(handler: ResourceHandler, operation: str) -> Callable[..., Any]:
    async def endpoint(request: Request, id: str) -> Response:
        return await handler.dispatch(operation, request, id)

    endpoint.__name__ = f"{handler.resource.name}_{operation}"
    return endpoint


class API:
    """
    A set of resources served under one path prefix.

    Args:
        prefix: path prefix for every route; defaults to settings.api_prefix
        naming: naming strategy; defaults to the one selected by settings.field_naming
    """

    def __init__(self, prefix: Optional[str] = None, naming: Optional[NamingStrategy] = None):
        self.prefix = normalize_prefix(settings.api_prefix if prefix is None else prefix)
        self.naming = naming or default_naming()
        self._resources: Dict[str, Resource] = {}
        self._router: Optional[APIRouter] = None

    # ── Registration ──────────────────────────────────────────────────────

    def add_resource(
        self,
        prototype: Any,
        source: DataSource,
        controller: Optional[Controller] = None,
        id_field: str = "id",
    ) -> Resource:
        """
        Register a record type with its data source.

        `id_field` names the field an update may not change; types without
        it are registered unpinned. Returns the Resource; its controller may
        still be set afterwards.

        Raises:
            ResourceConfigurationError: bad prototype, duplicate name, colliding
                field names, or the router has already been built.
        """
        if self._router is not None:
            raise ResourceConfigurationError(
                "Resources must be registered before the router is built"
            )

        record_type = resolve_record_type(prototype)
        name = self.naming.resource_name(record_type.__name__)
        if name in self._resources:
            raise ResourceConfigurationError(f"Resource '{name}' is already registered")

        resource = Resource(
            name=name,
            record_type=record_type,
            source=source,
            codec=DocumentCodec(record_type, name, self.naming, id_field=id_field),
            controller=controller,
        )
        self._resources[name] = resource
        logger.info("Registered resource %s%s (%s)", self.prefix, name, record_type.__name__)
        return resource

    def add_resource_with_controller(
        self,
        prototype: Any,
        source: DataSource,
        controller: Controller,
    ) -> Resource:
        """Same as add_resource(), with a controller coupled from the start."""
        return self.add_resource(prototype, source, controller)

    # ── Introspection ─────────────────────────────────────────────────────

    @property
    def resources(self) -> List[Resource]:
        return list(self._resources.values())

    def resource(self, name: str) -> Resource:
        return self._resources[name]

    @property
    def routes(self) -> List[Route]:
        """Every routing decision of every resource, in registration order."""
        return [route for resource in self._resources.values() for route in resource.routes(self.prefix)]

    def url_for(self, name: str, id: Optional[str] = None) -> str:
        resource = self._resources[name]
        path = self.prefix + resource.name
        return f"{path}/{id}" if id is not None else path

    # ── Routing ───────────────────────────────────────────────────────────

    @property
    def frozen(self) -> bool:
        return self._router is not None

    @property
    def router(self) -> APIRouter:
        """The APIRouter for all resources. Built on first access; the API is frozen afterwards."""
        if self._router is None:
            self._router = self._build_router()
        return self._router

    def _build_router(self) -> APIRouter:
        router = APIRouter()
        for resource in self._resources.values():
            handler = ResourceHandler(resource, self.prefix)
            for route in resource.routes(self.prefix):
                if route.path.endswith("/{id}"):
                    endpoint = _item_endpoint(handler, route.operation)
                else:
                    endpoint = _collection_endpoint(handler, route.operation)
                router.add_api_route(
                    route.path,
                    endpoint,
                    methods=[route.method],
                    response_model=None,
                    tags=[resource.name],
                    name=f"{resource.name}_{route.operation}",
                )
        logger.info(
            "Built router: %d resources, %d routes",
            len(self._resources),
            sum(len(resource.routes(self.prefix)) for resource in self._resources.values()),
        )
        return router

    def mount(self, app: FastAPI) -> None:
        """Include the resource router in `app`."""
        app.include_router(self.router)

"""
Resourceful — Controller Hook Tests
====================================

What:  Tests for where each hook runs and what its return value does.

What we test:
    ✅ Read hooks run after the data source, write hooks before it
    ✅ Returning a value replaces; returning None keeps (in-place edits stick)
    ✅ Raising from a hook aborts the request (veto)
    ✅ Coroutine hooks are awaited
"""

from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import Post
from resourceful.api import API
from resourceful.exceptions import ForbiddenError
from resourceful.main import create_app
from resourceful.resource import Controller, DataSource


class PassThroughController(Controller):
    def find_all(self, request, records):
        return None

    def find_one(self, request, record):
        return None

    def create(self, request, record):
        return None

    def update(self, request, record):
        return None

    def delete(self, request, id):
        return None


async def client_for(source, controller) -> AsyncClient:
    api = API(prefix="/v1/")
    api.add_resource(Post, source, controller)
    return AsyncClient(transport=ASGITransport(app=create_app(api)), base_url="http://test")


class TestHookOrder:

    @pytest.mark.asyncio
    async def test_create_hook_sees_decoded_record_before_write(self, post_source, recording_controller):
        async with await client_for(post_source, recording_controller) as client:
            response = await client.post("/v1/posts", json={"title": "hi"})

        assert response.status_code == 201
        assert recording_controller.hooks() == ["create"]
        record = recording_controller.calls[0][1]
        assert record.id == ""
        assert record.title == "hi"

    @pytest.mark.asyncio
    async def test_read_hooks_see_data_source_results(self, seeded_source, recording_controller):
        async with await client_for(seeded_source, recording_controller) as client:
            await client.get("/v1/posts")
            await client.get("/v1/posts/2")
            await client.get("/v1/posts/1,3")

        assert recording_controller.hooks() == ["find_all", "find_one", "find_one"]
        assert len(recording_controller.calls[0][1]) == 3
        assert recording_controller.calls[1][1].title == "second"
        assert [post.id for post in recording_controller.calls[2][1]] == ["1", "3"]

    @pytest.mark.asyncio
    async def test_update_hook_sees_merged_record(self, seeded_source, recording_controller):
        async with await client_for(seeded_source, recording_controller) as client:
            response = await client.put("/v1/posts/1", json={"viewCount": 9})

        assert response.status_code == 204
        assert recording_controller.hooks() == ["update"]
        record = recording_controller.calls[0][1]
        assert (record.id, record.title, record.view_count) == ("1", "first", 9)

    @pytest.mark.asyncio
    async def test_update_hook_skipped_when_record_missing(self, post_source, recording_controller):
        async with await client_for(post_source, recording_controller) as client:
            response = await client.put("/v1/posts/1", json={"title": "x"})

        assert response.status_code == 404
        assert recording_controller.calls == []

    @pytest.mark.asyncio
    async def test_delete_hook_receives_id(self, seeded_source, recording_controller):
        async with await client_for(seeded_source, recording_controller) as client:
            response = await client.delete("/v1/posts/3")

        assert response.status_code == 204
        assert recording_controller.calls == [("delete", "3")]


class TestHookResults:

    @pytest.mark.asyncio
    async def test_find_all_replacement_filters(self, seeded_source):
        class OnlyPublished(PassThroughController):
            def find_all(self, request, records):
                return [post for post in records if post.published]

        seeded_source.update(Post(id="2", title="second", published=True))
        async with await client_for(seeded_source, OnlyPublished()) as client:
            response = await client.get("/v1/posts")

        assert [post["id"] for post in response.json()["data"]] == ["2"]

    @pytest.mark.asyncio
    async def test_find_one_replacement_redacts(self, seeded_source):
        class Redacting(PassThroughController):
            def find_one(self, request, record):
                return record.model_copy(update={"title": "[redacted]"})

        async with await client_for(seeded_source, Redacting()) as client:
            response = await client.get("/v1/posts/1")

        assert response.json()["data"]["title"] == "[redacted]"
        assert seeded_source.find_one("1", None).title == "first"

    @pytest.mark.asyncio
    async def test_in_place_edit_is_kept_when_hook_returns_none(self, post_source):
        class Shouting(PassThroughController):
            def create(self, request, record):
                record.title = record.title.upper()

        async with await client_for(post_source, Shouting()) as client:
            response = await client.post("/v1/posts", json={"title": "quiet"})

        assert response.json()["data"]["title"] == "QUIET"
        assert post_source.find_one("1", None).title == "QUIET"

    @pytest.mark.asyncio
    async def test_coroutine_hooks_are_awaited(self, post_source):
        class AsyncStamp(PassThroughController):
            async def create(self, request, record):
                return record.model_copy(update={"tags": ["stamped"]})

        async with await client_for(post_source, AsyncStamp()) as client:
            response = await client.post("/v1/posts", json={"title": "t"})

        assert response.json()["data"]["tags"] == ["stamped"]


class TestVeto:

    @pytest.mark.asyncio
    async def test_delete_veto_keeps_record(self, seeded_source):
        class NoDeletes(PassThroughController):
            def delete(self, request, id):
                raise ForbiddenError("Posts cannot be deleted")

        async with await client_for(seeded_source, NoDeletes()) as client:
            response = await client.delete("/v1/posts/1")

        assert response.status_code == 403
        assert response.text == "Posts cannot be deleted"
        assert seeded_source.find_one("1", None).title == "first"

    @pytest.mark.asyncio
    async def test_create_veto_skips_data_source(self):
        class NoCreates(PassThroughController):
            def create(self, request, record):
                raise ForbiddenError()

        source = MagicMock(spec=DataSource)
        async with await client_for(source, NoCreates()) as client:
            response = await client.post("/v1/posts", json={"title": "t"})

        assert response.status_code == 403
        source.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_veto_leaves_store_untouched(self, seeded_source):
        class Frozen(PassThroughController):
            def update(self, request, record):
                raise ForbiddenError()

        async with await client_for(seeded_source, Frozen()) as client:
            response = await client.put("/v1/posts/1", json={"title": "changed"})

        assert response.status_code == 403
        assert seeded_source.find_one("1", None).title == "first"

    @pytest.mark.asyncio
    async def test_unclassified_hook_error_is_500(self, seeded_source):
        class Broken(PassThroughController):
            def find_all(self, request, records):
                raise KeyError("missing")

        async with await client_for(seeded_source, Broken()) as client:
            response = await client.get("/v1/posts")

        assert response.status_code == 500
        assert response.content == b""

"""
Resourceful — In-Memory Data Source Tests
"""

from typing import Optional

import pytest
from pydantic import BaseModel

from conftest import Post
from resourceful.exceptions import ConflictError, NotFoundError
from resourceful.sources.memory import MemoryDataSource


class Counter(BaseModel):
    id: int = 0
    value: int = 0


class TestCreate:

    def test_sequential_ids(self, post_source):
        assert post_source.create(Post(title="a")) == "1"
        assert post_source.create(Post(title="b")) == "2"

    def test_int_id_field_gets_int_ids(self):
        source = MemoryDataSource(Counter)
        key = source.create(Counter(value=3))
        assert key == "1"
        assert source.find_one("1", None).id == 1

    def test_explicit_id_is_kept(self, post_source):
        assert post_source.create(Post(id="abc", title="a")) == "abc"
        assert post_source.find_one("abc", None).title == "a"

    def test_generated_ids_skip_taken_keys(self, post_source):
        post_source.create(Post(id="1", title="explicit"))
        assert post_source.create(Post(title="generated")) == "2"

    def test_duplicate_id_conflicts(self, post_source):
        post_source.create(Post(id="x", title="a"))
        with pytest.raises(ConflictError):
            post_source.create(Post(id="x", title="b"))

    def test_missing_id_field_rejected(self):
        class NoId(BaseModel):
            name: Optional[str] = None

        with pytest.raises(ValueError, match="no field 'id'"):
            MemoryDataSource(NoId)


class TestReads:

    def test_find_all_insertion_order(self, seeded_source):
        assert [post.title for post in seeded_source.find_all(None)] == ["first", "second", "third"]

    def test_find_one_missing(self, post_source):
        with pytest.raises(NotFoundError) as exc_info:
            post_source.find_one("7", None)
        assert exc_info.value.status_code == 404
        assert exc_info.value.resource_id == "7"

    def test_find_multiple_requested_order_skips_unknown(self, seeded_source):
        posts = seeded_source.find_multiple(["3", "nope", "1"], None)
        assert [post.id for post in posts] == ["3", "1"]

    def test_returned_records_are_copies(self, seeded_source):
        post = seeded_source.find_one("1", None)
        post.title = "mutated"
        post.tags.append("x")
        stored = seeded_source.find_one("1", None)
        assert stored.title == "first"
        assert stored.tags == []


class TestWrites:

    def test_update_replaces(self, seeded_source):
        seeded_source.update(Post(id="2", title="new"))
        assert seeded_source.find_one("2", None).title == "new"

    def test_update_missing(self, post_source):
        with pytest.raises(NotFoundError):
            post_source.update(Post(id="9", title="x"))

    def test_delete(self, seeded_source):
        seeded_source.delete("1")
        assert [post.id for post in seeded_source.find_all(None)] == ["2", "3"]

    def test_delete_missing(self, post_source):
        with pytest.raises(NotFoundError):
            post_source.delete("1")

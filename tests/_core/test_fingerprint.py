"""
Tests for entity tag and last-modified generation.
"""

import re
import uuid
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

import pytest

from staleguard import Fingerprint, compute_entity_tag, compute_last_modified, fingerprint
from tests._helpers import Comment, Post

WEAK_TAG = re.compile(r"^W/ [0-9a-f]{32}$")

UTC = timezone.utc


def test_none_and_empty_yield_no_validators():
    assert compute_entity_tag(None) is None
    assert compute_entity_tag([]) is None
    assert compute_last_modified(None) is None
    assert compute_last_modified([]) is None
    assert fingerprint([]) == Fingerprint(etag=None, last_modified=None)


def test_tag_is_weak_md5_hex():
    post = Post(id=1, updated_at=datetime(2017, 2, 16, 16, 28, 5, tzinfo=UTC))

    assert WEAK_TAG.match(compute_entity_tag(post))


def test_single_entity_equals_one_element_list():
    post = Post(id=1, updated_at=datetime(2017, 2, 16, 16, 28, 5))

    assert compute_entity_tag(post) == compute_entity_tag([post])
    assert compute_entity_tag(post) == compute_entity_tag((post,))


def test_tag_is_deterministic():
    posts = [
        Post(id=1, updated_at=datetime(2017, 2, 16, 16, 28, 5)),
        Post(id=2, updated_at=datetime(2020, 1, 1)),
    ]

    assert compute_entity_tag(posts) == compute_entity_tag(list(posts))


def test_tag_is_order_sensitive():
    a = Post(id=1, updated_at=datetime(2020, 1, 1))
    b = Post(id=2, updated_at=datetime(2020, 1, 1))

    assert compute_entity_tag([a, b]) != compute_entity_tag([b, a])


def test_tag_ignores_sub_second_fraction():
    first = Post(id=1, updated_at=datetime(2020, 1, 1, 12, 0, 0, 1))
    second = Post(id=1, updated_at=datetime(2020, 1, 1, 12, 0, 0, 999_999))

    assert compute_entity_tag(first) == compute_entity_tag(second)


def test_tag_ignores_timezone_representation():
    naive = Post(id=1, updated_at=datetime(2020, 1, 1, 12, 0, 0))
    aware = Post(id=1, updated_at=datetime(2020, 1, 1, 12, 0, 0, tzinfo=UTC))
    shifted = Post(id=1, updated_at=datetime(2020, 1, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2))))

    assert compute_entity_tag(naive) == compute_entity_tag(aware) == compute_entity_tag(shifted)


@pytest.mark.parametrize(
    "other",
    [
        Post(id=2, updated_at=datetime(2020, 1, 1)),
        Post(id=1, updated_at=datetime(2020, 1, 1, 0, 0, 1)),
        Comment(id=1, updated_at=datetime(2020, 1, 1)),
    ],
    ids=["identity", "timestamp", "type"],
)
def test_tag_changes_with_each_facet(other):
    post = Post(id=1, updated_at=datetime(2020, 1, 1))

    assert compute_entity_tag(post) != compute_entity_tag(other)


def test_tag_ignores_other_fields():
    first = Post(id=1, updated_at=datetime(2020, 1, 1), title="Hello")
    second = Post(id=1, updated_at=datetime(2020, 1, 1), title="World")

    assert compute_entity_tag(first) == compute_entity_tag(second)


def test_uuid_identity():
    identity = uuid.UUID("12345678-1234-5678-1234-567812345678")
    post = Post(id=identity, updated_at=datetime(2020, 1, 1))

    assert WEAK_TAG.match(compute_entity_tag(post))
    assert compute_entity_tag(post) != compute_entity_tag(Post(id=uuid.uuid4(), updated_at=datetime(2020, 1, 1)))


def test_non_datetime_updated_at_is_rejected():
    with pytest.raises(TypeError, match="updated_at must be a datetime"):
        compute_entity_tag(Post(id=1, updated_at="2020-01-01"))  # type: ignore[arg-type]


def test_last_modified_is_the_maximum():
    entities = [
        Post(id=1, updated_at=datetime(2017, 2, 16, 16, 28, 5)),
        Post(id=2, updated_at=datetime(2020, 1, 1, 0, 0, 0)),
    ]

    assert compute_last_modified(entities) == datetime(2020, 1, 1, tzinfo=UTC)
    assert compute_last_modified(list(reversed(entities))) == datetime(2020, 1, 1, tzinfo=UTC)


def test_last_modified_compares_instants_not_representations():
    entities = [
        # 11:00 UTC
        Post(id=1, updated_at=datetime(2020, 1, 1, 12, 0, 0, tzinfo=timezone(timedelta(hours=1)))),
        # 11:30 UTC
        Post(id=2, updated_at=datetime(2020, 1, 1, 11, 30, 0)),
    ]

    assert compute_last_modified(entities) == datetime(2020, 1, 1, 11, 30, 0, tzinfo=UTC)


def test_last_modified_is_truncated_to_seconds():
    post = Post(id=1, updated_at=datetime(2020, 1, 1, 0, 0, 0, 500_000))

    result = compute_last_modified(post)

    assert result == datetime(2020, 1, 1, tzinfo=UTC)
    assert result.tzinfo is UTC


def test_fingerprint_pairs_both_validators(caplog):
    post = Post(id=1, updated_at=datetime(2020, 1, 1))

    with caplog.at_level("DEBUG", logger="staleguard"):
        result = fingerprint([post])

    assert result.etag == compute_entity_tag(post)
    assert result.last_modified == datetime(2020, 1, 1, tzinfo=UTC)
    assert caplog.messages == [
        f"Computed fingerprint: entities=1 etag={result.etag} last_modified=2020-01-01T00:00:00+00:00"
    ]


class PostList(Sequence):
    def __init__(self, posts):
        self._posts = list(posts)

    def __getitem__(self, index):
        return self._posts[index]

    def __len__(self):
        return len(self._posts)


def test_custom_sequence_is_a_sequence_of_entities():
    posts = [
        Post(id=1, updated_at=datetime(2017, 2, 16, 16, 28, 5)),
        Post(id=2, updated_at=datetime(2020, 1, 1)),
    ]

    assert compute_entity_tag(PostList(posts)) == compute_entity_tag(posts)
    assert compute_last_modified(PostList(posts)) == datetime(2020, 1, 1, tzinfo=UTC)
    assert compute_entity_tag(PostList([])) is None


def test_generators_are_consumed_once():
    posts = [
        Post(id=1, updated_at=datetime(2017, 2, 16, 16, 28, 5)),
        Post(id=2, updated_at=datetime(2020, 1, 1)),
    ]

    assert compute_entity_tag(post for post in posts) == compute_entity_tag(posts)
    assert compute_last_modified(post for post in posts) == datetime(2020, 1, 1, tzinfo=UTC)
    assert fingerprint(post for post in posts) == fingerprint(posts)


class Key:
    pass


def test_unstable_identity_is_rejected():
    with pytest.raises(TypeError, match="cannot encode entity identity of type Key"):
        compute_entity_tag(Post(id=Key(), updated_at=datetime(2020, 1, 1)))

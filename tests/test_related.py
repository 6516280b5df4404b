"""Unit tests for related.py"""

import pytest

from postgen.pipeline import sort_posts
from postgen.related import resolve_related, select_related_posts


@pytest.fixture(name="corpus")
def corpus_fixture(make_post):
    a = make_post("a", "2024-03-01", tags=["x", "y"])
    b = make_post("b", "2024-02-01", tags=["x"])
    c = make_post("c", "2023-01-01", tags=["x"])
    d = make_post("d", "2024-02-15", tags=[])
    return sort_posts([a, b, c, d])


def ids(posts):
    return [post.id for post in posts]


def test_tag_overlap_then_fallback(corpus):
    """Shared-tag posts come first, newest first, then the remaining corpus."""
    a = corpus[0]
    assert ids(select_related_posts(corpus, a, 3)) == ["b", "c", "d"]


def test_explicit_related_come_first(corpus):
    a = corpus[0]
    a.related_ids = ["d", "missing", "a", "d"]
    assert ids(select_related_posts(corpus, a, 3)) == ["d", "b", "c"]


def test_result_is_truncated(corpus):
    a = corpus[0]
    a.related_ids = ["c", "d"]
    assert ids(select_related_posts(corpus, a, 1)) == ["c"]


def test_overlap_count_outranks_date(make_post):
    current = make_post("current", "2024-05-01", tags=["x", "y", "z"])
    newer = make_post("newer", "2024-04-01", tags=["x"])
    older = make_post("older", "2020-01-01", tags=["x", "y"])
    posts = sort_posts([current, newer, older])
    assert ids(select_related_posts(posts, current, 3)) == ["older", "newer"]


def test_undated_posts_lose_date_tie_break(make_post):
    current = make_post("current", "2024-05-01", tags=["x"])
    undated = make_post("undated", "soon", tags=["x"])
    dated = make_post("dated", "2019-01-01", tags=["x"])
    posts = [current, undated, dated]
    assert ids(select_related_posts(posts, current, 3)) == ["dated", "undated"]


def test_never_includes_itself_and_handles_small_corpus(make_post):
    only = make_post("only", "2024-01-01", tags=["x"], related=["only"])
    assert select_related_posts([only], only, 3) == []


def test_resolve_related_fills_every_post(corpus):
    resolve_related(corpus, 2)
    for post in corpus:
        assert len(post.related_posts) == 2
        assert post.id not in ids(post.related_posts)

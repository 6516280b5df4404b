"""Shared fixtures for postgen tests"""

import pytest

from postgen.content import parse_post_date
from postgen.models import Post
from postgen.render import MarkdownRenderer


class InlineRenderer:
    """Renderer stub that supports inline rendering."""

    def parse(self, text):
        return f"<p>{text}</p>\n"

    def parse_inline(self, text):
        return f"<em>{text}</em>"


@pytest.fixture(name="renderer")
def renderer_fixture():
    return MarkdownRenderer()


@pytest.fixture(name="inline_renderer")
def inline_renderer_fixture():
    return InlineRenderer()


@pytest.fixture(name="make_post")
def make_post_fixture():
    def make(post_id, date="", tags=(), related=(), category="uncategorized", **metadata):
        metadata.setdefault("title", post_id.upper())
        metadata["date"] = date
        return Post(
            id=post_id,
            metadata=metadata,
            content="",
            html="",
            plain=f"{post_id} body text",
            category=category,
            tags=list(tags),
            related_ids=list(related),
            date=parse_post_date(date),
        )

    return make

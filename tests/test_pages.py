"""Unit tests for pages.py"""

import argparse

import pytest

from postgen.models import Heading
from postgen.pages import (
    build_archive_date_sections,
    build_post_meta,
    build_toc,
    category_groups,
    render_homepage,
    render_post_page,
    render_sitemap,
    site_options,
)
from postgen.render import read_template


@pytest.fixture(name="options")
def options_fixture():
    return site_options(argparse.Namespace(site_name="notes", site_url="https://example.com", author="me"))


@pytest.fixture(name="template")
def template_fixture():
    return read_template(None)


def test_toc_needs_minimum_headings():
    headings = [Heading(2, "One", "one"), Heading(3, "Two & more", "two")]
    desktop, mobile = build_toc(headings, 3)
    assert "post-toc-empty" in desktop
    assert mobile == ""

    desktop, mobile = build_toc(headings + [Heading(2, "Three", "three")], 3)
    assert '<li class="toc-item toc-level-3"><a href="#two" data-toc-link="two">Two &amp; more</a></li>' in desktop
    assert mobile.startswith('<details class="post-toc-mobile">')


def test_post_meta_lists_status_and_tags(make_post, options):
    post = make_post("p", "2024-01-05", tags=["ml", "rl"], category="research")
    post.status = "wip"
    post.reading_time = 4
    meta = build_post_meta(post, options)
    assert "January 5, 2024" in meta
    assert '<span class="post-category">research</span>' in meta
    assert "4 min read" in meta
    assert '<span class="post-status">wip</span>' in meta
    assert '<span class="post-tag">rl</span>' in meta


def test_post_meta_labels_uncategorized(make_post, options):
    meta = build_post_meta(make_post("p", "bad-date"), options)
    assert '<span class="post-category">other</span>' in meta
    assert "bad-date" in meta
    assert "post-status" not in meta


def test_post_page_escapes_title_and_embeds_schema(make_post, options, template):
    post = make_post("p", "2024-01-05", title="<Hello>", tags=["x"])
    post.html = "<p>Body {{content}}</p>"
    page = render_post_page(template, post, options)
    assert "<h1>&lt;Hello&gt;</h1>" in page
    assert '"datePublished": "2024-01-05T00:00:00Z"' in page
    assert '"keywords": "x"' in page
    assert "<p>Body {{content}}</p>" in page
    assert "see also" not in page


def test_category_groups_follow_configured_order(make_post, options):
    posts = [
        make_post("a", category="personal"),
        make_post("b", category="uncategorized"),
        make_post("c", category="research"),
    ]
    groups = category_groups(posts, options)
    assert [key for key, _, _ in groups] == ["research", "personal", "uncategorized"]
    assert groups[-1][1] == "other"


def test_archive_date_sections_group_by_year(make_post, options):
    posts = [make_post("a", "2024-02-01"), make_post("b", "2023-05-01"), make_post("c", "nope")]
    html = build_archive_date_sections(posts, options)
    assert html.index("<h2>2024</h2>") < html.index("<h2>2023</h2>") < html.index("<h2>unknown</h2>")


def test_homepage_limits_cards_per_group(make_post, options, template):
    posts = [make_post(f"r{i}", category="research") for i in range(5)]
    page = render_homepage(template, posts, options)
    assert page.count('<article class="post-card">') == 3
    assert 'href="/archive/#research"' in page


def test_sitemap_lists_home_archive_and_posts(make_post):
    sitemap = render_sitemap([make_post("a b"), make_post("c")], "https://example.com/")
    assert sitemap.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<loc>https://example.com/</loc>" in sitemap
    assert "<loc>https://example.com/index.html</loc>" in sitemap
    assert "<loc>https://example.com/archive/</loc>" in sitemap
    assert "<loc>https://example.com/posts/a%20b/</loc>" in sitemap
    assert "<loc>https://example.com/posts/c/</loc>" in sitemap


def test_nested_post_id_url_matches_output_path(make_post):
    post = make_post("2024/hello world")
    assert post.url == "/posts/2024/hello%20world/"
    assert "<loc>/posts/2024/hello%20world/</loc>" in render_sitemap([post], "")

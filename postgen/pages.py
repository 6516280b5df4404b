from __future__ import annotations

import datetime as dt
import html
import json
from pathlib import Path

from .content import (
    DEFAULT_CATEGORIES,
    UNCATEGORIZED,
    category_label,
    format_date,
    format_month_day,
    format_year,
    truncate_text,
)
from .models import Heading, Post
from .render import render_template, write_text
from .utils import iso_date, parse_bool

RELATED_EXCERPT_LENGTH = 160
EXCERPT_LENGTH = 180
HOME_POSTS_PER_GROUP = 3


def site_options(args: object) -> dict:
    return {
        "site_name": getattr(args, "site_name", "") or "",
        "site_description": getattr(args, "site_description", "") or "",
        "site_url": (getattr(args, "site_url", "") or "").rstrip("/"),
        "author": getattr(args, "author", "") or getattr(args, "site_name", "") or "",
        "categories": tuple(getattr(args, "categories", None) or DEFAULT_CATEGORIES),
        "uncategorized_label": getattr(args, "uncategorized_label", "other") or "other",
        "toc_min_headings": int(getattr(args, "toc_min_headings", 3) or 0),
        "highlight": parse_bool(getattr(args, "highlight", False)),
    }


def canonical_url(site_url: str, path: str) -> str:
    if not site_url:
        return path
    return f"{site_url}/{path.lstrip('/')}"


def render_page(
    base_template: str,
    options: dict,
    title: str,
    description: str,
    canonical: str,
    content: str,
    head: str = "",
    scripts: str = "",
) -> str:
    return render_template(
        base_template,
        title=html.escape(title),
        description=html.escape(description),
        canonical=html.escape(canonical),
        site_name=html.escape(options["site_name"]),
        author=html.escape(options["author"]),
        year=str(dt.datetime.now().year),
        scripts=scripts,
        head=head,
        content=content,
    )


def build_post_meta(post: Post, options: dict) -> str:
    sep = '<span class="meta-sep">·</span>'
    parts = [
        f'<span class="meta-item">{html.escape(format_date(post.raw_date))}</span>',
        sep,
        f'<span class="post-category">'
        f'{html.escape(category_label(post.category, options["uncategorized_label"]))}</span>',
        sep,
        f'<span class="meta-item">{post.reading_time} min read</span>',
    ]
    if post.status:
        parts.extend([sep, f'<span class="post-status">{html.escape(post.status)}</span>'])
    if post.tags:
        tag_links = "".join(f'<span class="post-tag">{html.escape(tag)}</span>' for tag in post.tags)
        parts.extend([sep, f'<span class="post-tags">{tag_links}</span>'])
    return f'<div class="post-meta">{"".join(parts)}</div>'


def build_toc(headings: list[Heading], min_headings: int = 3) -> tuple[str, str]:
    """Return (desktop, mobile) table-of-contents markup."""
    if len(headings) < min_headings or not headings:
        return '<aside class="post-toc post-toc-empty" aria-hidden="true"></aside>', ""
    items = "".join(
        f'<li class="toc-item toc-level-{heading.level}">'
        f'<a href="#{html.escape(heading.id)}" data-toc-link="{html.escape(heading.id)}">'
        f"{html.escape(heading.text)}</a></li>"
        for heading in headings
    )
    nav = f'<nav class="post-toc-inner" aria-label="table of contents"><h2>contents</h2><ol>{items}</ol></nav>'
    return (
        f'<aside class="post-toc">{nav}</aside>',
        f'<details class="post-toc-mobile"><summary>contents</summary>{nav}</details>',
    )


def build_related_section(post: Post) -> str:
    if not post.related_posts:
        return ""
    items = "".join(
        f'<li><a href="{related.url}">{html.escape(related.title)}</a>'
        f"<p>{html.escape(truncate_text(related.excerpt, RELATED_EXCERPT_LENGTH))}</p></li>"
        for related in post.related_posts
    )
    return (
        '<section class="related-posts" aria-labelledby="related-posts-heading">'
        f'<h2 id="related-posts-heading">see also</h2><ul>{items}</ul></section>'
    )


def build_post_schema(post: Post, description: str, url: str, author: str) -> str:
    schema = {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": post.title,
        "description": description,
        "author": {"@type": "Person", "name": author},
        "publisher": {"@type": "Person", "name": author},
        "url": url,
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
    }
    if post.date is not None:
        schema["datePublished"] = iso_date(post.date)
        schema["dateModified"] = iso_date(post.date)
    if post.tags:
        schema["keywords"] = ", ".join(post.tags)
    return json.dumps(schema, ensure_ascii=False).replace("</", "<\\/")


def render_post_page(base_template: str, post: Post, options: dict) -> str:
    description = truncate_text(post.excerpt, EXCERPT_LENGTH)
    url = canonical_url(options["site_url"], post.url)
    title = html.escape(post.title)
    toc_desktop, toc_mobile = build_toc(post.headings, options["toc_min_headings"])
    head = "\n".join(
        [
            '<meta property="og:type" content="article">',
            f'<meta property="og:site_name" content="{html.escape(options["site_name"])}">',
            f'<meta property="og:title" content="{title}">',
            f'<meta property="og:description" content="{html.escape(description)}">',
            f'<meta property="og:url" content="{html.escape(url)}">',
            '<meta name="twitter:card" content="summary_large_image">',
            f'<meta name="twitter:title" content="{title}">',
            f'<meta name="twitter:description" content="{html.escape(description)}">',
            f'<script type="application/ld+json">{build_post_schema(post, description, url, options["author"])}</script>',
        ]
    )
    if options["highlight"]:
        head += '\n<link rel="stylesheet" href="/css/highlight.css">'
    content = (
        '<main class="post-layout">'
        f"{toc_desktop}"
        '<article class="post-content" id="post-content">'
        f"<h1>{title}</h1>"
        f"{build_post_meta(post, options)}"
        f"{toc_mobile}"
        f"{post.html}"
        f"{build_related_section(post)}"
        "</article>"
        '<aside class="post-margin-column" aria-hidden="true"></aside>'
        "</main>"
    )
    return render_page(
        base_template,
        options,
        title=f"{post.title} - {options['site_name']}",
        description=description,
        canonical=url,
        content=content,
        head=head,
        scripts='<script src="/js/toc.js" defer></script>',
    )


def build_posts(base_template: str, output_dir: Path, posts: list[Post], args: object) -> None:
    options = site_options(args)
    for post in posts:
        write_text(output_dir / "posts" / post.id / "index.html", render_post_page(base_template, post, options))


def category_groups(posts: list[Post], options: dict) -> list[tuple[str, str, list[Post]]]:
    """Group posts by category in configured order; uncategorized last."""
    groups = []
    for category in options["categories"]:
        items = [post for post in posts if post.category == category]
        if items:
            groups.append((category, category_label(category, options["uncategorized_label"]), items))
    leftovers = [post for post in posts if post.category not in options["categories"]]
    if leftovers:
        groups.append((UNCATEGORIZED, category_label(UNCATEGORIZED, options["uncategorized_label"]), leftovers))
    return groups


def build_archive_topic_sections(posts: list[Post], options: dict) -> str:
    sections = []
    for key, label, items in category_groups(posts, options):
        rows = "".join(
            f'<li><a href="{post.url}">{html.escape(post.title)}</a>'
            f'<span class="archive-item-meta">{html.escape(format_date(post.raw_date))} · '
            f"{post.reading_time} min</span>"
            f"<p>{html.escape(truncate_text(post.excerpt, EXCERPT_LENGTH))}</p></li>"
            for post in items
        )
        sections.append(
            f'<section class="archive-group" id="{key}"><div class="archive-group-head">'
            f"<h2>{html.escape(label)}</h2><span>{len(items)}</span></div>"
            f'<ul class="archive-topic-list">{rows}</ul></section>'
        )
    return "".join(sections)


def build_archive_date_sections(posts: list[Post], options: dict) -> str:
    by_year: dict[str, list[Post]] = {}
    for post in posts:
        by_year.setdefault(format_year(post.raw_date), []).append(post)
    sections = []
    for year, items in by_year.items():
        rows = "".join(
            f'<li><span class="archive-date-stamp">{html.escape(format_month_day(post.raw_date))}</span>'
            f'<a href="{post.url}">{html.escape(post.title)}</a>'
            f'<span class="archive-date-category">'
            f'{html.escape(category_label(post.category, options["uncategorized_label"]))}</span></li>'
            for post in items
        )
        sections.append(
            f'<section class="archive-year-block"><h2>{html.escape(year)}</h2>'
            f'<ul class="archive-date-list">{rows}</ul></section>'
        )
    return "".join(sections)


def render_archive_page(base_template: str, posts: list[Post], options: dict) -> str:
    content = (
        '<main class="container archive-page">'
        '<section class="archive-hero"><h1>archive</h1><p>browse by topic or date.</p></section>'
        '<div class="archive-view-switcher" aria-label="archive view">'
        '<button type="button" class="archive-view-toggle is-active" data-archive-view-toggle="topic" '
        'aria-pressed="true">[by topic]</button>'
        '<button type="button" class="archive-view-toggle" data-archive-view-toggle="date" '
        'aria-pressed="false">[by date]</button>'
        "</div>"
        '<section class="archive-view archive-view-topic" data-archive-view="topic">'
        f"{build_archive_topic_sections(posts, options)}</section>"
        '<section class="archive-view archive-view-date" data-archive-view="date" hidden>'
        f"{build_archive_date_sections(posts, options)}</section>"
        "</main>"
    )
    return render_page(
        base_template,
        options,
        title=f"archive - {options['site_name']}",
        description=f"Browse posts by topic or timeline on {options['site_name']}.",
        canonical=canonical_url(options["site_url"], "/archive/"),
        content=content,
        scripts='<script src="/js/archive.js" defer></script>',
    )


def build_archive(base_template: str, output_dir: Path, posts: list[Post], args: object) -> None:
    archive_html = render_archive_page(base_template, posts, site_options(args))
    write_text(output_dir / "archive" / "index.html", archive_html)
    write_text(output_dir / "posts" / "index.html", archive_html)


def render_homepage(base_template: str, posts: list[Post], options: dict) -> str:
    sections = []
    for key, label, items in category_groups(posts, options):
        cards = "".join(
            f'<article class="post-card"><div class="post-date">{html.escape(format_date(post.raw_date))}</div>'
            f'<h3><a href="{post.url}">{html.escape(post.title)}</a></h3>'
            f'<p class="post-excerpt">{html.escape(truncate_text(post.excerpt, EXCERPT_LENGTH))}</p></article>'
            for post in items[:HOME_POSTS_PER_GROUP]
        )
        sections.append(
            f'<section class="category-group" id="home-{key}"><div class="category-group-head">'
            f'<h2>{html.escape(label)}</h2><a class="see-all-link" href="/archive/#{key}">see all -></a></div>'
            f'<div class="category-post-list">{cards}</div></section>'
        )
    content = (
        '<main class="container">'
        f'<section class="hero"><h1>{html.escape(options["site_name"])}</h1>'
        f'<p class="subtitle">{html.escape(options["site_description"])}</p></section>'
        f'<section class="posts grouped-posts">{"".join(sections)}</section>'
        "</main>"
    )
    return render_page(
        base_template,
        options,
        title=options["site_name"],
        description=options["site_description"],
        canonical=canonical_url(options["site_url"], "/"),
        content=content,
    )


def build_index(base_template: str, output_dir: Path, posts: list[Post], args: object) -> None:
    write_text(output_dir / "index.html", render_homepage(base_template, posts, site_options(args)))


def render_sitemap(posts: list[Post], site_url: str) -> str:
    """Sitemap XML; locations are root-relative when ``site_url`` is empty."""
    site_url = site_url.rstrip("/")
    urls = [f"{site_url}/", f"{site_url}/index.html", f"{site_url}/archive/"]
    urls.extend(f"{site_url}{post.url}" for post in posts)
    items = "\n".join(f"  <url><loc>{html.escape(url)}</loc></url>" for url in urls)
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            items,
            "</urlset>",
            "",
        ]
    )


def build_sitemap(output_dir: Path, posts: list[Post], site_url: str) -> None:
    write_text(output_dir / "sitemap.xml", render_sitemap(posts, site_url))

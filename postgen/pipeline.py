from __future__ import annotations

import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from .content import (
    AVERAGE_READING_WPM,
    DEFAULT_CATEGORIES,
    estimate_reading_time,
    normalize_category,
    normalize_related,
    normalize_status,
    normalize_tags,
    parse_front_matter,
    parse_post_date,
    strip_markdown,
)
from .footnotes import extract_footnotes, link_footnotes
from .headings import index_headings
from .models import Post
from .related import RELATED_LIMIT, resolve_related
from .render import MarkdownRenderer

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Fatal build failure; the run is aborted."""


def load_index(index_path: Path) -> list[str]:
    try:
        data = json.loads(index_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise BuildError(f"Cannot read posts index {index_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise BuildError(f"Invalid JSON in posts index {index_path}: {exc}") from exc
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise BuildError(f"Posts index must be a JSON array of filenames: {index_path}")
    return data


def post_id_from_filename(file_name: str) -> str:
    return file_name[:-3] if file_name.endswith(".md") else file_name


def process_document(
    post_id: str,
    raw_text: str,
    renderer: object,
    categories: tuple[str, ...] = DEFAULT_CATEGORIES,
    reading_wpm: int = AVERAGE_READING_WPM,
) -> Post:
    """Run one source document through the per-document pipeline.

    frontmatter -> footnote extraction -> render -> footnote linking ->
    heading ids -> plain text and reading time.
    """
    metadata, body = parse_front_matter(raw_text)
    content, footnotes = extract_footnotes(body)
    html_text = renderer.parse(content)
    html_text = link_footnotes(html_text, footnotes, post_id, renderer)
    html_text, headings = index_headings(html_text)
    plain = strip_markdown(content)

    date = parse_post_date(metadata.get("date"))
    if date is None and metadata.get("date"):
        logger.warning("Unparseable date %r in %s", metadata.get("date"), post_id)

    return Post(
        id=post_id,
        metadata=metadata,
        content=content,
        html=html_text,
        plain=plain,
        headings=headings,
        category=normalize_category(metadata.get("category"), categories),
        tags=normalize_tags(metadata.get("tags")),
        status=normalize_status(metadata.get("status")),
        related_ids=normalize_related(metadata.get("related")),
        reading_time=estimate_reading_time(plain, reading_wpm),
        date=date,
    )


def sort_posts(posts: list[Post]) -> list[Post]:
    """Newest first; undated posts last; equal dates keep input order."""
    return sorted(posts, key=lambda post: post.sort_key, reverse=True)


def load_posts(
    posts_dir: Path,
    file_names: list[str],
    renderer_factory: Callable[[], object],
    categories: tuple[str, ...] = DEFAULT_CATEGORIES,
    reading_wpm: int = AVERAGE_READING_WPM,
    workers: int = 1,
) -> list[Post]:
    def load(file_name: str) -> Post:
        path = posts_dir / file_name
        try:
            raw_text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise BuildError(f"Cannot read post {path}: {exc}") from exc
        logger.debug("Processing %s", path)
        return process_document(
            post_id_from_filename(file_name),
            raw_text,
            renderer_factory(),
            categories=categories,
            reading_wpm=reading_wpm,
        )

    workers = min(max(1, workers), len(file_names)) if file_names else 1
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(load, file_names))
    return [load(file_name) for file_name in file_names]


def build_corpus(
    posts_dir: Path,
    file_names: list[str],
    renderer_factory: Callable[[], object],
    categories: tuple[str, ...] = DEFAULT_CATEGORIES,
    reading_wpm: int = AVERAGE_READING_WPM,
    related_limit: int = RELATED_LIMIT,
    workers: int = 1,
) -> list[Post]:
    posts = load_posts(posts_dir, file_names, renderer_factory, categories, reading_wpm, workers)
    posts = sort_posts(posts)
    resolve_related(posts, related_limit)
    return posts


def resolve_workers(value: int) -> int:
    if value <= 0:
        value = os.cpu_count() or 1
    return max(1, min(value, 32))


def make_renderer_factory(args: object) -> Callable[[], MarkdownRenderer]:
    extensions = list(getattr(args, "markdown_extensions", None) or [])
    highlight = bool(getattr(args, "highlight", False))
    pygments_style = getattr(args, "pygments_style", "default")

    def factory() -> MarkdownRenderer:
        if extensions:
            return MarkdownRenderer(extensions, highlight=highlight, pygments_style=pygments_style)
        return MarkdownRenderer(highlight=highlight, pygments_style=pygments_style)

    try:
        factory()
    except (ImportError, AttributeError, TypeError, ValueError) as exc:
        raise BuildError(f"Cannot initialise Markdown renderer: {exc}") from exc
    return factory

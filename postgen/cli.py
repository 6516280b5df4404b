from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .config import ConfigError, load_config
from .content import AVERAGE_READING_WPM, DEFAULT_CATEGORIES
from .logging_setup import configure_logging
from .pages import build_archive, build_index, build_posts, build_sitemap
from .pipeline import BuildError, build_corpus, load_index, make_renderer_factory, resolve_workers
from .related import RELATED_LIMIT
from .render import BUNDLED_STATIC_DIR, copy_static, read_template, write_highlight_css
from .utils import clean_output_dir, parse_bool, parse_csv, parse_int

logger = logging.getLogger(__name__)


def build_site(args: argparse.Namespace) -> int:
    """Build every page into ``args.output``; returns the number of posts."""
    posts_dir = Path(args.posts)
    index_path = Path(args.index)
    if not index_path.is_absolute():
        index_path = posts_dir / index_path
    output_dir = Path(args.output)
    static_dir = Path(args.static) if args.static else None
    templates_dir = Path(args.templates) if args.templates else None

    file_names = load_index(index_path)
    logger.info("Loaded %d entries from %s", len(file_names), index_path)

    posts = build_corpus(
        posts_dir,
        file_names,
        make_renderer_factory(args),
        categories=tuple(args.categories),
        reading_wpm=args.reading_wpm,
        related_limit=args.related_limit,
        workers=resolve_workers(args.build_workers),
    )

    if args.clean:
        try:
            clean_output_dir(output_dir, Path.cwd())
        except ValueError as exc:
            raise BuildError(str(exc)) from exc
    output_dir.mkdir(parents=True, exist_ok=True)

    copy_static(BUNDLED_STATIC_DIR, output_dir)
    if static_dir is not None and static_dir.exists():
        copy_static(static_dir, output_dir)
    if args.highlight:
        write_highlight_css(output_dir, args.pygments_style)

    base_template = read_template(templates_dir)
    build_posts(base_template, output_dir, posts, args)
    build_archive(base_template, output_dir, posts, args)
    build_index(base_template, output_dir, posts, args)
    if not args.site_url:
        logger.warning("No site_url configured; sitemap.xml uses root-relative locations.")
    build_sitemap(output_dir, posts, args.site_url)
    return len(posts)


def build_parser(config: dict, config_path: str = "site.toml") -> argparse.ArgumentParser:
    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    def cfg_bool(key: str, default: bool) -> bool:
        return parse_bool(cfg_value(key, default))

    def cfg_int(key: str, default: int) -> int:
        return parse_int(cfg_value(key, default), default)

    def cfg_list(key: str, default: list[str]) -> list[str]:
        return parse_csv(cfg_value(key, default))

    parser = argparse.ArgumentParser(description="Static Markdown blog generator.")
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--posts", default=cfg_str("posts", "posts"), help="Directory containing Markdown posts.")
    parser.add_argument(
        "--index",
        default=cfg_str("index", "posts.json"),
        help="JSON array of post filenames, relative to the posts directory.",
    )
    parser.add_argument("--output", default=cfg_str("output", "dist"), help="Output directory for the site.")
    parser.add_argument("--static", default=cfg_str("static", "static"), help="Directory of static assets to copy.")
    parser.add_argument(
        "--templates",
        default=cfg_str("templates", ""),
        help="Directory holding base.html (defaults to the bundled template).",
    )
    parser.add_argument("--site-url", default=cfg_str("site_url", ""), help="Public site URL for canonical links.")
    parser.add_argument("--site-name", default=cfg_str("site_name", "blog"), help="Site title.")
    parser.add_argument(
        "--site-description",
        default=cfg_str("site_description", "research, technical notes, and personal frameworks."),
        help="Site description.",
    )
    parser.add_argument("--author", default=cfg_str("author", ""), help="Author name for metadata.")
    parser.add_argument(
        "--categories",
        type=parse_csv,
        default=cfg_list("categories", list(DEFAULT_CATEGORIES)),
        help="Comma-separated category order.",
    )
    parser.add_argument(
        "--uncategorized-label",
        default=cfg_str("uncategorized_label", "other"),
        help="Label shown for posts outside the known categories.",
    )
    parser.add_argument(
        "--related-limit",
        type=int,
        default=cfg_int("related_limit", RELATED_LIMIT),
        help="Maximum related posts per post.",
    )
    parser.add_argument(
        "--reading-wpm",
        type=int,
        default=cfg_int("reading_wpm", AVERAGE_READING_WPM),
        help="Words per minute for reading time.",
    )
    parser.add_argument(
        "--toc-min-headings",
        type=int,
        default=cfg_int("toc_min_headings", 3),
        help="Minimum headings before a table of contents is shown.",
    )
    parser.add_argument(
        "--highlight",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("highlight", True),
        help="Highlight fenced code with Pygments.",
    )
    parser.add_argument(
        "--pygments-style",
        default=cfg_str("pygments_style", "default"),
        help="Pygments style for highlighted code.",
    )
    parser.add_argument(
        "--markdown-extensions",
        type=parse_csv,
        default=cfg_list("markdown_extensions", []),
        help="Comma-separated Python-Markdown extensions (empty = defaults).",
    )
    parser.add_argument(
        "--build-workers",
        type=int,
        default=cfg_int("build_workers", 0),
        help="Number of worker threads for parsing/rendering (0 = auto).",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean", True),
        help="Clean output directory before build.",
    )
    parser.add_argument("--log-level", default=cfg_str("log_level", ""), help="Logging level.")
    return parser


def main(argv: list[str] | None = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="site.toml")
    pre_args, _ = pre_parser.parse_known_args(argv)
    try:
        config = load_config(Path(pre_args.config))
    except ConfigError as exc:
        configure_logging()
        logger.error("%s", exc)
        sys.exit(1)

    args = build_parser(config, pre_args.config).parse_args(argv)
    configure_logging(args.log_level or None)

    start = time.perf_counter()
    try:
        count = build_site(args)
    except (BuildError, OSError) as exc:
        logger.error("Build failed: %s", exc)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Generated {count} posts, archive, homepage, and sitemap in: {args.output}")

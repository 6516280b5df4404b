from __future__ import annotations

import re
import shutil
from pathlib import Path

import markdown
from pygments.formatters import HtmlFormatter

TAG_RE = re.compile(r"<[^>]+>")
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")
PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_TEMPLATES_DIR = PACKAGE_DIR / "templates"
BUNDLED_STATIC_DIR = PACKAGE_DIR / "static"
DEFAULT_EXTENSIONS = ("fenced_code", "tables", "attr_list")


class MarkdownRenderer:
    """Python-Markdown wrapper exposing ``parse``.

    Instances are not thread-safe; build one per worker.
    """

    def __init__(
        self,
        extensions: list[str] | tuple[str, ...] = DEFAULT_EXTENSIONS,
        highlight: bool = False,
        pygments_style: str = "default",
    ) -> None:
        extensions = list(extensions)
        extension_configs = {}
        if highlight:
            if "codehilite" not in extensions:
                extensions.append("codehilite")
            extension_configs["codehilite"] = {"css_class": "codehilite", "pygments_style": pygments_style}
        self._md = markdown.Markdown(extensions=extensions, extension_configs=extension_configs)

    def parse(self, text: str) -> str:
        html_text = self._md.convert(text)
        self._md.reset()
        return html_text


def strip_tags(html_text: str) -> str:
    return TAG_RE.sub("", html_text)


def render_template(template: str, **context: str) -> str:
    """Fill ``{{key}}`` placeholders in one pass; unknown keys stay literal."""

    def replace(match: re.Match) -> str:
        return context.get(match.group(1), match.group(0))

    return PLACEHOLDER_RE.sub(replace, template)


def read_template(templates_dir: Path | None, name: str = "base.html") -> str:
    if templates_dir is not None and (templates_dir / name).exists():
        return (templates_dir / name).read_text(encoding="utf-8")
    return (DEFAULT_TEMPLATES_DIR / name).read_text(encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def copy_static(static_dir: Path, output_dir: Path) -> None:
    """Merge ``static_dir`` into ``output_dir``, overwriting same-named files."""
    shutil.copytree(static_dir, output_dir, dirs_exist_ok=True)


def write_highlight_css(output_dir: Path, style: str = "default") -> Path:
    path = output_dir / "css" / "highlight.css"
    write_text(path, HtmlFormatter(style=style).get_style_defs(".codehilite"))
    return path

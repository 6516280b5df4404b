from __future__ import annotations

import re

from .content import ENTITY_RE, slugify
from .models import Heading
from .render import strip_tags

HEADING_RE = re.compile(r"<h([23])([^>]*)>(.*?)</h\1>", re.DOTALL)
ID_ATTR_RE = re.compile(r'\sid="([^"]*)"')


def heading_text(inner_html: str) -> str:
    text = ENTITY_RE.sub(" ", strip_tags(inner_html))
    return re.sub(r"\s+", " ", text).strip()


def index_headings(html_text: str) -> tuple[str, list[Heading]]:
    """Give every h2/h3 a unique id and collect them for a table of contents.

    An id already on the element is kept as the base id. Headings without
    text are skipped and left as they are.
    """
    headings: list[Heading] = []
    base_counts: dict[str, int] = {}
    used_ids: set[str] = set()

    def repl(match: re.Match) -> str:
        level, attrs, inner = match.group(1), match.group(2), match.group(3)
        text = heading_text(inner)
        if not text:
            return match.group(0)

        existing = ID_ATTR_RE.search(attrs)
        base = existing.group(1) if existing and existing.group(1) else slugify(text)
        if not base:
            base = f"section-{len(headings) + 1}"

        count = base_counts.get(base, 0) + 1
        heading_id = base if count == 1 else f"{base}-{count}"
        while heading_id in used_ids:
            count += 1
            heading_id = f"{base}-{count}"
        base_counts[base] = count
        used_ids.add(heading_id)

        headings.append(Heading(level=int(level), text=text, id=heading_id))
        attrs = ID_ATTR_RE.sub("", attrs, count=1)
        return f'<h{level}{attrs} id="{heading_id}">{inner}</h{level}>'

    return HEADING_RE.sub(repl, html_text), headings

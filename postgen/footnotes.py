from __future__ import annotations

import logging
import re

from .content import slugify

logger = logging.getLogger(__name__)

DEFINITION_RE = re.compile(r"^\[\^([^\]]+)\]:\s*(.*)$")
CONTINUATION_RE = re.compile(r"^( {2,}|\t)")
REFERENCE_RE = re.compile(r"\[\^([^\]]+)\]")
PARAGRAPH_WRAP_RE = re.compile(r"^<p>|</p>$")


def extract_footnotes(markdown_text: str) -> tuple[str, dict[str, str]]:
    """Remove ``[^key]: ...`` definitions from ``markdown_text``.

    A definition continues over blank lines and lines indented by two spaces
    or a tab. Returns the remaining text and a key -> body mapping.
    """
    lines = markdown_text.split("\n")
    kept: list[str] = []
    footnotes: dict[str, str] = {}
    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1
        match = DEFINITION_RE.match(line)
        if not match:
            kept.append(line)
            continue
        note_lines = [match.group(2)]
        while index < len(lines):
            next_line = lines[index]
            if not next_line.strip():
                note_lines.append("")
            elif CONTINUATION_RE.match(next_line):
                note_lines.append(CONTINUATION_RE.sub("", next_line, count=1))
            else:
                break
            index += 1
        footnotes[match.group(1).strip()] = "\n".join(note_lines).strip()
    return "\n".join(kept), footnotes


def render_inline(renderer: object, markdown_text: str) -> str:
    parse_inline = getattr(renderer, "parse_inline", None)
    if callable(parse_inline):
        return parse_inline(markdown_text)
    return PARAGRAPH_WRAP_RE.sub("", renderer.parse(markdown_text).strip())


def sidenote_markup(toggle_id: str, number: int, note_html: str) -> str:
    return (
        f'<label for="{toggle_id}" class="sidenote-number">{number}</label>'
        f'<input type="checkbox" id="{toggle_id}" class="sidenote-toggle">'
        f'<span class="sidenote"><span class="sidenote-prefix">{number}. </span>{note_html}</span>'
    )


def link_footnotes(html_text: str, footnotes: dict[str, str], post_id: str, renderer: object) -> str:
    """Replace ``[^key]`` markers in rendered HTML with numbered sidenotes."""
    if not footnotes:
        return html_text

    numbers: dict[str, int] = {}
    rendered: dict[str, str] = {}
    post_slug = slugify(post_id)

    def repl(match: re.Match) -> str:
        key = match.group(1).strip()
        note = footnotes.get(key)
        if not note:
            logger.warning("Unknown footnote reference [^%s] in %s", key, post_id)
            return match.group(0)
        if key not in numbers:
            numbers[key] = len(numbers) + 1
            rendered[key] = render_inline(renderer, note)
        number = numbers[key]
        return sidenote_markup(f"sn-{post_slug}-{number}", number, rendered[key])

    return REFERENCE_RE.sub(repl, html_text)

from __future__ import annotations

import datetime as dt
import math
import re

FRONT_MATTER_RE = re.compile(r"^-{3,}[ \t]*\r?\n(.*?)\r?\n-{3,}[ \t]*(?:\r?\n|$)(.*)\Z", re.DOTALL)
ENTITY_RE = re.compile(r"&(?:[a-z]+|#\d+);", re.IGNORECASE)
FENCED_CODE_RE = re.compile(r"```.*?```", re.DOTALL)
INLINE_CODE_RE = re.compile(r"`([^`]+)`")
IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]*\)")
HEADING_MARK_RE = re.compile(r"^#{1,6}\s+", re.MULTILINE)
EMPHASIS_RE = re.compile(r"[>*_~]")

LIST_KEYS = {"tags", "related"}
DEFAULT_CATEGORIES = ("research", "technical", "personal")
UNCATEGORIZED = "uncategorized"
AVERAGE_READING_WPM = 220
DATE_FORMATS = ("%Y/%m/%d", "%B %d, %Y", "%b %d, %Y", "%d %B %Y")


def slugify(text: str) -> str:
    text = ENTITY_RE.sub(" ", text.lower())
    text = re.sub(r"[^a-z0-9\s-]", "", text).strip()
    text = re.sub(r"\s+", "-", text)
    return re.sub(r"-+", "-", text)


def strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def parse_list(value: str) -> list[str]:
    if value.startswith("[") and value.endswith("]"):
        value = value[1:-1]
    items = [strip_quotes(item.strip()) for item in value.split(",")]
    return [item for item in items if item]


def parse_value(key: str, raw_value: str) -> str | list[str]:
    value = strip_quotes(raw_value.strip())
    if key in LIST_KEYS:
        return parse_list(value)
    return value


def parse_front_matter(text: str) -> tuple[dict, str]:
    """Split ``text`` into (metadata, body).

    Text without a leading dashed block comes back untouched with empty
    metadata. The first colon on each line separates key from value.
    """
    match = FRONT_MATTER_RE.match(text.lstrip("\ufeff"))
    if not match:
        return {}, text

    meta: dict = {}
    for line in match.group(1).splitlines():
        if line.lstrip().startswith("#") or ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        if not key:
            continue
        meta[key] = parse_value(key, value)
    return meta, match.group(2)


def _as_list(value: object) -> list[str]:
    if isinstance(value, list):
        return [str(item) for item in value]
    if isinstance(value, str):
        return value.split(",")
    return []


def normalize_tags(value: object) -> list[str]:
    tags = (item.strip().lower() for item in _as_list(value))
    return list(dict.fromkeys(tag for tag in tags if tag))


def normalize_related(value: object) -> list[str]:
    ids = (item.strip() for item in _as_list(value))
    return list(dict.fromkeys(item for item in ids if item))


def normalize_status(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip().lower() or None


def normalize_category(value: object, categories: tuple[str, ...] = DEFAULT_CATEGORIES) -> str:
    if not isinstance(value, str):
        return UNCATEGORIZED
    normalized = value.strip().lower()
    return normalized if normalized in categories else UNCATEGORIZED


def category_label(category: str, uncategorized_label: str = "other") -> str:
    if category == UNCATEGORIZED:
        return uncategorized_label
    return category


def parse_post_date(value: object) -> dt.datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    parsed = None
    try:
        parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        for fmt in DATE_FORMATS:
            try:
                parsed = dt.datetime.strptime(value, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return parsed


def format_date(value: str) -> str:
    parsed = parse_post_date(value)
    if parsed is None:
        return value or ""
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def format_month_day(value: str) -> str:
    parsed = parse_post_date(value)
    if parsed is None:
        return value or ""
    return f"{parsed:%b} {parsed.day}"


def format_year(value: str) -> str:
    parsed = parse_post_date(value)
    if parsed is None:
        return "unknown"
    return str(parsed.year)


def strip_markdown(text: str) -> str:
    """Reduce Markdown to plain text for excerpts and word counts."""
    text = FENCED_CODE_RE.sub(" ", text)
    text = INLINE_CODE_RE.sub(r"\1", text)
    text = IMAGE_RE.sub(" ", text)
    text = LINK_RE.sub(r"\1", text)
    text = HEADING_MARK_RE.sub("", text)
    text = EMPHASIS_RE.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


def count_words(text: str) -> int:
    return len(text.split())


def estimate_reading_time(plain_text: str, wpm: int = AVERAGE_READING_WPM) -> int:
    if not plain_text:
        return 1
    return max(1, math.ceil(count_words(plain_text) / max(1, wpm)))


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + "..."

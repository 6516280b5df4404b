from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from urllib.parse import quote


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    id: str


@dataclass(eq=False)
class Post:
    """A processed source document.

    Built per file by the pipeline, then enriched by the corpus-wide pass
    that fills ``related_posts``.
    """

    id: str
    metadata: dict
    content: str
    html: str
    plain: str
    headings: list[Heading] = field(default_factory=list)
    category: str = "uncategorized"
    tags: list[str] = field(default_factory=list)
    status: str | None = None
    related_ids: list[str] = field(default_factory=list)
    reading_time: int = 1
    date: dt.datetime | None = None
    related_posts: list[Post] = field(default_factory=list, repr=False)

    @property
    def title(self) -> str:
        return self.metadata.get("title") or self.id

    @property
    def raw_date(self) -> str:
        value = self.metadata.get("date")
        return value if isinstance(value, str) else ""

    @property
    def excerpt(self) -> str:
        return self.metadata.get("excerpt") or self.plain

    @property
    def url(self) -> str:
        return f"/posts/{quote(self.id, safe='/')}/"

    @property
    def sort_key(self) -> dt.datetime:
        return self.date or dt.datetime.min

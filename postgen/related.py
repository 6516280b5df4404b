from __future__ import annotations

from .models import Post

RELATED_LIMIT = 3


def select_related_posts(posts: list[Post], current: Post, max_items: int = RELATED_LIMIT) -> list[Post]:
    """Pick up to ``max_items`` posts related to ``current``.

    Explicit ``related`` ids come first, then posts sharing tags (most shared
    tags, then newest), then the rest of ``posts`` in order. ``posts`` is
    expected to be sorted newest first already.
    """
    by_id = {post.id: post for post in posts}
    selected: list[Post] = []
    selected_ids = {current.id}

    def take(post: Post) -> None:
        if len(selected) < max_items and post.id not in selected_ids:
            selected.append(post)
            selected_ids.add(post.id)

    for related_id in current.related_ids:
        match = by_id.get(related_id)
        if match is not None:
            take(match)

    current_tags = set(current.tags)
    scored = []
    for post in posts:
        if post.id in selected_ids:
            continue
        overlap = sum(1 for tag in post.tags if tag in current_tags)
        if overlap:
            scored.append((overlap, post.sort_key, post))
    scored.sort(key=lambda item: (item[0], item[1]), reverse=True)
    for _, _, post in scored:
        take(post)

    for post in posts:
        take(post)

    return selected[:max_items]


def resolve_related(posts: list[Post], max_items: int = RELATED_LIMIT) -> None:
    for post in posts:
        post.related_posts = select_related_posts(posts, post, max_items)

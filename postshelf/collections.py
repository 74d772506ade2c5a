from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from .content import Post


class PostIndex(Mapping[str, Post]):
    """Read-only mapping of slug to Post, in configuration order.

    Instances are never modified after construction, so a store can hand
    the same index to many readers while building a replacement.
    """

    def __init__(self, posts: Iterable[Post] = ()):
        mapping: dict[str, Post] = {}
        for post in posts:
            mapping[post.slug] = post
        self._mapping = mapping

    def __getitem__(self, slug: str) -> Post:
        return self._mapping[slug]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def recent(self) -> list[Post]:
        """Return posts in reverse configuration order, most recent first."""
        return list(reversed(self._mapping.values()))

    def latest(self) -> Post | None:
        recent = self.recent()
        return recent[0] if recent else None

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostIndex({len(self._mapping)} posts)"

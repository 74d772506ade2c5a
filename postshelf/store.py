"""Post store for Postshelf.

PostStore turns configured ``slug [date]`` entries into an ordered,
slug-keyed collection of Posts. The collection is loaded on first access,
memoized on the store instance and dropped by ``clear_cache()``.

Loading is lock-guarded and publishes a fully built PostIndex in a single
assignment, so concurrent readers see either the previous index or the
new one.

Two failure modes reach callers:
- PostNotFound from ``find_by_slug``.
- OSError / UnicodeDecodeError from any read during a load. A single
  unreadable file aborts the whole load and leaves the cache empty.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from .collections import PostIndex
from .config import (
    PostEntry,
    load_config,
    parse_entries,
    posts_dir as resolve_posts_dir,
)
from .content import FilePostReader, Post, parse_post, post_path
from .protocols import EntrySource, PostReader
from .utils import today

logger = logging.getLogger(__name__)


class PostNotFound(LookupError):
    """No post with the requested slug.

    Attributes:
        slug: The slug that was looked up.
    """

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"No post with slug {slug!r}")


class StaticEntrySource:
    """EntrySource over a fixed list of entries."""

    def __init__(self, entries: Iterable[PostEntry]):
        self._entries = list(entries)

    def entries(self) -> list[PostEntry]:
        return list(self._entries)


class PostStore:
    """Loads, caches and serves Post records.

    Attributes:
        posts_dir: Directory holding ``<slug>.md`` files.
    """

    def __init__(
        self,
        posts_dir: Path,
        entries: EntrySource | Sequence[PostEntry],
        reader: PostReader | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the store.

        Args:
            posts_dir: Directory holding the Markdown files.
            entries: Configured posts, either as an EntrySource or a list.
            reader: Optional custom file reader.
            clock: Callable returning the current datetime, used for
                entries without a configured date.
        """
        self.posts_dir = Path(posts_dir)
        if isinstance(entries, EntrySource):
            self._source = entries
        else:
            self._source = StaticEntrySource(entries)
        self._reader = reader or FilePostReader()
        self._clock = clock
        self._index: PostIndex | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        project_root: Path,
        config: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> PostStore:
        """Build a store from a project's postshelf.yaml.

        Args:
            project_root: Root directory of the project.
            config: Already loaded configuration; loaded from disk if None.
            **kwargs: Passed through to the constructor (reader, clock).
        """
        if config is None:
            config = load_config(project_root)
        entries = parse_entries(config.get("posts") or [])
        return cls(resolve_posts_dir(project_root, config), entries, **kwargs)

    def load_all(self) -> list[Post]:
        """Read and parse every configured post, in configuration order.

        Entries whose file does not start with a ``# `` title line are
        skipped. Read errors propagate.
        """
        posts: list[Post] = []
        for entry in self._source.entries():
            path = post_path(self.posts_dir, entry.slug)
            text = self._reader.read(path)
            if entry.date:
                created_at = entry.date
            else:
                created_at = today(self._clock)
                logger.debug("No date configured for %s; using %s", entry.slug, created_at)
            post = parse_post(entry.slug, text, created_at)
            if post is None:
                logger.debug("Skipping %s: missing '# Title' first line", path)
                continue
            posts.append(post)
        return posts

    def all(self) -> PostIndex:
        """Return the memoized slug to Post mapping, loading it if needed."""
        index = self._index
        if index is not None:
            return index
        with self._lock:
            if self._index is None:
                self._index = self._build_index()
            return self._index

    def reload(self) -> PostIndex:
        """Load a fresh index and swap it in.

        Readers keep seeing the previous index until the new one is ready.
        If loading fails the previous index stays in place.
        """
        with self._lock:
            self._index = self._build_index()
            return self._index

    def clear_cache(self) -> None:
        """Drop the memoized index; the next query reloads from disk."""
        with self._lock:
            self._index = None
        logger.debug("Cleared post cache for %s", self.posts_dir)

    def recent(self) -> list[Post]:
        return self.all().recent()

    def latest(self) -> Post | None:
        return self.all().latest()

    def find_by_slug(self, slug: str) -> Post:
        """Return the post with the given slug.

        Raises:
            PostNotFound: If no loaded post has that slug.
        """
        try:
            return self.all()[slug]
        except KeyError:
            raise PostNotFound(slug) from None

    def __len__(self) -> int:
        return len(self.all())

    def __contains__(self, slug: object) -> bool:
        return slug in self.all()

    def __iter__(self) -> Iterator[Post]:
        return iter(self.all().values())

    def _build_index(self) -> PostIndex:
        index = PostIndex(self.load_all())
        logger.info("Loaded %d posts from %s", len(index), self.posts_dir)
        return index

"""Post model and parsing for Postshelf.

A post file is UTF-8 Markdown whose first line is ``# <title>``; everything
after that line is the post body. Files that do not start this way are not
posts and are skipped, not reported.

Key classes:
- Post: Immutable record for one blog entry.
- FilePostReader: Implementation of the PostReader protocol for files on disk.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .renderers import RenderedPost, render_markdown
from .utils import ASCII_WHITESPACE

TITLE_RE = re.compile(r"\A# (.*)$", re.MULTILINE)
BODY_STRIP_CHARS = ASCII_WHITESPACE + "\0"


@dataclass(frozen=True)
class Post:
    """Represents one blog entry.

    Attributes:
        slug: Unique identifier, also the Markdown filename stem.
        title: Text after ``# `` on the first line of the file.
        content: Remainder of the file after the title line, trimmed.
        created_at: Configured date, or the load date as ``YYYY-MM-DD``.
    """

    slug: str
    title: str
    content: str
    created_at: str

    def render(self) -> RenderedPost:
        return render_markdown(self.content)

    def html(self) -> str:
        """Return the post content rendered to HTML."""
        return self.render().html


def parse_post(slug: str, text: str, created_at: str) -> Post | None:
    """Build a Post from a file's text.

    Args:
        slug: Post slug.
        text: Decoded file contents.
        created_at: Creation date to record.

    Returns:
        Post, or None if the text does not start with a ``# `` title line.
    """
    match = TITLE_RE.match(text)
    if not match:
        return None
    return Post(
        slug=slug,
        title=match.group(1),
        content=text[match.end() :].strip(BODY_STRIP_CHARS),
        created_at=created_at,
    )


def post_path(posts_dir: Path, slug: str) -> Path:
    return posts_dir / f"{slug}.md"


class FilePostReader:
    """Reads post files from disk as UTF-8 text.

    Missing or unreadable files raise the underlying OSError; invalid
    UTF-8 raises UnicodeDecodeError.
    """

    def read(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

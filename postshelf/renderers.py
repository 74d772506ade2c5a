"""Markdown rendering for Postshelf.

Post content is stored as Markdown; host applications that want HTML call
``render_markdown`` (or ``Post.html()``).

Key classes:
- Heading: A heading found while rendering, for building a table of contents.
- RenderedPost: HTML plus headings, with a table of contents built from them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import mistune


@dataclass
class Heading:
    """Represents a heading extracted from markdown content.

    Attributes:
        id: Anchor ID for the heading (URL-friendly slug).
        text: The text content of the heading.
        level: Heading level (1-6).
    """

    id: str
    text: str
    level: int


@dataclass
class RenderedPost:
    """Rendered post body.

    Attributes:
        html: Body HTML.
        headings: Headings in document order, with their anchor ids.
    """

    html: str
    headings: list[Heading] = field(default_factory=list)

    def toc(self, max_level: int = 3) -> list[Heading]:
        """Return headings for a table of contents, dropping those below max_level."""
        return [h for h in self.headings if h.level <= max_level]

    def toc_html(self, max_level: int = 3) -> str:
        """Render the table of contents as nested lists of anchor links.

        Nesting is relative to the shallowest heading, and a skipped level
        (``##`` straight to ``####``) nests one step only.
        Returns an empty string when the post has no headings.
        """
        entries = self.toc(max_level)
        if not entries:
            return ""
        base = min(h.level for h in entries)
        parts: list[str] = []
        depth = 0
        for heading in entries:
            level = min(heading.level - base + 1, depth + 1)
            if level > depth:
                parts.append("<ul>")
                depth += 1
            else:
                parts.append("</li>")
                while depth > level:
                    parts.append("</ul></li>")
                    depth -= 1
            parts.append(f'<li><a href="#{heading.id}">{heading.text}</a>')
        parts.append("</li>")
        while depth > 1:
            parts.append("</ul></li>")
            depth -= 1
        parts.append("</ul>")
        return "".join(parts)


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text."""
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


class _PostRenderer(mistune.HTMLRenderer):
    """Markdown renderer with heading anchors and syntax highlighting.

    Attributes:
        headings: List of Heading objects extracted during rendering.
    """

    def __init__(self):
        super().__init__(escape=False)
        self.headings: list[Heading] = []
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        base_id = _generate_heading_id(text)

        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id

        self.headings.append(Heading(id=heading_id, text=text, level=level))
        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Unknown languages fall back to a plain escaped block.
        """
        if info:
            from pygments import highlight
            from pygments.formatters import HtmlFormatter
            from pygments.lexers import get_lexer_by_name
            from pygments.util import ClassNotFound

            try:
                lexer = get_lexer_by_name(info, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{info}"' if info else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


def render_markdown(text: str) -> RenderedPost:
    """Render Markdown to HTML.

    Args:
        text: Markdown source.

    Returns:
        RenderedPost with the HTML and the headings in document order.
    """
    renderer = _PostRenderer()
    markdown = mistune.create_markdown(
        renderer=renderer, plugins=["strikethrough", "footnotes", "table", "url"]
    )
    return RenderedPost(html=markdown(text), headings=renderer.headings)

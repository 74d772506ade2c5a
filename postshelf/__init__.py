"""Postshelf blog post store.

This package loads blog posts from Markdown files listed in a project's
``postshelf.yaml``, memoizes the parsed collection, and answers lookups by
slug and by recency. It is meant to be embedded in a host web application.

The main entry point for applications is ``PostStore``; the CLI module
provides commands for listing, showing and scaffolding posts.
"""

from .content import Post
from .store import PostNotFound, PostStore

__all__ = ["__version__", "Post", "PostNotFound", "PostStore"]
__version__ = "0.1.0"

"""Command-line interface for Postshelf.

This module defines the CLI commands using Click framework.
All commands operate on the project in ``--root`` (default: current directory).

Commands:
- list: Print all posts, newest first.
- latest: Print the most recent post.
- show: Print one post by slug, as Markdown or HTML, optionally with a table of contents.
- new: Scaffold a new post file and register it in postshelf.yaml.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
import questionary

from . import __version__
from .config import (
    CONFIG_FILENAME,
    ConfigError,
    PostEntry,
    load_config,
    parse_entries,
    posts_dir,
    save_entries,
)
from .content import post_path
from .store import PostNotFound, PostStore
from .utils import slugify, split_words, titleize, today


@click.group()
@click.version_option(version=__version__, prog_name="postshelf")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root containing postshelf.yaml (default: current directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, root: Path | None, verbose: bool):
    """Postshelf blog post store."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )
    ctx.obj = (root or Path.cwd()).resolve()


@cli.command("list")
@click.pass_obj
def list_posts(project_root: Path):
    """Print all posts, newest first."""
    store = _open_store(project_root)
    posts = _guard(store.recent)
    if not posts:
        click.echo("No posts.")
        return
    for post in posts:
        click.echo(f"{post.created_at}  {post.slug}  {post.title}")


@cli.command()
@click.pass_obj
def latest(project_root: Path):
    """Print the most recent post."""
    store = _open_store(project_root)
    post = _guard(store.latest)
    if post is None:
        click.echo("No posts.")
        return
    click.echo(click.style(post.title, bold=True))
    click.echo(post.created_at)
    click.echo()
    click.echo(post.content)


@cli.command()
@click.argument("slug")
@click.option("--html", "as_html", is_flag=True, help="Render content to HTML")
@click.option("--toc", is_flag=True, help="Include a table of contents")
@click.pass_obj
def show(project_root: Path, slug: str, as_html: bool, toc: bool):
    """Print one post by slug."""
    store = _open_store(project_root)
    post = _guard(lambda: store.find_by_slug(slug))
    if as_html:
        rendered = post.render()
        nav = rendered.toc_html() if toc else ""
        if nav:
            click.echo(f'<nav class="toc">{nav}</nav>')
        click.echo(rendered.html, nl=False)
        return
    click.echo(f"# {post.title}")
    click.echo()
    headings = post.render().toc() if toc else []
    if headings:
        base = min(h.level for h in headings)
        for heading in headings:
            click.echo(f"{'  ' * (heading.level - base)}- {heading.text}")
        click.echo()
    click.echo(post.content)


@cli.command()
@click.argument("name")
@click.option("--date", "date", default=None, help="Date to record for the post, used verbatim")
@click.option("--today", "use_today", is_flag=True, help="Record today's date for the post")
@click.option("--undated", is_flag=True, help="Record no date; the load date is used")
@click.pass_obj
def new(
    project_root: Path, name: str, date: str | None, use_today: bool, undated: bool
):
    """Create a new post file and register it."""
    slug = slugify(name)
    if not slug:
        raise click.ClickException(f"Cannot derive a slug from {name!r}")
    if sum([date is not None, use_today, undated]) > 1:
        raise click.ClickException("Use only one of --date, --today and --undated")
    if date is not None and len(split_words(date)) != 1:
        raise click.ClickException("--date must be a single word, e.g. 2024-01-15")

    config = _guard(lambda: load_config(project_root))
    entries = _guard(lambda: parse_entries(config["posts"]))
    if any(entry.slug == slug for entry in entries):
        raise click.ClickException(
            f"A post with slug '{slug}' is already listed in {CONFIG_FILENAME}"
        )

    target_dir = posts_dir(project_root, config)
    target_path = post_path(target_dir, slug)
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {_relative(target_path, project_root)}"
        )

    if use_today:
        date = today()
    elif date is None and not undated:
        pin_date = questionary.confirm(
            f"Record today's date ({today()}) for this post?",
            default=True,
            style=_questionary_style(),
        ).ask()
        if pin_date is None:
            raise click.Abort()
        date = today() if pin_date else None

    target_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(f"# {titleize(name)}\n\n", encoding="utf-8")
    entries.append(PostEntry(slug=slug, date=date))
    try:
        _guard(lambda: save_entries(project_root, entries))
    except click.ClickException:
        target_path.unlink(missing_ok=True)
        raise

    click.echo(f"Created {_relative(target_path, project_root)}")


def _open_store(project_root: Path) -> PostStore:
    return _guard(lambda: PostStore.from_config(project_root))


def _guard(func):
    """Run func, turning store and config failures into CLI errors."""
    try:
        return func()
    except PostNotFound as exc:
        raise click.ClickException(str(exc)) from None
    except ConfigError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"I/O error: {exc}") from None


def _relative(path: Path, root: Path) -> Path:
    try:
        return path.relative_to(root)
    except ValueError:
        return path


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()

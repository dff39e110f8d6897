"""Command-line interface for whatif-sync."""

import argparse
import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from schemas.article import Article
from schemas.progress import ProgressStatus
from schemas.settings import ReaderSettings
from whatif_sync.aggregators import ProgressTracker
from whatif_sync.clients import WhatIfClient
from whatif_sync.repository import ArticleRepository
from whatif_sync.storage import ArticleUnavailableError, JsonDocumentStore, JsonLegacyPreferences

STORE_FILENAME = "articles.json"
LEGACY_PREFS_FILENAME = "legacy-preferences.json"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def load_settings(args: argparse.Namespace) -> ReaderSettings:
    """Load the settings file and apply command-line overrides."""
    settings = ReaderSettings.load(args.settings)
    updates: dict = {}

    if args.offline_root is not None:
        updates["offline_root"] = args.offline_root
    if args.offline:
        updates["offline_mode"] = True
    if args.theme is not None or args.invert:
        theme = settings.theme.model_copy()
        if args.theme is not None:
            theme.amoled = args.theme == "amoled"
            theme.night = args.theme == "night"
        if args.invert:
            theme.invert = True
        updates["theme"] = theme

    return settings.model_copy(update=updates)


@asynccontextmanager
async def open_repository(settings: ReaderSettings) -> AsyncIterator[ArticleRepository]:
    """Wire the repository to JSON-backed stores under the offline root."""
    store = JsonDocumentStore(settings.offline_root / STORE_FILENAME)
    preferences = JsonLegacyPreferences(settings.offline_root / LEGACY_PREFS_FILENAME)
    async with WhatIfClient(settings.client_config()) as client:
        yield ArticleRepository(settings, client, store, preferences)


def _format_article(article: Article) -> str:
    flags = ("R" if article.read else "-") + ("*" if article.favorite else "-")
    return f"{article.number:>4} {flags} {article.title}"


def _log_progress(status: ProgressStatus | None) -> None:
    if status is not None:
        logging.getLogger(__name__).info(f"Progress: {status.completed}/{status.total}")


async def _sync(args: argparse.Namespace) -> int:
    logger = logging.getLogger(__name__)
    async with open_repository(load_settings(args)) as repository:
        result = await repository.update_database()

    if not result.ok:
        logger.error(f"Synchronization failed: {result.error}")
        return 1

    logger.info(f"New articles: {len(result.new_articles)}")
    if result.migrated_legacy_flags:
        logger.info("  Legacy read/favorite flags migrated")
    return 0


async def _download(args: argparse.Namespace) -> int:
    logger = logging.getLogger(__name__)
    async with open_repository(load_settings(args)) as repository:
        result = await repository.download_article(args.number)

    if not result.ok:
        logger.error(f"Failed to download article {args.number}: {result.error}")
        return 1

    logger.info(f"Downloaded article {args.number}")
    logger.info(f"  Images stored: {len(result.images_saved)}")
    if result.images_failed:
        logger.warning(f"  Images failed: {result.images_failed}")
    return 0


async def _download_all(args: argparse.Namespace) -> int:
    async with open_repository(load_settings(args)) as repository:
        tracker = ProgressTracker(on_change=_log_progress)
        events = await tracker.follow(repository.download_all_articles())

    logging.getLogger(__name__).info(f"Processed {events} articles")
    return 0


async def _download_overview(args: argparse.Namespace) -> int:
    async with open_repository(load_settings(args)) as repository:
        tracker = ProgressTracker(on_change=_log_progress)
        events = await tracker.follow(repository.download_archive_images())

    logging.getLogger(__name__).info(f"Processed {events} archive images")
    return 0


async def _render(args: argparse.Namespace) -> int:
    logger = logging.getLogger(__name__)
    async with open_repository(load_settings(args)) as repository:
        try:
            loaded = await repository.load_article(args.number)
        except ArticleUnavailableError as e:
            logger.error(f"Article unavailable: {e}")
            return 1

    if loaded is None:
        logger.error(f"Unknown article {args.number}, run 'sync' first")
        return 1

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(loaded.html)
        logger.info(f"Wrote article {loaded.number} to {args.output}")
    else:
        sys.stdout.write(loaded.html)

    if args.refs_output is not None:
        args.refs_output.parent.mkdir(parents=True, exist_ok=True)
        args.refs_output.write_text("\n\n".join(
            f"[{index}] {ref}" for index, ref in enumerate(loaded.refs)
        ))
        logger.info(f"Wrote {len(loaded.refs)} footnotes to {args.refs_output}")
    return 0


async def _delete_offline(args: argparse.Namespace) -> int:
    async with open_repository(load_settings(args)) as repository:
        await repository.delete_all_offline_articles()
    return 0


def run_async(command):
    """Wrap an async command into a CLI handler with logging and error mapping."""

    def handler(args: argparse.Namespace) -> int:
        setup_logging(args.verbose)
        try:
            return asyncio.run(command(args))
        except Exception as e:
            logging.getLogger(__name__).error(f"Command failed: {e}")
            return 1

    return handler


def list_articles(args: argparse.Namespace) -> int:
    """Execute the list command."""
    setup_logging(args.verbose)
    settings = load_settings(args)
    store = JsonDocumentStore(settings.offline_root / STORE_FILENAME)

    for article in store.articles():
        if args.unread and article.read:
            continue
        if args.favorites and not article.favorite:
            continue
        print(_format_article(article))
    return 0


def search_articles(args: argparse.Namespace) -> int:
    """Execute the search command."""
    setup_logging(args.verbose)
    settings = load_settings(args)
    store = JsonDocumentStore(settings.offline_root / STORE_FILENAME)

    for article in store.search(args.query):
        print(_format_article(article))
    return 0


def mark_read(args: argparse.Namespace) -> int:
    """Execute the mark-read command."""
    setup_logging(args.verbose)
    settings = load_settings(args)
    store = JsonDocumentStore(settings.offline_root / STORE_FILENAME)

    if store.get(args.number) is None:
        logging.getLogger(__name__).error(f"Unknown article {args.number}")
        return 1
    store.set_read(args.number, not args.unread)
    return 0


def mark_favorite(args: argparse.Namespace) -> int:
    """Execute the favorite command."""
    setup_logging(args.verbose)
    settings = load_settings(args)
    store = JsonDocumentStore(settings.offline_root / STORE_FILENAME)

    if store.get(args.number) is None:
        logging.getLogger(__name__).error(f"Unknown article {args.number}")
        return 1
    store.set_favorite(args.number, not args.remove)
    return 0


def mark_all_read(args: argparse.Namespace) -> int:
    """Execute the mark-all-read command."""
    setup_logging(args.verbose)
    settings = load_settings(args)
    store = JsonDocumentStore(settings.offline_root / STORE_FILENAME)
    store.set_all_read(not args.unread)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="whatif-sync",
        description="Synchronize and render the What If? archive for offline reading",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Path to a JSON settings file",
    )
    parser.add_argument(
        "--offline-root",
        type=Path,
        default=None,
        help="Directory holding the article store and offline copies",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Read from and keep full offline copies",
    )
    parser.add_argument(
        "--theme",
        choices=["default", "night", "amoled"],
        default=None,
        help="Theme used to pick the article stylesheet",
    )
    parser.add_argument(
        "--invert",
        action="store_true",
        help="Invert illustration colors in dark themes",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    sync_parser = subparsers.add_parser(
        "sync",
        help="Fetch the archive index and store new articles",
    )
    sync_parser.set_defaults(func=run_async(_sync))

    list_parser = subparsers.add_parser(
        "list",
        help="List stored articles",
    )
    list_parser.add_argument("--unread", action="store_true", help="Only unread articles")
    list_parser.add_argument("--favorites", action="store_true", help="Only favorites")
    list_parser.set_defaults(func=list_articles)

    search_parser = subparsers.add_parser(
        "search",
        help="Search stored articles by title",
    )
    search_parser.add_argument("query", help="Text to look for in titles")
    search_parser.set_defaults(func=search_articles)

    download_parser = subparsers.add_parser(
        "download",
        help="Download one article for offline reading",
    )
    download_parser.add_argument("number", type=int, help="Article number")
    download_parser.set_defaults(func=run_async(_download))

    download_all_parser = subparsers.add_parser(
        "download-all",
        help="Synchronize and download every article for offline reading",
    )
    download_all_parser.set_defaults(func=run_async(_download_all))

    overview_parser = subparsers.add_parser(
        "download-overview",
        help="Download the archive thumbnails",
    )
    overview_parser.set_defaults(func=run_async(_download_overview))

    render_parser = subparsers.add_parser(
        "render",
        help="Render an article for reading and mark it read",
    )
    render_parser.add_argument("number", type=int, help="Article number")
    render_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the rendered page here instead of stdout",
    )
    render_parser.add_argument(
        "--refs-output",
        type=Path,
        default=None,
        help="Write the extracted footnotes to this file",
    )
    render_parser.set_defaults(func=run_async(_render))

    read_parser = subparsers.add_parser(
        "mark-read",
        help="Mark an article read",
    )
    read_parser.add_argument("number", type=int, help="Article number")
    read_parser.add_argument("--unread", action="store_true", help="Mark unread instead")
    read_parser.set_defaults(func=mark_read)

    favorite_parser = subparsers.add_parser(
        "favorite",
        help="Add an article to the favorites",
    )
    favorite_parser.add_argument("number", type=int, help="Article number")
    favorite_parser.add_argument("--remove", action="store_true", help="Remove from favorites")
    favorite_parser.set_defaults(func=mark_favorite)

    all_read_parser = subparsers.add_parser(
        "mark-all-read",
        help="Mark every article read",
    )
    all_read_parser.add_argument("--unread", action="store_true", help="Mark all unread instead")
    all_read_parser.set_defaults(func=mark_all_read)

    delete_parser = subparsers.add_parser(
        "delete-offline",
        help="Delete every offline article and image",
    )
    delete_parser.set_defaults(func=run_async(_delete_offline))

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

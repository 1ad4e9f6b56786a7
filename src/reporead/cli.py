"""CLI entry point — ``reporead serve`` plus the repository commands."""

from __future__ import annotations

# Phase 1: Singleton logging — before any transitive litellm imports
from reporead.logging_config import setup_logging

setup_logging(default="WARNING")

import argparse  # noqa: E402
import asyncio  # noqa: E402
import json  # noqa: E402
import sys  # noqa: E402
from collections.abc import Callable  # noqa: E402

from reporead import __version__  # noqa: E402
from reporead.config import Settings, repos_dir  # noqa: E402
from reporead.constants import TrendingSince  # noqa: E402
from reporead.ingestion.hosting_client import HostingClient  # noqa: E402
from reporead.ingestion.schemas import FileNode  # noqa: E402
from reporead.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
)
from reporead.resilience.errors import RepoError  # noqa: E402
from reporead.services.repo_service import RepoService  # noqa: E402
from reporead.storage.local_store import LocalStore  # noqa: E402

# Phase 2: Clear litellm's duplicate handlers after all imports
cleanup_third_party_handlers()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"reporead {__version__}")
        return

    handler = _COMMANDS.get(args.command or "")
    if handler is None:
        parser.print_help()
        return

    try:
        handler(args)
    except RepoError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="reporead",
        description=(
            "Offline repository browser — import hosted "
            "repositories and read them locally."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Start the HTTP API server")
    serve.add_argument(
        "--host",
        default=None,
        help="Bind address (default: from settings, 127.0.0.1)",
    )
    serve.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Port (default: from settings, 8765)",
    )

    imp = sub.add_parser("import", help="Import a repository by URL")
    imp.add_argument("url", help="Repository URL, optionally with /tree/<branch>")

    sub.add_parser("list", help="List imported repositories")

    info = sub.add_parser("info", help="Show one repository's metadata")
    info.add_argument("key", help="Repository key")

    tree = sub.add_parser("tree", help="Print a repository's file tree")
    tree.add_argument("key", help="Repository key")
    tree.add_argument(
        "--json",
        action="store_true",
        help="Print the stored tree as JSON",
    )

    read = sub.add_parser("read", help="Print one file of a repository")
    read.add_argument("key", help="Repository key")
    read.add_argument("path", help="File path relative to the repository root")

    delete = sub.add_parser("delete", help="Delete an imported repository")
    delete.add_argument("key", help="Repository key")

    search = sub.add_parser("search", help="Search hosted repositories")
    search.add_argument("query", help="Search query")
    search.add_argument(
        "--token",
        default=None,
        help="API token for authenticated search",
    )

    trending = sub.add_parser("trending", help="List trending repositories")
    trending.add_argument("--language", "-l", default=None)
    trending.add_argument(
        "--since",
        choices=[s.value for s in TrendingSince],
        default=TrendingSince.DAILY.value,
    )
    trending.add_argument("--spoken-language", default=None)

    return parser


def _service(settings: Settings, hosting: HostingClient) -> RepoService:
    return RepoService(LocalStore(repos_dir(settings)), hosting)


def _offline_service() -> RepoService:
    """Service for commands that never touch the network."""
    settings = Settings()
    return _service(settings, HostingClient(settings))


def _run_serve(args: argparse.Namespace) -> None:
    """Start the API server with uvicorn."""
    import uvicorn

    settings = Settings()
    host = args.host or settings.host
    port = args.port or settings.port
    print(f"Serving RepoRead API at http://{host}:{port}")
    uvicorn.run(
        "reporead.main:app",
        host=host,
        port=port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


def _run_import(args: argparse.Namespace) -> None:
    async def _import() -> None:
        settings = Settings()
        async with HostingClient(settings) as hosting:
            result = await _service(settings, hosting).import_repo(args.url)
        files = sum(1 for node in result.tree.iter_nodes() if not node.is_dir)
        info = result.info
        print(
            f"Imported {info.owner}/{info.repo}@{info.branch} "
            f"as {result.repo_key} ({files} files)"
        )

    asyncio.run(_import())


def _run_list(args: argparse.Namespace) -> None:
    repos = _offline_service().list_recent_repos()
    if not repos:
        print("No repositories imported yet.")
        return
    for info in repos:
        print(
            f"{info.key}\t{info.owner}/{info.repo}@{info.branch}"
            f"\t{info.imported_at}"
        )


def _run_info(args: argparse.Namespace) -> None:
    info = _offline_service().get_repo_info(args.key)
    print(info.model_dump_json(indent=2))


def _run_tree(args: argparse.Namespace) -> None:
    tree = _offline_service().get_repo_tree(args.key)
    if args.json:
        print(tree.model_dump_json(indent=2, exclude_none=True))
        return
    for line in _render_tree(tree):
        print(line)


def _render_tree(node: FileNode, depth: int = 0) -> list[str]:
    label = f"{node.name}/" if node.is_dir else node.name
    lines = [f"{'  ' * depth}{label}"]
    for child in node.children or []:
        lines.extend(_render_tree(child, depth + 1))
    return lines


def _run_read(args: argparse.Namespace) -> None:
    content = _offline_service().read_text_file(args.key, args.path)
    if content.is_binary:
        print(f"{args.path}: binary file not shown", file=sys.stderr)
        return
    print(content.content)
    if content.truncated:
        total = (
            f"{content.total_lines} lines"
            if content.total_lines is not None
            else "file too large"
        )
        print(f"[preview only: {total}]", file=sys.stderr)


def _run_delete(args: argparse.Namespace) -> None:
    _offline_service().delete_repo(args.key)
    print(f"Deleted {args.key}")


def _run_search(args: argparse.Namespace) -> None:
    async def _search() -> None:
        settings = Settings()
        async with HostingClient(settings) as hosting:
            items = await _service(settings, hosting).search_repos(
                args.query, token=args.token
            )
        for item in items:
            print(f"{item.full_name}\t★{item.stargazers_count}\t{item.html_url}")

    asyncio.run(_search())


def _run_trending(args: argparse.Namespace) -> None:
    from reporead.catalog.trending import fetch_trending

    async def _trending() -> None:
        async with HostingClient(Settings()) as hosting:
            repos = await fetch_trending(
                hosting,
                language=args.language,
                since=args.since,
                spoken_language=args.spoken_language,
            )
        print(json.dumps([r.model_dump() for r in repos], indent=2))

    asyncio.run(_trending())


_COMMANDS: dict[str, Callable[[argparse.Namespace], None]] = {
    "serve": _run_serve,
    "import": _run_import,
    "list": _run_list,
    "info": _run_info,
    "tree": _run_tree,
    "read": _run_read,
    "delete": _run_delete,
    "search": _run_search,
    "trending": _run_trending,
}


if __name__ == "__main__":
    main()

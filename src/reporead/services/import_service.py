"""End-to-end import: URL → snapshot → extracted tree → sidecar metadata."""

from __future__ import annotations

import logging
import shutil
from datetime import UTC, datetime

from reporead.ingestion.archive import extract_archive
from reporead.ingestion.hosting_client import HostingClient
from reporead.ingestion.schemas import ImportResult, RepoInfo
from reporead.ingestion.tree_builder import build_file_tree
from reporead.ingestion.url_parser import generate_repo_key, parse_repo_url
from reporead.resilience.errors import IoError
from reporead.storage.local_store import LocalStore, save_info, save_tree

logger = logging.getLogger(__name__)


async def import_repo(
    url: str,
    *,
    store: LocalStore,
    hosting: HostingClient,
) -> ImportResult:
    """Import the repository at ``url`` into ``store``.

    A re-import of the same owner/repo replaces the previous copy
    wholesale. The downloaded archive never outlives the call.
    """
    parsed = parse_repo_url(url, host=hosting.host)
    branch = parsed.branch or await hosting.default_branch(
        parsed.owner, parsed.repo
    )

    key = generate_repo_key(parsed.owner, parsed.repo)
    repo_dir = store.repo_dir(key)
    zip_path = store.archive_path(key)
    logger.info(
        "event=import_start key=%s branch=%s", key, branch
    )

    try:
        await hosting.download_archive(
            parsed.owner, parsed.repo, branch, zip_path
        )
        if repo_dir.exists():
            try:
                shutil.rmtree(repo_dir)
            except OSError as exc:
                raise IoError(f"{repo_dir}: {exc.strerror or exc}") from exc
            logger.info("event=import_replace key=%s", key)
        extract_archive(zip_path, repo_dir)
    finally:
        zip_path.unlink(missing_ok=True)

    tree = build_file_tree(repo_dir, parsed.repo)
    info = RepoInfo(
        key=key,
        owner=parsed.owner,
        repo=parsed.repo,
        branch=branch,
        imported_at=datetime.now(UTC).isoformat(),
        url=url,
    )
    save_info(repo_dir, info)
    save_tree(repo_dir, tree)

    logger.info(
        "event=import_complete key=%s files=%d",
        key,
        sum(1 for node in tree.iter_nodes() if not node.is_dir),
    )
    return ImportResult(repo_key=key, info=info, tree=tree)

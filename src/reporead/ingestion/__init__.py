"""Repository ingestion — parse URL, fetch snapshot, extract, walk, read."""

from reporead.ingestion.archive import extract_archive
from reporead.ingestion.content_reader import read_file_content, split_lines
from reporead.ingestion.hosting_client import HostingClient
from reporead.ingestion.language_detector import (
    contains_nul,
    detect_language,
    is_binary_extension,
)
from reporead.ingestion.schemas import (
    FileContent,
    FileNode,
    ImportResult,
    ParsedUrl,
    RepoInfo,
    SearchResultItem,
    TrendingRepo,
)
from reporead.ingestion.tree_builder import build_file_tree
from reporead.ingestion.url_parser import generate_repo_key, parse_repo_url

__all__ = [
    "FileContent",
    "FileNode",
    "HostingClient",
    "ImportResult",
    "ParsedUrl",
    "RepoInfo",
    "SearchResultItem",
    "TrendingRepo",
    "build_file_tree",
    "contains_nul",
    "detect_language",
    "extract_archive",
    "generate_repo_key",
    "is_binary_extension",
    "parse_repo_url",
    "read_file_content",
    "split_lines",
]

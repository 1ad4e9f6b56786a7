"""RepoRead: offline snapshots of hosted source repositories."""

__version__ = "0.1.0"

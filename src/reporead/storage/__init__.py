"""On-disk repository store."""

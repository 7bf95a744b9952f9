"""vlt - Obsidian vault CLI that works directly on the filesystem."""

__version__ = "0.3.0"

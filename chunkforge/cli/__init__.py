"""Command-line interface for ChunkForge."""

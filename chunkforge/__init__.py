"""ChunkForge - document chunking engine for embedding and retrieval.

Turns extracted document text into typed, scored segments and tables.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

"""
Core infrastructure for ChunkForge: exceptions, logging, types and
configuration.
"""

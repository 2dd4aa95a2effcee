"""Chunked transport of binary payloads to the staging endpoint."""

from minuteflow.transport.chunked import UPLOAD_CHUNK_SIZE, ChunkUploader, chunk_count, iter_chunks

__all__ = ["ChunkUploader", "UPLOAD_CHUNK_SIZE", "chunk_count", "iter_chunks"]

from redx.sessions.schema import ChatSession, Message, Role
from redx.sessions.storage import BlobStore, JsonFileBlobStore, MemoryBlobStore
from redx.sessions.store import (
    SessionStore,
    SessionStoreError,
    UnknownMessageError,
    UnknownSessionError,
)

__all__ = [
    "BlobStore",
    "ChatSession",
    "JsonFileBlobStore",
    "MemoryBlobStore",
    "Message",
    "Role",
    "SessionStore",
    "SessionStoreError",
    "UnknownMessageError",
    "UnknownSessionError",
]

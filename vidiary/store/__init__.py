"""
Durable storage for catalog records.
"""
from vidiary.store.durable_store import DurableVideoStore

__all__ = ["DurableVideoStore"]

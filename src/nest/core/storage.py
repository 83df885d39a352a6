"""
NEST Core - Mock object storage.

Bucket API compatible with the calls the app makes against Supabase
Storage. Uploads are kept in memory; public URLs point at stock travel
photos so covers render without a real bucket.
"""

import logging
import time

logger = logging.getLogger(__name__)

STOCK_IMAGES = [
    "https://images.unsplash.com/photo-1502602898657-3e91760cbb34?auto=format&fit=crop&w=1200&q=80",
    "https://images.unsplash.com/photo-1499856871940-a09627c6dcf6?auto=format&fit=crop&w=1200&q=80",
    "https://images.unsplash.com/photo-1500835556837-99ac94a94552?auto=format&fit=crop&w=1200&q=80",
    "https://images.unsplash.com/photo-1523906834658-6e24ef2386f9?auto=format&fit=crop&w=1200&q=80",
    "https://images.unsplash.com/photo-1516483638261-f4dbaf036963?auto=format&fit=crop&w=1200&q=80",
]


class MockBucket:
    """A single named bucket."""

    def __init__(self, name: str, objects: dict[str, bytes], latency: float = 0.0):
        self.name = name
        self._objects = objects
        self._latency = latency

    def upload(self, path: str, file: bytes) -> dict:
        if self._latency:
            time.sleep(self._latency)
        self._objects[path] = bytes(file)
        logger.info(f"[mock-storage] {self.name}/{path} ({len(file)} bytes)")
        return {"path": path}

    def download(self, path: str) -> bytes | None:
        return self._objects.get(path)

    def get_public_url(self, path: str) -> str:
        # Stable pick so the same path always maps to the same image.
        return STOCK_IMAGES[len(path) % len(STOCK_IMAGES)]


class MockStorage:
    """Entry point: ``storage.from_("trip-covers").upload(...)``."""

    def __init__(self, latency: float = 0.0):
        self._latency = latency
        self._buckets: dict[str, dict[str, bytes]] = {}

    def from_(self, bucket: str) -> MockBucket:
        return MockBucket(bucket, self._buckets.setdefault(bucket, {}), self._latency)

"""A simulated three-tier concurrent memory allocator with size classes, a page cache and a benchmark."""

__version__ = "0.1.0"
__all__ = [
    "allocator",
    "benchmark",
    "centralcache",
    "memory",
    "objectpool",
    "pagecache",
    "pagemap",
    "sizeclass",
    "spans",
    "threadcache",
]
# spanalloc

`spanalloc` models a three-tier concurrent memory allocator over a simulated
address space. Addresses are plain integers, and no real memory is reserved.

## How it is built

- `spanalloc.sizeclass` holds the size-class rules. `round_up(size)` aligns a
  size to its band. `index(size)` picks the free-list bucket.
  `num_move_size(size)` caps how many objects move in one batch, and
  `num_move_page(size)` gives how many pages a fresh span gets.
- `spanalloc.spans` provides `FreeList`, a LIFO list of free objects with a
  growing `max_size`. It also provides `Span`, a run of pages, and `SpanList`,
  a doubly linked list of spans that carries its own `lock`.
- `spanalloc.memory.AddressSpace` plays the operating system. Its `alloc(kpage)`
  returns the page-aligned address of `kpage` new pages. Its `free(address)`
  gives them back. Freed ranges are reused first-fit and merged.
- `spanalloc.objectpool.ObjectPool` builds objects with a factory and hands
  released ones out again first. An optional `reset` function is applied to a
  reused object.
- `spanalloc.pagemap` has three radix maps from page numbers to values:
  `PageMap1` is a flat array, `PageMap2` is a two-level tree, and `PageMap3` is
  a three-level tree whose nodes are created by `ensure`.
- `spanalloc.pagecache.PageCache` hands out spans of 8 KiB pages through
  `new_span(k)`. It finds the span for an address with `map_object_to_span`.
  `release_span_to_page_cache` merges a returned span with free neighbours,
  up to 128 pages.
- `spanalloc.centralcache.CentralCache` keeps one span list per size class. It
  cuts spans into objects and hands out batches through `fetch_range_obj`.
  `release_list_to_spans` takes objects back and returns spans that are no
  longer used to the page cache.
- `spanalloc.threadcache.ThreadCache` is one thread's free lists. A bucket is
  refilled with a batch that starts at one object and grows by one each time
  the limit is reached. When a bucket grows too long, a batch goes back to the
  central cache.
- `spanalloc.allocator.ConcurrentAllocator` ties the tiers together. Each
  thread gets its own `ThreadCache`.

## Installation

```
pip install .
```

## Usage

```python
from spanalloc.allocator import concurrent_alloc, concurrent_free

ptr = concurrent_alloc(16)          # served by this thread's cache
big = concurrent_alloc(300 * 1024)  # served as whole pages by the page cache
concurrent_free(ptr)
concurrent_free(big)
```

`concurrent_alloc` and `concurrent_free` share one allocator for the whole
process. If you want one that keeps its state to itself, for example in tests,
create a `ConcurrentAllocator()` and call its `alloc` and `free` methods.

Requests of up to 255 bytes go through the thread cache. Larger requests go
straight to the page cache as a span of `round_up(size) >> 13` pages. A size
that rounds up to less than one page (256 bytes up to just under 8 KiB) would
need zero pages, so it is rejected with `ValueError`.

`free` raises `ValueError` for an address that belongs to no span. It raises
`RuntimeError` when a small block is freed on a thread that has never
allocated.

Size-class examples:

```python
from spanalloc import sizeclass

sizeclass.round_up(129)       # 144
sizeclass.index(129)          # 16
sizeclass.num_move_size(16)   # 512 objects at most per batch
```

## Benchmark

This command runs worker threads that allocate and free 16-byte blocks. It
first uses `concurrent_alloc`/`concurrent_free`, then plain `bytearray`
allocation as a baseline, and prints the times each took:

```
spanalloc-benchmark [-n NTIMES] [-w WORKERS] [-r ROUNDS]
```

The defaults are 1000 allocations per thread per round, 4 threads and 10
rounds. You can also call `spanalloc.benchmark.benchmark_concurrent_malloc`
and `benchmark_malloc` yourself. Each prints its report and returns a
`BenchmarkResult` with the times in milliseconds.

## What it does not do

`spanalloc` does not manage real memory. The addresses it returns cannot be
read or written. It cannot stand in for the interpreter's allocator or for a
system `malloc`. It is meant for studying and testing allocation policy.
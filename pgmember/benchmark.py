#!/usr/bin/env python3
"""
Write-throughput prober for the member's data volume.

For every block size: remove the old scratch file, sync, write SIZE_MB of zeros
one block at a time and fsync it, sync again, then print how long it took as
`hostname<TAB>block_size<TAB>seconds`.
"""

import argparse
import os
import socket
import sys
import time
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

import psutil

SIZE_MB = 5000
BLOCK_SIZES = [256, 512, 1024, 2048, 4096, 8192]
BENCHMARK_FILE = "/data/benchmark_file"


class BenchmarkError(Exception):
    """Raised when the probe can't run or a write comes up short."""


def block_count(size_mb: int, block_size: int) -> int:
    """Number of blocks needed to cover size_mb, rounding the last block up."""
    return -(-size_mb * 1024 * 1024 // block_size)


def check_free_space(path: str, size_mb: int) -> None:
    """Fail before timing anything if the payload can't fit on the volume."""
    target = Path(path).resolve().parent
    usage = psutil.disk_usage(str(target))
    needed = size_mb * 1024 * 1024
    # The scratch file gets removed first, so its current size is reclaimable
    try:
        reclaimable = os.stat(path).st_size
    except FileNotFoundError:
        reclaimable = 0
    if usage.free + reclaimable < needed:
        raise BenchmarkError(
            f"Not enough space on {target}: need {needed} bytes, "
            f"{usage.free + reclaimable} available"
        )


def remove_scratch_file(path: str) -> None:
    """Best-effort delete, like rm -f. If it really failed, the write will too."""
    try:
        os.remove(path)
    except OSError:
        pass


def write_blocks(path: str, block_size: int, count: int) -> None:
    """Sequentially write count zero blocks and fsync before returning."""
    block = bytes(block_size)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    try:
        for _ in range(count):
            written = os.write(fd, block)
            if written != block_size:
                raise BenchmarkError(
                    f"Short write to {path}: {written} of {block_size} bytes"
                )
        os.fsync(fd)
    finally:
        os.close(fd)


def benchmark_write(path: str, size_mb: int, block_size: int) -> float:
    """Time one durable sequential write of size_mb using block_size writes."""
    count = block_count(size_mb, block_size)

    remove_scratch_file(path)
    os.sync()

    start = time.perf_counter()
    write_blocks(path, block_size, count)
    os.sync()

    return time.perf_counter() - start


def run(
    path: str,
    size_mb: int,
    block_sizes: List[int],
    out: TextIO = sys.stdout,
) -> List[Tuple[str, int, float]]:
    """Probe every block size in order, printing one line per probe."""
    hostname = socket.gethostname()
    rows = []
    for block_size in block_sizes:
        elapsed = benchmark_write(path, size_mb, block_size)
        print("\t".join([hostname, str(block_size), str(elapsed)]), file=out, flush=True)
        rows.append((hostname, block_size, elapsed))
    return rows


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sequential write throughput prober")
    parser.add_argument("--path", default=BENCHMARK_FILE,
                        help=f"Scratch file to write (default: {BENCHMARK_FILE})")
    parser.add_argument("--size-mb", type=int, default=SIZE_MB,
                        help=f"Total MiB written per block size (default: {SIZE_MB})")
    parser.add_argument("--block-sizes", nargs="+", type=int, default=BLOCK_SIZES,
                        help="Block sizes in bytes, probed in order (default: 256 ... 8192)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main prober function."""
    args = parse_args(argv)

    print(f"💾 Probing {args.path} with {args.size_mb} MiB per block size", file=sys.stderr)
    print(f"📏 Block sizes: {args.block_sizes}", file=sys.stderr)

    check_free_space(args.path, args.size_mb)
    run(args.path, args.size_mb, args.block_sizes)

    print("✅ Probe complete", file=sys.stderr)


if __name__ == "__main__":
    main()

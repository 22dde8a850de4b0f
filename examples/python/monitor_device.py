#!/usr/bin/env python3
"""Continuously monitor a hardware RNG device.

Reads the device in chunks and prints the running estimate after each one.
Counters are rescaled as they fill, so this can run indefinitely.

Usage:
    python examples/python/monitor_device.py /dev/hwrng 16

    # Any producer works through stdin
    some-trng-tool | python examples/python/monitor_device.py - 16
"""

import logging
import sys

from inm_health import HealthCheck, open_source

THRESHOLD = 0.5  # alarm below this many bits of entropy per bit
CHUNK_SIZE = 4096  # bytes between estimate updates

path = sys.argv[1] if len(sys.argv) > 1 else "/dev/hwrng"
n = int(sys.argv[2]) if len(sys.argv) > 2 else 16

logging.basicConfig(level=logging.INFO, format="%(message)s")

with HealthCheck(n, debug=True) as hc, open_source(path, chunk_size=CHUNK_SIZE) as source:
    try:
        for h in hc.iter_feed(source):
            flag = "  ALARM: entropy collapse" if hc.bits_sampled > 10_000 and h < THRESHOLD else ""
            print(f"\r{hc.total_bits:>14,} bits  H={h:.4f}  K={hc.branching_factor():.4f}{flag}", end="")
    except KeyboardInterrupt:
        pass
    print()
    print(hc.finalize().summary_line())

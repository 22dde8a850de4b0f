#!/usr/bin/env python3
"""Estimate entropy per bit of a file for several context lengths.

Each order gets its own HealthCheck; instances share no state.

Usage:
    pip install -e .
    python examples/python/basic.py trng.bin
"""

import os
import sys

from inm_health import BytesSource, FileByteSource, analyze

path = sys.argv[1] if len(sys.argv) > 1 else None
sample = None if path else os.urandom(1 << 16)

for n in (1, 4, 8, 12, 16):
    source = FileByteSource(path) if path else BytesSource(sample)
    report = analyze(n, source)
    print(
        f"N={n:<3} H={report.entropy_per_bit:.4f} bits/bit  "
        f"K={report.branching_factor:.4f}  ones={report.ones_percent:.2f}%"
    )

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# 関数ごとの実行時間（x = j*0.001 を iterations 回）を測って速い順に表示

import argparse, sys, time
from typing import List, Tuple

import numpy as np

import function_catalog

BENCH_FNS = ["exp", "ln", "sqrt", "sin", "cos", "tan"]
BAR_WIDTH = 40


def run_benchmarks(iterations: int, keys=None) -> List[Tuple[str, float]]:
    if iterations < 1:
        raise ValueError(f"iterations must be >= 1 (got {iterations})")
    keys = BENCH_FNS if keys is None else keys
    out = []
    for key in keys:
        fn = function_catalog.get(key).fn
        acc = 0.0
        t0 = time.perf_counter()
        with np.errstate(all="ignore"):  # ln(0) = -inf
            for j in range(iterations):
                acc += fn(j * 0.001)
        out.append((function_catalog.get(key).name, time.perf_counter() - t0))
    out.sort(key=lambda r: r[1])
    return out


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Time catalog functions on scalar inputs.")
    ap.add_argument("--iterations", type=int, default=100_000, help="関数ごとの呼び出し回数")
    args = ap.parse_args(argv)

    if args.iterations < 1:
        raise SystemExit("--iterations must be >= 1")
    print(f"[info] iterations={args.iterations:,} per function")
    results = run_benchmarks(args.iterations)
    slowest = max(t for _, t in results)
    for name, t in results:
        bar = "#" * max(1, int(round(BAR_WIDTH * t / slowest))) if slowest > 0 else "#"
        print(f"  {name:<10} {t * 1e3:9.2f} ms  {bar}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

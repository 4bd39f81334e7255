#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
参照実装 vs ネイティブの ULP 差を x ごとに散布図にして PNG 保存。
- 一致点（ULP=0）は緑の小さい点、差のある点はオレンジの丸
- 縦軸は [0, max(1.2*maxULP, 1)]

使い方例:
  python plot_ulp_scatter.py --fn sin --out-dir plots_ulp
  python plot_ulp_scatter.py --fn exp --points 20000
"""

from __future__ import annotations
import argparse, os, sys
from typing import Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt

from ulp_compare import ComparisonResult, SweepAccumulator, UnaryFn, format_report
from ref_functions import REFERENCE_FNS, case_inputs

ZERO_COLOR = "#3fb950"
DIFF_COLOR = "#d29922"


def profile_sweep(candidate: UnaryFn, reference: UnaryFn,
                  xs: Sequence[float]) -> Tuple[ComparisonResult, np.ndarray, np.ndarray]:
    """
    1 回の評価で集計結果と各 x の ULP 差を同時に作る。
    ULP 差は SweepAccumulator が集計に使った値（一致・NaN 同士・非有限の差は 0）。
    """
    xs = np.asarray(xs, dtype=np.float64)
    if xs.size == 0:
        raise ValueError("empty input sequence")
    acc = SweepAccumulator()
    ulps = np.zeros(xs.size, dtype=np.float64)
    with np.errstate(all="ignore"):
        for i, x in enumerate(xs):
            x = float(x)
            ulps[i] = acc.consider(x, float(candidate(x)), float(reference(x)))
    return acc.result(), xs, ulps


def ulp_profile(candidate: UnaryFn, reference: UnaryFn,
                xs: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    _, xs, ulps = profile_sweep(candidate, reference, xs)
    return xs, ulps


def plot_ulp_scatter(xs: np.ndarray, ulps: np.ndarray, title: str, out_png: str) -> str:
    max_ulp = float(ulps.max(initial=0.0))
    ymax = max(max_ulp * 1.2, 1.0)
    zero = ulps == 0.0

    plt.figure(figsize=(9, 5))
    plt.scatter(xs[zero], ulps[zero], s=2, marker="s", color=ZERO_COLOR, alpha=0.3,
                linewidths=0, label="exact match")
    plt.scatter(xs[~zero], ulps[~zero], s=9, marker="o", color=DIFF_COLOR,
                linewidths=0, label="ULP difference")
    plt.xlim(float(xs[0]), float(xs[-1]))
    plt.ylim(0.0, ymax)
    plt.xlabel("x")
    plt.ylabel("ULP difference")
    plt.title(title)
    plt.grid(True, linestyle="--", alpha=0.35)
    plt.legend(loc="upper left")
    plt.tight_layout()
    plt.savefig(out_png, dpi=150)
    plt.close()
    print(f"[saved] {out_png}")
    return out_png


def run_one(key: str, out_dir: str, points: int | None = None) -> str:
    case = REFERENCE_FNS[key]
    res, xs, ulps = profile_sweep(case.ref, case.native, case_inputs(key, points))
    for line in format_report(f"reference {key} vs native", res, case.ref, case.native):
        print(line)
    return plot_ulp_scatter(xs, ulps, f"ULP difference: reference {key} vs native",
                            os.path.join(out_dir, f"ulp_scatter_{key}.png"))


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Scatter plot of per-point ULP difference (reference vs native).",
                                 formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    ap.add_argument("--fn", nargs="+", choices=sorted(REFERENCE_FNS), default=sorted(REFERENCE_FNS),
                    help="描画する関数")
    ap.add_argument("--out-dir", default="plots_ulp", help="PNG出力先")
    ap.add_argument("--points", type=int, default=None, help="サンプル数（既定は関数ごとの値）")
    args = ap.parse_args(argv)

    if args.points is not None and args.points < 1:
        raise SystemExit("--points must be >= 1")
    os.makedirs(args.out_dir, exist_ok=True)
    try:
        for key in args.fn:
            run_one(key, args.out_dir, args.points)
    except (ValueError, ArithmeticError) as e:
        print(f"[error] {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

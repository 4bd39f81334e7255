#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
カタログの関数 y(x) を既定範囲でプロットして PNG 保存。
NaN / ±∞ は描画から外し、y=0 を基準線として引く。

使い方例:
  python plot_functions.py --out-dir plots_fn
  python plot_functions.py --fn exp ln sqrt sigmoid gaussian --points 2001
"""

from __future__ import annotations
import argparse, os, sys

import numpy as np
import matplotlib.pyplot as plt

from ulp_compare import linspace
import function_catalog

DEFAULT_FNS = ["exp", "ln", "sqrt", "sigmoid", "gaussian"]
LINE_COLOR = "#58a6ff"


def sample_function(key: str, points: int):
    """(xs, ys, finite_mask) を返す"""
    info = function_catalog.get(key)
    xs = linspace(info.default_range[0], info.default_range[1], points)
    with np.errstate(all="ignore"):
        ys = np.array([float(info.fn(float(x))) for x in xs], dtype=np.float64)
    return xs, ys, np.isfinite(ys)


def plot_function(key: str, out_png: str, points: int = 1001) -> str:
    info = function_catalog.get(key)
    xs, ys, ok = sample_function(key, points)
    if not np.any(ok):
        print(f"[warn] {info.name}: no finite values on [{xs[0]}, {xs[-1]}]", file=sys.stderr)
    y_plot = ys.copy()
    y_plot[~ok] = np.nan  # 非有限は線を切る

    plt.figure(figsize=(9, 5))
    plt.plot(xs, y_plot, linewidth=1.4, color=LINE_COLOR, label=info.name)
    if np.any(ok):
        ymin, ymax = float(ys[ok].min()), float(ys[ok].max())
        if ymin <= 0.0 <= ymax:
            plt.axhline(0.0, color="#888888", linestyle="--", linewidth=1.0, alpha=0.8)
    plt.xlim(info.default_range)
    plt.title(f"{info.name}   domain {info.domain}, range {info.range}")
    plt.xlabel("x")
    plt.ylabel("y")
    plt.grid(True, linestyle="--", alpha=0.35)
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_png, dpi=150)
    plt.close()
    print(f"[saved] {out_png}")
    return out_png


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    ap.add_argument("--fn", nargs="+", choices=list(function_catalog.FUNCTIONS), default=DEFAULT_FNS,
                    help="描画する関数")
    ap.add_argument("--out-dir", default="plots_fn", help="PNG出力先")
    ap.add_argument("--points", type=int, default=1001, help="サンプル数")
    args = ap.parse_args(argv)

    if args.points < 2:
        raise SystemExit("--points must be >= 2")
    os.makedirs(args.out_dir, exist_ok=True)
    for key in args.fn:
        plot_function(key, os.path.join(args.out_dir, f"fn_{key}.png"), args.points)
    return 0


if __name__ == "__main__":
    sys.exit(main())

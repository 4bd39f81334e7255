#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Numerical Accuracy Explorer: 全パートをまとめて実行する入口。

  all       : compare → edges → accuracy(全関数) → plot （既定）
  compare   : numpy vs math の ULP 比較
  edges     : 特殊値の表と期待値チェック
  accuracy  : 参照実装 vs math の ULP 比較 + 散布図
  plot      : カタログ関数のプロット
  bench     : 実行時間の比較

終了コード: 正常終了 0、比較中に関数が例外を投げたら 1。

使い方例:
  python explorer.py
  python explorer.py accuracy --fn sin cos --out-dir plots
"""

from __future__ import annotations
import argparse, os, sys

import ulp_compare
import edge_cases
import plot_ulp_scatter
import plot_functions
import bench_native
import function_catalog
from ref_functions import REFERENCE_FNS


def _part(title: str) -> None:
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def cmd_compare(args) -> None:
    _part("PART 1: accuracy comparison (numpy vs math)")
    ulp_compare.run_default(args.points, block=args.block)


def cmd_edges(args) -> None:
    _part("PART 2: edge case handling")
    edge_cases.main([])


def cmd_accuracy(args) -> None:
    _part("PART 3: reference implementations vs native (ULP scatter)")
    os.makedirs(args.out_dir, exist_ok=True)
    for key in args.fn:
        plot_ulp_scatter.run_one(key, args.out_dir, args.ref_points)
        print()


def cmd_plot(args) -> None:
    _part("PART 4: function plots")
    os.makedirs(args.out_dir, exist_ok=True)
    for key in args.plot_fn:
        plot_functions.plot_function(key, os.path.join(args.out_dir, f"fn_{key}.png"), args.plot_points)


def cmd_bench(args) -> None:
    _part("Benchmark")
    bench_native.main(["--iterations", str(args.iterations)])


def cmd_all(args) -> None:
    cmd_compare(args)
    cmd_edges(args)
    cmd_accuracy(args)
    cmd_plot(args)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="accuracy-explorer",
                                 description="Numerical accuracy explorer: numpy vs math (libm) in ULP.",
                                 formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    ap.add_argument("--out-dir", default="plots", help="PNG出力先")
    ap.add_argument("--points", type=int, default=ulp_compare.DEFAULT_POINTS, help="compare の各レンジのサンプル数")
    ap.add_argument("--block", type=int, default=None, help="部分集計のブロック要素数")
    ap.add_argument("--ref-points", type=int, default=None, help="accuracy のサンプル数（既定は関数ごとの値）")
    ap.add_argument("--fn", nargs="+", choices=sorted(REFERENCE_FNS), default=sorted(REFERENCE_FNS),
                    help="accuracy の対象関数")
    ap.add_argument("--plot-fn", nargs="+", choices=list(function_catalog.FUNCTIONS),
                    default=plot_functions.DEFAULT_FNS, help="plot の対象関数")
    ap.add_argument("--plot-points", type=int, default=1001, help="plot のサンプル数")
    ap.add_argument("--iterations", type=int, default=100_000, help="bench の呼び出し回数")
    ap.add_argument("command", nargs="?", default="all", choices=sorted(COMMANDS), help="実行するパート")
    return ap


COMMANDS = {
    "all": cmd_all,
    "compare": cmd_compare,
    "edges": cmd_edges,
    "accuracy": cmd_accuracy,
    "plot": cmd_plot,
    "bench": cmd_bench,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.points < 1:
        raise SystemExit("--points must be >= 1")
    if args.block is not None and args.block < 1:
        raise SystemExit("--block must be >= 1")
    if args.ref_points is not None and args.ref_points < 1:
        raise SystemExit("--ref-points must be >= 1")
    if args.plot_points < 2:
        raise SystemExit("--plot-points must be >= 2")
    if args.iterations < 1:
        raise SystemExit("--iterations must be >= 1")

    try:
        COMMANDS[args.command](args)
    except (ValueError, ArithmeticError) as e:
        print(f"[error] {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print()
    print("[done]")
    return 0


if __name__ == "__main__":
    sys.exit(main())

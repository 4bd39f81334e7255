#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
numpy 版の初等関数（被検体）と math モジュール（ネイティブ libm）を
同じ入力列で評価し、ULP 単位で差を集計する。

- ULP 距離: 参照側 a でスケールした相対誤差 / eps（a==0 のときは |b|/(eps/2)）
- 両方 NaN / 同符号の ∞ は「非有限の一致」として比較対象から外す
- 最大 ULP は最初に現れた x を記録（ブロック分割しても同じ結果）

使い方例:
  python ulp_compare.py
  python ulp_compare.py --points 20000 --block 4096
"""

from __future__ import annotations
import argparse, math, sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

FLOAT64_EPS = float(np.finfo(np.float64).eps)  # 2^-52
DEFAULT_POINTS = 5000
TINY_POINTS = 1000

UnaryFn = Callable[[float], float]


# ----- ULP 距離 -----
def ulp_diff(a: float, b: float) -> float:
    """
    a を基準にした ULP 差。対称ではない（|a| でスケールする）。
    NaN 同士は IEEE 比較で一致しないので NaN を返す。
    """
    if a == b:
        return 0.0
    if math.isnan(a) or math.isnan(b):
        return math.nan
    if math.isinf(a) or math.isinf(b):
        return math.inf
    if a == 0.0:
        return abs(b) / (FLOAT64_EPS / 2.0)
    return abs(a - b) / (abs(a) * FLOAT64_EPS)


def is_nonfinite_agreement(cv: float, rv: float) -> bool:
    # 両方 NaN、または同符号の ∞
    if math.isnan(cv) and math.isnan(rv):
        return True
    return math.isinf(cv) and math.isinf(rv) and cv == rv


# ----- 入力点の生成 -----
def linspace(start: float, stop: float, n: int) -> np.ndarray:
    if n < 1:
        raise ValueError(f"n must be >= 1 (got {n})")
    if n == 1:
        return np.array([start], dtype=np.float64)
    return np.linspace(start, stop, n, dtype=np.float64)


def logspace(lo_exp: float, hi_exp: float, n: int) -> np.ndarray:
    """10**lo_exp .. 10**hi_exp を指数について等間隔に n 点"""
    if n < 1:
        raise ValueError(f"n must be >= 1 (got {n})")
    return np.logspace(lo_exp, hi_exp, n, dtype=np.float64)


# ----- 集計結果 -----
@dataclass(frozen=True)
class ComparisonResult:
    """
    One sweep of a candidate/reference pair over one input range.

    Fields:
      points_tested        -- number of inputs evaluated
      exact_agreements     -- comparable samples where cv == rv
      total_comparable     -- samples eligible for divergence scoring
      max_ulp_diff         -- largest finite ULP divergence (0.0 if none)
      avg_ulp_diff         -- mean over divergent samples, None on perfect agreement
      worst_case_input     -- x at max_ulp_diff, None if no finite divergence
      nonfinite_agreements -- both NaN or both the same infinity
      unscored             -- divergent samples whose distance was NaN/inf
    """
    points_tested:        int
    exact_agreements:     int
    total_comparable:     int
    max_ulp_diff:         float
    avg_ulp_diff:         Optional[float]
    worst_case_input:     Optional[float]
    nonfinite_agreements: int = 0
    unscored:             int = 0

    @property
    def divergent(self) -> int:
        return self.total_comparable - self.exact_agreements

    @property
    def is_perfect(self) -> bool:
        return self.divergent == 0

    @property
    def agreement_pct(self) -> float:
        # 比較対象が 0 件（全点が非有限で一致）は 100% 扱い
        if self.total_comparable == 0:
            return 100.0
        return 100.0 * self.exact_agreements / self.total_comparable


class SweepAccumulator:
    """Running aggregate of a sweep; partial accumulators merge in input order."""

    def __init__(self) -> None:
        self.points = 0
        self.agree = 0
        self.comparable = 0
        self.nonfinite = 0
        self.unscored = 0
        self.ulp_sum = 0.0
        self.max_ulp = 0.0
        self.worst_x: Optional[float] = None

    def consider(self, x: float, cv: float, rv: float) -> float:
        """1 点を集計し、集計に使った ULP 差を返す（一致・非有限は 0.0）。"""
        self.points += 1
        if is_nonfinite_agreement(cv, rv):
            self.nonfinite += 1
            return 0.0
        self.comparable += 1
        if cv == rv:
            self.agree += 1
            return 0.0
        d = ulp_diff(cv, rv)
        if math.isnan(d) or math.isinf(d):
            self.unscored += 1
            return 0.0
        self.ulp_sum += d
        if d > self.max_ulp:
            self.max_ulp = d
            self.worst_x = float(x)
        return d

    def merge(self, later: "SweepAccumulator") -> "SweepAccumulator":
        """later は自分より後ろの入力を処理したもの。同値の最大は先勝ち。"""
        self.points += later.points
        self.agree += later.agree
        self.comparable += later.comparable
        self.nonfinite += later.nonfinite
        self.unscored += later.unscored
        self.ulp_sum += later.ulp_sum
        if later.max_ulp > self.max_ulp:
            self.max_ulp = later.max_ulp
            self.worst_x = later.worst_x
        return self

    def result(self) -> ComparisonResult:
        divergent = self.comparable - self.agree
        avg = (self.ulp_sum / divergent) if divergent > 0 else None
        return ComparisonResult(
            points_tested=self.points,
            exact_agreements=self.agree,
            total_comparable=self.comparable,
            max_ulp_diff=self.max_ulp,
            avg_ulp_diff=avg,
            worst_case_input=self.worst_x,
            nonfinite_agreements=self.nonfinite,
            unscored=self.unscored,
        )


def _sweep_block(candidate: UnaryFn, reference: UnaryFn, xs: Sequence[float]) -> SweepAccumulator:
    acc = SweepAccumulator()
    with np.errstate(all="ignore"):
        for x in xs:
            x = float(x)
            acc.consider(x, float(candidate(x)), float(reference(x)))
    return acc


def compare_sweep(candidate: UnaryFn, reference: UnaryFn, xs: Sequence[float],
                  block: Optional[int] = None) -> ComparisonResult:
    """
    candidate(x) と reference(x) を全点で比較して ComparisonResult を返す。
    block を指定するとブロックごとに部分集計してから入力順にマージする。
    関数が例外を投げた場合はそのまま伝播する（部分結果は返さない）。
    """
    if len(xs) == 0:
        raise ValueError("empty input sequence")
    if block is None:
        return _sweep_block(candidate, reference, xs).result()
    if block < 1:
        raise ValueError(f"block must be >= 1 (got {block})")

    total = SweepAccumulator()
    for off in range(0, len(xs), block):
        total.merge(_sweep_block(candidate, reference, xs[off:off + block]))
    return total.result()


def compare_many(jobs: Iterable[Tuple[UnaryFn, UnaryFn, Sequence[float]]],
                 max_workers: Optional[int] = None) -> List[ComparisonResult]:
    """独立したスイープを並行実行。結果は jobs と同じ順序。"""
    jobs = list(jobs)
    with ThreadPoolExecutor(max_workers=max_workers) as ex:
        futures = [ex.submit(compare_sweep, c, r, xs) for c, r, xs in jobs]
        return [f.result() for f in futures]


# ----- テキストレポート -----
def format_report(title: str, res: ComparisonResult,
                  candidate: UnaryFn, reference: UnaryFn) -> List[str]:
    lines = [f"[{title}]"]
    lines.append(f"  points tested       : {res.points_tested:,}")
    lines.append(f"  exact agreement     : {res.exact_agreements:,}/{res.total_comparable:,}"
                 f" ({res.agreement_pct:.1f}%)")
    if res.nonfinite_agreements:
        lines.append(f"  non-finite (agreed) : {res.nonfinite_agreements:,}")
    if res.is_perfect:
        lines.append("  perfect agreement across all test points")
        return lines
    lines.append(f"  max ULP difference  : {res.max_ulp_diff:.2f}")
    lines.append(f"  avg ULP difference  : {res.avg_ulp_diff:.4f}")
    if res.unscored:
        lines.append(f"  unscored (NaN/inf)  : {res.unscored:,}")
    if res.worst_case_input is not None:
        x = res.worst_case_input
        with np.errstate(all="ignore"):
            cv, rv = float(candidate(x)), float(reference(x))
        lines.append(f"  worst case at x     : {x!r}")
        lines.append(f"    candidate(x)      : {cv!r}")
        lines.append(f"    reference(x)      : {rv!r}")
    return lines


# ----- 既定のスイープ（numpy vs math） -----
def default_sweeps(points: int = DEFAULT_POINTS, tiny_points: int = TINY_POINTS):
    """(title, candidate, reference, xs) のリスト"""
    return [
        ("exp(x) on [-10, 10]", np.exp, math.exp, linspace(-10.0, 10.0, points)),
        ("exp(x) on [-700, 700] (near overflow/underflow)", np.exp, math.exp,
         linspace(-700.0, 700.0, points)),
        ("ln(x) on tiny positives [1e-300, 0.1]", np.log, math.log,
         logspace(-300.0, -1.0, tiny_points)),
        ("ln(x) on [0.001, 10]", np.log, math.log, linspace(0.001, 10.0, points)),
        ("sqrt(x) on [0, 1000]", np.sqrt, math.sqrt, linspace(0.0, 1000.0, points)),
        ("sin(x) on [-10, 10]", np.sin, math.sin, linspace(-10.0, 10.0, points)),
        ("cos(x) on [-10, 10]", np.cos, math.cos, linspace(-10.0, 10.0, points)),
    ]


def run_default(points: int = DEFAULT_POINTS, block: Optional[int] = None) -> List[Tuple[str, ComparisonResult]]:
    out = []
    for title, cand, ref, xs in default_sweeps(points):
        res = compare_sweep(cand, ref, xs, block=block)
        for line in format_report(title, res, cand, ref):
            print(line)
        print()
        out.append((title, res))
    return out


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Compare numpy elementary functions against math (libm) in ULP.",
                                 formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    ap.add_argument("--points", type=int, default=DEFAULT_POINTS, help="各レンジのサンプル数")
    ap.add_argument("--block", type=int, default=None, help="部分集計のブロック要素数（省略時は一括）")
    args = ap.parse_args(argv)

    if args.points < 1:
        raise SystemExit("--points must be >= 1")
    if args.block is not None and args.block < 1:
        raise SystemExit("--block must be >= 1")

    print(f"[info] candidate=numpy  reference=math  points={args.points:,}")
    try:
        run_default(args.points, block=args.block)
    except (ValueError, ArithmeticError) as e:
        print(f"[error] {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

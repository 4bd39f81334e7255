#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
教科書的な参照実装（Taylor 展開 + 引数縮約、ln の級数、sqrt の Newton 法）と
ネイティブ math 関数を ULP で比べるための表。

使い方例:
  python ref_functions.py --fn sin
  python ref_functions.py --fn exp --points 20000
"""

from __future__ import annotations
import argparse, math, sys
from typing import Dict, NamedTuple, Tuple

import numpy as np

from ulp_compare import UnaryFn, compare_sweep, format_report, linspace

LOG2E = 1.4426950408889634
LN2 = 0.6931471805599453
TWO_PI = 2.0 * math.pi

# 1/k! (k=0..11)
_EXP_COEFFS = (
    1.0, 1.0, 0.5, 0.16666666666666666, 0.041666666666666664,
    0.008333333333333333, 0.001388888888888889, 1.984126984126984e-4,
    2.48015873015873e-5, 2.7557319223985893e-6, 2.7557319223985894e-7,
    2.505210838544172e-8,
)


def _horner(coeffs, r: float) -> float:
    acc = 0.0
    for c in reversed(coeffs):
        acc = acc * r + c
    return acc


def ref_exp(x: float) -> float:
    if math.isnan(x):
        return math.nan
    if x == 0.0:
        return 1.0
    if math.isinf(x):
        return math.inf if x > 0 else 0.0
    # x = k*ln2 + r,  |r| <= ln2/2
    k = round(x * LOG2E)
    r = x - k * LN2
    with np.errstate(over="ignore", under="ignore"):
        return float(np.ldexp(_horner(_EXP_COEFFS, r), k))


def ref_ln(x: float) -> float:
    if math.isnan(x):
        return math.nan
    if x <= 0.0:
        return -math.inf if x == 0.0 else math.nan
    if math.isinf(x):
        return math.inf
    # x = m * 2^e,  m in [0.5, 1)
    m, e = math.frexp(x)
    t = (m - 1.0) / (m + 1.0)
    t2 = t * t
    s = t
    term = t
    for k in range(3, 22, 2):
        term *= t2
        s += term / k
    return 2.0 * s + e * LN2


def ref_sqrt(x: float) -> float:
    if math.isnan(x):
        return math.nan
    if x < 0.0:
        return math.nan
    if x == 0.0 or math.isinf(x):
        return x
    g = math.sqrt(x)  # 初期値はネイティブ
    g = 0.5 * (g + x / g)
    g = 0.5 * (g + x / g)
    return g


def _reduce_pm_pi(x: float) -> float:
    # fmod は被除数の符号を保つ（% とは違う）
    r = math.fmod(x, TWO_PI)
    if r > math.pi:
        r -= TWO_PI
    if r < -math.pi:
        r += TWO_PI
    return r


def ref_sin(x: float) -> float:
    if math.isnan(x) or math.isinf(x):
        return math.nan
    r = _reduce_pm_pi(x)
    r2 = r * r
    return r * (1.0 + r2 * (-1.0 / 6 + r2 * (1.0 / 120 + r2 * (
        -1.0 / 5040 + r2 * (1.0 / 362880 + r2 * (
            -1.0 / 39916800 + r2 / 6227020800))))))


def ref_cos(x: float) -> float:
    if math.isnan(x) or math.isinf(x):
        return math.nan
    r = _reduce_pm_pi(x)
    r2 = r * r
    return 1.0 + r2 * (-0.5 + r2 * (1.0 / 24 + r2 * (
        -1.0 / 720 + r2 * (1.0 / 40320 + r2 * (
            -1.0 / 3628800 + r2 / 479001600)))))


class AccuracyCase(NamedTuple):
    ref: UnaryFn
    native: UnaryFn
    xrange: Tuple[float, float]
    n: int


REFERENCE_FNS: Dict[str, AccuracyCase] = {
    "exp":  AccuracyCase(ref_exp,  math.exp,  (-20.0, 20.0),  10000),
    "ln":   AccuracyCase(ref_ln,   math.log,  (0.001, 100.0), 10000),
    "sqrt": AccuracyCase(ref_sqrt, math.sqrt, (0.0, 1000.0),  10000),
    "sin":  AccuracyCase(ref_sin,  math.sin,  (-20.0, 20.0),  10000),
    "cos":  AccuracyCase(ref_cos,  math.cos,  (-20.0, 20.0),  10000),
}


def case_inputs(key: str, points: int | None = None) -> np.ndarray:
    case = REFERENCE_FNS[key]
    n = case.n if points is None else points
    return linspace(case.xrange[0], case.xrange[1], n)


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Textbook reference implementations vs math (libm) in ULP.",
                                 formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    ap.add_argument("--fn", choices=sorted(REFERENCE_FNS), default="sin", help="比較する関数")
    ap.add_argument("--points", type=int, default=None, help="サンプル数（既定は関数ごとの値）")
    args = ap.parse_args(argv)

    if args.points is not None and args.points < 1:
        raise SystemExit("--points must be >= 1")
    case = REFERENCE_FNS[args.fn]
    xs = case_inputs(args.fn, args.points)
    print(f"[info] fn={args.fn}  range=[{case.xrange[0]}, {case.xrange[1]}]  points={xs.size:,}")
    try:
        res = compare_sweep(case.ref, case.native, xs)
    except (ValueError, ArithmeticError) as e:
        print(f"[error] {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    for line in format_report(f"reference {args.fn} vs native", res, case.ref, case.native):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())

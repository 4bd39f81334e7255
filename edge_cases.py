#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
IEEE 754 の特殊値・境界値（NaN, ±∞, ±0, サブノーマル, overflow/underflow）に対する
numpy 初等関数の振る舞いを表にする。

- classify(x, fn): 結果が NaN / ±∞ / ±0 なら special
- EXPECTATIONS: exp / ln / sqrt の期待値チェック（PASS/FAIL を表示）

使い方:
  python edge_cases.py
  python edge_cases.py --table-only
"""

from __future__ import annotations
import argparse, math, sys
from typing import Callable, List, NamedTuple, Sequence, Tuple

import numpy as np

from ulp_compare import FLOAT64_EPS, UnaryFn

_FI = np.finfo(np.float64)
SMALLEST_NORMAL = float(_FI.tiny)      # 2.2250738585072014e-308
SMALLEST_SUBNORMAL = 5e-324            # 2^-1074
FLOAT64_MAX = float(_FI.max)           # 1.7976931348623157e+308
EXP_OVERFLOW = 709.782712893384        # ln(FLOAT64_MAX)
EXP_UNDERFLOW = -745.1332191019411     # これより下で exp(x) は 0 に丸まる

# (ラベル, 入力)
EDGE_INPUTS: Tuple[Tuple[str, float], ...] = (
    ("0", 0.0),
    ("-0", -0.0),
    ("1", 1.0),
    ("-1", -1.0),
    ("NaN", math.nan),
    ("+∞", math.inf),
    ("-∞", -math.inf),
    ("1e-300", 1e-300),
    ("1e+300", 1e+300),
    ("5e-324 (smallest)", SMALLEST_SUBNORMAL),
    ("smallest normal", SMALLEST_NORMAL),
    ("largest finite", FLOAT64_MAX),
    ("709.78 (exp max)", 709.78),
    ("710 (exp overflow)", 710.0),
    ("-745 (exp underflow)", -745.0),
    ("-746 (exp → 0)", -746.0),
    ("π", math.pi),
    ("π/2", math.pi / 2.0),
)

DEFAULT_TABLE_FNS: Tuple[Tuple[str, UnaryFn], ...] = (
    ("exp", np.exp),
    ("ln", np.log),
    ("sqrt", np.sqrt),
    ("sin", np.sin),
)


class EdgeResult(NamedTuple):
    result: float
    is_special: bool


def is_special(y: float) -> bool:
    return math.isnan(y) or math.isinf(y) or y == 0.0


def classify(x: float, fn: UnaryFn) -> EdgeResult:
    with np.errstate(all="ignore"):
        y = float(fn(x))
    return EdgeResult(y, is_special(y))


def format_number(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "+∞" if x > 0 else "-∞"
    if x == 0.0:
        return "-0" if math.copysign(1.0, x) < 0 else "0"
    if abs(x) > 1e6 or abs(x) < 1e-4:
        return f"{x:.4e}"
    return f"{x:.6g}"


def edge_table(fns: Sequence[Tuple[str, UnaryFn]] = DEFAULT_TABLE_FNS,
               inputs: Sequence[Tuple[str, float]] = EDGE_INPUTS):
    """行ごとに (label, [EdgeResult...], special) を返す"""
    rows = []
    for label, x in inputs:
        cells = [classify(x, fn) for _, fn in fns]
        rows.append((label, cells, any(c.is_special for c in cells)))
    return rows


# ----- 期待値チェック -----
def _is_pos_zero(y: float) -> bool:
    return y == 0.0 and math.copysign(1.0, y) > 0


def _is_neg_zero(y: float) -> bool:
    return y == 0.0 and math.copysign(1.0, y) < 0


class Expectation(NamedTuple):
    fn_name:   str
    label:     str
    x:         float
    expected:  str
    predicate: Callable[[float], bool]


class CheckResult(NamedTuple):
    expectation: Expectation
    result:      float
    passed:      bool


_FNS = {"exp": np.exp, "ln": np.log, "sqrt": np.sqrt}

EXPECTATIONS: Tuple[Expectation, ...] = (
    Expectation("exp", "exp(0) = 1", 0.0, "1 (exactly)", lambda y: y == 1.0),
    Expectation("exp", "exp(1) ≈ e", 1.0, "2.718281828459045...",
                lambda y: abs(y - 2.718281828459045) < FLOAT64_EPS * 4),
    Expectation("exp", "exp(NaN) = NaN", math.nan, "NaN", math.isnan),
    Expectation("exp", "exp(+∞) = +∞", math.inf, "+Infinity", lambda y: y == math.inf),
    Expectation("exp", "exp(-∞) = 0", -math.inf, "0", lambda y: y == 0.0),
    Expectation("exp", "exp(710) overflows to +∞", 710.0, "+Infinity (overflow)", lambda y: y == math.inf),
    Expectation("exp", "exp(-745) underflows", -745.0, "5e-324 or 0 (underflow)",
                lambda y: 0.0 <= y <= SMALLEST_SUBNORMAL),
    Expectation("exp", "exp(1e-20) ≈ 1", 1e-20, "≈ 1.0 (first-order Taylor)", lambda y: abs(y - 1.0) < 1e-15),
    Expectation("ln", "ln(1) = 0", 1.0, "0 (exactly)", lambda y: y == 0.0),
    Expectation("ln", "ln(e) ≈ 1", 2.718281828459045, "1.0", lambda y: abs(y - 1.0) < FLOAT64_EPS * 4),
    Expectation("ln", "ln(0) = -∞", 0.0, "-Infinity", lambda y: y == -math.inf),
    Expectation("ln", "ln(-1) = NaN", -1.0, "NaN (not in real domain)", math.isnan),
    Expectation("ln", "ln(NaN) = NaN", math.nan, "NaN", math.isnan),
    Expectation("ln", "ln(+∞) = +∞", math.inf, "+Infinity", lambda y: y == math.inf),
    Expectation("ln", "ln(5e-324) handles subnormal input", SMALLEST_SUBNORMAL, "≈ -744.44",
                lambda y: y < -700.0 and not math.isnan(y)),
    Expectation("sqrt", "sqrt(4) = 2", 4.0, "2 (exactly)", lambda y: y == 2.0),
    Expectation("sqrt", "sqrt(0) = 0", 0.0, "+0", _is_pos_zero),
    Expectation("sqrt", "sqrt(-0) = -0", -0.0, "-0 (IEEE 754)", _is_neg_zero),
    Expectation("sqrt", "sqrt(-1) = NaN", -1.0, "NaN", math.isnan),
    Expectation("sqrt", "sqrt(NaN) = NaN", math.nan, "NaN", math.isnan),
    Expectation("sqrt", "sqrt(+∞) = +∞", math.inf, "+Infinity", lambda y: y == math.inf),
    Expectation("sqrt", "sqrt(MAX) does not overflow", FLOAT64_MAX, "≈ 1.34e+154",
                lambda y: y > 1.0e150 and not math.isinf(y)),
    Expectation("sqrt", "sqrt(SMALLEST_NORMAL)", SMALLEST_NORMAL, "≈ 1.49e-154",
                lambda y: 0.0 < y < 1.0e-100),
)


def run_checks(expectations: Sequence[Expectation] = EXPECTATIONS, fns=None) -> List[CheckResult]:
    fns = _FNS if fns is None else fns
    out = []
    for e in expectations:
        y, _ = classify(e.x, fns[e.fn_name])
        out.append(CheckResult(e, y, bool(e.predicate(y))))
    return out


def ieee_constants():
    return (
        ("machine epsilon", FLOAT64_EPS),
        ("smallest subnormal", SMALLEST_SUBNORMAL),
        ("smallest normal", SMALLEST_NORMAL),
        ("largest float64", FLOAT64_MAX),
        ("exp overflow threshold", EXP_OVERFLOW),
        ("exp underflow threshold", EXP_UNDERFLOW),
    )


def print_checks(results: Sequence[CheckResult]) -> int:
    n_fail = 0
    current = None
    for r in results:
        e = r.expectation
        if e.fn_name != current:
            current = e.fn_name
            print(f"\n=== {current}(x) edge cases ===")
        print(f"  {'PASS' if r.passed else 'FAIL'}  {e.label}")
        print(f"        result  : {format_number(r.result)}")
        print(f"        expected: {e.expected}")
        n_fail += 0 if r.passed else 1
    return n_fail


def print_table(rows, fn_names: Sequence[str]) -> None:
    head = f"  {'x':<22}" + "".join(f"{n:>14}" for n in fn_names) + "  status"
    print(head)
    print("  " + "-" * (len(head) - 2))
    for label, cells, special in rows:
        vals = "".join(f"{format_number(c.result):>14}" for c in cells)
        print(f"  {label:<22}{vals}  {'special' if special else 'normal'}")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="IEEE 754 edge-case behaviour of numpy elementary functions.")
    ap.add_argument("--table-only", action="store_true", help="期待値チェックを省略して表だけ表示")
    args = ap.parse_args(argv)

    print_table(edge_table(), [n for n, _ in DEFAULT_TABLE_FNS])
    if args.table_only:
        return 0

    n_fail = print_checks(run_checks())

    print("\n=== IEEE 754 constants ===")
    for name, v in ieee_constants():
        print(f"  {name:<24}: {v!r}")

    print(f"\n[result] checks failed: {n_fail}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

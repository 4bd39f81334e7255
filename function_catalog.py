#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
関数メタデータ表（numpy 実装, 定義域, 値域, 代表値, 既定の描画範囲）。
import 時に一度だけ作り、以後は読み取り専用。

使い方:
  python function_catalog.py            # 一覧
  python function_catalog.py --fn log1p # 1 件の詳細
"""

from __future__ import annotations
import argparse, math, sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

import numpy as np

from ulp_compare import UnaryFn


@dataclass(frozen=True)
class FunctionInfo:
    fn:            UnaryFn
    name:          str
    desc:          str
    domain:        str
    range:         str
    props:         Tuple[Tuple[str, str], ...]
    default_range: Tuple[float, float]


def sigmoid(x: float) -> float:
    return 1.0 / (1.0 + np.exp(-x))


def gaussian(x: float) -> float:
    return np.exp(-(x * x))


def heaviside(x: float) -> float:
    return np.heaviside(x, 0.5)


_TABLE = {
    "exp": FunctionInfo(
        np.exp, "exp(x)",
        "The exponential function. Maps every real number to a positive number.",
        "(-∞, +∞)", "(0, +∞)", (("exp(0)", "1"), ("exp(1)", "e ≈ 2.71828")), (-3.0, 5.0)),
    "exp2": FunctionInfo(
        np.exp2, "exp2(x)",
        "Base-2 exponential. Returns 2 raised to the power x.",
        "(-∞, +∞)", "(0, +∞)", (("exp2(0)", "1"), ("exp2(10)", "1024")), (-3.0, 10.0)),
    "expm1": FunctionInfo(
        np.expm1, "expm1(x)",
        "exp(x) - 1 without catastrophic cancellation for x near zero.",
        "(-∞, +∞)", "(-1, +∞)", (("expm1(0)", "0"), ("near 0", "higher precision")), (-4.0, 4.0)),
    "ln": FunctionInfo(
        np.log, "ln(x)",
        "Natural logarithm, the inverse of exp.",
        "(0, +∞)", "(-∞, +∞)", (("ln(1)", "0"), ("ln(e)", "1")), (0.01, 10.0)),
    "log2": FunctionInfo(
        np.log2, "log2(x)",
        "Base-2 logarithm.",
        "(0, +∞)", "(-∞, +∞)", (("log2(1)", "0"), ("log2(1024)", "10")), (0.01, 16.0)),
    "log10": FunctionInfo(
        np.log10, "log10(x)",
        "Base-10 logarithm (decibels, pH, orders of magnitude).",
        "(0, +∞)", "(-∞, +∞)", (("log10(1)", "0"), ("log10(100)", "2")), (0.01, 100.0)),
    "log1p": FunctionInfo(
        np.log1p, "log1p(x)",
        "ln(1 + x) computed accurately for small x.",
        "(-1, +∞)", "(-∞, +∞)", (("log1p(0)", "0"), ("near 0", "higher precision")), (-0.99, 5.0)),
    "sqrt": FunctionInfo(
        np.sqrt, "sqrt(x)",
        "Square root.",
        "[0, +∞)", "[0, +∞)", (("sqrt(0)", "0"), ("sqrt(4)", "2")), (0.0, 16.0)),
    "cbrt": FunctionInfo(
        np.cbrt, "cbrt(x)",
        "Cube root, defined for negative inputs as well.",
        "(-∞, +∞)", "(-∞, +∞)", (("cbrt(0)", "0"), ("cbrt(27)", "3")), (-8.0, 8.0)),
    "sin": FunctionInfo(
        np.sin, "sin(x)",
        "Sine. Period 2π.",
        "(-∞, +∞)", "[-1, 1]", (("sin(0)", "0"), ("sin(π/2)", "1")), (-2.0 * math.pi, 2.0 * math.pi)),
    "cos": FunctionInfo(
        np.cos, "cos(x)",
        "Cosine, cos(x) = sin(x + π/2).",
        "(-∞, +∞)", "[-1, 1]", (("cos(0)", "1"), ("cos(π)", "-1")), (-2.0 * math.pi, 2.0 * math.pi)),
    "tan": FunctionInfo(
        np.tan, "tan(x)",
        "Tangent, with vertical asymptotes at odd multiples of π/2.",
        "x ≠ kπ/2", "(-∞, +∞)", (("tan(0)", "0"), ("tan(π/4)", "1")), (-math.pi + 0.1, math.pi - 0.1)),
    "sigmoid": FunctionInfo(
        sigmoid, "sigmoid(x)",
        "Logistic sigmoid 1/(1+exp(-x)).",
        "(-∞, +∞)", "(0, 1)", (("σ(0)", "0.5"), ("σ(∞)", "→ 1")), (-8.0, 8.0)),
    "gaussian": FunctionInfo(
        gaussian, "gaussian(x)",
        "Gaussian bell curve exp(-x²).",
        "(-∞, +∞)", "(0, 1]", (("g(0)", "1 (peak)"), ("FWHM", "≈ 1.665")), (-4.0, 4.0)),
    "sinc": FunctionInfo(
        np.sinc, "sinc(x)",
        "Normalized sinc sin(πx)/(πx).",
        "(-∞, +∞)", "[-0.217, 1]", (("sinc(0)", "1"), ("sinc(n)", "0 for n≠0")), (-8.0, 8.0)),
    "heaviside": FunctionInfo(
        heaviside, "heaviside(x)",
        "Heaviside step: 0 for x<0, 1/2 at 0, 1 for x>0.",
        "(-∞, +∞)", "{0, 0.5, 1}", (("H(0)", "0.5"), ("derivative", "δ(x)")), (-3.0, 3.0)),
}

FUNCTIONS: Mapping[str, FunctionInfo] = MappingProxyType(_TABLE)
del _TABLE


def get(key: str) -> FunctionInfo:
    try:
        return FUNCTIONS[key]
    except KeyError:
        raise KeyError(f"unknown function {key!r} (choose from: {', '.join(FUNCTIONS)})") from None


def describe(key: str):
    info = get(key)
    lines = [f"[{info.name}]", f"  {info.desc}",
             f"  domain : {info.domain}", f"  range  : {info.range}"]
    for k, v in info.props:
        lines.append(f"  {k:<12}: {v}")
    lo, hi = info.default_range
    lines.append(f"  plot x ∈ [{lo:.4g}, {hi:.4g}]")
    return lines


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="List the function catalog.")
    ap.add_argument("--fn", choices=list(FUNCTIONS), default=None, help="詳細を表示する関数")
    args = ap.parse_args(argv)

    keys = [args.fn] if args.fn else list(FUNCTIONS)
    for k in keys:
        for line in describe(k):
            print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())

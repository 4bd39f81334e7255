import math

import numpy as np
import pytest

import ulp_compare
from ulp_compare import (
    FLOAT64_EPS,
    ComparisonResult,
    SweepAccumulator,
    compare_many,
    compare_sweep,
    format_report,
    linspace,
    logspace,
    ulp_diff,
)
from ref_functions import ref_sin


class TestUlpDiff:

    def test_eps_is_two_to_minus_52(self):
        assert FLOAT64_EPS == 2.0 ** -52

    @pytest.mark.parametrize("a", [0.0, -0.0, 1.0, -3.5, 1e-310, 1e300, math.inf, -math.inf])
    def test_reflexive(self, a):
        assert ulp_diff(a, a) == 0.0

    def test_nan_against_itself_is_nan(self):
        assert math.isnan(ulp_diff(math.nan, math.nan))

    def test_signed_zeros_are_equal(self):
        assert ulp_diff(0.0, -0.0) == 0.0
        assert ulp_diff(-0.0, 0.0) == 0.0

    def test_nan_on_either_side(self):
        assert math.isnan(ulp_diff(math.nan, 1.0))
        assert math.isnan(ulp_diff(1.0, math.nan))

    def test_nan_checked_before_infinity(self):
        assert math.isnan(ulp_diff(math.inf, math.nan))

    def test_infinity_is_maximal(self):
        assert ulp_diff(math.inf, 1.0) == math.inf
        assert ulp_diff(1.0, -math.inf) == math.inf
        assert ulp_diff(math.inf, -math.inf) == math.inf

    def test_zero_reference_uses_half_eps(self):
        assert ulp_diff(0.0, 1e-300) == 1e-300 / (FLOAT64_EPS / 2.0)
        assert ulp_diff(-0.0, -1e-300) == 1e-300 / (FLOAT64_EPS / 2.0)

    def test_one_ulp_above_one(self):
        assert ulp_diff(1.0, 1.0 + 2.0 ** -52) == 1.0

    @pytest.mark.parametrize("a,b", [(2.0, 3.0), (-7.25, 1e-3), (1e-200, 3e-200), (123.0, -456.0)])
    def test_relative_formula(self, a, b):
        assert ulp_diff(a, b) == abs(a - b) / (abs(a) * FLOAT64_EPS)

    def test_scaled_by_first_argument_not_symmetric(self):
        assert ulp_diff(2.0, 3.0) != ulp_diff(3.0, 2.0)
        assert ulp_diff(2.0, 3.0) == 1.0 / (2.0 * FLOAT64_EPS)
        assert ulp_diff(3.0, 2.0) == 1.0 / (3.0 * FLOAT64_EPS)


class TestSampleGeneration:

    def test_linspace_endpoints(self):
        assert list(linspace(-10.0, 10.0, 5)) == [-10.0, -5.0, 0.0, 5.0, 10.0]

    def test_linspace_single_point_is_start(self):
        xs = linspace(2.0, 5.0, 1)
        assert xs.tolist() == [2.0]

    def test_linspace_rejects_zero_points(self):
        with pytest.raises(ValueError):
            linspace(0.0, 1.0, 0)

    def test_logspace_range(self):
        xs = logspace(-300.0, -1.0, 1000)
        assert xs.size == 1000
        assert np.all(xs > 0.0)
        assert xs[0] == pytest.approx(1e-300, rel=1e-12)
        assert xs[-1] == pytest.approx(0.1, rel=1e-12)
        assert np.all(np.diff(xs) > 0.0)


class TestCompareSweep:

    def test_sin_against_itself(self):
        res = compare_sweep(np.sin, np.sin, [-10.0, -5.0, 0.0, 5.0, 10.0])
        assert res.points_tested == 5
        assert res.exact_agreements == 5
        assert res.total_comparable == 5
        assert res.max_ulp_diff == 0.0
        assert res.avg_ulp_diff is None
        assert res.worst_case_input is None
        assert res.is_perfect

    def test_perfect_agreement_report(self):
        res = compare_sweep(np.sin, np.sin, [-10.0, -5.0, 0.0, 5.0, 10.0])
        lines = format_report("sin", res, np.sin, np.sin)
        assert any("perfect agreement" in line for line in lines)
        assert not any("avg ULP" in line for line in lines)

    def test_divergent_report_shows_worst_case_values(self):
        cand, ref = (lambda x: x), (lambda x: x + 1e-10)
        lines = format_report("offset", compare_sweep(cand, ref, [1.0]), cand, ref)
        assert lines[0] == "[offset]"
        assert "  exact agreement     : 0/1 (0.0%)" in lines
        assert "  max ULP difference  : 450360.00" in lines
        assert any(line.startswith("  avg ULP difference  : ") for line in lines)
        assert "  worst case at x     : 1.0" in lines
        assert "    candidate(x)      : 1.0" in lines
        assert "    reference(x)      : 1.0000000001" in lines
        assert not any("perfect agreement" in line for line in lines)

    def test_report_lists_unscored_samples(self):
        cand, ref = (lambda x: x), (lambda x: math.nan if x < 0 else x)
        res = compare_sweep(cand, ref, [-1.0, 2.0])
        assert res.unscored == 1
        lines = format_report("nan", res, cand, ref)
        assert "  unscored (NaN/inf)  : 1" in lines
        assert not any("worst case" in line for line in lines)

    def test_self_comparison_counts_every_point(self):
        xs = linspace(-3.0, 3.0, 101)
        res = compare_sweep(math.atan, math.atan, xs)
        assert res.exact_agreements == res.total_comparable == res.points_tested == 101
        assert res.max_ulp_diff == 0.0

    def test_offset_by_1e_10(self):
        res = compare_sweep(lambda x: x, lambda x: x + 1e-10, [1.0])
        assert res.total_comparable == 1
        assert res.exact_agreements == 0
        assert res.max_ulp_diff == pytest.approx(1e-10 / FLOAT64_EPS, rel=1e-5)
        assert res.max_ulp_diff == pytest.approx(450360.0, rel=1e-4)
        assert res.worst_case_input == 1.0
        assert res.avg_ulp_diff == res.max_ulp_diff

    def test_saturation_to_infinity_is_excluded(self):
        res = compare_sweep(np.exp, np.exp, [709.0, 710.0, 711.0])
        assert res.points_tested == 3
        assert res.nonfinite_agreements == 2
        assert res.total_comparable == 1
        assert res.exact_agreements == 1
        assert res.max_ulp_diff == 0.0
        assert res.is_perfect

    def test_both_nan_is_excluded(self):
        res = compare_sweep(np.log, np.log, [-1.0, -2.0])
        assert res.points_tested == 2
        assert res.nonfinite_agreements == 2
        assert res.total_comparable == 0
        assert res.exact_agreements == 0
        assert res.agreement_pct == 100.0
        assert res.avg_ulp_diff is None

    def test_opposite_infinities_are_divergent_but_unscored(self):
        res = compare_sweep(lambda x: math.inf, lambda x: -math.inf, [1.0, 2.0])
        assert res.total_comparable == 2
        assert res.exact_agreements == 0
        assert res.unscored == 2
        assert res.max_ulp_diff == 0.0
        assert res.avg_ulp_diff == 0.0
        assert res.worst_case_input is None
        assert not res.is_perfect

    def test_signed_zeros_agree(self):
        res = compare_sweep(lambda x: 0.0, lambda x: -0.0, [1.0])
        assert res.exact_agreements == 1

    def test_average_over_divergent_samples_only(self):
        # x=0 は一致、x=1, 2 は 1 ULP と 3 ULP
        table = {0.0: (1.0, 1.0), 1.0: (1.0, 1.0 + 2.0 ** -52), 2.0: (1.0, 1.0 + 3 * 2.0 ** -52)}
        res = compare_sweep(lambda x: table[x][0], lambda x: table[x][1], [0.0, 1.0, 2.0])
        assert res.exact_agreements == 1
        assert res.total_comparable == 3
        assert res.max_ulp_diff == 3.0
        assert res.avg_ulp_diff == 2.0
        assert res.worst_case_input == 2.0

    def test_worst_case_tie_keeps_first_input(self):
        res = compare_sweep(lambda x: 1.0, lambda x: 1.0 + 2.0 ** -52, [3.0, 1.0, 2.0])
        assert res.max_ulp_diff == 1.0
        assert res.worst_case_input == 3.0

    def test_empty_input_raises(self):
        with pytest.raises(ValueError):
            compare_sweep(np.sin, math.sin, [])

    def test_raising_reference_propagates(self):
        with pytest.raises(OverflowError):
            compare_sweep(np.exp, math.exp, [1.0, 710.0])

    def test_raising_candidate_propagates(self):
        with pytest.raises(ValueError):
            compare_sweep(math.sqrt, np.sqrt, [4.0, -1.0])

    def test_result_is_immutable(self):
        res = compare_sweep(np.sin, np.sin, [1.0])
        with pytest.raises(AttributeError):
            res.points_tested = 2  # type: ignore[misc]


class TestBlockedSweep:

    def test_blocked_matches_straight(self):
        xs = linspace(-20.0, 20.0, 1001)
        straight = compare_sweep(ref_sin, math.sin, xs)
        blocked = compare_sweep(ref_sin, math.sin, xs, block=7)
        assert blocked.points_tested == straight.points_tested
        assert blocked.exact_agreements == straight.exact_agreements
        assert blocked.total_comparable == straight.total_comparable
        assert blocked.max_ulp_diff == straight.max_ulp_diff
        assert blocked.worst_case_input == straight.worst_case_input
        assert blocked.avg_ulp_diff == pytest.approx(straight.avg_ulp_diff, rel=1e-12)

    def test_blocked_tie_keeps_first_input(self):
        res = compare_sweep(lambda x: 1.0, lambda x: 1.0 + 2.0 ** -52, [3.0, 1.0, 2.0, 4.0], block=2)
        assert res.worst_case_input == 3.0

    def test_invalid_block(self):
        with pytest.raises(ValueError):
            compare_sweep(np.sin, np.sin, [1.0], block=0)

    def test_merge_prefers_earlier_maximum(self):
        a = SweepAccumulator()
        a.consider(1.0, 1.0, 1.0 + 2.0 ** -51)
        b = SweepAccumulator()
        b.consider(5.0, 1.0, 1.0 + 2.0 ** -51)
        b.consider(6.0, 2.0, 2.0)
        res = a.merge(b).result()
        assert res.points_tested == 3
        assert res.exact_agreements == 1
        assert res.max_ulp_diff == 2.0
        assert res.worst_case_input == 1.0

    def test_merge_takes_larger_later_maximum(self):
        a = SweepAccumulator()
        a.consider(1.0, 1.0, 1.0 + 2.0 ** -52)
        b = SweepAccumulator()
        b.consider(5.0, 1.0, 1.0 + 2.0 ** -51)
        assert a.merge(b).result().worst_case_input == 5.0


class TestCompareMany:

    def test_results_in_job_order(self):
        xs = [0.5, 1.0, 1.5]
        jobs = [
            (np.sin, np.sin, xs),
            (lambda x: x, lambda x: x + 1e-10, [1.0]),
            (np.exp, np.exp, [709.0, 710.0]),
        ]
        results = compare_many(jobs, max_workers=3)
        assert [r.points_tested for r in results] == [3, 1, 2]
        assert results[0].is_perfect
        assert results[1].worst_case_input == 1.0
        assert results[2].nonfinite_agreements == 1

    def test_error_in_one_job_propagates(self):
        with pytest.raises(OverflowError):
            compare_many([(np.exp, math.exp, [710.0])])


class TestDefaultSweeps:

    def test_invariants_hold(self, capsys):
        for title, res in ulp_compare.run_default(points=200):
            assert isinstance(res, ComparisonResult)
            assert res.exact_agreements <= res.total_comparable <= res.points_tested
            assert res.points_tested == res.total_comparable + res.nonfinite_agreements
            assert res.max_ulp_diff >= 0.0
            assert (res.avg_ulp_diff is None) == res.is_perfect
        out = capsys.readouterr().out
        assert "exp(x) on [-10, 10]" in out
        assert "sqrt(x) on [0, 1000]" in out

    def test_main_exit_code(self, capsys):
        assert ulp_compare.main(["--points", "50"]) == 0
        assert "[info] candidate=numpy" in capsys.readouterr().out

    def test_main_reports_fatal_error(self, monkeypatch, capsys):
        monkeypatch.setattr(ulp_compare, "default_sweeps",
                            lambda *a, **k: [("exp overflow", np.exp, math.exp, [710.0])])
        assert ulp_compare.main(["--points", "10"]) == 1
        assert "[error] OverflowError" in capsys.readouterr().err

    @pytest.mark.parametrize("argv", [["--points", "0"], ["--block", "0"], ["--block", "-4"]])
    def test_main_rejects_bad_arguments(self, argv, capsys):
        with pytest.raises(SystemExit) as exc:
            ulp_compare.main(argv)
        assert "must be >= 1" in str(exc.value.code)
        assert "[info]" not in capsys.readouterr().out

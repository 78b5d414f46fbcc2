"""Tests for the layout subpackage.

Covers label-height estimation, conflict analysis, cluster growth,
space distribution, label placement, and batch allocation with
per-borehole failure isolation.
"""

from __future__ import annotations

import logging

import numpy as np
import pytest

from pyborelog.layout.batch import allocate, allocate_batch
from pyborelog.layout.clusters import (
    AllocationContext,
    Cluster,
    build_clusters,
    description_clusters,
    distribute_space,
)
from pyborelog.layout.conflicts import analyze_conflicts
from pyborelog.layout.intervals import Interval, LabelMetrics
from pyborelog.layout.placement import label_placements, track_end
from pyborelog.stratigraphy.borehole import BoreholeLog

METRICS = LabelMetrics()


# ======================================================================
# Fixtures: synthetic interval sequences
# ======================================================================

def _intervals(thicknesses, label_lengths, metrics=METRICS):
    """Contiguous intervals from the surface with labels of given lengths."""
    intervals = []
    top = 0.0
    for i, (h, n) in enumerate(zip(thicknesses, label_lengths)):
        label = "X" * n
        intervals.append(Interval(
            index=i,
            top=top,
            bottom=top + h,
            label=label,
            text_height=metrics.estimate_height(label),
        ))
        top += h
    return intervals


def _spans(clusters):
    return [(c.start_index, c.end_index) for c in clusters]


def _finals(cluster):
    return [ls.final_height for ls in cluster.layer_sizes]


def _log(hole_id, depths, geology, **kwargs):
    return BoreholeLog(hole_id=hole_id, depths=depths, geology=geology, **kwargs)


# ======================================================================
# LabelMetrics
# ======================================================================

class TestLabelMetrics:
    def test_one_line(self):
        assert METRICS.estimate_height("X" * 35) == pytest.approx(0.35)

    def test_two_lines(self):
        assert METRICS.estimate_height("X" * 36) == pytest.approx(0.8)

    def test_long_label(self):
        # ceil(200 / 35) = 6 lines
        assert METRICS.estimate_height("X" * 200) == pytest.approx(2.6)

    def test_empty_label(self):
        assert METRICS.estimate_height("") == 0.0

    def test_monotonic(self):
        heights = [METRICS.estimate_height("X" * n) for n in range(0, 300)]
        assert all(b >= a for a, b in zip(heights, heights[1:]))

    def test_invalid(self):
        with pytest.raises(ValueError):
            LabelMetrics(line_width_chars=0)
        with pytest.raises(ValueError):
            LabelMetrics(line_height=-1.0)


# ======================================================================
# Conflict analysis
# ======================================================================

class TestConflicts:
    def test_scenario_a(self):
        records = analyze_conflicts(_intervals([1, 1, 1], [10, 200, 10]))
        assert [r.has_overflow for r in records] == [False, True, False]
        assert records[1].overflow == pytest.approx(1.6)
        assert records[0].overflow == 0.0
        assert records[0].available_space == pytest.approx(0.65)
        assert records[1].available_space == pytest.approx(-1.6)

    def test_aligned_with_input(self):
        records = analyze_conflicts(_intervals([1, 2, 3, 4], [5, 5, 5, 5]))
        assert [r.index for r in records] == [0, 1, 2, 3]

    def test_zero_length_interval(self):
        records = analyze_conflicts(_intervals([1, 0, 1], [10, 0, 10]))
        assert not records[1].has_overflow
        assert records[1].overflow == 0.0
        assert records[1].available_space == 0.0

    def test_exact_fit_is_not_overflow(self):
        fit = METRICS.estimate_height("X" * 10)
        records = analyze_conflicts(_intervals([fit], [10]))
        assert not records[0].has_overflow


# ======================================================================
# Cluster building
# ======================================================================

class TestBuildClusters:
    def test_scenario_a_absorbs_both_neighbours(self):
        clusters = description_clusters(_intervals([1, 1, 1], [10, 200, 10]))
        assert _spans(clusters) == [(0, 2)]
        c = clusters[0]
        assert c.layers == [0, 1, 2]
        assert c.total_needed == pytest.approx(1.6)
        assert c.total_available == pytest.approx(1.3)
        assert c.needs_extra_space == pytest.approx(0.3)
        assert not c.unchanged

    def test_scenario_b_single_short_label(self):
        clusters = description_clusters(_intervals([2.0], [5]))
        assert len(clusters) == 1
        c = clusters[0]
        assert c.unchanged
        assert c.layer_sizes[0].final_height == pytest.approx(2.0)
        assert c.layer_sizes[0].original_height == pytest.approx(2.0)

    def test_scenario_c_everything_overflows(self):
        intervals = _intervals([0.5, 0.5, 0.5], [100, 100, 100])
        clusters = description_clusters(intervals)
        assert _spans(clusters) == [(0, 2)]
        c = clusters[0]
        assert c.needs_extra_space == pytest.approx(0.75)
        assert c.allocated_space > sum(iv.thickness for iv in intervals)

    def test_no_conflicts_all_unchanged(self):
        intervals = _intervals([2.0, 3.0, 1.5], [10, 20, 30])
        clusters = description_clusters(intervals)
        assert _spans(clusters) == [(0, 0), (1, 1), (2, 2)]
        for c, iv in zip(clusters, intervals):
            assert c.unchanged
            assert c.total_needed == 0.0
            assert c.layer_sizes[0].final_height == pytest.approx(iv.thickness)

    def test_grows_towards_more_slack(self):
        clusters = description_clusters(_intervals([1, 0.5, 2, 1], [10, 60, 10, 10]))
        assert _spans(clusters) == [(0, 0), (1, 2), (3, 3)]
        assert clusters[1].total_available == pytest.approx(1.65)
        assert clusters[1].needs_extra_space == 0.0

    def test_tie_goes_up(self):
        clusters = description_clusters(_intervals([1, 0.5, 1, 1], [10, 60, 10, 10]))
        assert _spans(clusters) == [(0, 1), (2, 2), (3, 3)]

    def test_stops_when_satisfied(self):
        clusters = description_clusters(
            _intervals([1, 1, 0.5, 3, 1], [10, 10, 60, 10, 10])
        )
        # One neighbour below covers the 0.3 overflow
        assert _spans(clusters) == [(0, 0), (1, 1), (2, 3), (4, 4)]

    def test_does_not_take_claimed_neighbour(self):
        clusters = description_clusters(_intervals([0.5, 1, 0.5, 1], [60, 10, 60, 10]))
        assert _spans(clusters) == [(0, 1), (2, 3)]

    def test_overflowing_neighbour_contributes_nothing(self):
        clusters = description_clusters(_intervals([0.5, 0.5], [60, 60]))
        assert _spans(clusters) == [(0, 1)]
        c = clusters[0]
        assert c.total_available == 0.0
        assert c.total_needed == pytest.approx(0.3)
        assert c.needs_extra_space == pytest.approx(0.3)

    def test_seed_at_bottom_grows_up(self):
        clusters = description_clusters(_intervals([2, 1, 0.5], [10, 10, 60]))
        assert _spans(clusters) == [(0, 0), (1, 2)]

    def test_only_singletons_sized_before_distribution(self):
        intervals = _intervals([1, 1, 1], [10, 200, 10])
        ctx = AllocationContext(intervals, analyze_conflicts(intervals))
        clusters = build_clusters(ctx)
        assert clusters[0].layer_sizes == []
        assert ctx.claimed.all()

    def test_context_length_mismatch(self):
        intervals = _intervals([1, 1], [10, 10])
        with pytest.raises(ValueError):
            AllocationContext(intervals, analyze_conflicts(intervals[:1]))

    def test_empty_sequence(self):
        assert description_clusters([]) == []


# ======================================================================
# Space distribution
# ======================================================================

class TestDistributeSpace:
    def test_scenario_a_floor_first(self):
        c = description_clusters(_intervals([1, 1, 1], [10, 200, 10]))[0]
        # proportional share would be [0.35, 2.6, 0.35]; floors win
        assert _finals(c) == pytest.approx([0.45, 2.7, 0.45])
        assert c.target_space == pytest.approx(3.3)
        assert c.allocated_space == pytest.approx(3.6)
        assert c.floor_excess == pytest.approx(0.3)

    def test_proportional_when_floors_hold(self):
        clusters = description_clusters(_intervals([1, 0.5, 2, 1], [10, 60, 10, 10]))
        c = clusters[1]
        assert _finals(c) == pytest.approx([2.5 * 0.8 / 1.15, 2.5 * 0.35 / 1.15])
        assert c.allocated_space == pytest.approx(2.5)
        assert c.floor_excess == pytest.approx(0.0)

    def test_scenario_c_heights(self):
        c = description_clusters(_intervals([0.5, 0.5, 0.5], [100, 100, 100]))[0]
        assert _finals(c) == pytest.approx([1.35, 1.35, 1.35])

    def test_zero_text_keeps_original(self):
        intervals = _intervals([1.0, 2.0], [0, 0])
        ctx = AllocationContext(intervals, analyze_conflicts(intervals))
        cluster = Cluster(start_index=0, end_index=1, layers=[0, 1],
                          needs_extra_space=0.5)
        distribute_space(cluster, ctx)
        assert _finals(cluster) == pytest.approx([1.0, 2.0])

    def test_unchanged_untouched(self):
        intervals = _intervals([1.0], [10])
        clusters = description_clusters(intervals)
        ctx = AllocationContext(intervals, analyze_conflicts(intervals))
        before = list(clusters[0].layer_sizes)
        distribute_space(clusters[0], ctx)
        assert clusters[0].layer_sizes == before

    def test_fit_margin(self):
        metrics = LabelMetrics(fit_margin=0.5)
        intervals = _intervals([1, 1, 1], [10, 200, 10], metrics)
        c = description_clusters(intervals, metrics)[0]
        assert _finals(c) == pytest.approx([0.85, 3.1, 0.85])

    def test_size_of(self):
        c = description_clusters(_intervals([1, 1, 1], [10, 200, 10]))[0]
        assert c.size_of(1).text_height == pytest.approx(2.6)
        with pytest.raises(KeyError):
            c.size_of(7)

    def test_zero_length_overflowing_interval(self):
        clusters = description_clusters(_intervals([1, 0, 1], [10, 10, 10]))
        assert _spans(clusters) == [(0, 1), (2, 2)]
        assert _finals(clusters[0]) == pytest.approx([0.5, 0.5])


# ======================================================================
# Invariants over random sequences
# ======================================================================

def _random_cases(n_cases=50, seed=7):
    rng = np.random.default_rng(seed)
    for _ in range(n_cases):
        n = int(rng.integers(1, 15))
        thickness = rng.uniform(0.0, 2.5, size=n)
        thickness[rng.random(n) < 0.1] = 0.0
        lengths = rng.integers(0, 260, size=n)
        yield _intervals(thickness.tolist(), lengths.tolist())


class TestInvariants:
    @pytest.mark.parametrize("intervals", list(_random_cases()))
    def test_partition(self, intervals):
        clusters = description_clusters(intervals)
        covered = [i for c in clusters for i in c.layers]
        assert covered == list(range(len(intervals)))
        for c in clusters:
            assert c.layers == list(range(c.start_index, c.end_index + 1))
            assert [ls.layer_index for ls in c.layer_sizes] == c.layers

    @pytest.mark.parametrize("intervals", list(_random_cases()))
    def test_labels_fit(self, intervals):
        for c in description_clusters(intervals):
            for ls in c.layer_sizes:
                if c.unchanged:
                    assert ls.final_height == pytest.approx(ls.original_height)
                    assert ls.final_height >= ls.text_height
                else:
                    assert ls.final_height >= (
                        ls.text_height + METRICS.fit_margin - 1e-9
                    )

    @pytest.mark.parametrize("intervals", list(_random_cases()))
    def test_stretch(self, intervals):
        for c in description_clusters(intervals):
            assert c.needs_extra_space == pytest.approx(
                max(0.0, c.total_needed - c.total_available)
            )
            assert c.needs_extra_space >= 0.0

    @pytest.mark.parametrize("intervals", list(_random_cases()))
    def test_floor_excess_is_floor_shortfall(self, intervals):
        for c in description_clusters(intervals):
            if c.unchanged:
                continue
            text = np.array([ls.text_height for ls in c.layer_sizes])
            share = c.target_space * text / text.sum()
            shortfall = np.maximum(text + METRICS.fit_margin - share, 0.0).sum()
            assert c.floor_excess == pytest.approx(shortfall, abs=1e-9)
            if c.needs_extra_space == 0.0:
                assert c.allocated_space <= (
                    c.original_space + c.floor_excess + 1e-9
                )


# ======================================================================
# Placement
# ======================================================================

class TestPlacement:
    def test_scenario_a_offsets(self):
        clusters = description_clusters(_intervals([1, 1, 1], [10, 200, 10]))
        placements = list(label_placements(clusters))
        assert [p.top for p in placements] == pytest.approx([0.0, 0.45, 3.15])
        assert [p.center for p in placements] == pytest.approx([0.225, 1.8, 3.375])
        assert [p.corrected_depth for p in placements] == pytest.approx([0.45, 3.15, 3.6])
        assert [p.original_depth for p in placements] == pytest.approx([1.0, 2.0, 3.0])
        assert all(p.bent for p in placements)
        assert track_end(clusters) == pytest.approx(3.6)

    def test_unchanged_straight(self):
        clusters = description_clusters(_intervals([2.0, 3.0], [10, 10]))
        placements = list(label_placements(clusters))
        assert [p.corrected_depth for p in placements] == [None, None]
        assert not any(p.bent for p in placements)
        assert [p.top for p in placements] == pytest.approx([0.0, 2.0])
        assert track_end(clusters) == pytest.approx(5.0)

    def test_coincident_boundary_not_bent(self):
        clusters = description_clusters(_intervals([1, 0.5, 2, 1], [10, 60, 10, 10]))
        placements = list(label_placements(clusters))
        assert placements[1].bent
        assert placements[2].corrected_depth == pytest.approx(3.5)
        assert not placements[2].bent

    def test_offset_restarts_per_cluster(self):
        clusters = description_clusters(_intervals([0.7, 0.5, 0.5], [10, 60, 10]))
        assert _spans(clusters) == [(0, 1), (2, 2)]
        assert clusters[0].floor_excess == pytest.approx(0.15)
        placements = list(label_placements(clusters))
        # the floored cluster ends at 1.35 but the next slot starts at its true top
        assert placements[1].corrected_depth == pytest.approx(1.35)
        assert placements[2].top == pytest.approx(1.2)
        assert track_end(clusters) == pytest.approx(1.7)

    def test_empty(self):
        assert list(label_placements([])) == []
        assert track_end([]) == 0.0


# ======================================================================
# Batch allocation
# ======================================================================

class TestBatch:
    def _logs(self):
        return [
            _log("SP-01", [0, 1, 2, 3], ["a" * 10, "b" * 200, "c" * 10]),
            _log("SP-02", [0, 1, 2], ["argila"]),
            _log("SP-03", [0, 2], ["areia"]),
        ]

    def test_allocate_single(self):
        allocation = allocate(self._logs()[0])
        assert _spans(allocation.clusters) == [(0, 2)]
        assert allocation.stretch == pytest.approx(0.3)

    def test_failure_isolated(self, caplog):
        with caplog.at_level(logging.ERROR):
            result = allocate_batch(self._logs())
        assert result.failed == ["SP-02"]
        assert [a.log.hole_id for a in result] == ["SP-01", "SP-03"]
        assert result.failures == {1: "SP-02"}
        assert [a.index for a in result] == [0, 2]
        assert result.total == 3
        assert len(result) == 2
        assert "SP-02" in caplog.text

    def test_threaded_keeps_order(self):
        logs = self._logs() * 4
        serial = allocate_batch(logs)
        threaded = allocate_batch(logs, max_workers=4)
        assert [a.index for a in threaded] == [a.index for a in serial]
        assert threaded.failed == serial.failed == ["SP-02"] * 4
        for a, b in zip(serial, threaded):
            assert _spans(a.clusters) == _spans(b.clusters)

    def test_metrics_forwarded(self):
        metrics = LabelMetrics(line_width_chars=1000)
        result = allocate_batch(self._logs()[:1], metrics=metrics)
        assert all(c.unchanged for c in result.allocations[0].clusters)

    def test_empty_batch(self):
        result = allocate_batch([])
        assert result.total == 0
        assert result.failed == []

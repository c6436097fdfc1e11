"""
Tests for segment and stream vesting.

Covers the stacking rule (segments consume one shared time budget in index
order), saturation at zero, cancellation and the checkpoint/fold helpers.
"""

from dataclasses import replace

import pytest
from hypothesis import assume, given, settings, strategies as st

from flowcraft_sdk import (
    Segment,
    Stream,
    checkpoint_stream,
    compute_rate,
    evaluate_segment,
    evaluate_stream,
    fold_completed_segments,
    fully_vested_at,
    next_segment_index,
)
from flowcraft_sdk.constants import MAX_SEGMENTS
from flowcraft_sdk.exceptions import InvalidRate, SegmentLimitExceeded, StreamNotExpired

RATE_1000_PER_100S = compute_rate(1000, 100)


@st.composite
def segments(draw):
    amount = draw(st.integers(min_value=0, max_value=10 ** 12))
    vested = draw(st.integers(min_value=0, max_value=amount))
    rate = draw(st.integers(min_value=1, max_value=10 ** 15))
    cancelled = draw(st.booleans())
    return Segment("tier", "payer", rate, amount, vested, cancelled)


@st.composite
def streams(draw):
    archived_amount = draw(st.integers(min_value=0, max_value=10 ** 12))
    return Stream(
        pool="pool",
        subscriber="subscriber",
        last_update_time=draw(st.integers(min_value=0, max_value=10 ** 6)),
        archived_amount=archived_amount,
        archived_vested=draw(st.integers(min_value=0, max_value=archived_amount)),
        total_withdrawn=draw(st.integers(min_value=0, max_value=10 ** 13)),
        segments=tuple(draw(st.lists(segments(), max_size=6))),
    )


times = st.integers(min_value=0, max_value=2 * 10 ** 6)


class TestEvaluateSegment:

    def test_linear_vesting(self):
        segment = Segment("basic", "payer", RATE_1000_PER_100S, 1000)
        assert evaluate_segment(segment, 50) == 500
        assert evaluate_segment(segment, 100) == 1000

    def test_capped_at_amount(self):
        segment = Segment("basic", "payer", RATE_1000_PER_100S, 1000)
        assert evaluate_segment(segment, 150) == 1000

    def test_starts_from_checkpoint(self):
        segment = Segment("basic", "payer", RATE_1000_PER_100S, 1000, vested=400)
        assert evaluate_segment(segment, 10) == 500
        assert evaluate_segment(segment, 1000) == 1000

    def test_non_positive_elapsed_is_noop(self):
        segment = Segment("basic", "payer", RATE_1000_PER_100S, 1000, vested=300)
        assert evaluate_segment(segment, 0) == 300
        assert evaluate_segment(segment, -50) == 300

    def test_cancelled_is_frozen(self):
        segment = Segment("basic", "payer", RATE_1000_PER_100S, 1000, vested=300, cancelled=True)
        assert evaluate_segment(segment, 10 ** 9) == 300

    @given(segment=segments(), elapsed=st.integers(min_value=-10 ** 6, max_value=10 ** 9))
    def test_never_exceeds_amount(self, segment, elapsed):
        assert evaluate_segment(segment, elapsed) <= segment.amount

    @given(segment=segments(), a=times, b=times)
    def test_cancellation_freeze(self, segment, a, b):
        frozen = replace(segment, cancelled=True)
        assert evaluate_segment(frozen, a) == evaluate_segment(frozen, b) == frozen.vested


class TestEvaluateStream:

    def test_single_segment_scenario(self, one_segment_stream):
        assert evaluate_stream(one_segment_stream, 50).total_vested == 500
        assert evaluate_stream(one_segment_stream, 100).total_vested == 1000
        assert evaluate_stream(one_segment_stream, 150).total_vested == 1000

    def test_single_segment_expiry(self, one_segment_stream):
        assert not evaluate_stream(one_segment_stream, 99).is_expired
        assert evaluate_stream(one_segment_stream, 100).is_expired

    def test_stacked_segments_share_time(self, stacked_stream):
        vesting = evaluate_stream(stacked_stream, 150)
        assert vesting.segment_vested == (1000, 500)
        assert vesting.total_vested == 1500
        assert vesting.total_deposited == 2000
        assert vesting.total_unvested == 500
        assert not vesting.is_expired

    def test_stacked_segments_second_waits(self, stacked_stream):
        vesting = evaluate_stream(stacked_stream, 60)
        assert vesting.segment_vested == (600, 0)

    def test_stacked_segments_complete(self, stacked_stream):
        vesting = evaluate_stream(stacked_stream, 200)
        assert vesting.segment_vested == (1000, 1000)
        assert vesting.is_expired

    def test_cancelled_segment_consumes_no_time(self, stacked_stream):
        first = replace(stacked_stream.segments[0], vested=200, cancelled=True)
        stream = replace(stacked_stream, segments=(first, stacked_stream.segments[1]))
        vesting = evaluate_stream(stream, 50)
        assert vesting.segment_vested == (200, 500)

    def test_cancelled_remainder_blocks_expiry(self, one_segment_stream):
        segment = replace(one_segment_stream.segments[0], vested=200, cancelled=True)
        vesting = evaluate_stream(replace(one_segment_stream, segments=(segment,)), 10 ** 6)
        assert vesting.total_unvested == 800
        assert not vesting.is_expired

    def test_archived_totals_seed(self, one_segment_stream):
        stream = replace(one_segment_stream, archived_amount=5000, archived_vested=5000)
        vesting = evaluate_stream(stream, 50)
        assert vesting.total_deposited == 6000
        assert vesting.total_vested == 5500

    def test_time_before_checkpoint_is_zero(self, one_segment_stream):
        stream = replace(one_segment_stream, last_update_time=1000)
        assert evaluate_stream(stream, 500).total_vested == 0

    def test_claimable_subtracts_withdrawn(self, one_segment_stream):
        stream = replace(one_segment_stream, total_withdrawn=300)
        assert evaluate_stream(stream, 50).claimable == 200

    def test_claimable_floors_at_zero(self, one_segment_stream):
        stream = replace(one_segment_stream, total_withdrawn=900)
        assert evaluate_stream(stream, 50).claimable == 0

    def test_empty_stream(self):
        vesting = evaluate_stream(Stream("pool", "subscriber"), 100)
        assert vesting.total_deposited == 0
        assert vesting.is_expired
        assert vesting.segment_vested == ()

    def test_zero_rate_on_active_segment(self, one_segment_stream):
        segment = replace(one_segment_stream.segments[0], rate_per_second=0)
        with pytest.raises(InvalidRate):
            evaluate_stream(replace(one_segment_stream, segments=(segment,)), 50)

    def test_segment_limit(self, one_segment_stream):
        stream = replace(
            one_segment_stream,
            segments=one_segment_stream.segments * (MAX_SEGMENTS + 1),
        )
        with pytest.raises(SegmentLimitExceeded):
            evaluate_stream(stream, 50)

    def test_segment_limit_boundary(self, one_segment_stream):
        stream = replace(one_segment_stream, segments=one_segment_stream.segments * MAX_SEGMENTS)
        assert evaluate_stream(stream, 50).total_deposited == 1000 * MAX_SEGMENTS


class TestStreamProperties:

    @settings(max_examples=200)
    @given(stream=streams(), t1=times, t2=times)
    def test_monotonic(self, stream, t1, t2):
        assume(t1 <= t2)
        assert evaluate_stream(stream, t2).total_vested >= evaluate_stream(stream, t1).total_vested

    @given(stream=streams(), t=times)
    def test_conservation(self, stream, t):
        vesting = evaluate_stream(stream, t)
        assert vesting.total_vested + vesting.total_unvested == vesting.total_deposited

    @given(stream=streams(), t=times)
    def test_claimable_non_negative(self, stream, t):
        assert evaluate_stream(stream, t).claimable >= 0

    @given(stream=streams(), t=times)
    def test_attribution_sums_to_total(self, stream, t):
        vesting = evaluate_stream(stream, t)
        assert stream.archived_vested + sum(vesting.segment_vested) == vesting.total_vested
        for segment, vested in zip(stream.segments, vesting.segment_vested):
            assert segment.vested <= vested <= segment.amount

    @given(stream=streams())
    def test_everything_vests_by_fully_vested_at(self, stream):
        vesting = evaluate_stream(stream, fully_vested_at(stream))
        for segment, vested in zip(stream.segments, vesting.segment_vested):
            if not segment.cancelled:
                assert vested == segment.amount


class TestCheckpoint:

    def test_checkpoint_writes_vested(self, stacked_stream):
        stream = checkpoint_stream(stacked_stream, 150)
        assert stream.last_update_time == 150
        assert [s.vested for s in stream.segments] == [1000, 500]

    def test_checkpoint_then_evaluate_matches(self, stacked_stream):
        stream = checkpoint_stream(stacked_stream, 50)
        assert evaluate_stream(stream, 150) == evaluate_stream(stacked_stream, 150)

    def test_checkpoint_in_the_past_is_noop(self, stacked_stream):
        stream = replace(stacked_stream, last_update_time=100)
        assert checkpoint_stream(stream, 50) is stream


class TestFold:

    def test_fold_moves_totals(self, stacked_stream):
        expired = checkpoint_stream(stacked_stream, 500)
        folded = fold_completed_segments(expired)
        assert folded.segments == ()
        assert folded.archived_count == 2
        assert folded.archived_amount == 2000
        assert folded.archived_vested == 2000
        assert evaluate_stream(folded, 600) == replace(
            evaluate_stream(expired, 600), segment_vested=()
        )

    def test_fold_keeps_cancelled_remainder(self, one_segment_stream):
        segment = replace(one_segment_stream.segments[0], vested=200, cancelled=True)
        folded = fold_completed_segments(replace(one_segment_stream, segments=(segment,)))
        assert folded.archived_amount == 1000
        assert folded.archived_vested == 200

    def test_fold_refuses_active_stream(self, stacked_stream):
        with pytest.raises(StreamNotExpired):
            fold_completed_segments(checkpoint_stream(stacked_stream, 150))


class TestNextSegmentIndex:

    def test_new_stream(self):
        assert next_segment_index(None) == 0

    def test_active_stream_appends(self, stacked_stream):
        assert next_segment_index(stacked_stream) == 2

    def test_expired_stream_restarts(self, stacked_stream):
        assert next_segment_index(checkpoint_stream(stacked_stream, 500)) == 0


class TestFullyVestedAt:

    def test_stacked(self, stacked_stream):
        assert fully_vested_at(stacked_stream) == 200

    def test_offset_by_checkpoint(self, one_segment_stream):
        stream = checkpoint_stream(one_segment_stream, 40)
        assert fully_vested_at(stream) == 100

"""
Real-time vesting for segmented streams

A stream stores vesting checkpoints only when the program touches it. The
functions here replay the program's arithmetic to answer "how much has
vested at current_time" without a transaction.

Segments share one time budget: the time elapsed since the stream's last
checkpoint is spent on segments in index order, so a later segment only
starts vesting once every earlier one is done.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from .constants import MAX_SEGMENTS
from .exceptions import SegmentLimitExceeded, StreamNotExpired
from .fixed_point import amount_for_time, require_int, time_for_amount
from .models import Segment, Stream, StreamVesting

logger = logging.getLogger(__name__)


def check_segment_limit(stream: Stream, max_segments: int = MAX_SEGMENTS) -> None:
    """Raise SegmentLimitExceeded if the stream holds too many segments."""
    if len(stream.segments) > max_segments:
        raise SegmentLimitExceeded(
            f"stream has {len(stream.segments)} segments, limit is {max_segments}"
        )


def evaluate_segment(segment: Segment, elapsed_seconds: int) -> int:
    """
    Vested amount of a single segment elapsed_seconds after its checkpoint.

    Cancelled segments are frozen and a non-positive elapsed time is a
    no-op. The result never exceeds segment.amount.
    """
    require_int("elapsed_seconds", elapsed_seconds)
    if segment.cancelled or elapsed_seconds <= 0:
        return segment.vested

    additional = amount_for_time(elapsed_seconds, segment.rate_per_second)
    return segment.vested + min(additional, segment.amount - segment.vested)


def evaluate_stream(stream: Stream, current_time: int) -> StreamVesting:
    """
    Vesting totals for a stream as of current_time.

    Args:
        stream: Stream snapshot as stored on-chain
        current_time: Unix time in seconds

    Returns:
        StreamVesting with totals, claimable amount, the expiry flag and the
        vested amount attributed to every segment

    Raises:
        SegmentLimitExceeded: if the snapshot holds too many segments
        InvalidRate: if an incomplete segment has a non-positive rate
    """
    require_int("current_time", current_time)
    check_segment_limit(stream)

    total_deposited = stream.archived_amount
    total_vested = stream.archived_vested
    remaining_time = max(current_time - stream.last_update_time, 0)
    all_complete = True
    segment_vested: List[int] = []

    for segment in stream.segments:
        total_deposited += segment.amount

        if segment.cancelled:
            segment_vested.append(segment.vested)
            continue

        unvested = segment.amount - segment.vested
        if unvested == 0:
            segment_vested.append(segment.vested)
            continue

        time_needed = time_for_amount(unvested, segment.rate_per_second)
        if remaining_time >= time_needed:
            segment_vested.append(segment.amount)
            remaining_time -= time_needed
        else:
            segment_vested.append(
                segment.vested + amount_for_time(remaining_time, segment.rate_per_second)
            )
            remaining_time = 0
            all_complete = False

    total_vested += sum(segment_vested)
    total_unvested = total_deposited - total_vested
    claimable = max(total_vested - stream.total_withdrawn, 0)

    logger.debug(
        "Evaluated stream %s at %d: vested %d of %d, claimable %d",
        stream.subscriber, current_time, total_vested, total_deposited, claimable,
    )

    return StreamVesting(
        total_deposited=total_deposited,
        total_vested=total_vested,
        total_unvested=total_unvested,
        claimable=claimable,
        is_expired=all_complete and total_unvested == 0,
        segment_vested=tuple(segment_vested),
    )


def fully_vested_at(stream: Stream) -> int:
    """
    First Unix time at which every non-cancelled segment has fully vested.

    Uses the same truncated per-segment durations as evaluate_stream, so
    evaluating at the returned time vests everything that can vest.
    """
    remaining = sum(
        time_for_amount(segment.unvested, segment.rate_per_second)
        for segment in stream.segments
        if not segment.is_complete
    )
    return stream.last_update_time + remaining


def checkpoint_stream(stream: Stream, current_time: int) -> Stream:
    """
    Write the vesting state at current_time back into a new snapshot.

    This is what the program does at the start of every state-changing
    instruction. A current_time before the last checkpoint leaves the
    snapshot untouched.
    """
    if current_time <= stream.last_update_time:
        return stream

    vesting = evaluate_stream(stream, current_time)
    segments = tuple(
        replace(segment, vested=vested)
        for segment, vested in zip(stream.segments, vesting.segment_vested)
    )
    return replace(stream, segments=segments, last_update_time=current_time)


def fold_completed_segments(stream: Stream) -> Stream:
    """
    Move a fully complete segment list into the archived totals.

    The result has no segments and archived totals grown by the folded
    amounts, so evaluate_stream reports the same deposited and vested sums
    before and after folding.

    Raises:
        StreamNotExpired: if any segment is still vesting
    """
    pending = [i for i, segment in enumerate(stream.segments) if not segment.is_complete]
    if pending:
        raise StreamNotExpired(
            f"segments {pending} are still vesting; checkpoint the stream first"
        )

    return replace(
        stream,
        archived_count=stream.archived_count + len(stream.segments),
        archived_amount=stream.archived_amount + sum(s.amount for s in stream.segments),
        archived_vested=stream.archived_vested + sum(s.vested for s in stream.segments),
        current_segment_index=0,
        segments=(),
    )


def next_segment_index(stream: Optional[Stream]) -> int:
    """
    Index the next subscribed segment will occupy.

    New streams and streams whose segments are all complete start over at
    index 0 because the program folds the old list on reactivation.
    """
    if stream is None:
        return 0
    if all(segment.is_complete for segment in stream.segments):
        return 0
    return len(stream.segments)

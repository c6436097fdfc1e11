"""
Display summaries built on top of the vesting engine

Nothing here does its own vesting arithmetic: every figure comes from an
evaluate_stream result, so views and totals cannot drift apart.
"""

from typing import Dict, Iterable, List, Tuple

from .calculator import compute_rate, compute_upgrade_cost
from .constants import DEFAULT_CLAIM_BATCH_SIZE
from .models import (
    ClaimPlan,
    Pool,
    PoolAggregateStats,
    PoolInfo,
    SegmentInfo,
    Stream,
    StreamInfo,
    StreamVesting,
    StreamWithAddress,
    UpgradeQuote,
    to_datetime,
)
from .vesting import evaluate_stream


def build_segment_infos(stream: Stream, vesting: StreamVesting) -> Tuple[SegmentInfo, ...]:
    """
    Per-segment summaries using the vested amounts attributed by the aggregator.

    Raises:
        ValueError: if vesting was computed for a different segment list
    """
    if len(vesting.segment_vested) != len(stream.segments):
        raise ValueError(
            f"vesting covers {len(vesting.segment_vested)} segments, "
            f"stream has {len(stream.segments)}"
        )

    infos = []
    for index, (segment, vested) in enumerate(zip(stream.segments, vesting.segment_vested)):
        infos.append(SegmentInfo(
            index=index,
            tier=segment.tier,
            payer=segment.payer,
            amount=segment.amount,
            vested=vested,
            unvested=segment.amount - vested,
            rate_per_second=segment.rate_per_second,
            cancelled=segment.cancelled,
            is_complete=segment.cancelled or vested == segment.amount,
            checkpoint_vested=segment.vested,
        ))
    return tuple(infos)


def build_stream_info(address: str, stream: Stream, vesting: StreamVesting) -> StreamInfo:
    """Stream summary with segment counts for display."""
    segments = build_segment_infos(stream, vesting)
    return StreamInfo(
        address=address,
        pool=stream.pool,
        subscriber=stream.subscriber,
        start_time=to_datetime(stream.start_time),
        total_deposited=vesting.total_deposited,
        total_vested=vesting.total_vested,
        total_unvested=vesting.total_unvested,
        total_withdrawn=stream.total_withdrawn,
        claimable=vesting.claimable,
        active_segments=sum(1 for s in segments if not s.is_complete),
        cancelled_segments=sum(1 for s in segments if s.cancelled),
        is_expired=vesting.is_expired,
        segments=segments,
    )


def build_pool_info(address: str, pool: Pool) -> PoolInfo:
    return PoolInfo(
        address=address,
        owner=pool.owner,
        mint=pool.mint,
        name=pool.name,
        total_subscribers=pool.total_subscribers,
        total_deposited=pool.total_deposited,
        total_withdrawn=pool.total_withdrawn,
        total_refunded=pool.total_refunded,
        created_at=to_datetime(pool.created_at),
    )


def build_pool_aggregate_stats(
    pool_address: str,
    streams: Iterable[StreamWithAddress],
    current_time: int,
) -> PoolAggregateStats:
    """
    Real-time totals across the streams of one pool.

    total_claimable sums the per-stream claimable amounts, each already
    floored at zero, so one stale stream cannot hide another's balance.
    """
    total_streams = 0
    active_streams = 0
    expired_streams = 0
    total_deposited = 0
    total_vested = 0
    total_withdrawn = 0
    claimable_by_stream: Dict[str, int] = {}

    for item in streams:
        vesting = evaluate_stream(item.stream, current_time)
        total_streams += 1
        total_deposited += vesting.total_deposited
        total_vested += vesting.total_vested
        total_withdrawn += item.stream.total_withdrawn
        claimable_by_stream[item.address] = vesting.claimable

        if vesting.is_expired:
            expired_streams += 1
        else:
            active_streams += 1

    return PoolAggregateStats(
        pool=pool_address,
        total_streams=total_streams,
        active_streams=active_streams,
        expired_streams=expired_streams,
        total_deposited=total_deposited,
        total_vested=total_vested,
        total_withdrawn=total_withdrawn,
        total_claimable=sum(claimable_by_stream.values()),
        total_unvested=total_deposited - total_vested,
        calculated_at=to_datetime(current_time),
        claimable_by_stream=claimable_by_stream,
    )


def is_claim_worthwhile(vesting: StreamVesting, min_claimable: int = 1) -> bool:
    """True when submitting a claim would move at least min_claimable."""
    return vesting.claimable >= max(min_claimable, 1)


def plan_claim_batches(
    pool_address: str,
    streams: Iterable[StreamWithAddress],
    current_time: int,
    batch_size: int = DEFAULT_CLAIM_BATCH_SIZE,
    min_claimable: int = 1,
) -> ClaimPlan:
    """
    Group the claimable streams of a pool into batches for claim-all.

    Streams below min_claimable are listed in skipped. Batches keep the
    order the streams were given in.
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    claimable: List[str] = []
    skipped: List[str] = []
    total_streams = 0
    total_claimable = 0

    for item in streams:
        total_streams += 1
        vesting = evaluate_stream(item.stream, current_time)
        if is_claim_worthwhile(vesting, min_claimable):
            claimable.append(item.address)
            total_claimable += vesting.claimable
        else:
            skipped.append(item.address)

    batches = tuple(
        tuple(claimable[i:i + batch_size])
        for i in range(0, len(claimable), batch_size)
    )
    return ClaimPlan(
        pool=pool_address,
        batches=batches,
        total_streams=total_streams,
        total_claimable=total_claimable,
        skipped=tuple(skipped),
    )


def quote_segment_upgrade(
    stream: Stream,
    segment_index: int,
    new_amount: int,
    new_duration: int,
    current_time: int,
) -> UpgradeQuote:
    """
    Price moving one segment to a new tier at current_time.

    The unvested amount is taken from the real-time attribution, so time
    that has passed since the last checkpoint is not charged twice.

    Raises:
        IndexError: if segment_index is out of range
        ValueError: if the segment is cancelled
    """
    if segment_index < 0:
        raise IndexError(f"segment index {segment_index} out of range")
    segment = stream.segments[segment_index]
    if segment.cancelled:
        raise ValueError(f"segment {segment_index} is cancelled")

    vesting = evaluate_stream(stream, current_time)
    unvested = segment.amount - vesting.segment_vested[segment_index]
    new_rate = compute_rate(new_amount, new_duration)

    return UpgradeQuote(
        segment_index=segment_index,
        unvested=unvested,
        current_rate=segment.rate_per_second,
        new_rate=new_rate,
        cost=compute_upgrade_cost(unvested, segment.rate_per_second, new_rate),
    )

"""
Data models for Flowcraft SDK

Snapshots (Config, Pool, Segment, Stream) mirror the on-chain accounts and
are immutable. Every amount, rate and timestamp is an int.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Tuple


def _as_int(value: Any) -> int:
    if isinstance(value, str):
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    return value


def _pick(data: Mapping[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel, default)


@dataclass(frozen=True)
class Config:
    """Protocol configuration"""
    admin: str
    treasury: str
    fee_bps: int
    bump: int = 0


@dataclass(frozen=True)
class Pool:
    """Subscription pool"""
    owner: str
    mint: str
    name: str
    total_subscribers: int = 0
    total_deposited: int = 0
    total_withdrawn: int = 0
    total_refunded: int = 0
    created_at: int = 0
    bump: int = 0


@dataclass(frozen=True)
class Segment:
    """Rate-limited tranche of a stream"""
    tier: str
    payer: str
    rate_per_second: int
    amount: int
    vested: int = 0
    cancelled: bool = False

    @property
    def unvested(self) -> int:
        return self.amount - self.vested

    @property
    def is_complete(self) -> bool:
        """Cancelled or fully vested segments never change again."""
        return self.cancelled or self.vested == self.amount

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Segment":
        """
        Build a segment from a JSON-style mapping.

        Accepts snake_case or camelCase keys and integer strings.
        """
        return cls(
            tier=data.get("tier", ""),
            payer=data.get("payer", ""),
            rate_per_second=_as_int(_pick(data, "rate_per_second", "ratePerSecond")),
            amount=_as_int(data["amount"]),
            vested=_as_int(data.get("vested", 0)),
            cancelled=bool(data.get("cancelled", False)),
        )


@dataclass(frozen=True)
class Stream:
    """One subscriber's stream into a pool"""
    pool: str
    subscriber: str
    start_time: int = 0
    last_update_time: int = 0
    archived_count: int = 0
    archived_amount: int = 0
    archived_vested: int = 0
    total_withdrawn: int = 0
    current_segment_index: int = 0
    bump: int = 0
    segments: Tuple[Segment, ...] = ()

    def __post_init__(self):
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Stream":
        """
        Build a stream snapshot from a JSON-style mapping.

        Example:
            >>> stream = Stream.from_dict(json.load(open("stream.json")))
        """
        return cls(
            pool=data.get("pool", ""),
            subscriber=data.get("subscriber", ""),
            start_time=_as_int(_pick(data, "start_time", "startTime", 0)),
            last_update_time=_as_int(_pick(data, "last_update_time", "lastUpdateTime", 0)),
            archived_count=_as_int(_pick(data, "archived_count", "archivedCount", 0)),
            archived_amount=_as_int(_pick(data, "archived_amount", "archivedAmount", 0)),
            archived_vested=_as_int(_pick(data, "archived_vested", "archivedVested", 0)),
            total_withdrawn=_as_int(_pick(data, "total_withdrawn", "totalWithdrawn", 0)),
            current_segment_index=_as_int(
                _pick(data, "current_segment_index", "currentSegmentIndex", 0)
            ),
            bump=_as_int(data.get("bump", 0)),
            segments=tuple(Segment.from_dict(s) for s in data.get("segments", ())),
        )


@dataclass(frozen=True)
class StreamWithAddress:
    """Stream snapshot paired with its account address"""
    address: str
    stream: Stream


@dataclass(frozen=True)
class StreamVesting:
    """Real-time vesting totals for a stream"""
    total_deposited: int
    total_vested: int
    total_unvested: int
    claimable: int
    is_expired: bool
    # Vested amount attributed to each segment, in segment order
    segment_vested: Tuple[int, ...] = ()


@dataclass(frozen=True)
class UpgradeCost:
    """Cost of moving the remaining duration of a segment to a new rate"""
    new_cost: int
    difference: int
    is_upgrade: bool


@dataclass(frozen=True)
class UpgradeQuote:
    """Upgrade cost for a concrete segment at a point in time"""
    segment_index: int
    unvested: int
    current_rate: int
    new_rate: int
    cost: UpgradeCost


@dataclass(frozen=True)
class SubscriptionQuote:
    """Fee split and rate for a new deposit"""
    amount: int
    fee: int
    net_amount: int
    rate_per_second: int


@dataclass(frozen=True)
class SegmentInfo:
    """Display summary for one segment"""
    index: int
    tier: str
    payer: str
    amount: int
    vested: int
    unvested: int
    rate_per_second: int
    cancelled: bool
    is_complete: bool
    checkpoint_vested: int = 0


@dataclass(frozen=True)
class StreamInfo:
    """Display summary for a stream"""
    address: str
    pool: str
    subscriber: str
    start_time: datetime
    total_deposited: int
    total_vested: int
    total_unvested: int
    total_withdrawn: int
    claimable: int
    active_segments: int
    cancelled_segments: int
    is_expired: bool
    segments: Tuple[SegmentInfo, ...] = ()


@dataclass(frozen=True)
class PoolInfo:
    """Display summary for a pool"""
    address: str
    owner: str
    mint: str
    name: str
    total_subscribers: int
    total_deposited: int
    total_withdrawn: int
    total_refunded: int
    created_at: datetime


@dataclass(frozen=True)
class PoolAggregateStats:
    """Real-time totals across every stream of a pool"""
    pool: str
    total_streams: int
    active_streams: int
    expired_streams: int
    total_deposited: int
    total_vested: int
    total_withdrawn: int
    total_claimable: int
    total_unvested: int
    calculated_at: datetime
    claimable_by_stream: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ClaimPlan:
    """Claimable streams of a pool split into submission batches"""
    pool: str
    batches: Tuple[Tuple[str, ...], ...]
    total_streams: int
    total_claimable: int
    skipped: Tuple[str, ...] = ()

    @property
    def claimable_streams(self) -> int:
        return sum(len(batch) for batch in self.batches)


def to_datetime(timestamp: int) -> datetime:
    """Convert a Unix timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)

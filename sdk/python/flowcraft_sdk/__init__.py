"""
Flowcraft Python SDK

Python SDK for Flowcraft - segmented subscription streams on Solana.

Features:
- Real-time vesting, claimable and expiry figures without a transaction
- Fee, rate and tier-upgrade pricing in exact integer arithmetic
- Pool analytics and claim-all batch planning
- Read-only ledger client with program address derivation
- Vesting charts
"""

import logging

__version__ = "1.0.0"
__author__ = "Flowcraft Team"

from .calculator import (
    compute_fee,
    compute_net_amount,
    compute_rate,
    compute_remaining_duration,
    compute_upgrade_cost,
    quote_subscription,
)
from .client import FlowcraftClient
from .config import ClientConfig
from .constants import BPS_DENOMINATOR, MAX_FEE_BPS, MAX_SEGMENTS, RATE_SCALE
from .crypto import FlowcraftCrypto
from .exceptions import (
    AccountDecodeError,
    CalculationError,
    FlowcraftError,
    InvalidAddress,
    InvalidAmount,
    InvalidDuration,
    InvalidFeeBps,
    InvalidRate,
    NetworkError,
    RpcError,
    SegmentLimitExceeded,
    StreamNotExpired,
)
from .models import (
    ClaimPlan,
    Config,
    Pool,
    PoolAggregateStats,
    PoolInfo,
    Segment,
    SegmentInfo,
    Stream,
    StreamInfo,
    StreamVesting,
    StreamWithAddress,
    SubscriptionQuote,
    UpgradeCost,
    UpgradeQuote,
)
from .utils import Utils
from .vesting import (
    checkpoint_stream,
    evaluate_segment,
    evaluate_stream,
    fold_completed_segments,
    fully_vested_at,
    next_segment_index,
)
from .views import (
    build_pool_aggregate_stats,
    build_pool_info,
    build_segment_infos,
    build_stream_info,
    is_claim_worthwhile,
    plan_claim_batches,
    quote_segment_upgrade,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "FlowcraftClient",
    "ClientConfig",
    "FlowcraftCrypto",
    "Utils",
    # constants
    "RATE_SCALE",
    "BPS_DENOMINATOR",
    "MAX_FEE_BPS",
    "MAX_SEGMENTS",
    # calculations
    "compute_fee",
    "compute_net_amount",
    "compute_rate",
    "compute_remaining_duration",
    "compute_upgrade_cost",
    "quote_subscription",
    "evaluate_segment",
    "evaluate_stream",
    "checkpoint_stream",
    "fold_completed_segments",
    "fully_vested_at",
    "next_segment_index",
    # views
    "build_segment_infos",
    "build_stream_info",
    "build_pool_info",
    "build_pool_aggregate_stats",
    "is_claim_worthwhile",
    "plan_claim_batches",
    "quote_segment_upgrade",
    # models
    "Config",
    "Pool",
    "Segment",
    "Stream",
    "StreamWithAddress",
    "StreamVesting",
    "UpgradeCost",
    "UpgradeQuote",
    "SubscriptionQuote",
    "SegmentInfo",
    "StreamInfo",
    "PoolInfo",
    "PoolAggregateStats",
    "ClaimPlan",
    # errors
    "FlowcraftError",
    "CalculationError",
    "InvalidDuration",
    "InvalidRate",
    "InvalidFeeBps",
    "InvalidAmount",
    "SegmentLimitExceeded",
    "StreamNotExpired",
    "NetworkError",
    "RpcError",
    "AccountDecodeError",
    "InvalidAddress",
]

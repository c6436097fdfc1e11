"""
Test configuration and fixtures
"""
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

# Make the SDK importable without installing it
sdk_path = Path(__file__).parent.parent
sys.path.insert(0, str(sdk_path))

import pytest

from flowcraft_sdk import Segment, Stream
from flowcraft_sdk.crypto import FlowcraftCrypto


def make_address(seed: int) -> str:
    """Deterministic base58 address for tests."""
    return FlowcraftCrypto.encode_address(bytes([seed % 256]) * 32)


@pytest.fixture
def pool_address():
    return make_address(7)


@pytest.fixture
def subscriber_address():
    return make_address(9)


@pytest.fixture
def one_segment_stream(pool_address, subscriber_address):
    """1000 units over 100 seconds, checkpointed at t=0."""
    return Stream(
        pool=pool_address,
        subscriber=subscriber_address,
        segments=(Segment("basic", subscriber_address, 10_000_000_000, 1000),),
    )


@pytest.fixture
def stacked_stream(pool_address, subscriber_address):
    """Two back-to-back segments of 1000 units over 100 seconds each."""
    return Stream(
        pool=pool_address,
        subscriber=subscriber_address,
        segments=(
            Segment("basic", subscriber_address, 10_000_000_000, 1000),
            Segment("basic", subscriber_address, 10_000_000_000, 1000),
        ),
    )

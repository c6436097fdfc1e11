"""
Account decoding for the Flowcraft program

Accounts are Anchor accounts: an 8-byte discriminator followed by the
Borsh-encoded fields in declaration order, little-endian.
"""

import hashlib
import struct

from .crypto import FlowcraftCrypto
from .exceptions import AccountDecodeError
from .models import Config, Pool, Segment, Stream


def account_discriminator(name: str) -> bytes:
    """First 8 bytes of sha256("account:<name>")."""
    return hashlib.sha256(f"account:{name}".encode("utf-8")).digest()[:8]


CONFIG_DISCRIMINATOR = account_discriminator("Config")
POOL_DISCRIMINATOR = account_discriminator("Pool")
STREAM_DISCRIMINATOR = account_discriminator("Stream")

# Stream.pool follows the discriminator directly
STREAM_POOL_OFFSET = 8


class BorshReader:
    """Sequential reader over Borsh-encoded bytes."""

    def __init__(self, data: bytes, offset: int = 0):
        self.data = data
        self.offset = offset

    def _unpack(self, fmt: str):
        size = struct.calcsize(fmt)
        if self.offset + size > len(self.data):
            raise AccountDecodeError(
                f"account data truncated at offset {self.offset} "
                f"(need {size} bytes, have {len(self.data) - self.offset})"
            )
        value = struct.unpack_from(fmt, self.data, self.offset)[0]
        self.offset += size
        return value

    def u8(self) -> int:
        return self._unpack("<B")

    def u32(self) -> int:
        return self._unpack("<I")

    def u64(self) -> int:
        return self._unpack("<Q")

    def i64(self) -> int:
        return self._unpack("<q")

    def boolean(self) -> bool:
        value = self.u8()
        if value > 1:
            raise AccountDecodeError(f"invalid bool byte {value} at offset {self.offset - 1}")
        return value == 1

    def fixed(self, length: int) -> bytes:
        if self.offset + length > len(self.data):
            raise AccountDecodeError(f"account data truncated at offset {self.offset}")
        value = self.data[self.offset:self.offset + length]
        self.offset += length
        return value

    def pubkey(self) -> str:
        return FlowcraftCrypto.encode_address(self.fixed(32))

    def string(self) -> str:
        raw = self.fixed(self.u32())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise AccountDecodeError(f"invalid utf-8 string: {raw!r}") from e


def _reader_for(data: bytes, discriminator: bytes, name: str) -> BorshReader:
    if data[:8] != discriminator:
        raise AccountDecodeError(f"account is not a {name} account")
    return BorshReader(data, 8)


def decode_config(data: bytes) -> Config:
    reader = _reader_for(data, CONFIG_DISCRIMINATOR, "Config")
    return Config(
        admin=reader.pubkey(),
        treasury=reader.pubkey(),
        fee_bps=reader.u64(),
        bump=reader.u8(),
    )


def decode_pool(data: bytes) -> Pool:
    reader = _reader_for(data, POOL_DISCRIMINATOR, "Pool")
    return Pool(
        owner=reader.pubkey(),
        mint=reader.pubkey(),
        name=reader.string(),
        total_subscribers=reader.u64(),
        total_deposited=reader.u64(),
        total_withdrawn=reader.u64(),
        total_refunded=reader.u64(),
        created_at=reader.i64(),
        bump=reader.u8(),
    )


def _decode_segment(reader: BorshReader) -> Segment:
    return Segment(
        tier=reader.string(),
        payer=reader.pubkey(),
        rate_per_second=reader.u64(),
        amount=reader.u64(),
        vested=reader.u64(),
        cancelled=reader.boolean(),
    )


def decode_stream(data: bytes) -> Stream:
    reader = _reader_for(data, STREAM_DISCRIMINATOR, "Stream")
    pool = reader.pubkey()
    subscriber = reader.pubkey()
    start_time = reader.i64()
    last_update_time = reader.i64()
    archived_count = reader.u64()
    archived_amount = reader.u64()
    archived_vested = reader.u64()
    total_withdrawn = reader.u64()
    current_segment_index = reader.u8()
    bump = reader.u8()
    segments = tuple(_decode_segment(reader) for _ in range(reader.u32()))

    return Stream(
        pool=pool,
        subscriber=subscriber,
        start_time=start_time,
        last_update_time=last_update_time,
        archived_count=archived_count,
        archived_amount=archived_amount,
        archived_vested=archived_vested,
        total_withdrawn=total_withdrawn,
        current_segment_index=current_segment_index,
        bump=bump,
        segments=segments,
    )

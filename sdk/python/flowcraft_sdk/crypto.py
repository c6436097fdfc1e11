"""
Program address derivation for Flowcraft accounts
"""

import hashlib
from typing import Sequence, Tuple

import base58

from .constants import CONFIG_SEED, POOL_SEED, STREAM_SEED, VAULT_SEED
from .exceptions import InvalidAddress

PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEED_LENGTH = 32
MAX_SEEDS = 16

# edwards25519 field prime and curve constant d = -121665/121666
ED25519_P = 2 ** 255 - 19
ED25519_D = -121665 * pow(121666, ED25519_P - 2, ED25519_P) % ED25519_P


class FlowcraftCrypto:
    """
    Address helpers for the Flowcraft program.

    Account addresses are program-derived: sha256 of the seeds, a bump byte,
    the program id and a fixed marker, chosen so the result is not a valid
    ed25519 public key.

    Example:
        >>> pool, bump = FlowcraftCrypto.pool_pda(owner, "pro-tier", program_id)
    """

    @staticmethod
    def decode_address(address: str) -> bytes:
        """
        Decode a base58 address into its 32 raw bytes.

        Raises:
            InvalidAddress: if the string is not base58 or not 32 bytes long
        """
        try:
            raw = base58.b58decode(address)
        except ValueError as e:
            raise InvalidAddress(f"not a base58 address: {address!r}") from e
        if len(raw) != 32:
            raise InvalidAddress(f"address must be 32 bytes, got {len(raw)}: {address!r}")
        return raw

    @staticmethod
    def encode_address(raw: bytes) -> str:
        """Encode 32 raw bytes as a base58 address."""
        if len(raw) != 32:
            raise InvalidAddress(f"address must be 32 bytes, got {len(raw)}")
        return base58.b58encode(raw).decode("ascii")

    @staticmethod
    def is_on_curve(raw: bytes) -> bool:
        """
        True if raw decompresses to an ed25519 point.

        Mirrors the validator's check: the y coordinate is read with the sign
        bit cleared and the point exists iff (y^2 - 1) / (d*y^2 + 1) is a
        square mod p. Subgroup membership is not required.
        """
        y = int.from_bytes(raw, "little") & ((1 << 255) - 1)
        y2 = y * y % ED25519_P
        u = (y2 - 1) % ED25519_P
        v = (ED25519_D * y2 + 1) % ED25519_P
        x2 = u * pow(v, ED25519_P - 2, ED25519_P) % ED25519_P
        return x2 == 0 or pow(x2, (ED25519_P - 1) // 2, ED25519_P) == 1

    @staticmethod
    def _hash_seeds(seeds: Sequence[bytes], program_id: str) -> bytes:
        if len(seeds) > MAX_SEEDS:
            raise ValueError(f"at most {MAX_SEEDS} seeds allowed, got {len(seeds)}")
        digest = hashlib.sha256()
        for seed in seeds:
            if len(seed) > MAX_SEED_LENGTH:
                raise ValueError(f"seed longer than {MAX_SEED_LENGTH} bytes: {seed!r}")
            digest.update(seed)
        digest.update(FlowcraftCrypto.decode_address(program_id))
        digest.update(PDA_MARKER)
        return digest.digest()

    @staticmethod
    def create_program_address(seeds: Sequence[bytes], program_id: str) -> str:
        """
        Derive the address for an exact seed list (bump included).

        Raises:
            ValueError: if a seed is too long, or the hash lands on the curve
        """
        raw = FlowcraftCrypto._hash_seeds(seeds, program_id)
        if FlowcraftCrypto.is_on_curve(raw):
            raise ValueError("derived address is on the ed25519 curve")
        return FlowcraftCrypto.encode_address(raw)

    @staticmethod
    def find_program_address(seeds: Sequence[bytes], program_id: str) -> Tuple[str, int]:
        """
        Search bumps from 255 down for the first off-curve address.

        Returns:
            Tuple of (address, bump)
        """
        seeds = list(seeds)
        for bump in range(255, -1, -1):
            raw = FlowcraftCrypto._hash_seeds(seeds + [bytes([bump])], program_id)
            if not FlowcraftCrypto.is_on_curve(raw):
                return FlowcraftCrypto.encode_address(raw), bump
        raise ValueError("unable to find a viable program address bump")

    @staticmethod
    def config_pda(program_id: str) -> Tuple[str, int]:
        return FlowcraftCrypto.find_program_address([CONFIG_SEED], program_id)

    @staticmethod
    def pool_pda(owner: str, name: str, program_id: str) -> Tuple[str, int]:
        """Pool address for an owner and pool name (name is at most 32 bytes)."""
        return FlowcraftCrypto.find_program_address(
            [POOL_SEED, FlowcraftCrypto.decode_address(owner), name.encode("utf-8")],
            program_id,
        )

    @staticmethod
    def stream_pda(pool: str, subscriber: str, program_id: str) -> Tuple[str, int]:
        return FlowcraftCrypto.find_program_address(
            [
                STREAM_SEED,
                FlowcraftCrypto.decode_address(pool),
                FlowcraftCrypto.decode_address(subscriber),
            ],
            program_id,
        )

    @staticmethod
    def vault_pda(pool: str, program_id: str) -> Tuple[str, int]:
        return FlowcraftCrypto.find_program_address(
            [VAULT_SEED, FlowcraftCrypto.decode_address(pool)], program_id
        )

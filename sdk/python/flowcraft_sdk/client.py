"""
Main Flowcraft ledger client
"""

import base64
import logging
import time
from itertools import count
from typing import Any, List, Optional, Tuple

import base58
import requests

from .config import ClientConfig
from .constants import DEFAULT_CLAIM_BATCH_SIZE
from .crypto import FlowcraftCrypto
from .exceptions import AccountDecodeError, NetworkError, RpcError
from .layout import (
    STREAM_DISCRIMINATOR,
    STREAM_POOL_OFFSET,
    decode_config,
    decode_pool,
    decode_stream,
)
from .models import (
    ClaimPlan,
    Config,
    Pool,
    PoolAggregateStats,
    PoolInfo,
    Stream,
    StreamInfo,
    StreamWithAddress,
)
from .vesting import evaluate_stream, next_segment_index
from .views import (
    build_pool_aggregate_stats,
    build_pool_info,
    build_stream_info,
    plan_claim_batches,
)

logger = logging.getLogger(__name__)


class FlowcraftClient:
    """
    Read-only client for Flowcraft pools and streams.

    Accounts are read over Solana JSON-RPC and decoded locally; every
    derived figure comes from the pure vesting functions. Methods that
    report real-time amounts take current_time and only read the wall
    clock when it is omitted.

    Example:
        >>> client = FlowcraftClient(ClientConfig(rpc_url="http://localhost:8899"))
        >>> info = client.get_stream_info(stream_address)
        >>> print(f"Claimable: {info.claimable}")
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """
        Initialize Flowcraft client.

        Args:
            config: Endpoint, program id, commitment and timeout
            session: Optional pre-configured requests session
        """
        self.config = config
        self.program_id = config.program_id
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
        })
        self._ids = count(1)

    def _rpc(self, method: str, params: List[Any]) -> Any:
        """Make a JSON-RPC call and return its result"""
        payload = {
            'jsonrpc': '2.0',
            'id': next(self._ids),
            'method': method,
            'params': params,
        }
        try:
            response = self.session.post(
                self.config.rpc_url,
                json=payload,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error(f"RPC {method} failed: {e}")
            raise NetworkError(f"{method} request failed: {e}") from e
        except ValueError as e:
            raise NetworkError(f"{method} returned invalid JSON") from e

        logger.debug(f"RPC {method} - Status: {response.status_code}")
        if data.get('error'):
            error = data['error']
            raise RpcError(error.get('message', 'Unknown error'), code=error.get('code'))
        return data.get('result')

    def _get_account_data(self, address: str) -> Optional[bytes]:
        """Raw account data, or None if the account does not exist"""
        result = self._rpc('getAccountInfo', [
            address,
            {'encoding': 'base64', 'commitment': self.config.commitment},
        ])
        value = (result or {}).get('value')
        if value is None:
            return None
        return base64.b64decode(value['data'][0])

    @staticmethod
    def _now(current_time: Optional[int]) -> int:
        return int(time.time()) if current_time is None else current_time

    # Address Helpers

    def get_config_pda(self) -> Tuple[str, int]:
        return FlowcraftCrypto.config_pda(self.program_id)

    def get_pool_pda(self, owner: str, name: str) -> Tuple[str, int]:
        return FlowcraftCrypto.pool_pda(owner, name, self.program_id)

    def get_stream_pda(self, pool: str, subscriber: str) -> Tuple[str, int]:
        return FlowcraftCrypto.stream_pda(pool, subscriber, self.program_id)

    def get_vault_pda(self, pool: str) -> Tuple[str, int]:
        return FlowcraftCrypto.vault_pda(pool, self.program_id)

    # Account Reads

    def fetch_config(self) -> Optional[Config]:
        """
        Fetch the global protocol config.

        Returns:
            Config, or None if the program has not been initialized
        """
        config_address, _ = self.get_config_pda()
        data = self._get_account_data(config_address)
        return decode_config(data) if data is not None else None

    def fetch_pool(self, pool: str) -> Optional[Pool]:
        """
        Fetch a pool by address.

        Returns:
            Pool, or None if no account exists at the address

        Raises:
            AccountDecodeError: if the account exists but is not a pool
        """
        data = self._get_account_data(pool)
        return decode_pool(data) if data is not None else None

    def fetch_pool_by_owner(self, owner: str, name: str) -> Optional[Pool]:
        pool_address, _ = self.get_pool_pda(owner, name)
        return self.fetch_pool(pool_address)

    def fetch_stream(self, stream: str) -> Optional[Stream]:
        """
        Fetch a stream by address.

        Returns:
            Stream, or None if no account exists at the address
        """
        data = self._get_account_data(stream)
        return decode_stream(data) if data is not None else None

    def fetch_stream_by_subscriber(self, pool: str, subscriber: str) -> Optional[Stream]:
        stream_address, _ = self.get_stream_pda(pool, subscriber)
        return self.fetch_stream(stream_address)

    def fetch_streams_by_pool(self, pool: str) -> List[StreamWithAddress]:
        """
        Fetch every stream of a pool.

        Filters program accounts by the Stream discriminator and by the pool
        key stored right after it. Accounts that fail to decode are skipped.
        """
        result = self._rpc('getProgramAccounts', [
            self.program_id,
            {
                'encoding': 'base64',
                'commitment': self.config.commitment,
                'filters': [
                    {'memcmp': {'offset': 0, 'bytes': base58.b58encode(STREAM_DISCRIMINATOR).decode('ascii')}},
                    {'memcmp': {'offset': STREAM_POOL_OFFSET, 'bytes': pool}},
                ],
            },
        ])

        streams = []
        for account in result or []:
            address = account['pubkey']
            try:
                data = base64.b64decode(account['account']['data'][0])
                streams.append(StreamWithAddress(address=address, stream=decode_stream(data)))
            except AccountDecodeError as e:
                logger.warning(f"Skipping malformed stream account {address}: {e}")
        logger.debug(f"Fetched {len(streams)} streams for pool {pool}")
        return streams

    # Views

    def get_pool_info(self, pool: str) -> Optional[PoolInfo]:
        data = self.fetch_pool(pool)
        if data is None:
            return None
        return build_pool_info(pool, data)

    def get_stream_info(self, stream: str, current_time: Optional[int] = None) -> Optional[StreamInfo]:
        """
        Fetch a stream with real-time vesting figures.

        Args:
            stream: Stream address
            current_time: Unix time to evaluate at (default: now)

        Returns:
            StreamInfo, or None if the stream does not exist
        """
        data = self.fetch_stream(stream)
        if data is None:
            return None
        vesting = evaluate_stream(data, self._now(current_time))
        return build_stream_info(stream, data, vesting)

    def get_claimable(self, stream: str, current_time: Optional[int] = None) -> int:
        """Real-time claimable amount; 0 for a missing stream"""
        data = self.fetch_stream(stream)
        if data is None:
            return 0
        return evaluate_stream(data, self._now(current_time)).claimable

    def is_subscription_expired(self, stream: str, current_time: Optional[int] = None) -> bool:
        """True if every segment has finished vesting, or the stream does not exist"""
        data = self.fetch_stream(stream)
        if data is None:
            return True
        return evaluate_stream(data, self._now(current_time)).is_expired

    def pool_exists(self, owner: str, name: str) -> bool:
        return self.fetch_pool_by_owner(owner, name) is not None

    def subscription_exists(self, pool: str, subscriber: str) -> bool:
        return self.fetch_stream_by_subscriber(pool, subscriber) is not None

    def get_next_segment_index(self, pool: str, subscriber: str) -> int:
        """Index a new subscription from subscriber to pool would land at"""
        return next_segment_index(self.fetch_stream_by_subscriber(pool, subscriber))

    def get_pool_aggregate_stats(
        self, pool: str, current_time: Optional[int] = None
    ) -> PoolAggregateStats:
        """Real-time totals across every stream of a pool"""
        streams = self.fetch_streams_by_pool(pool)
        return build_pool_aggregate_stats(pool, streams, self._now(current_time))

    def plan_claim_all(
        self,
        pool: str,
        batch_size: int = DEFAULT_CLAIM_BATCH_SIZE,
        min_claimable: int = 1,
        current_time: Optional[int] = None,
    ) -> ClaimPlan:
        """
        Split the claimable streams of a pool into claim batches.

        Returns:
            ClaimPlan whose batches can each be submitted as one claim_batch
        """
        streams = self.fetch_streams_by_pool(pool)
        plan = plan_claim_batches(
            pool, streams, self._now(current_time), batch_size, min_claimable
        )
        logger.info(
            f"Planned {len(plan.batches)} claim batches for pool {pool} "
            f"({plan.claimable_streams}/{plan.total_streams} streams, {plan.total_claimable} claimable)"
        )
        return plan

    def close(self):
        """Close the session"""
        self.session.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, *args):
        """Context manager exit"""
        self.close()

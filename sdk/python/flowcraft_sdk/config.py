"""
Client configuration

The RPC endpoint and program id are always passed explicitly to the client;
from_env() is a convenience for scripts.
"""

import os
from dataclasses import dataclass

from .constants import DEFAULT_COMMITMENT, DEFAULT_PROGRAM_ID, DEFAULT_RPC_URL


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for FlowcraftClient"""
    rpc_url: str = DEFAULT_RPC_URL
    program_id: str = DEFAULT_PROGRAM_ID
    commitment: str = DEFAULT_COMMITMENT
    timeout: int = 30

    @classmethod
    def from_env(cls, prefix: str = "FLOWCRAFT_") -> "ClientConfig":
        """
        Read settings from environment variables.

        Recognized variables (with the default prefix): FLOWCRAFT_RPC_URL,
        FLOWCRAFT_PROGRAM_ID, FLOWCRAFT_COMMITMENT, FLOWCRAFT_TIMEOUT.
        Unset variables fall back to the class defaults.
        """
        env = os.environ
        return cls(
            rpc_url=env.get(f"{prefix}RPC_URL", DEFAULT_RPC_URL),
            program_id=env.get(f"{prefix}PROGRAM_ID", DEFAULT_PROGRAM_ID),
            commitment=env.get(f"{prefix}COMMITMENT", DEFAULT_COMMITMENT),
            timeout=int(env.get(f"{prefix}TIMEOUT", "30")),
        )

"""
Protocol constants for the Flowcraft stream program
"""

# Fixed-point scale for per-second rates
RATE_SCALE = 1_000_000_000

BPS_DENOMINATOR = 10_000
MAX_FEE_BPS = 1_000  # 10%
MAX_SEGMENTS = 100

# Seeds for program address derivation
CONFIG_SEED = b"config"
POOL_SEED = b"pool"
STREAM_SEED = b"stream"
VAULT_SEED = b"vault"

# Defaults for ClientConfig only; nothing reads these implicitly
DEFAULT_PROGRAM_ID = "3T8z77gRqyW6KZQBHf1ah2uKABh9vc5rSTaD595U2wm9"
DEFAULT_RPC_URL = "https://api.devnet.solana.com"
DEFAULT_COMMITMENT = "confirmed"

# Claim-all planning
DEFAULT_CLAIM_BATCH_SIZE = 20

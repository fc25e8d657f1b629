"""
Pump.fun AMM constants
"""

PROGRAM_ID = "pAMMBay6oceH9fJKBRHGP5D4bD4sWpmSwMn52FMfXEA"

POOL_TYPE = "pump-amm"

# Pool layout: discriminator(8) + bump(1) + index(2) + creator(32), then mints
QUOTE_MINT_OFFSET = 43
BASE_MINT_OFFSET = 75
LP_MINT_OFFSET = 107
POOL_MIN_SIZE = LP_MINT_OFFSET + 32

"""
Raydium AMM V4 / CPMM constants
"""

AMM_PROGRAM_ID = "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8"
CPMM_PROGRAM_ID = "CPMMoo8L3F4NbTegBCKVNunggL7H1ZpdTHKxQB5qKP1C"

# Mint authorities of LP tokens issued by each program
AMM_AUTHORITY = "5Q544fKrFoe6tsEbD7S8EmxGTJYAKtTVhAW5Q5pge4j1"
CPMM_AUTHORITY = "GpMZbSM2GgvTKHJirzeGfMFoaZ8UR2X7F4v8vHTvxFbL"

POOL_TYPE_AMM_V4 = "amm-v4"
POOL_TYPE_CPMM = "cpmm"

AUTHORITY_POOL_TYPES = {
    AMM_AUTHORITY: POOL_TYPE_AMM_V4,
    CPMM_AUTHORITY: POOL_TYPE_CPMM,
}

# AMM V4 pool state (LiquidityStateV4)
AMM_COIN_MINT_OFFSET = 408
AMM_PC_MINT_OFFSET = 440
AMM_LP_MINT_OFFSET = 472
AMM_POOL_MIN_SIZE = AMM_LP_MINT_OFFSET + 32
AMM_POOL_SIZE = 752

# CPMM pool state: discriminator(8) + amm_config + pool_creator + token_0_vault + token_1_vault
CPMM_LP_MINT_OFFSET = 8 + 4 * 32
CPMM_TOKEN0_MINT_OFFSET = 168
CPMM_TOKEN1_MINT_OFFSET = 200
CPMM_POOL_MIN_SIZE = CPMM_TOKEN1_MINT_OFFSET + 32

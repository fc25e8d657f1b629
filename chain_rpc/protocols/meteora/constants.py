"""
Meteora DLMM constants
"""

PROGRAM_ID = "24Uqj9JCLxUeoC3hGfh5W3s9FM9uCHDS2SG3LYwBpyTi"

POOL_TYPE = "dlmm"

# LbPair mint fields
TOKEN_X_MINT_OFFSET = 51
TOKEN_Y_MINT_OFFSET = 83
LB_MINT_OFFSET = 115
POOL_MIN_SIZE = LB_MINT_OFFSET + 32

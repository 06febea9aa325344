# agentek/tools/rpc/rpc_config.py
"""
RPC 工具配置
"""

from agentek.client.client_config import (
    ARBITRUM, BASE, MAINNET, MODE, OPTIMISM, POLYGON, SEPOLIA
)

RPC_CHAINS = [MAINNET, BASE, ARBITRUM, POLYGON, OPTIMISM, MODE, SEPOLIA]

# 区块信息中返回给 LLM 的字段
BLOCK_FIELDS = [
    "number", "hash", "parentHash", "timestamp", "miner",
    "gasUsed", "gasLimit", "baseFeePerGas",
]

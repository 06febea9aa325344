# agentek/tools/transfer/transfer_config.py
"""
转账配置
"""

from agentek.client.client_config import ARBITRUM, BASE, MAINNET, SEPOLIA

# 支持转账意图的链
TRANSFER_CHAINS = [MAINNET, ARBITRUM, BASE, SEPOLIA]

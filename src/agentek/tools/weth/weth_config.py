# agentek/tools/weth/weth_config.py
"""
WETH 配置
"""

from agentek.client.client_config import ARBITRUM, BASE, MAINNET, OPTIMISM, POLYGON

WETH_CHAINS = [MAINNET, OPTIMISM, ARBITRUM, POLYGON, BASE]

# 各链 WETH 合约地址
WETH_ADDRESS = {
    MAINNET.chain_id: "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    OPTIMISM.chain_id: "0x4200000000000000000000000000000000000006",
    ARBITRUM.chain_id: "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
    POLYGON.chain_id: "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",
    BASE.chain_id: "0x4200000000000000000000000000000000000006",
}

WETH_FUNCTIONS = {
    "deposit": "deposit()",
    "withdraw": "withdraw(uint256)",
}

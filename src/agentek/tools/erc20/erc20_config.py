# agentek/tools/erc20/erc20_config.py
"""
ERC20 配置
"""

from agentek.client.client_config import (
    ARBITRUM, BASE, MAINNET, MODE, OPTIMISM, POLYGON, SEPOLIA
)

# 支持 ERC20 工具的链
ERC20_CHAINS = [MAINNET, ARBITRUM, BASE, OPTIMISM, POLYGON, MODE, SEPOLIA]

# ERC20 函数签名
ERC20_FUNCTIONS = {
    "balanceOf": "balanceOf(address)",
    "allowance": "allowance(address,address)",
    "totalSupply": "totalSupply()",
    "decimals": "decimals()",
    "name": "name()",
    "symbol": "symbol()",
    "approve": "approve(address,uint256)",
    "transfer": "transfer(address,uint256)",
    "transferFrom": "transferFrom(address,address,uint256)",
}

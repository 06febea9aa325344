# agentek/tools/weth/__init__.py

from agentek.tools.weth.weth_tools import weth_tools

WETH_TOOL_CATEGORIES = {
    "意图": [
        "depositWETH",    # ETH -> WETH
        "withdrawWETH",   # WETH -> ETH
    ],
}

__all__ = [
    'weth_tools',
    'WETH_TOOL_CATEGORIES'
]

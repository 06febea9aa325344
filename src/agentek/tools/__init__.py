# agentek/tools/__init__.py
"""
EVM 工具集合
"""

from typing import List, Optional

from agentek.client.cache import TTLCache
from agentek.client.tool_registry import BaseTool
from agentek.tools.ens import ens_tools
from agentek.tools.erc20 import erc20_tools
from agentek.tools.rpc import rpc_tools
from agentek.tools.security import create_security_tools
from agentek.tools.signing import signing_tools
from agentek.tools.transfer import transfer_tools
from agentek.tools.weth import weth_tools


def all_tools(blacklist_cache: Optional[TTLCache] = None) -> List[BaseTool]:
    """汇总所有工具"""
    return [
        *erc20_tools,
        *transfer_tools,
        *ens_tools,
        *rpc_tools,
        *weth_tools,
        *signing_tools,
        *create_security_tools(cache=blacklist_cache),
    ]

__all__ = [
    'all_tools',
    'erc20_tools',
    'transfer_tools',
    'ens_tools',
    'rpc_tools',
    'weth_tools',
    'signing_tools',
    'create_security_tools',
]

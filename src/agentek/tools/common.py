# agentek/tools/common.py
"""
工具共用的参数类型和多链查询辅助函数
"""

import asyncio
import logging
from typing import Annotated, Any, Awaitable, Callable, Dict, List, Sequence

from pydantic import AfterValidator

from agentek.client.abi_utils import is_address
from agentek.client.client_config import ChainInfo

logger = logging.getLogger(__name__)


def _check_address(value: str) -> str:
    if not is_address(value):
        raise ValueError(f"无效的以太坊地址: {value}")
    return value

# 0x 开头的 20 字节地址
AddressStr = Annotated[str, AfterValidator(_check_address)]


async def fetch_per_chain(
    chains: Sequence[ChainInfo],
    fetch: Callable[[ChainInfo], Awaitable[Dict[str, Any]]],
    thing: str,
) -> List[Dict[str, Any]]:
    """
    并发查询多条链，单条链失败时返回错误条目而不是抛出

    Returns:
        [{"chain": 1, ...}, {"chain": 8453, "error": "Failed to fetch <thing>: ..."}]
    """
    async def run(chain: ChainInfo) -> Dict[str, Any]:
        try:
            return {"chain": chain.chain_id, **(await fetch(chain))}
        except Exception as e:
            logger.error(f"链 {chain.name} ({chain.chain_id}) 查询 {thing} 失败: {str(e)}")
            return {"chain": chain.chain_id, "error": f"Failed to fetch {thing}: {str(e)}"}

    return list(await asyncio.gather(*(run(chain) for chain in chains)))

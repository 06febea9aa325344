# agentek/client/intent_builder.py
"""
意图构建：在多条候选链上探测可行性，选出 gas 最便宜的链，
再根据是否有钱包客户端返回未执行的意图或执行后的意图
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from agentek.client.client_config import ChainInfo
from agentek.client.errors import NoViableChainError
from agentek.client.operations import Intent, Operation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    """单条链的探测结果：可行（附带数据）或不可行（附带原因）"""
    chain: ChainInfo
    ok: bool
    data: Any = None
    reason: Optional[str] = None

    @classmethod
    def viable(cls, chain: ChainInfo, data: Any = None) -> "ProbeResult":
        return cls(chain=chain, ok=True, data=data)

    @classmethod
    def not_viable(cls, chain: ChainInfo, reason: str) -> "ProbeResult":
        return cls(chain=chain, ok=False, reason=reason)


@dataclass(frozen=True)
class ChainCandidate:
    """被选中的链"""
    chain: ChainInfo
    gas_price: int
    data: Any = None

    @property
    def chain_id(self) -> int:
        return self.chain.chain_id


Probe = Callable[[ChainInfo], Awaitable[Any]]


async def probe_chains(chains: Sequence[ChainInfo], probe: Probe) -> List[ProbeResult]:
    """
    并发探测每条链

    probe 可以返回 ProbeResult，也可以返回任意数据（视为可行）；
    probe 抛出的异常转换为不可行结果，不会中断其他链的探测

    Returns:
        与 chains 顺序一致的探测结果
    """
    async def run(chain: ChainInfo) -> ProbeResult:
        try:
            result = await probe(chain)
        except Exception as e:
            logger.warning(f"链 {chain.name} ({chain.chain_id}) 探测失败: {str(e)}")
            return ProbeResult.not_viable(chain, str(e))

        if isinstance(result, ProbeResult):
            return result
        return ProbeResult.viable(chain, result)

    return list(await asyncio.gather(*(run(chain) for chain in chains)))


async def select_cheapest_chain(
    client: Any,
    results: Sequence[ProbeResult],
    summary: Optional[str] = None,
) -> ChainCandidate:
    """
    在可行的链中选择 gas 价格最低的一条

    gas 价格相同时，按客户端配置的链顺序取靠前的那条

    Raises:
        NoViableChainError: 所有链都不可行
    """
    viable = [result for result in results if result.ok]
    if not viable:
        raise NoViableChainError(list(results), summary)

    gas_prices = await asyncio.gather(*(
        client.get_public_client(result.chain.chain_id).get_gas_price() for result in viable
    ))

    order = {chain.chain_id: index for index, chain in enumerate(client.get_chains())}
    fallback = len(order)

    best = min(
        range(len(viable)),
        key=lambda i: (gas_prices[i], order.get(viable[i].chain.chain_id, fallback + i)),
    )

    selected = viable[best]
    logger.debug(
        f"选择链 {selected.chain.name} ({selected.chain.chain_id})，gas 价格 {gas_prices[best]}"
    )
    return ChainCandidate(chain=selected.chain, gas_price=gas_prices[best], data=selected.data)


async def choose_chain(
    client: Any,
    supported: Sequence[ChainInfo],
    chain_id: Optional[int],
    probe: Probe,
    summary: Optional[str] = None,
) -> ChainCandidate:
    """候选链 = 配置链 ∩ 支持链 ∩ 指定链，探测后选最便宜的一条"""
    candidates = client.filter_supported_chains(supported, chain_id)
    results = await probe_chains(candidates, probe)
    return await select_cheapest_chain(client, results, summary)


async def finalize_intent(
    client: Any,
    description: str,
    ops: Sequence[Operation],
    chain_id: int,
) -> Intent:
    """
    没有钱包客户端时返回未执行的意图；否则依次执行操作，返回带 hash/signatures 的意图
    """
    ops = list(ops)
    if client.get_wallet_client(chain_id) is None:
        return Intent(intent=description, ops=ops, chain=chain_id)

    result = await client.execute_operations(ops, chain_id)
    return Intent(
        intent=description,
        ops=ops,
        chain=chain_id,
        hash=result.get("hash"),
        signatures=result.get("signatures"),
    )

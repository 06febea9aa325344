# agentek/client/agentek_client.py
"""
Agentek 客户端
- 连接池：每条链一个 PublicClient，有签名账户时再加一个 WalletClient
- 调度：按名称查找工具，校验链支持和参数，再执行
- 执行器：顺序提交交易并等待确认，或执行签名请求
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from agentek.client.abi_utils import hex_to_int
from agentek.client.client_config import ChainInfo
from agentek.client.errors import (
    ChainNotConfiguredError, NoPublicClientError, NoWalletClientError,
    ToolNotFoundError, ToolValidationError, TransactionRevertedError,
    UnsupportedChainError
)
from agentek.client.operations import (
    Call, Operation, PersonalSign, TypedDataSign
)
from agentek.client.rpc_client import HTTPTransport, PublicClient, WalletClient
from agentek.client.tool_registry import BaseTool, ToolRegistry

logger = logging.getLogger(__name__)


class AgentekClient:
    """多链执行客户端，也是传给每个工具的能力句柄"""

    def __init__(
        self,
        transports: Sequence[Any],
        chains: Sequence[ChainInfo],
        account_or_address: Any,
        tools: Optional[Sequence[BaseTool]] = None,
    ):
        """
        Args:
            transports: 与 chains 一一对应的传输；数量不足时其余链复用第一个；
                        字符串视为 RPC URL
            chains: 链列表
            account_or_address: 签名账户（如 eth_account LocalAccount）或只读地址
            tools: 初始工具列表
        """
        self._chains: List[ChainInfo] = list(chains)
        transports = [
            HTTPTransport(transport) if isinstance(transport, str) else transport
            for transport in transports
        ]
        if self._chains and not transports:
            raise ValueError("至少需要一个传输")

        if isinstance(account_or_address, str):
            self.account = None
            self._address = account_or_address
        else:
            self.account = account_or_address
            self._address = account_or_address.address

        self._public_clients: Dict[int, PublicClient] = {}
        self._wallet_clients: Dict[int, WalletClient] = {}

        for index, chain in enumerate(self._chains):
            transport = transports[index] if index < len(transports) else transports[0]
            public_client = PublicClient(transport, chain)
            self._public_clients[chain.chain_id] = public_client
            if self.account is not None:
                self._wallet_clients[chain.chain_id] = WalletClient(
                    transport, chain, self.account, public_client
                )

        self._registry = ToolRegistry(tools)

        mode = "读写" if self.account is not None else "只读"
        logger.info(
            f"Agentek 客户端初始化完成: {len(self._chains)} 条链, {len(self._registry)} 个工具, {mode}模式"
        )

    # ===== 连接池 =====

    def get_public_client(self, chain_id: Optional[int] = None) -> PublicClient:
        if chain_id is None:
            if not self._chains:
                raise ChainNotConfiguredError()
            return self._public_clients[self._chains[0].chain_id]

        client = self._public_clients.get(chain_id)
        if client is None:
            raise ChainNotConfiguredError(chain_id)
        return client

    def get_wallet_client(self, chain_id: Optional[int] = None) -> Optional[WalletClient]:
        if chain_id is None:
            if not self._chains:
                return None
            chain_id = self._chains[0].chain_id
        return self._wallet_clients.get(chain_id)

    def get_public_clients(self) -> Dict[int, PublicClient]:
        return dict(self._public_clients)

    def get_wallet_clients(self) -> Dict[int, WalletClient]:
        return dict(self._wallet_clients)

    def get_chains(self) -> List[ChainInfo]:
        return list(self._chains)

    def filter_supported_chains(
        self,
        supported: Sequence[ChainInfo],
        chain_id: Optional[int] = None,
    ) -> List[ChainInfo]:
        """
        客户端配置的链与工具支持的链取交集（保持配置顺序）

        Raises:
            UnsupportedChainError: 指定了 chain_id 但不在交集中
        """
        supported_ids = {chain.chain_id for chain in supported}
        chains = [chain for chain in self._chains if chain.chain_id in supported_ids]

        if chain_id is not None:
            chains = [chain for chain in chains if chain.chain_id == chain_id]
            if not chains:
                raise UnsupportedChainError(chain_id)

        return chains

    # ===== 工具 =====

    def get_tools(self) -> Dict[str, BaseTool]:
        return self._registry.all()

    def get_tool(self, name: str) -> Optional[BaseTool]:
        return self._registry.get(name)

    def add_tools(self, tools: Sequence[BaseTool]):
        self._registry.add(tools)

    async def get_address(self) -> str:
        return self._address

    async def execute(self, name: str, args: Optional[Dict[str, Any]] = None) -> Any:
        """
        执行工具

        检查顺序：工具是否存在 -> 链是否支持 -> 参数校验，全部通过后才运行工具
        """
        tool = self._registry.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        args = dict(args or {})

        requested_chain = args.get("chain_id")
        if requested_chain is not None and tool.supported_chains is not None:
            chain_id = _coerce_chain_id(requested_chain)
            if chain_id is None or not tool.supports_chain(chain_id):
                raise UnsupportedChainError(requested_chain, name)

        try:
            validated = tool.parameters.model_validate(args)
        except ValidationError as e:
            raise ToolValidationError(name, e.errors(include_url=False)) from e

        logger.info(f"执行工具: {name}")
        return await tool.execute(self, validated)

    # ===== 执行器 =====

    async def execute_ops(self, ops: Sequence[Call], chain_id: int) -> str:
        """
        顺序提交交易，每笔确认后才提交下一笔

        Returns:
            单笔交易返回哈希，多笔返回用 ";" 连接的哈希
        """
        wallet_client = self._wallet_clients.get(chain_id)
        if wallet_client is None:
            raise NoWalletClientError(chain_id)

        public_client = self._public_clients.get(chain_id)
        if public_client is None:
            raise NoPublicClientError(chain_id)

        if not ops:
            raise ValueError("没有要执行的交易")

        hashes = []
        for op in ops:
            if not isinstance(op, Call):
                raise TypeError(f"不支持的交易操作类型: {type(op).__name__}")

            tx_hash = await wallet_client.send_transaction(
                to=op.target, value=int(op.value), data=op.data
            )
            receipt = await public_client.wait_for_transaction_receipt(tx_hash)

            if hex_to_int(receipt.get("status", "0x1")) == 0:
                raise TransactionRevertedError(tx_hash, chain_id)

            hashes.append(tx_hash)

        return ";".join(hashes)

    async def execute_sign(self, signs: Sequence[Union[PersonalSign, TypedDataSign]], chain_id: int) -> List[str]:
        """按顺序执行签名请求"""
        wallet_client = self._wallet_clients.get(chain_id)
        if wallet_client is None:
            raise NoWalletClientError(chain_id)

        signatures = []
        for sign in signs:
            if isinstance(sign, PersonalSign):
                signature = await wallet_client.sign_message(sign.message)
            elif isinstance(sign, TypedDataSign):
                signature = await wallet_client.sign_typed_data(
                    sign.domain, sign.types, sign.primary_type, sign.message
                )
            else:
                raise TypeError(f"不支持的签名操作类型: {type(sign).__name__}")
            signatures.append(signature)

        return signatures

    async def execute_operations(self, ops: Sequence[Operation], chain_id: int) -> Dict[str, Any]:
        """
        交易和签名分开执行

        Returns:
            {"hash": ..., "signatures": [...]}，只包含非空的那一类
        """
        calls, signs = [], []
        for op in ops:
            if isinstance(op, Call):
                calls.append(op)
            elif isinstance(op, (PersonalSign, TypedDataSign)):
                signs.append(op)
            else:
                raise TypeError(f"不支持的操作类型: {type(op).__name__}")

        results: Dict[str, Any] = {}
        if calls:
            results["hash"] = await self.execute_ops(calls, chain_id)
        if signs:
            results["signatures"] = await self.execute_sign(signs, chain_id)
        return results


def create_agentek_client(
    chains: Sequence[ChainInfo],
    account_or_address: Any,
    tools: Optional[Sequence[BaseTool]] = None,
    transports: Optional[Sequence[Any]] = None,
) -> AgentekClient:
    """
    创建客户端；未提供 transports 时每条链使用配置中的 RPC 端点
    """
    if transports is None:
        transports = [HTTPTransport.for_chain(chain) for chain in chains]
    return AgentekClient(transports, chains, account_or_address, tools)


def _coerce_chain_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    # JSON 数字可能带小数点，如 1.0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None

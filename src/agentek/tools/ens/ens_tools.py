# agentek/tools/ens/ens_tools.py
"""
ENS 工具集
名称解析与反向解析，直接读取主网 ENS Registry 和 Resolver 合约
"""

import logging
from typing import Any

from eth_utils import keccak
from pydantic import BaseModel, Field

from agentek.client.abi_utils import ETH_ADDRESS, checksum, is_address
from agentek.client.tool_registry import create_tool
from agentek.tools.common import AddressStr
from agentek.tools.ens.ens_config import (
    DEFAULT_TLD, ENS_CHAINS, ENS_REGISTRY_ADDRESS, REVERSE_SUFFIX
)

logger = logging.getLogger(__name__)

ENS_CHAIN_ID = ENS_CHAINS[0].chain_id

# ===== 辅助函数 =====

def normalize_name(name: str) -> str:
    """小写、去空格；没有后缀时补全 .eth"""
    name = name.strip().lower()
    if not name:
        raise ValueError("ENS 名称不能为空")
    return name if "." in name else f"{name}.{DEFAULT_TLD}"

def namehash(name: str) -> str:
    """EIP-137 namehash"""
    node = b"\x00" * 32
    if name:
        for label in reversed(name.split(".")):
            node = keccak(node + keccak(text=label))
    return "0x" + node.hex()

async def _get_resolver(client: Any, node: str) -> str:
    public_client = client.get_public_client(ENS_CHAIN_ID)
    return await public_client.read_contract(
        ENS_REGISTRY_ADDRESS, "resolver(bytes32)", [node], ("address",)
    )

async def resolve_ens_name(client: Any, name: str) -> str:
    """
    ENS 名称解析为地址

    Raises:
        ValueError: 名称没有解析记录
    """
    ens_name = normalize_name(name)
    node = namehash(ens_name)

    resolver = await _get_resolver(client, node)
    if resolver.lower() == ETH_ADDRESS:
        raise ValueError(f"No address found for ENS name: {name}")

    public_client = client.get_public_client(ENS_CHAIN_ID)
    address = await public_client.read_contract(resolver, "addr(bytes32)", [node], ("address",))
    if address.lower() == ETH_ADDRESS:
        raise ValueError(f"No address found for ENS name: {name}")

    logger.debug(f"ENS {ens_name} -> {address}")
    return checksum(address)

async def lookup_ens_address(client: Any, address: str) -> str:
    """地址反向解析为 ENS 名称"""
    node = namehash(f"{address.lower()[2:]}.{REVERSE_SUFFIX}")

    resolver = await _get_resolver(client, node)
    if resolver.lower() == ETH_ADDRESS:
        raise ValueError(f"No ENS name found for {address}")

    public_client = client.get_public_client(ENS_CHAIN_ID)
    name = await public_client.read_contract(resolver, "name(bytes32)", [node], ("string",))
    if not name:
        raise ValueError(f"No ENS name found for {address}")
    return name

async def resolve_address(client: Any, value: str) -> str:
    """十六进制地址直接返回 checksum 形式，其他输入按 ENS 名称解析"""
    value = value.strip()
    if is_address(value):
        return checksum(value)
    if value.startswith("0x"):
        raise ValueError(f"无效的地址格式: {value}")
    return await resolve_ens_name(client, value)

# ===== 工具 =====

class ResolveENSParams(BaseModel):
    name: str = Field(..., min_length=1, description="The ENS name to resolve")

class LookupENSParams(BaseModel):
    address: AddressStr = Field(..., description="The Ethereum address to lookup")


async def _resolve_ens(client: Any, args: ResolveENSParams) -> str:
    return await resolve_ens_name(client, args.name)

async def _lookup_ens(client: Any, args: LookupENSParams) -> str:
    return await lookup_ens_address(client, args.address)


resolve_ens_tool = create_tool(
    name="resolveENS",
    description="Resolves an ENS name to an Ethereum address",
    parameters=ResolveENSParams,
    execute=_resolve_ens,
    supported_chains=ENS_CHAINS,
)

lookup_ens_tool = create_tool(
    name="lookupENS",
    description="Looks up the ENS name for an Ethereum address",
    parameters=LookupENSParams,
    execute=_lookup_ens,
    supported_chains=ENS_CHAINS,
)

# 导出所有工具
ens_tools = [
    resolve_ens_tool,
    lookup_ens_tool,
]

__all__ = [
    'ens_tools',
    'resolve_ens_tool',
    'lookup_ens_tool',
    'namehash',
    'normalize_name',
    'resolve_address',
    'resolve_ens_name',
    'lookup_ens_address',
]

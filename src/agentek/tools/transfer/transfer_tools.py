# agentek/tools/transfer/transfer_tools.py
"""
转账意图
在余额足够的链中选择 gas 最便宜的一条，构建原生代币或 ERC20 转账
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from agentek.client.abi_utils import (
    checksum, encode_function_data, format_units, is_native_token, parse_units
)
from agentek.client.client_config import ChainInfo
from agentek.client.intent_builder import ProbeResult, choose_chain, finalize_intent
from agentek.client.operations import Call, Intent
from agentek.client.tool_registry import create_tool
from agentek.tools.common import AddressStr
from agentek.tools.ens.ens_tools import resolve_address
from agentek.tools.erc20.erc20_config import ERC20_FUNCTIONS
from agentek.tools.erc20.erc20_tools import (
    get_token_balance, get_token_decimals, get_token_symbol
)
from agentek.tools.transfer.transfer_config import TRANSFER_CHAINS

logger = logging.getLogger(__name__)


class IntentTransferParams(BaseModel):
    token: AddressStr = Field(..., description="The token address (0x0000000000000000000000000000000000000000 for the native token)")
    amount: str = Field(..., description="The amount to transfer")
    to: str = Field(..., min_length=1, description="The recipient address or ENS name")
    chain_id: Optional[int] = Field(None, description="Optional specify chainId to use")

class IntentTransferFromParams(BaseModel):
    token: AddressStr = Field(..., description="The token address")
    amount: str = Field(..., description="The amount to transfer")
    from_address: AddressStr = Field(..., description="The address to transfer from")
    to: str = Field(..., min_length=1, description="The recipient address or ENS name")
    chain_id: Optional[int] = Field(None, description="Optional specific chain to use")


def _balance_probe(client: Any, token: str, owner: str, amount: str):
    """探测 owner 在某条链上的余额是否足够，可行时返回最小单位数量"""
    async def probe(chain: ChainInfo):
        public_client = client.get_public_client(chain.chain_id)
        decimals = await get_token_decimals(public_client, token)
        balance = await get_token_balance(public_client, token, owner)
        needed = parse_units(amount, decimals)

        if balance < needed:
            return ProbeResult.not_viable(
                chain, f"insufficient balance {format_units(balance, decimals)} < {amount}"
            )
        return needed

    return probe


async def _intent_transfer(client: Any, args: IntentTransferParams) -> Intent:
    parse_units(args.amount, 0)

    token = checksum(args.token)
    sender = await client.get_address()
    to = await resolve_address(client, args.to)

    selected = await choose_chain(
        client, TRANSFER_CHAINS, args.chain_id,
        _balance_probe(client, token, sender, args.amount),
        summary=f"{sender} doesn't have enough {token} balance on any of the supported chains",
    )
    amount = selected.data

    if is_native_token(token):
        symbol = selected.chain.native_token
        ops = [Call(target=to, value=str(amount), data="0x")]
    else:
        symbol = await get_token_symbol(client.get_public_client(selected.chain_id), token)
        ops = [
            Call(
                target=token,
                value="0",
                data=encode_function_data(ERC20_FUNCTIONS["transfer"], [to, amount]),
            )
        ]

    return await finalize_intent(client, f"send {args.amount} {symbol} to {to}", ops, selected.chain_id)


async def _intent_transfer_from(client: Any, args: IntentTransferFromParams) -> Intent:
    if is_native_token(args.token):
        raise ValueError("ETH transferFrom not supported")

    parse_units(args.amount, 0)

    token = checksum(args.token)
    owner = checksum(args.from_address)
    to = await resolve_address(client, args.to)

    selected = await choose_chain(
        client, TRANSFER_CHAINS, args.chain_id,
        _balance_probe(client, token, owner, args.amount),
        summary=f"{owner} doesn't have enough {token} balance on any of the supported chains",
    )

    ops = [
        Call(
            target=token,
            value="0",
            data=encode_function_data(ERC20_FUNCTIONS["transferFrom"], [owner, to, selected.data]),
        )
    ]

    return await finalize_intent(
        client, f"send {args.amount} {token} from {owner} to {to}", ops, selected.chain_id
    )


intent_transfer_tool = create_tool(
    name="intentTransfer",
    description="Creates an intent to transfer tokens",
    parameters=IntentTransferParams,
    execute=_intent_transfer,
    supported_chains=TRANSFER_CHAINS,
)

intent_transfer_from_tool = create_tool(
    name="intentTransferFrom",
    description="Creates an intent to transfer tokens from another address",
    parameters=IntentTransferFromParams,
    execute=_intent_transfer_from,
    supported_chains=TRANSFER_CHAINS,
)

# 导出所有工具
transfer_tools = [
    intent_transfer_tool,
    intent_transfer_from_tool,
]

__all__ = [
    'transfer_tools',
    'intent_transfer_tool',
    'intent_transfer_from_tool',
]

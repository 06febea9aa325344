# agentek/tools/erc20/erc20_tools.py
"""
ERC20 工具集
多链查询：授权额度、余额、总供应量、精度、名称、符号
意图：授权 (approve)
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agentek.client.abi_utils import (
    MAX_UINT256, checksum, encode_function_data, format_units,
    is_max_amount, is_native_token, parse_amount
)
from agentek.client.client_config import ChainInfo
from agentek.client.intent_builder import choose_chain, finalize_intent
from agentek.client.operations import Call, Intent
from agentek.client.tool_registry import create_tool
from agentek.tools.common import AddressStr, fetch_per_chain
from agentek.tools.erc20.erc20_config import ERC20_CHAINS, ERC20_FUNCTIONS

logger = logging.getLogger(__name__)

# ===== 合约读取 =====

async def get_token_decimals(public_client: Any, token: str) -> int:
    """原生代币固定 18 位精度"""
    if is_native_token(token):
        return 18
    return await public_client.read_contract(token, ERC20_FUNCTIONS["decimals"], [], ("uint8",))

async def get_token_balance(public_client: Any, token: str, owner: str) -> int:
    if is_native_token(token):
        return await public_client.get_balance(owner)
    return await public_client.read_contract(token, ERC20_FUNCTIONS["balanceOf"], [owner], ("uint256",))

async def get_token_symbol(public_client: Any, token: str) -> str:
    if is_native_token(token):
        return public_client.chain.native_token
    return await public_client.read_contract(token, ERC20_FUNCTIONS["symbol"], [], ("string",))

async def get_token_name(public_client: Any, token: str) -> str:
    return await public_client.read_contract(token, ERC20_FUNCTIONS["name"], [], ("string",))

async def get_total_supply(public_client: Any, token: str) -> int:
    return await public_client.read_contract(token, ERC20_FUNCTIONS["totalSupply"], [], ("uint256",))

# ===== 参数 =====

class GetAllowanceParams(BaseModel):
    token: AddressStr = Field(..., description="The token address")
    owner: AddressStr = Field(..., description="The token owner's address")
    spender: AddressStr = Field(..., description="The spender's address")
    chain_id: Optional[int] = Field(None, description="If not specified, returns approval for all supported chains.")

class GetBalanceOfParams(BaseModel):
    token: AddressStr = Field(..., description="The token address")
    owner: AddressStr = Field(..., description="The token owner's address")
    chain_id: Optional[int] = Field(None, description="If not specified, returns balance for all supported chains.")

class TokenParams(BaseModel):
    token: AddressStr = Field(..., description="The token address")
    chain_id: Optional[int] = Field(None, description="If not specified, queries all supported chains.")

class TokenMetadataParams(BaseModel):
    token: AddressStr = Field(..., description="The token address")
    chain_id: int = Field(..., description="The token chain")

class IntentApproveParams(BaseModel):
    token: AddressStr = Field(..., description="The token address")
    amount: str = Field(..., description='The amount to approve, or "max" for unlimited approval')
    spender: AddressStr = Field(..., description="The spender address")
    chain_id: Optional[int] = Field(None, description="Optional specific chain to use")

# ===== 查询工具 =====

async def _get_allowance(client: Any, args: GetAllowanceParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(ERC20_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        public_client = client.get_public_client(chain.chain_id)
        decimals = await get_token_decimals(public_client, args.token)
        allowance = await public_client.read_contract(
            args.token, ERC20_FUNCTIONS["allowance"], [args.owner, args.spender], ("uint256",)
        )
        return {"allowance": format_units(allowance, decimals)}

    return await fetch_per_chain(chains, fetch, "allowance")

async def _get_balance_of(client: Any, args: GetBalanceOfParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(ERC20_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        public_client = client.get_public_client(chain.chain_id)
        decimals = await get_token_decimals(public_client, args.token)
        balance = await get_token_balance(public_client, args.token, args.owner)
        return {"balance": format_units(balance, decimals)}

    return await fetch_per_chain(chains, fetch, "balance")

async def _get_total_supply(client: Any, args: TokenParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(ERC20_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        public_client = client.get_public_client(chain.chain_id)
        decimals = await get_token_decimals(public_client, args.token)
        total_supply = await get_total_supply(public_client, args.token)
        return {"totalSupply": format_units(total_supply, decimals)}

    return await fetch_per_chain(chains, fetch, "total supply")

async def _get_decimals(client: Any, args: TokenParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(ERC20_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        public_client = client.get_public_client(chain.chain_id)
        return {"decimals": await get_token_decimals(public_client, args.token)}

    return await fetch_per_chain(chains, fetch, "decimals")

async def _get_name(client: Any, args: TokenParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(ERC20_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        public_client = client.get_public_client(chain.chain_id)
        return {"name": await get_token_name(public_client, args.token)}

    return await fetch_per_chain(chains, fetch, "name")

async def _get_symbol(client: Any, args: TokenParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(ERC20_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        public_client = client.get_public_client(chain.chain_id)
        return {"symbol": await get_token_symbol(public_client, args.token)}

    return await fetch_per_chain(chains, fetch, "symbol")

async def _get_token_metadata(client: Any, args: TokenMetadataParams) -> Dict[str, Any]:
    client.filter_supported_chains(ERC20_CHAINS, args.chain_id)
    public_client = client.get_public_client(args.chain_id)

    name, symbol, decimals, total_supply = await asyncio.gather(
        get_token_name(public_client, args.token),
        get_token_symbol(public_client, args.token),
        get_token_decimals(public_client, args.token),
        get_total_supply(public_client, args.token),
    )

    return {
        "chain": args.chain_id,
        "name": name,
        "symbol": symbol,
        "decimals": decimals,
        "totalSupply": format_units(total_supply, decimals),
    }

# ===== 意图工具 =====

async def _intent_approve(client: Any, args: IntentApproveParams) -> Intent:
    if is_native_token(args.token):
        raise ValueError("Cannot approve ETH, only ERC20 tokens")

    # 在探测前拒绝无效数量
    parse_amount(args.amount, 0)

    token = checksum(args.token)
    spender = checksum(args.spender)
    unlimited = is_max_amount(args.amount)

    async def probe(chain: ChainInfo) -> int:
        if unlimited:
            return MAX_UINT256
        decimals = await get_token_decimals(client.get_public_client(chain.chain_id), token)
        return parse_amount(args.amount, decimals)

    selected = await choose_chain(
        client, ERC20_CHAINS, args.chain_id, probe,
        summary="No supported chains found with valid token information",
    )

    ops = [
        Call(
            target=token,
            value="0",
            data=encode_function_data(ERC20_FUNCTIONS["approve"], [spender, selected.data]),
        )
    ]

    display_amount = "max (unlimited)" if unlimited else args.amount
    return await finalize_intent(
        client, f"approve {display_amount} {token} for spender {spender}", ops, selected.chain_id
    )

# ===== 创建工具对象 =====

get_allowance_tool = create_tool(
    name="getAllowance",
    description="Gets the ERC20 token allowance between an owner and spender",
    parameters=GetAllowanceParams,
    execute=_get_allowance,
    supported_chains=ERC20_CHAINS,
)

get_balance_of_tool = create_tool(
    name="getBalanceOf",
    description="Gets the ERC20 token balance of an address",
    parameters=GetBalanceOfParams,
    execute=_get_balance_of,
    supported_chains=ERC20_CHAINS,
)

get_total_supply_tool = create_tool(
    name="getTotalSupply",
    description="Gets the total supply of an ERC20 token",
    parameters=TokenParams,
    execute=_get_total_supply,
    supported_chains=ERC20_CHAINS,
)

get_decimals_tool = create_tool(
    name="getDecimals",
    description="Gets the number of decimals of an ERC20 token",
    parameters=TokenParams,
    execute=_get_decimals,
    supported_chains=ERC20_CHAINS,
)

get_name_tool = create_tool(
    name="getName",
    description="Gets the name of an ERC20 token",
    parameters=TokenParams,
    execute=_get_name,
    supported_chains=ERC20_CHAINS,
)

get_symbol_tool = create_tool(
    name="getSymbol",
    description="Gets the symbol of an ERC20 token",
    parameters=TokenParams,
    execute=_get_symbol,
    supported_chains=ERC20_CHAINS,
)

get_token_metadata_tool = create_tool(
    name="getTokenMetadata",
    description="Gets name, symbol, decimals and total supply of an ERC20 token on one chain",
    parameters=TokenMetadataParams,
    execute=_get_token_metadata,
    supported_chains=ERC20_CHAINS,
)

intent_approve_tool = create_tool(
    name="intentApprove",
    description='Creates an intent to approve token spending. Supports "max" for unlimited approval.',
    parameters=IntentApproveParams,
    execute=_intent_approve,
    supported_chains=ERC20_CHAINS,
)

# 导出所有工具
erc20_tools = [
    # 查询
    get_allowance_tool,
    get_balance_of_tool,
    get_total_supply_tool,
    get_decimals_tool,
    get_name_tool,
    get_symbol_tool,
    get_token_metadata_tool,

    # 意图
    intent_approve_tool,
]

__all__ = [
    'erc20_tools',
    'get_token_decimals',
    'get_token_balance',
    'get_token_symbol',
    'intent_approve_tool',
]

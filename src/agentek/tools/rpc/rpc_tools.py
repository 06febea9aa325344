# agentek/tools/rpc/rpc_tools.py
"""
EVM RPC 工具集 - 纯 RPC 功能
账户、区块、Gas、交易查询，以及任意合约调用的意图
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agentek.client.abi_utils import (
    checksum, encode_function_data, ensure_hex_data, format_ether,
    format_units, hex_to_int, parse_ether
)
from agentek.client.client_config import ChainInfo, get_explorer_url
from agentek.client.intent_builder import finalize_intent
from agentek.client.operations import Call, Intent
from agentek.client.tool_registry import create_tool
from agentek.tools.common import AddressStr, fetch_per_chain
from agentek.tools.rpc.rpc_config import BLOCK_FIELDS, RPC_CHAINS

logger = logging.getLogger(__name__)

TX_HASH_PATTERN = r"^0x[a-fA-F0-9]{64}$"

# ===== 参数 =====

class AddressParams(BaseModel):
    address: AddressStr = Field(..., description="The address to query")
    chain_id: Optional[int] = Field(None, description="If not specified, queries all supported chains.")

class ChainParams(BaseModel):
    chain_id: Optional[int] = Field(None, description="If not specified, queries all supported chains.")

class GetBlockParams(BaseModel):
    chain_id: int = Field(..., description="Chain ID to query")
    block_number: Optional[int] = Field(None, ge=0, description="Block number; latest block if omitted")

class EstimateGasParams(BaseModel):
    to: AddressStr = Field(..., description="The recipient or contract address")
    value: str = Field("0", description="ETH value in ether (e.g. '0.1')")
    data: str = Field("0x", description="Hex calldata")
    from_address: Optional[AddressStr] = Field(None, description="Sender address; defaults to the client's address")
    chain_id: Optional[int] = Field(None, description="If not specified, estimates on all supported chains.")

class TransactionHashParams(BaseModel):
    hash: str = Field(..., pattern=TX_HASH_PATTERN, description="The transaction hash")
    chain_id: int = Field(..., description="Chain ID the transaction was sent on")

class IntentSendTransactionParams(BaseModel):
    to: AddressStr = Field(..., description="The target contract or recipient address")
    value: str = Field("0", description="ETH value to send in ether (e.g. '0.1' for 0.1 ETH)")
    function_signature: Optional[str] = Field(
        None, description="Function signature to call, e.g. 'transfer(address,uint256)'"
    )
    args: Optional[List[Any]] = Field(
        None, description="The arguments to pass to the function, e.g. ['0x1234...', '1000000000000000000']"
    )
    data: Optional[str] = Field(
        None, description="Raw hex calldata. Use this only if function_signature/args are not provided."
    )
    chain_id: int = Field(..., description="Chain ID to send the transaction on")

# ===== 账户 =====

async def _get_balance(client: Any, args: AddressParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(RPC_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        balance = await client.get_public_client(chain.chain_id).get_balance(args.address)
        return {
            "balance": format_units(balance, chain.decimals),
            "symbol": chain.native_token,
        }

    return await fetch_per_chain(chains, fetch, "balance")

async def _get_code(client: Any, args: AddressParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(RPC_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        code = await client.get_public_client(chain.chain_id).get_code(args.address)
        return {"code": code, "isContract": code not in ("", "0x")}

    return await fetch_per_chain(chains, fetch, "code")

async def _get_transaction_count(client: Any, args: AddressParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(RPC_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        count = await client.get_public_client(chain.chain_id).get_transaction_count(args.address)
        return {"transactionCount": count}

    return await fetch_per_chain(chains, fetch, "transaction count")

# ===== 区块和 Gas =====

async def _get_block(client: Any, args: GetBlockParams) -> Dict[str, Any]:
    chain = client.filter_supported_chains(RPC_CHAINS, args.chain_id)[0]
    block_param = args.block_number if args.block_number is not None else "latest"

    block = await client.get_public_client(chain.chain_id).get_block(block_param)
    if not block:
        raise ValueError(f"未找到区块: {block_param} (链 {chain.chain_id})")

    info = {field: block[field] for field in BLOCK_FIELDS if field in block}
    for field in ("number", "timestamp", "gasUsed", "gasLimit", "baseFeePerGas"):
        if field in info:
            info[field] = hex_to_int(info[field])
    info["transactionCount"] = len(block.get("transactions", []))
    info["chain"] = chain.chain_id
    return info

async def _get_block_number(client: Any, args: ChainParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(RPC_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        return {"blockNumber": await client.get_public_client(chain.chain_id).get_block_number()}

    return await fetch_per_chain(chains, fetch, "block number")

async def _get_gas_price(client: Any, args: ChainParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(RPC_CHAINS, args.chain_id)

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        gas_price = await client.get_public_client(chain.chain_id).get_gas_price()
        return {"gasPrice": str(gas_price), "gasPriceGwei": format_units(gas_price, 9)}

    return await fetch_per_chain(chains, fetch, "gas price")

async def _estimate_gas(client: Any, args: EstimateGasParams) -> List[Dict[str, Any]]:
    chains = client.filter_supported_chains(RPC_CHAINS, args.chain_id)
    sender = args.from_address or await client.get_address()
    tx = {
        "from": sender,
        "to": args.to,
        "value": parse_ether(args.value),
        "data": ensure_hex_data(args.data),
    }

    async def fetch(chain: ChainInfo) -> Dict[str, Any]:
        public_client = client.get_public_client(chain.chain_id)
        gas = await public_client.estimate_gas(tx)
        gas_price = await public_client.get_gas_price()
        return {
            "gas": str(gas),
            "estimatedCost": format_units(gas * gas_price, chain.decimals),
            "symbol": chain.native_token,
        }

    return await fetch_per_chain(chains, fetch, "gas estimate")

# ===== 交易 =====

async def _get_transaction(client: Any, args: TransactionHashParams) -> Dict[str, Any]:
    chain = client.filter_supported_chains(RPC_CHAINS, args.chain_id)[0]
    tx = await client.get_public_client(chain.chain_id).get_transaction(args.hash)
    if not tx:
        raise ValueError(f"未找到交易: {args.hash} (链 {chain.chain_id})")

    return {
        "chain": chain.chain_id,
        "hash": tx.get("hash"),
        "from": tx.get("from"),
        "to": tx.get("to"),
        "value": format_ether(hex_to_int(tx.get("value"))),
        "nonce": hex_to_int(tx.get("nonce")),
        "gas": hex_to_int(tx.get("gas")),
        "input": tx.get("input", "0x"),
        "blockNumber": hex_to_int(tx["blockNumber"]) if tx.get("blockNumber") else None,
        "explorer": get_explorer_url(chain, tx_hash=args.hash),
    }

async def _get_transaction_receipt(client: Any, args: TransactionHashParams) -> Dict[str, Any]:
    chain = client.filter_supported_chains(RPC_CHAINS, args.chain_id)[0]
    receipt = await client.get_public_client(chain.chain_id).get_transaction_receipt(args.hash)
    if not receipt:
        raise ValueError(f"未找到交易收据: {args.hash} (链 {chain.chain_id})")

    return {
        "chain": chain.chain_id,
        "transactionHash": receipt.get("transactionHash", args.hash),
        "status": "success" if hex_to_int(receipt.get("status")) == 1 else "reverted",
        "blockNumber": hex_to_int(receipt.get("blockNumber")),
        "gasUsed": hex_to_int(receipt.get("gasUsed")),
        "contractAddress": receipt.get("contractAddress"),
        "logCount": len(receipt.get("logs", [])),
        "explorer": get_explorer_url(chain, tx_hash=args.hash),
    }

# ===== 意图 =====

def _build_calldata(args: IntentSendTransactionParams) -> str:
    if args.function_signature:
        return encode_function_data(args.function_signature, args.args or [])
    if args.args:
        raise ValueError("提供 args 时必须同时提供 function_signature")
    if args.data:
        return ensure_hex_data(args.data)
    return "0x"

async def _intent_send_transaction(client: Any, args: IntentSendTransactionParams) -> Intent:
    client.filter_supported_chains(RPC_CHAINS, args.chain_id)

    value = parse_ether(args.value)
    data = _build_calldata(args)
    target = checksum(args.to)

    ops = [Call(target=target, value=str(value), data=data)]

    if args.function_signature:
        description = f"call {args.function_signature} on {target}"
        if value:
            description += f" with {args.value} ETH"
    else:
        description = f"send transaction to {target} with {args.value} ETH"

    return await finalize_intent(client, description, ops, args.chain_id)

# ===== 创建工具对象 =====

get_balance_tool = create_tool(
    name="getBalance",
    description="Get the native token (ETH) balance for an address. If chain_id is omitted, returns balances across all supported chains.",
    parameters=AddressParams,
    execute=_get_balance,
    supported_chains=RPC_CHAINS,
)

get_code_tool = create_tool(
    name="getCode",
    description="Get the deployed bytecode at an address. Returns empty if the address is an EOA (not a contract). If chain_id is omitted, queries all supported chains.",
    parameters=AddressParams,
    execute=_get_code,
    supported_chains=RPC_CHAINS,
)

get_transaction_count_tool = create_tool(
    name="getTransactionCount",
    description="Get the nonce (number of transactions sent) from an address. If chain_id is omitted, returns counts across all supported chains.",
    parameters=AddressParams,
    execute=_get_transaction_count,
    supported_chains=RPC_CHAINS,
)

get_block_tool = create_tool(
    name="getBlock",
    description="Get information about a block including timestamp, transaction count and gas used. Returns the latest block if no block number is specified.",
    parameters=GetBlockParams,
    execute=_get_block,
    supported_chains=RPC_CHAINS,
)

get_block_number_tool = create_tool(
    name="getBlockNumber",
    description="Get the current (latest) block number. If chain_id is omitted, returns block numbers for all supported chains.",
    parameters=ChainParams,
    execute=_get_block_number,
    supported_chains=RPC_CHAINS,
)

get_gas_price_tool = create_tool(
    name="getGasPrice",
    description="Get the current gas price in wei and gwei. If chain_id is omitted, returns gas prices for all supported chains.",
    parameters=ChainParams,
    execute=_get_gas_price,
    supported_chains=RPC_CHAINS,
)

estimate_gas_tool = create_tool(
    name="estimateGas",
    description="Estimate the gas required for a transaction. If chain_id is omitted, estimates on all supported chains.",
    parameters=EstimateGasParams,
    execute=_estimate_gas,
    supported_chains=RPC_CHAINS,
)

get_transaction_tool = create_tool(
    name="getTransaction",
    description="Get details about a transaction including sender, recipient, value, gas, and input data.",
    parameters=TransactionHashParams,
    execute=_get_transaction,
    supported_chains=RPC_CHAINS,
)

get_transaction_receipt_tool = create_tool(
    name="getTransactionReceipt",
    description="Get the receipt of a mined transaction including status, gas used, and log count.",
    parameters=TransactionHashParams,
    execute=_get_transaction_receipt,
    supported_chains=RPC_CHAINS,
)

intent_send_transaction_tool = create_tool(
    name="intentSendTransaction",
    description="Creates an intent to send an arbitrary transaction: a contract call given by function signature and args, or raw calldata, with an optional ETH value.",
    parameters=IntentSendTransactionParams,
    execute=_intent_send_transaction,
    supported_chains=RPC_CHAINS,
)

# 导出所有工具
rpc_tools = [
    # 账户相关
    get_balance_tool,
    get_code_tool,
    get_transaction_count_tool,

    # 区块和 Gas 相关
    get_block_tool,
    get_block_number_tool,
    get_gas_price_tool,
    estimate_gas_tool,

    # 交易相关
    get_transaction_tool,
    get_transaction_receipt_tool,

    # 意图
    intent_send_transaction_tool,
]

__all__ = [
    'rpc_tools',
    'get_balance_tool',
    'get_code_tool',
    'get_transaction_count_tool',
    'get_block_tool',
    'get_block_number_tool',
    'get_gas_price_tool',
    'estimate_gas_tool',
    'get_transaction_tool',
    'get_transaction_receipt_tool',
    'intent_send_transaction_tool',
]

# agentek/tools/signing/signing_tools.py
"""
签名意图：EIP-191 个人消息签名和 EIP-712 结构化数据签名
不提交交易，有钱包客户端时直接返回签名
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agentek.client.abi_utils import ensure_hex_data, hex_to_int
from agentek.client.intent_builder import finalize_intent
from agentek.client.operations import Intent, PersonalSign, TypedDataSign
from agentek.client.tool_registry import create_tool


class IntentSignMessageParams(BaseModel):
    message: str = Field(..., description="The message to sign")
    raw: bool = Field(False, description="Treat message as 0x-prefixed hex bytes instead of text")
    chain_id: Optional[int] = Field(None, description="Chain whose wallet signs; defaults to the first configured chain")

class IntentSignTypedDataParams(BaseModel):
    domain: Dict[str, Any] = Field(..., description="EIP-712 domain (name, version, chainId, verifyingContract, salt)")
    types: Dict[str, List[Dict[str, str]]] = Field(..., description="EIP-712 type definitions, e.g. {'Mail': [{'name': 'contents', 'type': 'string'}]}")
    primary_type: str = Field(..., min_length=1, description="The primary type to sign")
    message: Dict[str, Any] = Field(..., description="The structured message")
    chain_id: Optional[int] = Field(None, description="Chain whose wallet signs; defaults to domain.chainId or the first configured chain")


def _signing_chain(client: Any, chain_id: Optional[int]) -> int:
    if chain_id is not None:
        client.get_public_client(chain_id)
        return chain_id
    return client.get_public_client().chain.chain_id


def _domain_chain_id(value: Any) -> int:
    """domain.chainId 可以是整数、十进制字符串或 0x 十六进制字符串"""
    try:
        return hex_to_int(value if isinstance(value, int) else str(value).strip())
    except ValueError:
        raise ValueError(f"domain.chainId 无效: {value!r}")


async def _intent_sign_message(client: Any, args: IntentSignMessageParams) -> Intent:
    chain_id = _signing_chain(client, args.chain_id)
    message = {"raw": ensure_hex_data(args.message)} if args.raw else args.message

    ops = [PersonalSign(message=message)]
    return await finalize_intent(client, f"sign message: {args.message}", ops, chain_id)

async def _intent_sign_typed_data(client: Any, args: IntentSignTypedDataParams) -> Intent:
    if args.primary_type not in args.types:
        raise ValueError(f"types 中缺少主类型 {args.primary_type}")

    chain_id = args.chain_id
    if chain_id is None and "chainId" in args.domain:
        chain_id = _domain_chain_id(args.domain["chainId"])
    chain_id = _signing_chain(client, chain_id)

    ops = [
        TypedDataSign(
            domain=args.domain,
            types=args.types,
            primary_type=args.primary_type,
            message=args.message,
        )
    ]
    return await finalize_intent(client, f"sign typed data {args.primary_type}", ops, chain_id)


intent_sign_message_tool = create_tool(
    name="intentSignMessage",
    description="Creates an intent to sign a personal message (EIP-191). Returns the signature when a wallet is available.",
    parameters=IntentSignMessageParams,
    execute=_intent_sign_message,
)

intent_sign_typed_data_tool = create_tool(
    name="intentSignTypedData",
    description="Creates an intent to sign EIP-712 typed structured data. Returns the signature when a wallet is available.",
    parameters=IntentSignTypedDataParams,
    execute=_intent_sign_typed_data,
)

signing_tools = [
    intent_sign_message_tool,
    intent_sign_typed_data_tool,
]

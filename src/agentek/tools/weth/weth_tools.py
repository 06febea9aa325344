# agentek/tools/weth/weth_tools.py
"""
WETH 意图：包装 (deposit) 和解包 (withdraw)
"""

from typing import Any

from pydantic import BaseModel, Field

from agentek.client.abi_utils import encode_function_data, parse_ether
from agentek.client.intent_builder import finalize_intent
from agentek.client.operations import Call, Intent
from agentek.client.tool_registry import create_tool
from agentek.tools.weth.weth_config import WETH_ADDRESS, WETH_CHAINS, WETH_FUNCTIONS


class DepositWETHParams(BaseModel):
    chain_id: int = Field(..., description="Chain ID to deposit on (e.g. 1 for Ethereum, 8453 for Base, 42161 for Arbitrum)")
    amount: str = Field(..., description="Amount of ETH to wrap in human-readable units (e.g. '1.5' for 1.5 ETH)")

class WithdrawWETHParams(BaseModel):
    chain_id: int = Field(..., description="Chain ID to withdraw on (e.g. 1 for Ethereum, 8453 for Base, 42161 for Arbitrum)")
    amount: str = Field(..., description="Amount of WETH to unwrap in human-readable units (e.g. '1.5' for 1.5 WETH)")


async def _deposit_weth(client: Any, args: DepositWETHParams) -> Intent:
    client.filter_supported_chains(WETH_CHAINS, args.chain_id)
    value = parse_ether(args.amount)

    ops = [
        Call(
            target=WETH_ADDRESS[args.chain_id],
            value=str(value),
            data=encode_function_data(WETH_FUNCTIONS["deposit"]),
        )
    ]
    return await finalize_intent(client, f"Deposit {args.amount} ETH into WETH", ops, args.chain_id)

async def _withdraw_weth(client: Any, args: WithdrawWETHParams) -> Intent:
    client.filter_supported_chains(WETH_CHAINS, args.chain_id)
    value = parse_ether(args.amount)

    ops = [
        Call(
            target=WETH_ADDRESS[args.chain_id],
            value="0",
            data=encode_function_data(WETH_FUNCTIONS["withdraw"], [value]),
        )
    ]
    return await finalize_intent(client, f"Withdraw {args.amount} WETH to ETH", ops, args.chain_id)


deposit_weth_tool = create_tool(
    name="depositWETH",
    description="Wrap native ETH into WETH (Wrapped ETH) by depositing into the WETH contract. You receive an equal amount of WETH, an ERC20 token.",
    parameters=DepositWETHParams,
    execute=_deposit_weth,
    supported_chains=WETH_CHAINS,
)

withdraw_weth_tool = create_tool(
    name="withdrawWETH",
    description="Unwrap WETH back to native ETH by withdrawing from the WETH contract. Burns your WETH and returns an equal amount of native ETH.",
    parameters=WithdrawWETHParams,
    execute=_withdraw_weth,
    supported_chains=WETH_CHAINS,
)

weth_tools = [
    deposit_weth_tool,
    withdraw_weth_tool,
]

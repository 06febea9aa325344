"""ERC20 read tools and approval intents."""

import pytest
from eth_abi import decode

from agentek.client.abi_utils import ETH_ADDRESS, MAX_UINT256, checksum, function_selector
from agentek.client.errors import NoViableChainError
from agentek.tools.erc20 import erc20_tools

TOKEN = "0x1111111111111111111111111111111111111111"
SPENDER = "0x2222222222222222222222222222222222222222"
OWNER = "0x4444444444444444444444444444444444444444"


def decode_approve(data):
    assert data.startswith(function_selector("approve(address,uint256)"))
    return decode(["address", "uint256"], bytes.fromhex(data[10:]))


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", ["max", "MAX", "Max"])
async def test_max_approval_is_uint256_max(make_chain, make_client, amount):
    chain = make_chain(1)
    chain.add_erc20(TOKEN, decimals=6)
    client = make_client([chain], OWNER, tools=erc20_tools)

    intent = await client.execute(
        "intentApprove", {"token": TOKEN, "amount": amount, "spender": SPENDER, "chain_id": 1}
    )

    spender, value = decode_approve(intent.ops[0].data)
    assert spender == checksum(SPENDER)
    assert value == MAX_UINT256
    assert "max (unlimited)" in intent.intent
    assert intent.hash is None


@pytest.mark.asyncio
async def test_max_approval_ignores_decimals_lookup(make_chain, make_client, call_log):
    """No token contract exists, yet "max" needs no on-chain decimals."""
    client = make_client([make_chain(1)], OWNER, tools=erc20_tools)

    intent = await client.execute(
        "intentApprove", {"token": TOKEN, "amount": "max", "spender": SPENDER}
    )

    assert decode_approve(intent.ops[0].data)[1] == MAX_UINT256
    assert "eth_call" not in [m for _, m, _ in call_log]


@pytest.mark.asyncio
async def test_decimal_approval_scaled_by_token_decimals(make_chain, make_client):
    chain = make_chain(1)
    chain.add_erc20(TOKEN, decimals=6)
    client = make_client([chain], OWNER, tools=erc20_tools)

    intent = await client.execute(
        "intentApprove", {"token": TOKEN, "amount": "2.5", "spender": SPENDER}
    )

    assert decode_approve(intent.ops[0].data)[1] == 2_500_000
    assert intent.intent == f"approve 2.5 {checksum(TOKEN)} for spender {checksum(SPENDER)}"


@pytest.mark.asyncio
async def test_approval_without_token_anywhere_has_no_viable_chain(make_chain, make_client):
    client = make_client([make_chain(1), make_chain(8453)], OWNER, tools=erc20_tools)

    with pytest.raises(NoViableChainError) as exc_info:
        await client.execute("intentApprove", {"token": TOKEN, "amount": "1", "spender": SPENDER})

    assert "Ethereum (1)" in str(exc_info.value)
    assert "Base (8453)" in str(exc_info.value)


@pytest.mark.asyncio
async def test_cannot_approve_native_token(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=erc20_tools)

    with pytest.raises(ValueError, match="Cannot approve ETH"):
        await client.execute(
            "intentApprove", {"token": ETH_ADDRESS, "amount": "1", "spender": SPENDER}
        )


@pytest.mark.asyncio
async def test_approval_executes_with_signer(make_chain, make_client, account):
    chain = make_chain(1)
    chain.add_erc20(TOKEN, decimals=18)
    client = make_client([chain], account, tools=erc20_tools)

    intent = await client.execute(
        "intentApprove", {"token": TOKEN, "amount": "max", "spender": SPENDER}
    )

    assert intent.hash in chain.receipts


@pytest.mark.asyncio
async def test_balance_of_reports_per_chain_errors(make_chain, make_client):
    mainnet, base = make_chain(1), make_chain(8453)
    mainnet.add_erc20(TOKEN, decimals=6, balances={OWNER: 1_250_000})
    client = make_client([mainnet, base], OWNER, tools=erc20_tools)

    result = await client.execute("getBalanceOf", {"token": TOKEN, "owner": OWNER})

    assert result[0] == {"chain": 1, "balance": "1.25"}
    assert result[1]["chain"] == 8453
    assert result[1]["error"].startswith("Failed to fetch balance:")


@pytest.mark.asyncio
async def test_read_tools_are_idempotent(make_chain, make_client):
    chain = make_chain(1)
    chain.add_erc20(TOKEN, decimals=18, balances={OWNER: 42})
    client = make_client([chain], OWNER, tools=erc20_tools)
    args = {"token": TOKEN, "owner": OWNER}

    first = await client.execute("getBalanceOf", args)
    second = await client.execute("getBalanceOf", args)

    assert first == second


@pytest.mark.asyncio
async def test_allowance_and_simple_reads(make_chain, make_client):
    chain = make_chain(1)
    chain.add_erc20(
        TOKEN, decimals=6, symbol="USDC", name="USD Coin",
        total_supply=10_000_000, allowances={(OWNER, SPENDER): 3_000_000},
    )
    client = make_client([chain], OWNER, tools=erc20_tools)

    allowance = await client.execute("getAllowance", {"token": TOKEN, "owner": OWNER, "spender": SPENDER})
    decimals = await client.execute("getDecimals", {"token": TOKEN})
    symbol = await client.execute("getSymbol", {"token": TOKEN})
    name = await client.execute("getName", {"token": TOKEN})
    supply = await client.execute("getTotalSupply", {"token": TOKEN})

    assert allowance == [{"chain": 1, "allowance": "3"}]
    assert decimals == [{"chain": 1, "decimals": 6}]
    assert symbol == [{"chain": 1, "symbol": "USDC"}]
    assert name == [{"chain": 1, "name": "USD Coin"}]
    assert supply == [{"chain": 1, "totalSupply": "10"}]


@pytest.mark.asyncio
async def test_token_metadata_single_chain(make_chain, make_client):
    chain = make_chain(8453)
    chain.add_erc20(TOKEN, decimals=18, symbol="TKN", name="Token", total_supply=5 * 10 ** 18)
    client = make_client([chain], OWNER, tools=erc20_tools)

    metadata = await client.execute("getTokenMetadata", {"token": TOKEN, "chain_id": 8453})

    assert metadata == {
        "chain": 8453,
        "name": "Token",
        "symbol": "TKN",
        "decimals": 18,
        "totalSupply": "5",
    }

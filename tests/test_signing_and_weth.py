"""Signing intents and WETH wrap/unwrap intents."""

import pytest
from eth_abi import decode
from eth_account import Account
from eth_account.messages import encode_defunct

from agentek.client.abi_utils import function_selector
from agentek.client.errors import UnsupportedChainError
from agentek.client.operations import PersonalSign, TypedDataSign
from agentek.tools.signing import signing_tools
from agentek.tools.weth import weth_tools
from agentek.tools.weth.weth_config import WETH_ADDRESS

OWNER = "0x4444444444444444444444444444444444444444"
ETHER = 10 ** 18

PERMIT_TYPES = {
    "Permit": [
        {"name": "owner", "type": "address"},
        {"name": "value", "type": "uint256"},
    ],
}


@pytest.mark.asyncio
async def test_sign_message_requested_without_wallet(make_chain, make_client, call_log):
    client = make_client([make_chain(1)], OWNER, tools=signing_tools)

    intent = await client.execute("intentSignMessage", {"message": "gm"})

    assert intent.chain == 1
    assert isinstance(intent.ops[0], PersonalSign)
    assert intent.signatures is None
    assert call_log == []


@pytest.mark.asyncio
async def test_sign_message_completed_with_wallet(make_chain, make_client, account):
    client = make_client([make_chain(8453)], account, tools=signing_tools)

    intent = await client.execute("intentSignMessage", {"message": "gm"})

    [signature] = intent.signatures
    assert Account.recover_message(encode_defunct(text="gm"), signature=signature) == account.address
    assert intent.hash is None


@pytest.mark.asyncio
async def test_sign_raw_message_requires_hex(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=signing_tools)

    intent = await client.execute("intentSignMessage", {"message": "0xdead", "raw": True})
    assert intent.ops[0].message == {"raw": "0xdead"}

    with pytest.raises(ValueError):
        await client.execute("intentSignMessage", {"message": "not hex", "raw": True})


@pytest.mark.asyncio
async def test_sign_typed_data_uses_domain_chain(make_chain, make_client):
    client = make_client([make_chain(1), make_chain(8453)], OWNER, tools=signing_tools)

    intent = await client.execute(
        "intentSignTypedData",
        {
            "domain": {"name": "Token", "chainId": 8453},
            "types": PERMIT_TYPES,
            "primary_type": "Permit",
            "message": {"owner": OWNER, "value": 1},
        },
    )

    assert intent.chain == 8453
    assert isinstance(intent.ops[0], TypedDataSign)


@pytest.mark.asyncio
@pytest.mark.parametrize("domain_chain_id", ["0x2105", "8453", 8453])
async def test_sign_typed_data_accepts_hex_domain_chain(make_chain, make_client, domain_chain_id):
    client = make_client([make_chain(1), make_chain(8453)], OWNER, tools=signing_tools)

    intent = await client.execute(
        "intentSignTypedData",
        {
            "domain": {"name": "Token", "chainId": domain_chain_id},
            "types": PERMIT_TYPES,
            "primary_type": "Permit",
            "message": {"owner": OWNER, "value": 1},
        },
    )

    assert intent.chain == 8453


@pytest.mark.asyncio
async def test_sign_typed_data_rejects_bad_domain_chain(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=signing_tools)

    with pytest.raises(ValueError, match="domain.chainId"):
        await client.execute(
            "intentSignTypedData",
            {
                "domain": {"chainId": "base"},
                "types": PERMIT_TYPES,
                "primary_type": "Permit",
                "message": {"owner": OWNER, "value": 1},
            },
        )


@pytest.mark.asyncio
async def test_sign_typed_data_rejects_missing_primary_type(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=signing_tools)

    with pytest.raises(ValueError):
        await client.execute(
            "intentSignTypedData",
            {"domain": {}, "types": PERMIT_TYPES, "primary_type": "Mail", "message": {}},
        )


@pytest.mark.asyncio
async def test_deposit_weth(make_chain, make_client):
    client = make_client([make_chain(42161)], OWNER, tools=weth_tools)

    intent = await client.execute("depositWETH", {"chain_id": 42161, "amount": "1.5"})

    op = intent.ops[0]
    assert op.target == WETH_ADDRESS[42161]
    assert op.value == str(3 * ETHER // 2)
    assert op.data == function_selector("deposit()")
    assert intent.intent == "Deposit 1.5 ETH into WETH"


@pytest.mark.asyncio
async def test_withdraw_weth(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=weth_tools)

    intent = await client.execute("withdrawWETH", {"chain_id": 1, "amount": "2"})

    op = intent.ops[0]
    assert op.value == "0"
    assert op.data.startswith(function_selector("withdraw(uint256)"))
    assert decode(["uint256"], bytes.fromhex(op.data[10:])) == (2 * ETHER,)


@pytest.mark.asyncio
async def test_weth_on_unsupported_chain(make_chain, make_client):
    client = make_client([make_chain(34443)], OWNER, tools=weth_tools)

    with pytest.raises(UnsupportedChainError):
        await client.execute("depositWETH", {"chain_id": 34443, "amount": "1"})


@pytest.mark.asyncio
async def test_deposit_weth_executes_with_wallet(make_chain, make_client, account):
    chain = make_chain(8453)
    chain.set_balance(account.address, 5 * ETHER)
    client = make_client([chain], account, tools=weth_tools)

    intent = await client.execute("depositWETH", {"chain_id": 8453, "amount": "1"})

    assert intent.hash in chain.receipts

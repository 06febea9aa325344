"""RPC read tools and arbitrary transaction intents."""

import pytest
from eth_abi import decode

from agentek.client.abi_utils import checksum, encode_function_data, function_selector
from agentek.client.errors import ToolValidationError
from agentek.client.operations import Call
from agentek.tools.rpc import rpc_tools

OWNER = "0x4444444444444444444444444444444444444444"
TARGET = "0x5555555555555555555555555555555555555555"
ETHER = 10 ** 18


@pytest.mark.asyncio
async def test_get_balance_all_chains(make_chain, make_client):
    mainnet, polygon = make_chain(1), make_chain(137)
    mainnet.set_balance(OWNER, 3 * ETHER // 2)
    polygon.set_balance(OWNER, 10 * ETHER)
    client = make_client([mainnet, polygon], OWNER, tools=rpc_tools)

    result = await client.execute("getBalance", {"address": OWNER})

    assert result == [
        {"chain": 1, "balance": "1.5", "symbol": "ETH"},
        {"chain": 137, "balance": "10", "symbol": "POL"},
    ]


@pytest.mark.asyncio
async def test_get_code_marks_contracts(make_chain, make_client):
    chain = make_chain(1)
    chain.code[TARGET] = "0x6080"
    client = make_client([chain], OWNER, tools=rpc_tools)

    contract = await client.execute("getCode", {"address": TARGET})
    eoa = await client.execute("getCode", {"address": OWNER})

    assert contract[0]["isContract"] is True
    assert eoa[0] == {"chain": 1, "code": "0x", "isContract": False}


@pytest.mark.asyncio
async def test_block_and_gas_reads(make_chain, make_client):
    client = make_client([make_chain(8453, gas_price=2 * 10 ** 9)], OWNER, tools=rpc_tools)

    block_number = await client.execute("getBlockNumber", {})
    gas_price = await client.execute("getGasPrice", {"chain_id": 8453})
    block = await client.execute("getBlock", {"chain_id": 8453, "block_number": 99})

    assert block_number == [{"chain": 8453, "blockNumber": 100}]
    assert gas_price == [{"chain": 8453, "gasPrice": "2000000000", "gasPriceGwei": "2"}]
    assert block["number"] == 99
    assert block["transactionCount"] == 1
    assert block["baseFeePerGas"] == 10 ** 9


@pytest.mark.asyncio
async def test_estimate_gas_reports_cost(make_chain, make_client):
    client = make_client([make_chain(1, gas_price=10 ** 9)], OWNER, tools=rpc_tools)

    result = await client.execute("estimateGas", {"to": TARGET, "value": "0.1"})

    assert result == [{"chain": 1, "gas": "21000", "estimatedCost": "0.000021", "symbol": "ETH"}]


@pytest.mark.asyncio
async def test_transaction_and_receipt_lookup(make_chain, make_client, account):
    chain = make_chain(1)
    client = make_client([chain], account, tools=rpc_tools)
    tx_hash = await client.execute_ops(
        [Call(target=TARGET, value=str(ETHER))], 1
    )
    chain.transactions[tx_hash].update({"to": TARGET, "value": hex(ETHER), "nonce": "0x0", "gas": hex(21000)})

    tx = await client.execute("getTransaction", {"hash": tx_hash, "chain_id": 1})
    receipt = await client.execute("getTransactionReceipt", {"hash": tx_hash, "chain_id": 1})

    assert tx["value"] == "1"
    assert tx["explorer"] == f"https://etherscan.io/tx/{tx_hash}"
    assert receipt["status"] == "success"
    assert receipt["gasUsed"] == 21000


@pytest.mark.asyncio
async def test_missing_transaction_raises(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=rpc_tools)

    with pytest.raises(ValueError, match="未找到交易"):
        await client.execute("getTransaction", {"hash": "0x" + "12" * 32, "chain_id": 1})


@pytest.mark.asyncio
async def test_bad_hash_fails_validation(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=rpc_tools)

    with pytest.raises(ToolValidationError):
        await client.execute("getTransactionReceipt", {"hash": "0x12", "chain_id": 1})


@pytest.mark.asyncio
async def test_send_transaction_intent_encodes_function_call(make_chain, make_client):
    client = make_client([make_chain(8453)], OWNER, tools=rpc_tools)

    intent = await client.execute(
        "intentSendTransaction",
        {
            "to": TARGET,
            "value": "0.5",
            "function_signature": "transfer(address,uint256)",
            "args": [OWNER, "1000"],
            "chain_id": 8453,
        },
    )

    assert intent.chain == 8453
    assert intent.ops[0].value == str(ETHER // 2)
    assert intent.ops[0].data == encode_function_data("transfer(address,uint256)", [OWNER, 1000])
    assert intent.hash is None


@pytest.mark.asyncio
async def test_send_transaction_intent_with_raw_data(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=rpc_tools)

    intent = await client.execute(
        "intentSendTransaction", {"to": TARGET, "data": "0xdeadbeef", "chain_id": 1}
    )

    assert intent.ops[0].data == "0xdeadbeef"
    assert intent.ops[0].value == "0"


@pytest.mark.asyncio
async def test_send_transaction_intent_rejects_bad_data(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=rpc_tools)

    with pytest.raises(ValueError):
        await client.execute("intentSendTransaction", {"to": TARGET, "data": "nothex", "chain_id": 1})


@pytest.mark.asyncio
async def test_send_transaction_intent_normalizes_array_and_tuple_args(make_chain, make_client):
    client = make_client([make_chain(1)], OWNER, tools=rpc_tools)
    recipient = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"
    signature = "batch(address[],uint256[2],(address,uint256)[])"

    intent = await client.execute(
        "intentSendTransaction",
        {
            "to": TARGET,
            "function_signature": signature,
            "args": [[recipient, OWNER], ["1000", "0x10"], [[recipient, "5"]]],
            "chain_id": 1,
        },
    )

    data = intent.ops[0].data
    assert data.startswith(function_selector(signature))
    addresses, amounts, pairs = decode(
        ["address[]", "uint256[2]", "(address,uint256)[]"], bytes.fromhex(data[10:])
    )
    assert addresses == (checksum(recipient), checksum(OWNER))
    assert amounts == (1000, 16)
    assert pairs == ((checksum(recipient), 5),)

"""Shared fixtures: an in-memory JSON-RPC chain and a fixed signing account."""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import pytest
import rlp
from eth_abi import decode, encode
from eth_account import Account
from eth_utils import keccak

from agentek.client.abi_utils import function_selector
from agentek.client.agentek_client import AgentekClient
from agentek.client.client_config import EXECUTION_CONFIG, get_chain_info
from agentek.client.errors import RPCError

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"

TOKEN = "0x1111111111111111111111111111111111111111"
SPENDER = "0x2222222222222222222222222222222222222222"
RECIPIENT = "0x3333333333333333333333333333333333333333"
OWNER = "0x4444444444444444444444444444444444444444"

GWEI = 10 ** 9
ETHER = 10 ** 18


def raw_transaction_nonce(raw: str) -> int:
    """Nonce of a signed legacy or typed (EIP-2718) transaction."""
    payload = bytes.fromhex(raw[2:])
    if payload[0] >= 0xc0:
        fields = rlp.decode(payload)
        nonce = fields[0]
    else:
        fields = rlp.decode(payload[1:])
        nonce = fields[1]
    return int.from_bytes(nonce, "big")


class FakeChain:
    """Per-chain state answered by FakeTransport."""

    def __init__(self, chain_id: int, gas_price: int = GWEI, base_fee: Optional[int] = GWEI):
        self.chain_id = chain_id
        self.gas_price = gas_price
        self.base_fee = base_fee
        self.block_number = 100
        self.balances: Dict[str, int] = {}
        self.nonces: Dict[str, int] = {}
        self.code: Dict[str, str] = {}
        # contract address -> {selector: handler(calldata_args_bytes) -> hex result}
        self.contracts: Dict[str, Dict[str, Callable[[bytes], str]]] = {}
        self.transactions: Dict[str, Dict[str, Any]] = {}
        self.receipts: Dict[str, Dict[str, Any]] = {}
        self.receipt_status = "0x1"
        self.receipt_delay = 0
        self._receipt_polls: Dict[str, int] = {}

    def set_balance(self, address: str, wei: int):
        self.balances[address.lower()] = wei

    def add_function(self, address: str, signature: str, output_types: List[str], handler: Callable[..., Any]):
        """Register a view function; handler receives decoded args and returns output values."""
        _, _, rest = signature.partition("(")
        input_types = [t for t in rest[:-1].split(",") if t]

        def respond(payload: bytes) -> str:
            args = decode(input_types, payload) if input_types else ()
            result = handler(*args)
            values = result if isinstance(result, tuple) else (result,)
            return "0x" + encode(output_types, list(values)).hex()

        self.contracts.setdefault(address.lower(), {})[function_selector(signature)] = respond

    def add_erc20(
        self,
        token: str,
        decimals: int = 18,
        symbol: str = "TKN",
        name: str = "Token",
        balances: Optional[Dict[str, int]] = None,
        total_supply: int = 1_000_000 * ETHER,
        allowances: Optional[Dict[tuple, int]] = None,
    ):
        balances = {k.lower(): v for k, v in (balances or {}).items()}
        allowances = {(o.lower(), s.lower()): v for (o, s), v in (allowances or {}).items()}

        self.add_function(token, "decimals()", ["uint8"], lambda: decimals)
        self.add_function(token, "symbol()", ["string"], lambda: symbol)
        self.add_function(token, "name()", ["string"], lambda: name)
        self.add_function(token, "totalSupply()", ["uint256"], lambda: total_supply)
        self.add_function(token, "balanceOf(address)", ["uint256"], lambda owner: balances.get(owner.lower(), 0))
        self.add_function(
            token, "allowance(address,address)", ["uint256"],
            lambda owner, spender: allowances.get((owner.lower(), spender.lower()), 0),
        )


class FakeTransport:
    """Async JSON-RPC transport that records every call in order."""

    def __init__(self, chain: FakeChain, log: Optional[List[tuple]] = None):
        self.chain = chain
        self.calls: List[tuple] = log if log is not None else []

    async def request(self, method: str, params: List[Any]) -> Any:
        self.calls.append((self.chain.chain_id, method, params))
        # yield like a real network call so concurrent callers interleave
        await asyncio.sleep(0)
        handler = getattr(self, f"_{method}", None)
        if handler is None:
            raise RPCError(f"RPC 错误: method {method} not supported")
        return handler(*params)

    def methods(self) -> List[str]:
        return [method for _, method, _ in self.calls]

    def _eth_gasPrice(self):
        return hex(self.chain.gas_price)

    def _eth_maxPriorityFeePerGas(self):
        return hex(GWEI)

    def _eth_blockNumber(self):
        return hex(self.chain.block_number)

    def _eth_getBalance(self, address, block):
        return hex(self.chain.balances.get(address.lower(), 0))

    def _eth_getTransactionCount(self, address, block):
        return hex(self.chain.nonces.get(address.lower(), 0))

    def _eth_getCode(self, address, block):
        return self.chain.code.get(address.lower(), "0x")

    def _eth_estimateGas(self, tx):
        return hex(21000) if tx.get("data", "0x") == "0x" else hex(60000)

    def _eth_getBlockByNumber(self, block, full_transactions):
        number = self.chain.block_number if block == "latest" else int(block, 16)
        result = {
            "number": hex(number),
            "hash": "0x" + "ab" * 32,
            "parentHash": "0x" + "cd" * 32,
            "timestamp": hex(1_700_000_000),
            "miner": "0x" + "00" * 20,
            "gasUsed": hex(15_000_000),
            "gasLimit": hex(30_000_000),
            "transactions": ["0x" + "ef" * 32],
        }
        if self.chain.base_fee is not None:
            result["baseFeePerGas"] = hex(self.chain.base_fee)
        return result

    def _eth_call(self, call, block):
        functions = self.chain.contracts.get(call["to"].lower(), {})
        data = call["data"]
        respond = functions.get(data[:10])
        if respond is None:
            raise RPCError("RPC 错误: execution reverted", code=3)
        return respond(bytes.fromhex(data[10:]))

    def _eth_sendRawTransaction(self, raw):
        sender = Account.recover_transaction(raw)
        nonce = raw_transaction_nonce(raw)
        expected = self.chain.nonces.get(sender.lower(), 0)
        if nonce != expected:
            raise RPCError(f"RPC 错误: invalid nonce: got {nonce}, expected {expected}", code=-32000)

        tx_hash = "0x" + keccak(hexstr=raw).hex()
        self.chain.nonces[sender.lower()] = expected + 1
        self.chain.transactions[tx_hash] = {"hash": tx_hash, "from": sender, "raw": raw, "nonce": hex(nonce)}
        self.chain.receipts[tx_hash] = {
            "transactionHash": tx_hash,
            "status": self.chain.receipt_status,
            "blockNumber": hex(self.chain.block_number + 1),
            "gasUsed": hex(21000),
            "contractAddress": None,
            "logs": [],
        }
        return tx_hash

    def _eth_getTransactionReceipt(self, tx_hash):
        polls = self._receipt_polls_for(tx_hash)
        if polls <= self.chain.receipt_delay:
            return None
        return self.chain.receipts.get(tx_hash)

    def _receipt_polls_for(self, tx_hash):
        polls = self.chain._receipt_polls.get(tx_hash, 0) + 1
        self.chain._receipt_polls[tx_hash] = polls
        return polls

    def _eth_getTransactionByHash(self, tx_hash):
        return self.chain.transactions.get(tx_hash)


@pytest.fixture(autouse=True)
def fast_polling(monkeypatch):
    """Receipt polling without real sleeps."""
    monkeypatch.setattr(EXECUTION_CONFIG, "poll_interval", 0)
    monkeypatch.setattr(EXECUTION_CONFIG, "receipt_timeout", 5)


@pytest.fixture
def account():
    return Account.from_key(PRIVATE_KEY)


@pytest.fixture
def call_log():
    """One ordered log shared by every fake transport in a test."""
    return []


@pytest.fixture
def make_chain():
    return FakeChain


@pytest.fixture
def make_client(call_log):
    """Build an AgentekClient over fake chains that all log into call_log."""
    def factory(chains, account_or_address, tools=None):
        transports = [FakeTransport(chain, call_log) for chain in chains]
        infos = [get_chain_info(chain.chain_id) for chain in chains]
        return AgentekClient(transports, infos, account_or_address, tools)
    return factory

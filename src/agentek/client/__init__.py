# agentek/client/__init__.py

from agentek.client.agentek_client import AgentekClient, create_agentek_client
from agentek.client.cache import TTLCache
from agentek.client.client_config import (
    ARBITRUM, BASE, MAINNET, MODE, OPTIMISM, POLYGON, SEPOLIA,
    SUPPORTED_CHAINS, ChainInfo, get_chain_info
)
from agentek.client.errors import (
    AgentekError, ChainNotConfiguredError, NoPublicClientError,
    NoViableChainError, NoWalletClientError, RPCError, RPCTimeoutError,
    ToolNotFoundError, ToolValidationError, TransactionRevertedError,
    UnsupportedChainError
)
from agentek.client.intent_builder import (
    ChainCandidate, ProbeResult, choose_chain, finalize_intent,
    probe_chains, select_cheapest_chain
)
from agentek.client.operations import (
    Call, Intent, Operation, PersonalSign, TypedDataSign
)
from agentek.client.rpc_client import HTTPTransport, PublicClient, WalletClient
from agentek.client.tool_registry import (
    BaseTool, ToolRegistry, create_tool, create_tool_collection
)

__all__ = [
    'AgentekClient', 'create_agentek_client', 'TTLCache',
    'ChainInfo', 'SUPPORTED_CHAINS', 'get_chain_info',
    'MAINNET', 'OPTIMISM', 'POLYGON', 'BASE', 'MODE', 'ARBITRUM', 'SEPOLIA',
    'AgentekError', 'ToolNotFoundError', 'ToolValidationError',
    'UnsupportedChainError', 'ChainNotConfiguredError', 'NoPublicClientError',
    'NoWalletClientError', 'NoViableChainError', 'RPCError', 'RPCTimeoutError',
    'TransactionRevertedError',
    'ProbeResult', 'ChainCandidate', 'probe_chains', 'select_cheapest_chain',
    'choose_chain', 'finalize_intent',
    'Call', 'PersonalSign', 'TypedDataSign', 'Operation', 'Intent',
    'HTTPTransport', 'PublicClient', 'WalletClient',
    'BaseTool', 'ToolRegistry', 'create_tool', 'create_tool_collection',
]

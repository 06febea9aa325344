# agentek/__init__.py
"""
Agentek - 面向 LLM 代理的多链 EVM 工具集
"""

from agentek.client import (
    AgentekClient, BaseTool, Call, ChainInfo, Intent, PersonalSign,
    TypedDataSign, create_agentek_client, create_tool
)

__version__ = "0.1.0"

__all__ = [
    'AgentekClient',
    'create_agentek_client',
    'create_tool',
    'BaseTool',
    'ChainInfo',
    'Call',
    'PersonalSign',
    'TypedDataSign',
    'Intent',
]

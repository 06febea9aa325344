# agentek/integrations/__init__.py

from agentek.integrations.langchain_toolkit import AgentekToolkit, to_langchain_tools

__all__ = [
    'AgentekToolkit',
    'to_langchain_tools'
]

# agentek/client/tool_registry.py
"""
工具描述与注册表
一个工具 = 名称 + 描述 + 参数模型 (pydantic) + execute 协程 + 可选的支持链列表
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel

from agentek.client.client_config import ChainInfo

logger = logging.getLogger(__name__)

ExecuteFn = Callable[[Any, BaseModel], Awaitable[Any]]


@dataclass(frozen=True)
class BaseTool:
    """工具描述（组装后不可变）"""
    name: str
    description: str
    parameters: Type[BaseModel]
    execute: ExecuteFn
    supported_chains: Optional[List[ChainInfo]] = None

    def supports_chain(self, chain_id: int) -> bool:
        """未声明支持链的工具视为支持所有链"""
        if self.supported_chains is None:
            return True
        return any(chain.chain_id == chain_id for chain in self.supported_chains)


def create_tool(
    name: str,
    description: str,
    parameters: Type[BaseModel],
    execute: ExecuteFn,
    supported_chains: Optional[Iterable[ChainInfo]] = None,
) -> BaseTool:
    """
    创建工具

    Args:
        name: 工具名（全局唯一）
        description: 给 LLM 看的描述
        parameters: pydantic 参数模型
        execute: async (client, args) -> Any
        supported_chains: 支持的链，None 表示所有链

    Returns:
        BaseTool
    """
    if not name:
        raise ValueError("工具名不能为空")
    if not (isinstance(parameters, type) and issubclass(parameters, BaseModel)):
        raise TypeError(f"工具 {name} 的参数必须是 pydantic BaseModel 子类")
    return BaseTool(
        name=name,
        description=description,
        parameters=parameters,
        execute=execute,
        supported_chains=list(supported_chains) if supported_chains is not None else None,
    )


def create_tool_collection(tools: Iterable[BaseTool]) -> Dict[str, BaseTool]:
    """按名称建立工具映射，重名时后者覆盖前者"""
    collection: Dict[str, BaseTool] = {}
    for tool in tools:
        if tool.name in collection:
            logger.debug(f"工具 {tool.name} 被覆盖")
        collection[tool.name] = tool
    return collection


class ToolRegistry:
    """名称 -> 工具 的注册表"""

    def __init__(self, tools: Optional[Iterable[BaseTool]] = None):
        self._tools: Dict[str, BaseTool] = create_tool_collection(tools or [])

    def register(self, tool: BaseTool):
        if tool.name in self._tools:
            logger.debug(f"工具 {tool.name} 被覆盖")
        self._tools[tool.name] = tool

    def add(self, tools: Iterable[BaseTool]):
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> Optional[BaseTool]:
        return self._tools.get(name)

    def all(self) -> Dict[str, BaseTool]:
        return dict(self._tools)

    def names(self) -> List[str]:
        return list(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

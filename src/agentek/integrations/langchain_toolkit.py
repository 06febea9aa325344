# agentek/integrations/langchain_toolkit.py
"""
LangChain 适配
把 agentek 工具转换为 StructuredTool，供 LLM 代理调用
"""

import dataclasses
import json
import logging
from typing import Any, List, Optional, Sequence

from langchain_core.tools import StructuredTool

from agentek.client.agentek_client import AgentekClient
from agentek.client.operations import Intent
from agentek.client.tool_registry import BaseTool

logger = logging.getLogger(__name__)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, Intent):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        to_dict = getattr(value, "to_dict", None)
        return to_dict() if to_dict else dataclasses.asdict(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_jsonable(item) for item in value]
    return value

def serialize_result(result: Any) -> str:
    """工具结果转换为 JSON 文本"""
    if isinstance(result, str):
        return result
    return json.dumps(_to_jsonable(result), ensure_ascii=False, default=str)


def to_langchain_tool(client: AgentekClient, tool: BaseTool) -> StructuredTool:
    """单个工具转换；执行失败时把错误信息返回给 LLM"""
    async def _run(**kwargs: Any) -> str:
        args = {key: value for key, value in kwargs.items() if value is not None}
        try:
            result = await client.execute(tool.name, args)
        except Exception as e:
            logger.error(f"工具 {tool.name} 执行失败: {str(e)}")
            return f"Error: {str(e)}"
        return serialize_result(result)

    return StructuredTool.from_function(
        coroutine=_run,
        name=tool.name,
        description=tool.description,
        args_schema=tool.parameters,
    )

def to_langchain_tools(client: AgentekClient, tools: Optional[Sequence[BaseTool]] = None) -> List[StructuredTool]:
    """转换工具列表；未指定时转换客户端中注册的全部工具"""
    if tools is None:
        tools = list(client.get_tools().values())
    return [to_langchain_tool(client, tool) for tool in tools]


class AgentekToolkit:
    """把客户端和工具打包成 LangChain 工具集"""

    def __init__(self, client: AgentekClient, tools: Optional[Sequence[BaseTool]] = None):
        self.client = client
        if tools:
            client.add_tools(tools)

    def get_tools(self) -> List[StructuredTool]:
        return to_langchain_tools(self.client)

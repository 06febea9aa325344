# agentek/client/errors.py
"""
错误类型
所有错误信息都是可直接转给用户或 LLM 的描述性文本
"""

import json
from typing import Any, Dict, List, Optional


class AgentekError(Exception):
    """所有 agentek 错误的基类"""


class ToolNotFoundError(AgentekError):
    """调用了未注册的工具"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"未找到工具: {name}")


class ToolValidationError(AgentekError):
    """参数未通过工具的 schema 校验"""

    def __init__(self, tool_name: str, errors: List[Dict[str, Any]]):
        self.tool_name = tool_name
        self.errors = errors
        detail = json.dumps(errors, ensure_ascii=False, default=str)
        super().__init__(f"工具 {tool_name} 参数校验失败: {detail}")


class UnsupportedChainError(AgentekError, ValueError):
    """请求的链不在工具或客户端支持的范围内"""

    def __init__(self, chain_id: Any, tool_name: Optional[str] = None):
        self.chain_id = chain_id
        self.tool_name = tool_name
        if tool_name:
            message = f"工具 {tool_name} 不支持链 {chain_id}"
        else:
            message = f"不支持的链: {chain_id}"
        super().__init__(message)


class ChainNotConfiguredError(AgentekError, ValueError):
    """请求的链没有配置连接"""

    def __init__(self, chain_id: Optional[int] = None):
        self.chain_id = chain_id
        if chain_id is None:
            message = "没有可用的公共客户端"
        else:
            message = f"链 {chain_id} 没有公共客户端"
        super().__init__(message)


class NoPublicClientError(AgentekError):
    """执行交易时缺少用于确认的公共客户端"""

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(f"链 {chain_id} 没有可用的公共客户端")


class NoWalletClientError(AgentekError):
    """执行交易或签名时缺少钱包客户端"""

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(f"链 {chain_id} 没有可用的钱包客户端")


class NoViableChainError(AgentekError):
    """所有候选链都未通过可行性检查"""

    def __init__(self, results: List[Any], summary: Optional[str] = None):
        # results: ProbeResult 列表
        self.results = results
        tried = "; ".join(
            f"{r.chain.name} ({r.chain.chain_id}): {r.reason or '不可行'}" for r in results
        )
        head = summary or "没有可用的链"
        super().__init__(f"{head} - 已尝试: {tried or '无候选链'}")

    @property
    def chains(self) -> List[Any]:
        return [r.chain for r in self.results]


class RPCError(AgentekError):
    """RPC 返回错误或所有端点都失败"""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        self.code = code
        self.data = data
        super().__init__(message)


class RPCTimeoutError(AgentekError, TimeoutError):
    """网络调用超时"""


class TransactionRevertedError(AgentekError):
    """交易已上链但执行失败"""

    def __init__(self, tx_hash: str, chain_id: int):
        self.tx_hash = tx_hash
        self.chain_id = chain_id
        super().__init__(f"交易 {tx_hash} 在链 {chain_id} 上执行失败 (reverted)")

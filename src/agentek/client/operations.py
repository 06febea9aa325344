# agentek/client/operations.py
"""
操作与意图模型
Operation 是交易调用 (Call) 或签名请求 (PersonalSign / TypedDataSign) 的标签联合
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Call:
    """交易调用：目标地址、原生代币数量（最小单位的十进制字符串）、调用数据"""
    target: str
    value: str = "0"
    data: str = "0x"
    kind: str = field(default="call", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"target": self.target, "value": self.value, "data": self.data}


@dataclass(frozen=True)
class PersonalSign:
    """EIP-191 个人消息签名，message 为文本或 {"raw": "0x..."}"""
    message: Union[str, Dict[str, str]]
    kind: str = field(default="personal_sign", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "message": self.message}


@dataclass(frozen=True)
class TypedDataSign:
    """EIP-712 结构化数据签名"""
    domain: Dict[str, Any]
    types: Dict[str, List[Dict[str, str]]]
    primary_type: str
    message: Dict[str, Any]
    kind: str = field(default="typed_data_sign", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "domain": self.domain,
            "types": self.types,
            "primaryType": self.primary_type,
            "message": self.message,
        }


Sign = Union[PersonalSign, TypedDataSign]
Operation = Union[Call, PersonalSign, TypedDataSign]


def is_sign_operation(op: Operation) -> bool:
    return isinstance(op, (PersonalSign, TypedDataSign))


@dataclass
class Intent:
    """
    意图：一个或多个操作 + 目标链

    未执行时只有 intent/ops/chain（requested），
    执行后带 hash 和/或 signatures（completed）
    """
    intent: str
    ops: List[Operation]
    chain: int
    hash: Optional[str] = None
    signatures: Optional[List[str]] = None

    def __post_init__(self):
        if not self.ops:
            raise ValueError(f"意图 '{self.intent}' 至少需要一个操作")

    @property
    def is_completed(self) -> bool:
        return self.hash is not None or self.signatures is not None

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典（省略未执行的字段）"""
        data = {
            "intent": self.intent,
            "ops": [op.to_dict() for op in self.ops],
            "chain": self.chain,
        }
        if self.hash is not None:
            data["hash"] = self.hash
        if self.signatures is not None:
            data["signatures"] = list(self.signatures)
        return data

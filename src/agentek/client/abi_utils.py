# agentek/client/abi_utils.py
"""
ABI 编解码与单位换算工具
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, List, Sequence, Tuple, Union

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector, is_hex
from eth_utils import is_address as _is_address
from eth_utils import to_checksum_address

MAX_UINT256 = 2 ** 256 - 1

# 原生代币使用零地址表示
ETH_ADDRESS = "0x0000000000000000000000000000000000000000"

# ===== 地址 =====

def is_address(value: Any) -> bool:
    """是否为 0x 开头的 20 字节十六进制地址（大小写混合时校验 checksum）"""
    return isinstance(value, str) and value.startswith("0x") and len(value) == 42 and _is_address(value)

def checksum(address: str) -> str:
    """转换为 checksum 地址"""
    if not is_address(address):
        raise ValueError(f"无效的地址格式: {address}")
    return to_checksum_address(address)

def is_native_token(token: str) -> bool:
    return token.lower() == ETH_ADDRESS

# ===== 函数编码 =====

def split_types(type_list: str) -> List[str]:
    """按顶层逗号拆分类型列表，保留 tuple 内部的逗号"""
    types, depth, current = [], 0, ""
    for char in type_list:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            types.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        types.append(current.strip())
    return types

def parse_signature(signature: str) -> Tuple[str, List[str]]:
    """
    解析函数签名

    Args:
        signature: 如 "transfer(address,uint256)"

    Returns:
        (函数名, 参数类型列表)
    """
    signature = signature.replace(" ", "")
    if "(" not in signature or not signature.endswith(")"):
        raise ValueError(f"无效的函数签名: {signature}")
    name, _, rest = signature.partition("(")
    return name, split_types(rest[:-1])

def function_selector(signature: str) -> str:
    """函数选择器（4 字节）"""
    name, types = parse_signature(signature)
    canonical = f"{name}({','.join(types)})"
    return "0x" + function_signature_to_4byte_selector(canonical).hex()

def _normalize_arg(abi_type: str, value: Any) -> Any:
    # 数组 T[] / T[N]：逐个元素按 T 处理
    if abi_type.endswith("]") and isinstance(value, (list, tuple)):
        element_type = abi_type[:abi_type.rindex("[")]
        return [_normalize_arg(element_type, item) for item in value]
    # tuple (T1,T2,...)
    if abi_type.startswith("(") and abi_type.endswith(")") and isinstance(value, (list, tuple)):
        component_types = split_types(abi_type[1:-1])
        if len(component_types) != len(value):
            raise ValueError(f"{abi_type} 需要 {len(component_types)} 个元素，实际提供 {len(value)} 个")
        return tuple(_normalize_arg(t, v) for t, v in zip(component_types, value))
    if abi_type == "address" and isinstance(value, str):
        return checksum(value)
    if (abi_type.startswith("uint") or abi_type.startswith("int")) and isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    if abi_type == "bool" and isinstance(value, str):
        return value.lower() == "true"
    if abi_type.startswith("bytes") and isinstance(value, str) and value.startswith("0x"):
        return bytes.fromhex(value[2:])
    return value

def encode_function_data(signature: str, args: Sequence[Any] = ()) -> str:
    """
    编码合约调用数据

    Args:
        signature: 函数签名，如 "approve(address,uint256)"
        args: 参数列表

    Returns:
        0x 开头的 calldata
    """
    _, types = parse_signature(signature)
    if len(types) != len(args):
        raise ValueError(f"{signature} 需要 {len(types)} 个参数，实际提供 {len(args)} 个")
    values = [_normalize_arg(t, v) for t, v in zip(types, args)]
    return function_selector(signature) + encode(types, values).hex()

def decode_function_result(output_types: Sequence[str], data: str) -> Any:
    """解码 eth_call 返回值，单个返回值直接返回该值"""
    if not data or data == "0x":
        raise ValueError("合约调用返回空数据")
    decoded = decode(list(output_types), bytes.fromhex(data[2:] if data.startswith("0x") else data))
    if len(decoded) == 1:
        return decoded[0]
    return decoded

def ensure_hex_data(data: str) -> str:
    """校验原始 calldata"""
    if not isinstance(data, str) or not data.startswith("0x") or not (data == "0x" or is_hex(data)):
        raise ValueError("原始数据必须是以 0x 开头的十六进制字符串")
    return data

def hex_to_int(value: Union[str, int, None]) -> int:
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    return int(value, 16) if value.startswith("0x") else int(value)

# ===== 单位换算 =====

def parse_units(amount: str, decimals: int) -> int:
    """
    十进制字符串按精度换算为最小单位整数

    Args:
        amount: 如 "1.5"
        decimals: 代币精度

    Returns:
        最小单位整数
    """
    with localcontext() as ctx:
        ctx.prec = 100
        try:
            value = Decimal(str(amount).strip())
        except InvalidOperation:
            raise ValueError(f"无效的数量: {amount}")
        if not value.is_finite():
            raise ValueError(f"无效的数量: {amount}")
        if value < 0:
            raise ValueError(f"数量不能为负数: {amount}")
        return int(value.scaleb(decimals).to_integral_value(rounding=ROUND_HALF_UP))

def parse_ether(amount: str) -> int:
    return parse_units(amount, 18)

def parse_amount(amount: str, decimals: int) -> int:
    """'max'（不区分大小写）表示 uint256 最大值，其余按精度解析"""
    if is_max_amount(amount):
        return MAX_UINT256
    return parse_units(amount, decimals)

def is_max_amount(amount: str) -> bool:
    return str(amount).strip().lower() == "max"

def format_units(value: int, decimals: int) -> str:
    """最小单位整数格式化为十进制字符串，去掉末尾的 0"""
    negative = value < 0
    value = abs(value)
    base = 10 ** decimals
    integer, fraction = divmod(value, base)
    fraction_str = str(fraction).zfill(decimals).rstrip("0") if decimals else ""
    result = f"{integer}.{fraction_str}" if fraction_str else str(integer)
    return f"-{result}" if negative else result

def format_ether(value: int) -> str:
    return format_units(value, 18)

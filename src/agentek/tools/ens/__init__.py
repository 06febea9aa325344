# agentek/tools/ens/__init__.py

from agentek.tools.ens.ens_tools import ens_tools, namehash, resolve_address

# ENS 工具分类
ENS_TOOL_CATEGORIES = {
    "名称解析": [
        "resolveENS",   # 名称 -> 地址
        "lookupENS",    # 地址 -> 名称
    ],
}

__all__ = [
    'ens_tools',
    'namehash',
    'resolve_address',
    'ENS_TOOL_CATEGORIES'
]

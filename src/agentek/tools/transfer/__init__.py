# agentek/tools/transfer/__init__.py

from agentek.tools.transfer.transfer_tools import transfer_tools

# 转账工具分类
TRANSFER_TOOL_CATEGORIES = {
    "意图": [
        "intentTransfer",      # 转账（原生代币或 ERC20）
        "intentTransferFrom",  # 代他人转出 ERC20
    ],
}

__all__ = [
    'transfer_tools',
    'TRANSFER_TOOL_CATEGORIES'
]

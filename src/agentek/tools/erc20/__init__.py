# agentek/tools/erc20/__init__.py

from agentek.tools.erc20.erc20_tools import erc20_tools

# ERC20 工具分类
ERC20_TOOL_CATEGORIES = {
    "代币查询": [
        "getAllowance",      # 授权额度
        "getBalanceOf",      # 代币余额
        "getTotalSupply",    # 总供应量
        "getDecimals",       # 精度
        "getName",           # 名称
        "getSymbol",         # 符号
        "getTokenMetadata",  # 元数据
    ],
    "意图": [
        "intentApprove",     # 授权
    ],
}

__all__ = [
    'erc20_tools',
    'ERC20_TOOL_CATEGORIES'
]

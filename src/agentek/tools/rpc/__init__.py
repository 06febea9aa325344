# agentek/tools/rpc/__init__.py

from agentek.tools.rpc.rpc_tools import rpc_tools

# RPC 工具分类
RPC_TOOL_CATEGORIES = {
    "账户查询": [
        "getBalance",            # 原生代币余额
        "getCode",               # 合约代码
        "getTransactionCount",   # nonce
    ],
    "区块链信息": [
        "getBlock",              # 区块信息
        "getBlockNumber",        # 区块高度
        "getGasPrice",           # Gas 价格
        "estimateGas",           # Gas 估算
    ],
    "交易查询": [
        "getTransaction",        # 交易详情
        "getTransactionReceipt", # 交易收据
    ],
    "意图": [
        "intentSendTransaction", # 任意交易
    ],
}

__all__ = [
    'rpc_tools',
    'RPC_TOOL_CATEGORIES'
]

# agentek/tools/ens/ens_config.py
"""
ENS 配置
"""

from agentek.client.client_config import MAINNET

# ENS 只在以太坊主网上解析
ENS_CHAINS = [MAINNET]

# ENS Registry（主网）
ENS_REGISTRY_ADDRESS = "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e"

# 反向解析的根域名
REVERSE_SUFFIX = "addr.reverse"

# 没有后缀的名称默认补全为 .eth
DEFAULT_TLD = "eth"

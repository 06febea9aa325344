# agentek/client/client_config.py
"""
多链客户端配置文件 - 外部化配置
链注册表、RPC 端点、请求与执行参数
"""

import os
import logging
from typing import Dict, List, Optional, Union
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# ===== 基础配置类 =====

@dataclass(frozen=True)
class ChainInfo:
    """链信息配置（部署后不可变）"""
    chain_id: int
    name: str
    native_token: str
    explorer_url: str = ""
    decimals: int = 18
    is_testnet: bool = False

@dataclass
class APIConfig:
    """API 配置"""
    timeout: float = 15
    max_retries: int = 3
    rate_limit_delay: float = 0.2
    headers: Optional[Dict[str, str]] = None

@dataclass
class ExecutionConfig:
    """交易执行配置"""
    poll_interval: float = 2.0        # 等待收据的轮询间隔（秒）
    receipt_timeout: float = 180.0    # 等待收据的最长时间（秒）
    priority_fee_fallback: int = 1_000_000_000  # 节点不支持 eth_maxPriorityFeePerGas 时使用 1 Gwei

# ===== API 配置 =====

# API Keys（从环境变量获取）
API_KEYS = {
    "infura": os.getenv("INFURA_API_KEY", ""),
    "alchemy": os.getenv("ALCHEMY_API_KEY", ""),
    "ankr": os.getenv("ANKR_API_KEY", ""),
}

# 请求配置
REQUEST_CONFIG = APIConfig(
    timeout=float(os.getenv("AGENTEK_TIMEOUT", "15")),
    max_retries=int(os.getenv("AGENTEK_MAX_RETRIES", "3")),
    rate_limit_delay=float(os.getenv("AGENTEK_RATE_LIMIT", "0.2")),
    headers={
        "Content-Type": "application/json",
        "User-Agent": "Agentek/1.0"
    }
)

# 执行配置
EXECUTION_CONFIG = ExecutionConfig(
    poll_interval=float(os.getenv("AGENTEK_POLL_INTERVAL", "2")),
    receipt_timeout=float(os.getenv("AGENTEK_RECEIPT_TIMEOUT", "180")),
)

# ===== 网络配置 =====

MAINNET = ChainInfo(
    chain_id=1,
    name="Ethereum",
    native_token="ETH",
    explorer_url=os.getenv("ETHEREUM_EXPLORER", "https://etherscan.io"),
)

OPTIMISM = ChainInfo(
    chain_id=10,
    name="OP Mainnet",
    native_token="ETH",
    explorer_url=os.getenv("OPTIMISM_EXPLORER", "https://optimistic.etherscan.io"),
)

POLYGON = ChainInfo(
    chain_id=137,
    name="Polygon",
    native_token="POL",
    explorer_url=os.getenv("POLYGON_EXPLORER", "https://polygonscan.com"),
)

BASE = ChainInfo(
    chain_id=8453,
    name="Base",
    native_token="ETH",
    explorer_url=os.getenv("BASE_EXPLORER", "https://basescan.org"),
)

MODE = ChainInfo(
    chain_id=34443,
    name="Mode Mainnet",
    native_token="ETH",
    explorer_url=os.getenv("MODE_EXPLORER", "https://modescan.io"),
)

ARBITRUM = ChainInfo(
    chain_id=42161,
    name="Arbitrum One",
    native_token="ETH",
    explorer_url=os.getenv("ARBITRUM_EXPLORER", "https://arbiscan.io"),
)

SEPOLIA = ChainInfo(
    chain_id=11155111,
    name="Sepolia",
    native_token="ETH",
    explorer_url=os.getenv("SEPOLIA_EXPLORER", "https://sepolia.etherscan.io"),
    is_testnet=True,
)

# 支持的 EVM 链
SUPPORTED_CHAINS = {
    "ethereum": MAINNET,
    "optimism": OPTIMISM,
    "polygon": POLYGON,
    "base": BASE,
    "mode": MODE,
    "arbitrum": ARBITRUM,
    "sepolia": SEPOLIA,
}

# RPC 端点配置（按优先级排序）
RPC_ENDPOINTS = {
    "ethereum": [
        # 优先使用付费服务（如果有 API Key）
        f"https://mainnet.infura.io/v3/{API_KEYS['infura']}" if API_KEYS['infura'] else None,
        f"https://eth-mainnet.g.alchemy.com/v2/{API_KEYS['alchemy']}" if API_KEYS['alchemy'] else None,
        f"https://rpc.ankr.com/eth/{API_KEYS['ankr']}" if API_KEYS['ankr'] else None,

        # 免费公共 RPC
        os.getenv("ETHEREUM_RPC_1", "https://eth.llamarpc.com"),
        os.getenv("ETHEREUM_RPC_2", "https://ethereum.publicnode.com"),
        "https://eth.drpc.org",
    ],

    "optimism": [
        f"https://optimism-mainnet.infura.io/v3/{API_KEYS['infura']}" if API_KEYS['infura'] else None,
        f"https://opt-mainnet.g.alchemy.com/v2/{API_KEYS['alchemy']}" if API_KEYS['alchemy'] else None,
        os.getenv("OPTIMISM_RPC_1", "https://mainnet.optimism.io"),
        os.getenv("OPTIMISM_RPC_2", "https://optimism.publicnode.com"),
        "https://optimism.drpc.org",
    ],

    "polygon": [
        f"https://polygon-mainnet.infura.io/v3/{API_KEYS['infura']}" if API_KEYS['infura'] else None,
        f"https://polygon-mainnet.g.alchemy.com/v2/{API_KEYS['alchemy']}" if API_KEYS['alchemy'] else None,
        os.getenv("POLYGON_RPC_1", "https://polygon-rpc.com"),
        os.getenv("POLYGON_RPC_2", "https://polygon.drpc.org"),
        "https://polygon.publicnode.com",
    ],

    "base": [
        f"https://base-mainnet.g.alchemy.com/v2/{API_KEYS['alchemy']}" if API_KEYS['alchemy'] else None,
        f"https://rpc.ankr.com/base/{API_KEYS['ankr']}" if API_KEYS['ankr'] else None,
        os.getenv("BASE_RPC_1", "https://mainnet.base.org"),
        os.getenv("BASE_RPC_2", "https://base.publicnode.com"),
        "https://base.drpc.org",
    ],

    "mode": [
        os.getenv("MODE_RPC_1", "https://mainnet.mode.network"),
        os.getenv("MODE_RPC_2", "https://mode.drpc.org"),
    ],

    "arbitrum": [
        f"https://arbitrum-mainnet.infura.io/v3/{API_KEYS['infura']}" if API_KEYS['infura'] else None,
        f"https://arb-mainnet.g.alchemy.com/v2/{API_KEYS['alchemy']}" if API_KEYS['alchemy'] else None,
        os.getenv("ARBITRUM_RPC_1", "https://arb1.arbitrum.io/rpc"),
        os.getenv("ARBITRUM_RPC_2", "https://arbitrum-one.publicnode.com"),
        "https://arbitrum.drpc.org",
    ],

    "sepolia": [
        f"https://sepolia.infura.io/v3/{API_KEYS['infura']}" if API_KEYS['infura'] else None,
        os.getenv("SEPOLIA_RPC_1", "https://ethereum-sepolia.publicnode.com"),
        "https://sepolia.drpc.org",
    ],
}

# 过滤掉 None 值的 RPC 端点
for chain in RPC_ENDPOINTS:
    RPC_ENDPOINTS[chain] = [rpc for rpc in RPC_ENDPOINTS[chain] if rpc]

# ===== 缓存配置 =====

CACHE_CONFIG = {
    "blacklist_ttl": int(os.getenv("AGENTEK_BLACKLIST_CACHE_TTL", str(60 * 60 * 24))),  # 黑名单每日更新
    "max_cache_size": int(os.getenv("AGENTEK_MAX_CACHE_SIZE", "100")),
}

# ===== 工具函数 =====

def get_chain_key(chain: Union[str, int, ChainInfo]) -> Optional[str]:
    """获取链在注册表中的键名"""
    if isinstance(chain, ChainInfo):
        chain = chain.chain_id
    if isinstance(chain, int):
        for key, info in SUPPORTED_CHAINS.items():
            if info.chain_id == chain:
                return key
        return None
    key = chain.lower()
    return key if key in SUPPORTED_CHAINS else None

def get_chain_info(chain: Union[str, int]) -> Optional[ChainInfo]:
    """获取链信息（支持链名或链 ID）"""
    key = get_chain_key(chain)
    return SUPPORTED_CHAINS.get(key) if key else None

def get_rpc_endpoints(chain: Union[str, int, ChainInfo]) -> List[str]:
    """获取链的 RPC 端点列表"""
    key = get_chain_key(chain)
    return RPC_ENDPOINTS.get(key, []) if key else []

def get_explorer_url(chain: Union[str, int, ChainInfo], tx_hash: str = None, address: str = None) -> str:
    """构建区块浏览器 URL"""
    chain_info = chain if isinstance(chain, ChainInfo) else get_chain_info(chain)
    if not chain_info or not chain_info.explorer_url:
        return ""

    base_url = chain_info.explorer_url

    if tx_hash:
        return f"{base_url}/tx/{tx_hash}"
    elif address:
        return f"{base_url}/address/{address}"
    else:
        return base_url

def validate_config() -> List[str]:
    """验证配置的完整性"""
    errors = []

    for key, info in SUPPORTED_CHAINS.items():
        if not info.explorer_url:
            errors.append(f"链 {key} 缺少 explorer_url")

        if not get_rpc_endpoints(key):
            errors.append(f"链 {key} 没有配置 RPC 端点")

    if REQUEST_CONFIG.timeout <= 0:
        errors.append("timeout 必须大于0")

    if EXECUTION_CONFIG.poll_interval < 0:
        errors.append("poll_interval 不能为负数")

    if CACHE_CONFIG["blacklist_ttl"] < 0:
        errors.append("blacklist_ttl 不能为负数")

    return errors

# 配置验证（如果启用调试模式）
if os.getenv("AGENTEK_DEBUG", "false").lower() == "true":
    for error in validate_config():
        logger.warning(f"Agentek 配置警告: {error}")

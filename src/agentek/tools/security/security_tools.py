# agentek/tools/security/security_tools.py
"""
安全检查工具
对照 ScamSniffer 黑名单检查地址和网站；黑名单缓存由调用方注入
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, FrozenSet, List, Optional
from urllib.parse import urlparse

import requests
from pydantic import BaseModel, Field

from agentek.client.cache import TTLCache
from agentek.client.client_config import CACHE_CONFIG, REQUEST_CONFIG
from agentek.client.tool_registry import BaseTool, create_tool
from agentek.tools.security.security_config import BLACKLIST_TTL, BLACKLIST_URLS

logger = logging.getLogger(__name__)


def fetch_blacklist(url: str) -> List[str]:
    """下载黑名单 JSON（字符串数组）"""
    logger.info(f"下载黑名单: {url}")
    response = requests.get(url, timeout=REQUEST_CONFIG.timeout, headers=REQUEST_CONFIG.headers)
    response.raise_for_status()
    data = response.json()
    if not isinstance(data, list):
        raise ValueError(f"黑名单格式无效: {url}")
    return data

def normalize_domain(website: str) -> str:
    """提取域名，去掉协议、www 前缀和路径"""
    website = website.strip().lower()
    hostname = urlparse(website).hostname if "://" in website else None
    if not hostname:
        hostname = website.split("/")[0]
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


class CheckMaliciousAddressParams(BaseModel):
    address: str = Field(..., min_length=1, description="The Ethereum address to check (0x...)")

class CheckMaliciousWebsiteParams(BaseModel):
    website: str = Field(..., min_length=1, description="The website URL or domain to check (e.g. 'https://example.com' or 'example.com')")


def create_security_tools(
    cache: Optional[TTLCache] = None,
    fetcher: Optional[Callable[[str], Any]] = None,
) -> List[BaseTool]:
    """
    创建安全检查工具

    Args:
        cache: 黑名单缓存，默认按 AGENTEK_BLACKLIST_CACHE_TTL 过期
        fetcher: url -> 字符串列表，可以是普通函数或协程函数

    Returns:
        [checkMaliciousAddress, checkMaliciousWebsite]
    """
    cache = cache if cache is not None else TTLCache(BLACKLIST_TTL, CACHE_CONFIG["max_cache_size"])
    fetcher = fetcher or fetch_blacklist

    async def get_blacklist(kind: str) -> FrozenSet[str]:
        cached = cache.get(kind)
        if cached is not None:
            return cached

        url = BLACKLIST_URLS[kind]
        if inspect.iscoroutinefunction(fetcher):
            entries = await fetcher(url)
        else:
            entries = await asyncio.to_thread(fetcher, url)

        blacklist = frozenset(str(entry).strip().lower() for entry in entries)
        cache.set(kind, blacklist)
        logger.debug(f"{kind} 黑名单已缓存 {len(blacklist)} 条")
        return blacklist

    async def check_address(client: Any, args: CheckMaliciousAddressParams) -> Dict[str, Any]:
        blacklist = await get_blacklist("address")
        return {
            "address": args.address,
            "isMalicious": args.address.strip().lower() in blacklist,
        }

    async def check_website(client: Any, args: CheckMaliciousWebsiteParams) -> Dict[str, Any]:
        blacklist = await get_blacklist("domain")
        return {
            "website": args.website,
            "isMalicious": normalize_domain(args.website) in blacklist,
        }

    return [
        create_tool(
            name="checkMaliciousAddress",
            description="Check if an Ethereum address has been flagged as malicious in the ScamSniffer blacklist database. Returns whether the address is known to be associated with scams or exploits.",
            parameters=CheckMaliciousAddressParams,
            execute=check_address,
        ),
        create_tool(
            name="checkMaliciousWebsite",
            description="Check if a website domain has been flagged in the ScamSniffer blacklist as associated with crypto scams, phishing, or malicious activity.",
            parameters=CheckMaliciousWebsiteParams,
            execute=check_website,
        ),
    ]

# agentek/tools/security/security_config.py
"""
安全检查配置
黑名单数据来自 ScamSniffer scam-database，每日更新
"""

import os

from agentek.client.client_config import CACHE_CONFIG

BLACKLIST_URLS = {
    "address": os.getenv(
        "AGENTEK_ADDRESS_BLACKLIST_URL",
        "https://raw.githubusercontent.com/scamsniffer/scam-database/refs/heads/main/blacklist/address.json",
    ),
    "domain": os.getenv(
        "AGENTEK_DOMAIN_BLACKLIST_URL",
        "https://raw.githubusercontent.com/scamsniffer/scam-database/refs/heads/main/blacklist/domains.json",
    ),
}

BLACKLIST_TTL = CACHE_CONFIG["blacklist_ttl"]

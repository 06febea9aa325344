# agentek/tools/security/__init__.py

from agentek.tools.security.security_tools import create_security_tools

SECURITY_TOOL_CATEGORIES = {
    "安全检查": [
        "checkMaliciousAddress",  # 地址黑名单
        "checkMaliciousWebsite",  # 网站黑名单
    ],
}

__all__ = [
    'create_security_tools',
    'SECURITY_TOOL_CATEGORIES'
]

# agentek/tools/signing/__init__.py

from agentek.tools.signing.signing_tools import signing_tools

SIGNING_TOOL_CATEGORIES = {
    "签名": [
        "intentSignMessage",    # EIP-191
        "intentSignTypedData",  # EIP-712
    ],
}

__all__ = [
    'signing_tools',
    'SIGNING_TOOL_CATEGORIES'
]

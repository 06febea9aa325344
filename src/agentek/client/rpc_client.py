# agentek/client/rpc_client.py
"""
EVM RPC 客户端
HTTPTransport: 支持多个 RPC 端点，自动故障转移
PublicClient: 按链的异步只读客户端
WalletClient: 按链的异步写客户端（交易提交、消息签名）
"""

import asyncio
import inspect
import itertools
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Union

import requests
from eth_account.messages import encode_defunct, encode_typed_data

from agentek.client.abi_utils import (
    checksum, decode_function_result, encode_function_data, hex_to_int
)
from agentek.client.client_config import (
    ChainInfo, EXECUTION_CONFIG, REQUEST_CONFIG, get_rpc_endpoints
)
from agentek.client.errors import RPCError, RPCTimeoutError

logger = logging.getLogger(__name__)

AUTH_ERROR_WORDS = ("unauthorized", "forbidden", "api key")


class HTTPTransport:
    """JSON-RPC over HTTP，支持多个端点和故障转移"""

    def __init__(
        self,
        urls: Union[str, Sequence[str]],
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        rate_limit_delay: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        if isinstance(urls, str):
            urls = [urls]
        self.urls = [url for url in urls if url]
        if not self.urls:
            raise ValueError("至少需要一个 RPC 端点")

        self.timeout = timeout if timeout is not None else REQUEST_CONFIG.timeout
        self.max_retries = max_retries if max_retries is not None else REQUEST_CONFIG.max_retries
        self.rate_limit_delay = (
            rate_limit_delay if rate_limit_delay is not None else REQUEST_CONFIG.rate_limit_delay
        )

        self.session = requests.Session()
        self.session.headers.update(headers or REQUEST_CONFIG.headers or {})
        # 记录每个 RPC 的失败次数，用于智能选择
        self.failure_counts: Dict[str, int] = {}
        self._ids = itertools.count(1)

    @classmethod
    def for_chain(cls, chain: Union[str, int, ChainInfo], **kwargs) -> "HTTPTransport":
        """使用配置中的端点为指定链创建传输"""
        urls = get_rpc_endpoints(chain)
        if not urls:
            name = chain.name if isinstance(chain, ChainInfo) else chain
            raise ValueError(f"链 {name} 没有配置 RPC 端点")
        return cls(urls, **kwargs)

    def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        调用 RPC 方法，自动故障转移

        Args:
            method: RPC 方法名
            params: 方法参数

        Returns:
            RPC 响应结果
        """
        # 按失败次数排序 RPC URLs（失败少的优先）
        sorted_urls = sorted(self.urls, key=lambda url: self.failure_counts.get(url, 0))

        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }

        last_error = None
        timeouts = 0
        attempts = sorted_urls[:max(1, self.max_retries)]

        for attempt, url in enumerate(attempts):
            if attempt > 0:
                time.sleep(self.rate_limit_delay)

            logger.debug(f"尝试 RPC: {url} (方法: {method})")

            try:
                response = self.session.post(url, json=payload, timeout=self.timeout)
                response.raise_for_status()
                data = response.json()

            except requests.exceptions.Timeout:
                logger.warning(f"RPC {url} 超时")
                self.failure_counts[url] = self.failure_counts.get(url, 0) + 1
                last_error = "请求超时"
                timeouts += 1
                continue

            except requests.exceptions.RequestException as e:
                logger.warning(f"RPC {url} 网络错误: {str(e)}")
                self.failure_counts[url] = self.failure_counts.get(url, 0) + 1
                last_error = f"网络错误: {str(e)}"
                continue

            if "error" in data:
                error = data["error"]
                message = error.get("message", str(error)) if isinstance(error, dict) else str(error)

                # 如果是需要认证的错误，标记这个 RPC 并切换端点
                if any(word in message.lower() for word in AUTH_ERROR_WORDS):
                    self.failure_counts[url] = self.failure_counts.get(url, 0) + 10
                    logger.warning(f"RPC {url} 需要认证")
                    last_error = f"RPC 错误: {message}"
                    continue

                # 执行错误（revert 等）不是端点问题，直接抛出
                raise RPCError(
                    f"RPC 错误: {message}",
                    code=error.get("code") if isinstance(error, dict) else None,
                    data=error.get("data") if isinstance(error, dict) else None,
                )

            # 成功，减少失败计数
            if url in self.failure_counts:
                self.failure_counts[url] = max(0, self.failure_counts[url] - 1)

            return data.get("result")

        if timeouts == len(attempts):
            raise RPCTimeoutError(f"所有 RPC 端点都超时了 (方法: {method})")

        # 所有 RPC 都失败了
        raise RPCError(f"所有 RPC 端点都失败了。最后的错误: {last_error}")

    def get_best_rpc(self) -> str:
        """获取当前最佳的 RPC URL"""
        return min(self.urls, key=lambda url: self.failure_counts.get(url, 0))

    def get_rpc_status(self) -> List[Dict[str, Any]]:
        """获取 RPC 状态信息"""
        status = []
        for url in self.urls:
            failures = self.failure_counts.get(url, 0)
            status.append({
                "url": url,
                "failures": failures,
                "status": "healthy" if failures == 0 else "degraded" if failures < 5 else "unhealthy"
            })
        return status

    def close(self):
        self.session.close()


def default_call_timeout() -> float:
    """单次调用的总时限，覆盖传输层的全部重试和重试间隔"""
    attempts = max(1, REQUEST_CONFIG.max_retries)
    return REQUEST_CONFIG.timeout * attempts + REQUEST_CONFIG.rate_limit_delay * (attempts - 1)


class PublicClient:
    """按链的只读客户端，所有方法都是协程"""

    def __init__(self, transport: Any, chain: ChainInfo, timeout: Optional[float] = None):
        self.transport = transport
        self.chain = chain
        self.timeout = timeout if timeout is not None else default_call_timeout()

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        params = params or []
        if inspect.iscoroutinefunction(self.transport.request):
            pending = self.transport.request(method, params)
        else:
            pending = asyncio.to_thread(self.transport.request, method, params)

        # 只把本方法的时限转换为 RPCTimeoutError，传输层抛出的异常原样传递
        task = asyncio.ensure_future(pending)
        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if not done:
            task.cancel()
            await asyncio.wait({task})
            raise RPCTimeoutError(
                f"链 {self.chain.chain_id} 的 RPC 请求超时: {method} (>{self.timeout}s)"
            )
        return task.result()

    # === 账户 ===

    async def get_balance(self, address: str, block: str = "latest") -> int:
        return hex_to_int(await self.request("eth_getBalance", [address, block]))

    async def get_transaction_count(self, address: str, block: str = "latest") -> int:
        return hex_to_int(await self.request("eth_getTransactionCount", [address, block]))

    async def get_code(self, address: str, block: str = "latest") -> str:
        return await self.request("eth_getCode", [address, block]) or "0x"

    # === 区块和 Gas ===

    async def get_gas_price(self) -> int:
        return hex_to_int(await self.request("eth_gasPrice", []))

    async def get_max_priority_fee(self) -> int:
        return hex_to_int(await self.request("eth_maxPriorityFeePerGas", []))

    async def get_block_number(self) -> int:
        return hex_to_int(await self.request("eth_blockNumber", []))

    async def get_block(self, block: Union[int, str] = "latest", full_transactions: bool = False) -> Optional[Dict]:
        block_param = hex(block) if isinstance(block, int) else block
        return await self.request("eth_getBlockByNumber", [block_param, full_transactions])

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        return hex_to_int(await self.request("eth_estimateGas", [to_rpc_tx(tx)]))

    # === 交易 ===

    async def get_transaction(self, tx_hash: str) -> Optional[Dict]:
        return await self.request("eth_getTransactionByHash", [tx_hash])

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict]:
        return await self.request("eth_getTransactionReceipt", [tx_hash])

    async def wait_for_transaction_receipt(
        self,
        tx_hash: str,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> Dict:
        """轮询直到交易被打包，返回收据"""
        poll_interval = EXECUTION_CONFIG.poll_interval if poll_interval is None else poll_interval
        timeout = EXECUTION_CONFIG.receipt_timeout if timeout is None else timeout

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while True:
            receipt = await self.get_transaction_receipt(tx_hash)
            if receipt:
                return receipt
            if loop.time() >= deadline:
                raise RPCTimeoutError(
                    f"等待交易 {tx_hash} 在链 {self.chain.chain_id} 上确认超时 (>{timeout}s)"
                )
            await asyncio.sleep(poll_interval)

    # === 合约 ===

    async def call(self, to: str, data: str, block: str = "latest", from_address: Optional[str] = None) -> str:
        call = {"to": to, "data": data}
        if from_address:
            call["from"] = from_address
        return await self.request("eth_call", [call, block])

    async def read_contract(
        self,
        address: str,
        signature: str,
        args: Sequence[Any] = (),
        output_types: Sequence[str] = ("uint256",),
    ) -> Any:
        """
        调用合约只读方法

        Args:
            address: 合约地址
            signature: 函数签名，如 "balanceOf(address)"
            args: 参数
            output_types: 返回值类型

        Returns:
            解码后的返回值（单个返回值直接返回）
        """
        result = await self.call(address, encode_function_data(signature, args))
        return decode_function_result(output_types, result)


class WalletClient:
    """按链的写客户端，绑定一个签名账户"""

    def __init__(self, transport: Any, chain: ChainInfo, account: Any, public_client: PublicClient):
        self.transport = transport
        self.chain = chain
        self.account = account
        self.public_client = public_client
        # 同一账户在同一条链上的提交串行化，避免 nonce 冲突
        self._submit_lock = asyncio.Lock()

    @property
    def address(self) -> str:
        return self.account.address

    async def send_transaction(self, to: str, value: int = 0, data: str = "0x") -> str:
        """
        签名并提交交易

        Returns:
            交易哈希
        """
        public_client = self.public_client

        async with self._submit_lock:
            nonce = await public_client.get_transaction_count(self.address, "pending")
            gas = await public_client.estimate_gas({
                "from": self.address, "to": to, "value": value, "data": data
            })

            tx = {
                "to": checksum(to),
                "value": value,
                "data": data,
                "nonce": nonce,
                "gas": gas,
                "chainId": self.chain.chain_id,
            }
            tx.update(await self._fee_fields())

            signed = self.account.sign_transaction(tx)
            raw = "0x" + bytes(signed.raw_transaction).hex()
            tx_hash = await public_client.request("eth_sendRawTransaction", [raw])

        logger.info(f"已提交交易 {tx_hash} (链 {self.chain.chain_id}, nonce {nonce})")
        return tx_hash

    async def _fee_fields(self) -> Dict[str, int]:
        """EIP-1559 链使用 maxFeePerGas，否则使用 gasPrice"""
        block = await self.public_client.get_block("latest")
        base_fee = block.get("baseFeePerGas") if block else None

        if base_fee is None:
            return {"gasPrice": await self.public_client.get_gas_price()}

        try:
            priority_fee = await self.public_client.get_max_priority_fee()
        except RPCError as e:
            logger.debug(f"eth_maxPriorityFeePerGas 不可用，使用默认值: {e}")
            priority_fee = EXECUTION_CONFIG.priority_fee_fallback

        return {
            "maxFeePerGas": hex_to_int(base_fee) * 2 + priority_fee,
            "maxPriorityFeePerGas": priority_fee,
        }

    async def sign_message(self, message: Union[str, Dict[str, str]]) -> str:
        """EIP-191 个人消息签名"""
        if isinstance(message, dict):
            signable = encode_defunct(hexstr=message["raw"])
        else:
            signable = encode_defunct(text=message)
        signed = self.account.sign_message(signable)
        return "0x" + bytes(signed.signature).hex()

    async def sign_typed_data(
        self,
        domain: Dict[str, Any],
        types: Dict[str, List[Dict[str, str]]],
        primary_type: str,
        message: Dict[str, Any],
    ) -> str:
        """EIP-712 结构化数据签名"""
        signable = encode_typed_data(full_message=build_typed_data(domain, types, primary_type, message))
        signed = self.account.sign_message(signable)
        return "0x" + bytes(signed.signature).hex()


# ===== 工具函数 =====

EIP712_DOMAIN_FIELDS = [
    ("name", "string"),
    ("version", "string"),
    ("chainId", "uint256"),
    ("verifyingContract", "address"),
    ("salt", "bytes32"),
]

def build_typed_data(
    domain: Dict[str, Any],
    types: Dict[str, List[Dict[str, str]]],
    primary_type: str,
    message: Dict[str, Any],
) -> Dict[str, Any]:
    """补全 EIP712Domain 类型，组装完整的 typed data"""
    all_types = dict(types)
    if "EIP712Domain" not in all_types:
        all_types["EIP712Domain"] = [
            {"name": name, "type": abi_type}
            for name, abi_type in EIP712_DOMAIN_FIELDS
            if name in domain
        ]
    return {
        "types": all_types,
        "primaryType": primary_type,
        "domain": domain,
        "message": message,
    }

def to_rpc_tx(tx: Dict[str, Any]) -> Dict[str, Any]:
    """整数字段转换为 RPC 需要的十六进制"""
    rpc_tx = {}
    for key, value in tx.items():
        if value is None:
            continue
        rpc_tx[key] = hex(value) if isinstance(value, int) else value
    return rpc_tx

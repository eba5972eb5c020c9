"""索引目录客户端数据模型定义模块.

提供索引目录客户端相关的数据模型，包括：
- CatalogResponse: 创建类调用的响应
- CatalogConfig: 搜索引擎连接配置
- IndexCatalog: 索引目录客户端协议
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from .exceptions import CatalogConfigError

# HTTP 200 视为创建成功
SUCCESS_STATUS = 200


@dataclass(frozen=True)
class CatalogResponse:
    """创建索引或别名调用的响应.

    Attributes:
        code: HTTP 状态码
        body: 响应体，不参与哈希，结果对象可以放入集合或作为字典键
    """

    code: int
    body: dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def ok(self) -> bool:
        """响应是否表示成功."""
        return self.code == SUCCESS_STATUS


@dataclass
class CatalogConfig:
    """搜索引擎连接配置模型.

    定义 ES 集群的连接信息、认证方式和重试策略。

    Attributes:
        hosts: ES 节点地址列表（必需，不可为空）
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或元组）
        bearer_token: Bearer Token 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        max_retries: 最大重试次数，默认 3
        retry_on_timeout: 超时是否重试，默认 False

    Raises:
        CatalogConfigError: 当参数不合法时抛出

    Examples:
        >>> config = CatalogConfig(
        ...     hosts=["http://localhost:9200"],
        ...     username="elastic",
        ...     password="changeme",
        ... )
    """

    hosts: list[str] = field(default_factory=list)
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    bearer_token: str | None = None
    ca_certs: str | None = None
    verify_certs: bool = True
    request_timeout: int = 30
    max_retries: int = 3
    retry_on_timeout: bool = False

    def __post_init__(self) -> None:
        """校验连接配置参数合法性."""
        if not self.hosts:
            raise CatalogConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")
        if self.request_timeout < 0:
            raise CatalogConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )
        if self.max_retries < 0:
            raise CatalogConfigError(
                f"max_retries 必须 >= 0，当前值: {self.max_retries}"
            )

    @classmethod
    def from_env(
        cls,
        prefix: str = "ALIASFLOW_",
        environ: Mapping[str, str] | None = None,
    ) -> CatalogConfig:
        """从环境变量读取连接配置.

        读取 ``<prefix>HOSTS``（逗号分隔）、``<prefix>USERNAME``、
        ``<prefix>PASSWORD``、``<prefix>API_KEY``、``<prefix>REQUEST_TIMEOUT``。

        Args:
            prefix: 环境变量前缀
            environ: 环境变量字典，默认使用 os.environ

        Returns:
            连接配置

        Raises:
            CatalogConfigError: 缺少 hosts 或超时时间不是整数时抛出
        """
        env = os.environ if environ is None else environ

        hosts = [h.strip() for h in env.get(f"{prefix}HOSTS", "").split(",") if h.strip()]
        timeout_raw = env.get(f"{prefix}REQUEST_TIMEOUT", "30")
        try:
            request_timeout = int(timeout_raw)
        except ValueError as e:
            raise CatalogConfigError(
                f"{prefix}REQUEST_TIMEOUT 必须为整数，当前值: {timeout_raw!r}"
            ) from e

        return cls(
            hosts=hosts,
            username=env.get(f"{prefix}USERNAME") or None,
            password=env.get(f"{prefix}PASSWORD") or None,
            api_key=env.get(f"{prefix}API_KEY") or None,
            request_timeout=request_timeout,
        )


class IndexCatalog(Protocol):
    """索引目录客户端协议.

    所有方法在无法连接搜索引擎时抛出 HostUnreachableError，exists 和 list_index_names
    遇到服务端错误时同样抛出；
    服务端拒绝创建请求时返回非成功的 CatalogResponse，而不抛出异常。
    """

    def exists(self, name: str) -> bool: ...

    def list_index_names(self) -> list[str]: ...

    def create_index(
        self,
        name: str,
        settings: Mapping[str, Any],
        mappings: Mapping[str, Any],
    ) -> CatalogResponse: ...

    def create_or_update_alias(
        self,
        alias_name: str,
        target_indices: Sequence[str],
    ) -> CatalogResponse: ...

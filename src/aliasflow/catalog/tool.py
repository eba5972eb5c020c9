"""索引目录客户端工具模块.

提供基于官方 elasticsearch 客户端的索引目录实现，负责：
- 检查索引/别名是否存在
- 列出全部物理索引名称
- 创建物理索引
- 创建或重新指向别名

使用示例:
    from aliasflow.catalog import CatalogConfig, EsIndexCatalog, create_client

    client = create_client(CatalogConfig(hosts=["http://localhost:9200"]))
    catalog = EsIndexCatalog(client)
    catalog.exists("articles_alias")
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import (
    ApiError,
    ConnectionError as ESConnectionError,
    ConnectionTimeout,
    NotFoundError,
)

from .exceptions import HostUnreachableError
from .models import SUCCESS_STATUS, CatalogConfig, CatalogResponse

logger = logging.getLogger(__name__)


def create_client(config: CatalogConfig) -> Elasticsearch:
    """根据连接配置创建 Elasticsearch 客户端实例.

    根据认证方式（Basic Auth / API Key / Bearer Token / 无认证）
    和 SSL 配置构建客户端。

    Args:
        config: 连接配置

    Returns:
        Elasticsearch 客户端实例
    """
    kwargs: dict[str, Any] = {
        "hosts": config.hosts,
        "max_retries": config.max_retries,
        "retry_on_timeout": config.retry_on_timeout,
        "request_timeout": config.request_timeout,
    }

    # Basic Auth 认证
    if config.username and config.password:
        kwargs["basic_auth"] = (config.username, config.password)

    # API Key 认证
    if config.api_key:
        kwargs["api_key"] = config.api_key

    # Bearer Token 认证
    if config.bearer_token:
        kwargs["bearer_auth"] = config.bearer_token

    # SSL/TLS 配置
    if config.ca_certs:
        kwargs["ca_certs"] = config.ca_certs
    kwargs["verify_certs"] = config.verify_certs

    return Elasticsearch(**kwargs)


def _response_body(response: Any) -> dict[str, Any]:
    """提取响应体（兼容 ObjectApiResponse 与普通字典）."""
    body = getattr(response, "body", response)
    if not body:
        return {}
    if isinstance(body, Mapping):
        return dict(body)
    return {"error": str(body)}


@contextmanager
def _host_guard(operation: str, api_errors: bool = False) -> Iterator[None]:
    """将传输层连接失败转换为 HostUnreachableError.

    Args:
        operation: 操作描述，用于错误信息
        api_errors: 是否把服务端错误（503、401、403 等）也视为不可用。
            只读的存在性检查和列表调用没有可以返回的响应对象，需要开启
    """
    try:
        yield
    except (ESConnectionError, ConnectionTimeout) as e:
        raise HostUnreachableError(f"{operation} 失败，无法连接 Elasticsearch: {e}") from e
    except ApiError as e:
        if not api_errors:
            raise
        raise HostUnreachableError(
            f"{operation} 失败，Elasticsearch 不可用 (status={e.status_code}): {e}"
        ) from e


class EsIndexCatalog:
    """基于 Elasticsearch 的索引目录客户端.

    创建索引和别名时服务端返回的非成功状态不会抛出异常，而是转换为 CatalogResponse；
    连接层失败，以及存在性检查和列表调用遇到的服务端错误，会抛出 HostUnreachableError。

    Args:
        es_client: Elasticsearch 客户端实例
    """

    def __init__(self, es_client: Elasticsearch):
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        self.es_client = es_client

    def exists(self, name: str) -> bool:
        """检查索引或别名是否存在.

        Args:
            name: 索引名称或别名名称

        Returns:
            是否存在
        """
        with _host_guard(f"检查 '{name}' 是否存在", api_errors=True):
            return bool(self.es_client.indices.exists(index=name))

    def list_index_names(self) -> list[str]:
        """列出全部物理索引名称.

        按搜索引擎返回的顺序输出，不做排序。

        Returns:
            索引名称列表
        """
        with _host_guard("列出索引", api_errors=True):
            response = self.es_client.indices.get_alias(
                index="*", expand_wildcards="open,closed"
            )
        return list(_response_body(response).keys())

    def create_index(
        self,
        name: str,
        settings: Mapping[str, Any],
        mappings: Mapping[str, Any],
    ) -> CatalogResponse:
        """创建物理索引.

        Args:
            name: 索引名称
            settings: 索引设置，原样透传
            mappings: 索引映射，原样透传

        Returns:
            创建响应；服务端拒绝时 code 为对应的错误状态码
        """
        with _host_guard(f"创建索引 '{name}'"):
            try:
                response = self.es_client.indices.create(
                    index=name,
                    settings=dict(settings) or None,
                    mappings=dict(mappings) or None,
                )
            except ApiError as e:
                logger.debug(f"创建索引 '{name}' 被拒绝: {e}")
                return CatalogResponse(code=e.status_code, body=_response_body(e.body))
        return CatalogResponse(code=SUCCESS_STATUS, body=_response_body(response))

    def create_or_update_alias(
        self,
        alias_name: str,
        target_indices: Sequence[str],
    ) -> CatalogResponse:
        """创建别名，或将已有别名重新指向目标索引.

        移除旧指向和添加新指向放在同一个 update_aliases 请求中原子执行，
        别名在切换过程中不会消失。

        Args:
            alias_name: 别名名称
            target_indices: 目标索引列表

        Returns:
            更新响应；服务端拒绝时 code 为对应的错误状态码
        """
        with _host_guard(f"更新别名 '{alias_name}'"):
            try:
                current = self._indices_for_alias(alias_name)
                actions: list[dict[str, Any]] = [
                    {"remove": {"index": index_name, "alias": alias_name}}
                    for index_name in current
                    if index_name not in target_indices
                ]
                actions.extend(
                    {"add": {"index": index_name, "alias": alias_name}}
                    for index_name in target_indices
                )
                response = self.es_client.indices.update_aliases(actions=actions)
            except ApiError as e:
                logger.debug(f"更新别名 '{alias_name}' 被拒绝: {e}")
                return CatalogResponse(code=e.status_code, body=_response_body(e.body))
        return CatalogResponse(code=SUCCESS_STATUS, body=_response_body(response))

    def _indices_for_alias(self, alias_name: str) -> list[str]:
        """获取别名当前指向的索引列表，别名不存在时返回空列表."""
        try:
            response = self.es_client.indices.get_alias(name=alias_name)
        except NotFoundError:
            return []
        return list(_response_body(response).keys())

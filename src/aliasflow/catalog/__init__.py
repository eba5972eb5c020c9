"""索引目录客户端模块 - 封装对搜索引擎索引目录的查询与创建操作.

主要组件:
    - IndexCatalog: 索引目录客户端协议
    - EsIndexCatalog: 基于 elasticsearch 客户端的实现
    - CatalogConfig: 连接配置模型
    - CatalogResponse: 创建类调用的响应
    - create_client: 根据配置创建 Elasticsearch 客户端

使用示例:
    from aliasflow.catalog import CatalogConfig, EsIndexCatalog, create_client

    catalog = EsIndexCatalog(create_client(CatalogConfig.from_env()))
"""

from .exceptions import CatalogConfigError, CatalogError, HostUnreachableError
from .models import CatalogConfig, CatalogResponse, IndexCatalog
from .tool import EsIndexCatalog, create_client

__all__ = [
    # 客户端
    "EsIndexCatalog",
    "create_client",
    # 模型
    "IndexCatalog",
    "CatalogConfig",
    "CatalogResponse",
    # 异常
    "CatalogError",
    "CatalogConfigError",
    "HostUnreachableError",
]

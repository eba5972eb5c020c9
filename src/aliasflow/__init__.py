"""AliasFlow - Elasticsearch 别名索引生命周期管理工具.

通过稳定的别名访问索引，实现零停机重建索引：客户端始终查询别名，
底层物理索引可以替换为新的带时间戳索引，再把别名切换过去。

主要功能:
    - IndexResolver: 解析逻辑名称，幂等地创建缺失的索引和别名
    - EsIndexCatalog: 基于 elasticsearch 客户端的索引目录
    - MappingBuilder / IndexDefinition: 以不可变值描述索引设置与映射

使用示例:
    from aliasflow import CatalogConfig, EsIndexCatalog, IndexResolver, create_client

    catalog = EsIndexCatalog(create_client(CatalogConfig(hosts=["http://localhost:9200"])))
    outcome = IndexResolver(catalog).ensure_index_ready("inmates_alias")
"""

__version__ = "0.1.0"

# 导出索引目录客户端
from aliasflow.catalog import (
    CatalogConfig,
    CatalogConfigError,
    CatalogError,
    CatalogResponse,
    EsIndexCatalog,
    HostUnreachableError,
    IndexCatalog,
    create_client,
)

# 导出异常
from aliasflow.exceptions import AliasFlowError

# 导出映射定义
from aliasflow.mapping import (
    IndexDefinition,
    MappingBuilder,
    MappingDefinitionError,
    MappingError,
    MappingNode,
    MappingTree,
)

# 导出解析器
from aliasflow.resolution import (
    AliasTarget,
    IndexResolver,
    IndexTimestamp,
    InvalidIndexNameError,
    InvalidTimestampError,
    OutcomeKind,
    OutcomeReporter,
    PlainIndex,
    ResolutionError,
    ResolutionOutcome,
    ScanResult,
    classify,
    scan,
)

__all__ = [
    # 版本
    "__version__",
    # 解析器
    "IndexResolver",
    "OutcomeReporter",
    "ResolutionOutcome",
    "OutcomeKind",
    "PlainIndex",
    "AliasTarget",
    "IndexTimestamp",
    "ScanResult",
    "classify",
    "scan",
    # 索引目录
    "IndexCatalog",
    "EsIndexCatalog",
    "CatalogConfig",
    "CatalogResponse",
    "create_client",
    # 映射定义
    "MappingBuilder",
    "MappingNode",
    "MappingTree",
    "IndexDefinition",
    # 异常
    "AliasFlowError",
    "CatalogError",
    "CatalogConfigError",
    "HostUnreachableError",
    "MappingError",
    "MappingDefinitionError",
    "ResolutionError",
    "InvalidIndexNameError",
    "InvalidTimestampError",
]

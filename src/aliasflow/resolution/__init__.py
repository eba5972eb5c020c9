"""索引解析模块.

该模块负责把逻辑名称解析为确定存在的索引和/或别名，支持零停机重建索引：
- 逻辑名称分类（普通索引 / ``_alias`` 别名）
- 带时间戳索引的扫描与选择
- 缺失索引与别名的幂等创建
- 创建结果报告

示例用法:
    >>> from aliasflow.catalog import EsIndexCatalog
    >>> from aliasflow.resolution import IndexResolver
    >>> resolver = IndexResolver(EsIndexCatalog(es_client))
    >>> resolver.ensure_index_ready("articles_alias", mapping={"properties": {}})
"""

from .exceptions import InvalidIndexNameError, InvalidTimestampError, ResolutionError
from .models import (
    AliasTarget,
    IndexTimestamp,
    LogicalName,
    OutcomeKind,
    PlainIndex,
    ResolutionOutcome,
    ScanResult,
)
from .naming import (
    ALIAS_SUFFIX,
    classify,
    scan,
    timestamped_index_name,
    validate_index_name,
)
from .reporter import OutcomeReporter
from .tool import IndexResolver

__all__ = [
    # 核心类
    "IndexResolver",
    "OutcomeReporter",
    # 数据模型
    "PlainIndex",
    "AliasTarget",
    "LogicalName",
    "IndexTimestamp",
    "ScanResult",
    "OutcomeKind",
    "ResolutionOutcome",
    # 工具函数
    "ALIAS_SUFFIX",
    "classify",
    "scan",
    "timestamped_index_name",
    "validate_index_name",
    # 异常类
    "ResolutionError",
    "InvalidIndexNameError",
    "InvalidTimestampError",
]

"""索引解析异常定义模块."""

from ..exceptions import AliasFlowError


class ResolutionError(AliasFlowError):
    """索引解析基础异常类."""

    pass


class InvalidIndexNameError(ResolutionError, ValueError):
    """逻辑名称不符合 Elasticsearch 索引命名规范异常."""

    pass


class InvalidTimestampError(ResolutionError):
    """索引名称时间戳后缀不合法异常.

    后缀不是 14 位十进制数字时抛出。扫描索引目录时此异常会被吞掉，
    对应的索引名按不匹配处理。
    """

    pass

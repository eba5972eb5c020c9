"""映射定义异常定义模块."""

from ..exceptions import AliasFlowError


class MappingError(AliasFlowError):
    """映射定义基础异常类."""

    pass


class MappingDefinitionError(MappingError):
    """映射或设置描述不合法异常.

    当字段名为空、设置或映射不是字典结构时抛出。
    """

    pass

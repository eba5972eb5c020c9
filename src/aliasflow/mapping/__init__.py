"""映射定义模块 - 以不可变值描述索引的设置与映射.

主要组件:
    - MappingBuilder: 映射构建器
    - MappingNode / MappingTree: 不可变映射树
    - IndexDefinition: 设置与映射的组合，传给 IndexResolver

使用示例:
    from aliasflow.mapping import IndexDefinition, MappingBuilder

    tree = MappingBuilder().field("title", analyzer="snowball").build()
    definition = IndexDefinition.from_tree(tree, settings={"number_of_shards": 1})
"""

from .exceptions import MappingDefinitionError, MappingError
from .models import (
    DEFAULT_FIELD_TYPE,
    DEFAULT_OBJECT_TYPE,
    IndexDefinition,
    MappingNode,
    MappingTree,
)
from .tool import MappingBuilder

__all__ = [
    # 构建器
    "MappingBuilder",
    # 模型
    "MappingNode",
    "MappingTree",
    "IndexDefinition",
    # 常量
    "DEFAULT_FIELD_TYPE",
    "DEFAULT_OBJECT_TYPE",
    # 异常
    "MappingError",
    "MappingDefinitionError",
]

"""映射定义数据模型模块.

映射以不可变树表示：每个节点显式持有类型和有序的子属性，
由 MappingBuilder 自底向上构建后返回，构建完成后不再修改。
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .exceptions import MappingDefinitionError

# 叶子字段未指定类型时的默认类型
DEFAULT_FIELD_TYPE = "text"

# 含子属性的字段未指定类型时的默认类型
DEFAULT_OBJECT_TYPE = "object"


def _freeze(value: Mapping[str, Any] | None, what: str) -> Mapping[str, Any]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise MappingDefinitionError(
            f"{what} 必须是字典结构，当前类型: {type(value).__name__}"
        )
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class MappingNode:
    """映射字段节点.

    Attributes:
        name: 字段名
        type: 字段类型（text, keyword, integer, object 等）
        options: 其他字段参数（analyzer, index 等）
        properties: 子字段，None 表示叶子字段
    """

    name: str
    type: str  # noqa: A003
    options: Mapping[str, Any] = field(default_factory=dict)
    properties: tuple[MappingNode, ...] | None = None

    def __post_init__(self) -> None:
        if not self.name or not isinstance(self.name, str):
            raise MappingDefinitionError("字段名必须是非空字符串")
        object.__setattr__(self, "options", _freeze(self.options, f"字段 '{self.name}' 的参数"))

    def to_dict(self) -> dict[str, Any]:
        """转换为 ES 映射字典."""
        result: dict[str, Any] = {**self.options, "type": self.type}
        if self.properties is not None:
            result["properties"] = {
                child.name: child.to_dict() for child in self.properties
            }
        return result


@dataclass(frozen=True)
class MappingTree:
    """文档类型的完整映射.

    Attributes:
        properties: 顶层字段
        options: 顶层映射参数（如 _source、dynamic）
    """

    properties: tuple[MappingNode, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _freeze(self.options, "映射参数"))

    def to_dict(self) -> dict[str, Any]:
        """转换为 ``{**options, "properties": {...}}`` 结构."""
        return {
            **self.options,
            "properties": {node.name: node.to_dict() for node in self.properties},
        }


@dataclass(frozen=True)
class IndexDefinition:
    """索引定义：设置与映射的不可变组合.

    由 schema 层构建一次，然后传给 IndexResolver。设置与映射对解析流程是
    不透明的，原样透传给索引目录客户端的创建调用。

    Attributes:
        settings: 索引设置（分片数、分析器等）
        mappings: 索引映射

    Raises:
        MappingDefinitionError: settings 或 mappings 不是字典结构时抛出

    Examples:
        >>> tree = MappingBuilder().field("title", analyzer="snowball").build()
        >>> definition = IndexDefinition.from_tree(
        ...     tree, settings={"number_of_shards": 1}, document_type="article"
        ... )
        >>> definition.mappings["article"]["properties"]["title"]["type"]
        'text'
    """

    settings: Mapping[str, Any] = field(default_factory=dict)
    mappings: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings", _freeze(self.settings, "settings"))
        object.__setattr__(self, "mappings", _freeze(self.mappings, "mappings"))

    @classmethod
    def from_tree(
        cls,
        tree: MappingTree,
        settings: Mapping[str, Any] | None = None,
        document_type: str | None = None,
    ) -> IndexDefinition:
        """根据映射树构建索引定义.

        Args:
            tree: 映射树
            settings: 索引设置
            document_type: 文档类型名；指定时映射以类型名为键包裹一层，
                未指定时生成无类型映射

        Returns:
            索引定义
        """
        mapping = tree.to_dict()
        if document_type:
            mapping = {document_type: mapping}
        return cls(settings=settings or {}, mappings=mapping)

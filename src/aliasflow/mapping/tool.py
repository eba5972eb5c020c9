"""映射构建器模块."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .exceptions import MappingDefinitionError
from .models import DEFAULT_FIELD_TYPE, DEFAULT_OBJECT_TYPE, MappingNode, MappingTree


class MappingBuilder:
    """
    映射构建器.

    逐个登记字段，嵌套字段由子构建器构建后作为完整节点返回，
    不依赖任何“当前层级”的共享状态。同名字段重复登记时，后者覆盖前者，
    位置保持首次登记时的顺序。

    使用示例:
        tree = (
            MappingBuilder(_source={"enabled": True})
            .field("id", type="keyword")
            .field("title", analyzer="snowball", boost=100)
            .nested(
                "comments",
                lambda b: b.field("body").nested("author", lambda a: a.field("name")),
            )
            .build()
        )
    """

    def __init__(self, **options: Any):
        """
        初始化构建器.

        Args:
            options: 顶层映射参数（如 _source、dynamic）
        """
        self._options = options
        self._nodes: dict[str, MappingNode] = {}

    def field(self, name: str, **options: Any) -> MappingBuilder:
        """
        登记叶子字段.

        Args:
            name: 字段名
            options: 字段参数，未指定 type 时默认为 "text"

        Returns:
            构建器自身（支持链式调用）
        """
        field_type = options.pop("type", DEFAULT_FIELD_TYPE)
        self._add(MappingNode(name=name, type=field_type, options=options))
        return self

    def nested(
        self,
        name: str,
        build: Callable[[MappingBuilder], Any],
        **options: Any,
    ) -> MappingBuilder:
        """
        登记含子属性的字段.

        Args:
            name: 字段名
            build: 接收子构建器并在其上登记子字段的函数
            options: 字段参数，未指定 type 时默认为 "object"

        Returns:
            构建器自身（支持链式调用）
        """
        if not callable(build):
            raise MappingDefinitionError(f"字段 '{name}' 的 build 参数必须可调用")

        child = MappingBuilder()
        build(child)

        field_type = options.pop("type", DEFAULT_OBJECT_TYPE)
        self._add(
            MappingNode(
                name=name,
                type=field_type,
                options=options,
                properties=child.build().properties,
            )
        )
        return self

    def build(self) -> MappingTree:
        """构建不可变的映射树."""
        return MappingTree(properties=tuple(self._nodes.values()), options=self._options)

    def _add(self, node: MappingNode) -> None:
        self._nodes[node.name] = node

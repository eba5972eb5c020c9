"""索引解析器核心工具类."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

from ..catalog.exceptions import HostUnreachableError
from ..catalog.models import IndexCatalog
from ..mapping.models import IndexDefinition
from .exceptions import InvalidIndexNameError
from .models import AliasTarget, PlainIndex, ResolutionOutcome
from .naming import classify, scan, timestamped_index_name, validate_index_name
from .reporter import OutcomeReporter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _guard(operation: Callable[..., T], *args: Any) -> T | HostUnreachableError:
    """执行索引目录调用，连接失败以返回值而不是异常的形式交给调用方."""
    try:
        return operation(*args)
    except HostUnreachableError as e:
        return e


class IndexResolver:
    """索引解析器.

    把逻辑名称解析为确定存在的物理索引和/或别名，缺失的部分只创建一次：

    - 逻辑名称已存在（索引或别名）时直接返回，不做任何创建
    - 普通名称：按给定设置和映射创建同名索引
    - 以 ``_alias`` 结尾的名称：
        1. 存在 ``<prefix>_<时间戳>`` 索引时，别名指向时间戳最新的那个
        2. 否则存在名为 ``<prefix>`` 的索引时，别名指向它
        3. 都不存在时，创建 ``<prefix>_<当前时间>`` 索引，成功后再创建别名

    无法连接搜索引擎时不抛出异常，返回 SKIPPED 结果，调用方的启动流程不受影响。
    创建被拒绝时也不抛出异常，返回 CREATE_FAILED 结果，已创建的索引不会回滚。

    Args:
        catalog: 索引目录客户端
        reporter: 创建结果报告器，默认将成功信息写入本模块日志
        now_func: 自定义获取当前时间的函数，主要用于测试
        use_utc: 未指定 now_func 时是否使用 UTC 时间生成时间戳，默认使用本地时间

    Example:
        >>> resolver = IndexResolver(EsIndexCatalog(es_client))
        >>> outcome = resolver.ensure_index_ready(
        ...     "inmates_alias",
        ...     settings={"number_of_shards": 1},
        ...     mapping={"properties": {"name": {"type": "keyword"}}},
        ... )
        >>> outcome.kind
        <OutcomeKind.INDEX_AND_ALIAS_CREATED: 'index_and_alias_created'>
    """

    def __init__(
        self,
        catalog: IndexCatalog,
        reporter: OutcomeReporter | None = None,
        now_func: Callable[[], datetime] | None = None,
        use_utc: bool = False,
    ):
        if catalog is None:
            raise ValueError("catalog 不能为 None")
        self.catalog = catalog
        self.reporter = reporter or OutcomeReporter(sink=logger)
        self.use_utc = use_utc
        self._now_func = now_func

    def _now(self) -> datetime:
        """获取当前时间."""
        if self._now_func is not None:
            return self._now_func()

        if self.use_utc:
            return datetime.now(tz=UTC)

        return datetime.now()

    def ensure_index_ready(
        self,
        logical_name: str,
        settings: Mapping[str, Any] | None = None,
        mapping: Mapping[str, Any] | None = None,
    ) -> ResolutionOutcome:
        """确保逻辑名称对应的索引/别名已就绪.

        通常在注册文档类型时调用一次；重复调用是安全的，
        目标就绪后的调用返回 NO_OP_ALREADY_EXISTS。

        Args:
            logical_name: 逻辑名称
            settings: 索引设置，原样透传
            mapping: 索引映射，原样透传

        Returns:
            解析结果

        Raises:
            InvalidIndexNameError: 逻辑名称不符合 Elasticsearch 规范时抛出
            MappingDefinitionError: settings 或 mapping 不是字典结构时抛出
        """
        definition = IndexDefinition(settings=settings or {}, mappings=mapping or {})
        return self.resolve(logical_name, definition)

    def resolve(
        self, logical_name: str, definition: IndexDefinition
    ) -> ResolutionOutcome:
        """按索引定义解析逻辑名称.

        Args:
            logical_name: 逻辑名称
            definition: 索引定义

        Returns:
            解析结果

        Raises:
            InvalidIndexNameError: 逻辑名称不符合 Elasticsearch 规范时抛出
        """
        if not validate_index_name(logical_name):
            raise InvalidIndexNameError(
                f"逻辑名称 '{logical_name}' 不符合 Elasticsearch 规范"
            )

        exists = _guard(self.catalog.exists, logical_name)
        if isinstance(exists, HostUnreachableError):
            return self._skip(logical_name, exists)
        if exists:
            logger.debug(f"'{logical_name}' 已存在，无需创建")
            return ResolutionOutcome.no_op_already_exists(logical_name)

        target = classify(logical_name)
        if isinstance(target, PlainIndex):
            return self._create_plain_index(target, definition)
        return self._resolve_alias(target, definition)

    def _create_plain_index(
        self, target: PlainIndex, definition: IndexDefinition
    ) -> ResolutionOutcome:
        response = _guard(
            self.catalog.create_index,
            target.name,
            definition.settings,
            definition.mappings,
        )
        if isinstance(response, HostUnreachableError):
            return self._skip(target.name, response)

        if not self.reporter.report_index_created(target.name, response):
            return ResolutionOutcome.create_failed(
                target.name, "index", response, target=target.name
            )
        return ResolutionOutcome.plain_index_created(target.name)

    def _resolve_alias(
        self, target: AliasTarget, definition: IndexDefinition
    ) -> ResolutionOutcome:
        names = _guard(self.catalog.list_index_names)
        if isinstance(names, HostUnreachableError):
            return self._skip(target.alias, names)

        result = scan(target.prefix, names)

        # 复用已有的时间戳索引，即使其映射已经过时
        if result.newest is not None:
            return self._point_alias(
                target.alias,
                result.newest,
                ResolutionOutcome.alias_pointed_to_existing,
            )

        if result.untimestamped_exists:
            return self._point_alias(
                target.alias,
                target.prefix,
                ResolutionOutcome.alias_pointed_to_new_plain,
            )

        return self._create_index_and_alias(target, definition)

    def _create_index_and_alias(
        self, target: AliasTarget, definition: IndexDefinition
    ) -> ResolutionOutcome:
        new_index = timestamped_index_name(target.prefix, self._now())

        response = _guard(
            self.catalog.create_index,
            new_index,
            definition.settings,
            definition.mappings,
        )
        if isinstance(response, HostUnreachableError):
            return self._skip(target.alias, response)

        if not self.reporter.report_index_created(new_index, response):
            return ResolutionOutcome.create_failed(
                target.alias, "index", response, target=new_index
            )

        return self._point_alias(
            target.alias, new_index, ResolutionOutcome.index_and_alias_created
        )

    def _point_alias(
        self,
        alias: str,
        index_name: str,
        on_success: Callable[[str, str], ResolutionOutcome],
    ) -> ResolutionOutcome:
        response = _guard(self.catalog.create_or_update_alias, alias, [index_name])
        if isinstance(response, HostUnreachableError):
            return self._skip(alias, response)

        if not self.reporter.report_alias_created(alias, index_name, response):
            return ResolutionOutcome.create_failed(
                alias, "alias", response, target=index_name
            )
        return on_success(alias, index_name)

    def _skip(
        self, logical_name: str, error: HostUnreachableError
    ) -> ResolutionOutcome:
        logger.error(
            f"跳过 '{logical_name}' 的索引创建，无法连接 Elasticsearch"
            f"（原始异常: {error!r}）"
        )
        return ResolutionOutcome.skipped(logical_name, str(error))

"""索引解析器单元测试.

使用内存中的索引目录记录全部调用，覆盖幂等性、分支选择、
创建失败和搜索引擎不可达等场景。
"""

import logging
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from elasticsearch.exceptions import ApiError

from aliasflow.catalog.exceptions import HostUnreachableError
from aliasflow.catalog.models import CatalogResponse
from aliasflow.catalog.tool import EsIndexCatalog
from aliasflow.mapping.exceptions import MappingDefinitionError
from aliasflow.mapping.models import IndexDefinition
from aliasflow.resolution.exceptions import InvalidIndexNameError
from aliasflow.resolution.models import OutcomeKind, ResolutionOutcome
from aliasflow.resolution.reporter import OutcomeReporter
from aliasflow.resolution.tool import IndexResolver

FIXED_NOW = datetime(2015, 3, 13, 12, 0, 0)


class FakeCatalog:
    """内存索引目录.

    Attributes:
        indices: 物理索引名称（保持插入顺序）
        aliases: 别名到目标索引的映射
        calls: 按顺序记录的调用
        index_status: create_index 返回的状态码
        alias_status: create_or_update_alias 返回的状态码
        unreachable: 会抛出 HostUnreachableError 的方法名集合
    """

    def __init__(self, indices=None):
        self.indices: list[str] = list(indices or [])
        self.aliases: dict[str, list[str]] = {}
        self.calls: list[tuple] = []
        self.index_status = 200
        self.alias_status = 200
        self.unreachable: set[str] = set()

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.unreachable:
            raise HostUnreachableError(f"{name}: connection refused")

    def exists(self, name):
        self._record("exists", name)
        return name in self.indices or name in self.aliases

    def list_index_names(self):
        self._record("list_index_names")
        return list(self.indices)

    def create_index(self, name, settings, mappings):
        self._record("create_index", name, dict(settings), dict(mappings))
        if self.index_status == 200:
            self.indices.append(name)
        return CatalogResponse(code=self.index_status, body={})

    def create_or_update_alias(self, alias_name, target_indices):
        self._record("create_or_update_alias", alias_name, list(target_indices))
        if self.alias_status == 200:
            self.aliases[alias_name] = list(target_indices)
        return CatalogResponse(code=self.alias_status, body={})

    def call_names(self):
        return [call[0] for call in self.calls]


def make_resolver(catalog, reporter=None):
    return IndexResolver(catalog, reporter=reporter, now_func=lambda: FIXED_NOW)


# ============================================================
# 初始化与参数校验
# ============================================================


class TestInit:
    """IndexResolver 初始化测试."""

    def test_none_catalog_raises(self) -> None:
        """测试 catalog 为 None 时抛出 ValueError."""
        with pytest.raises(ValueError):
            IndexResolver(None)

    def test_default_reporter(self) -> None:
        """测试默认创建报告器."""
        resolver = IndexResolver(FakeCatalog())
        assert isinstance(resolver.reporter, OutcomeReporter)
        assert resolver.reporter.sink is not None

    def test_now_func_used(self) -> None:
        """测试使用自定义时间函数."""
        resolver = make_resolver(FakeCatalog())
        assert resolver._now() == FIXED_NOW

    def test_use_utc_default_clock(self) -> None:
        """测试 use_utc 时生成带时区的时间."""
        resolver = IndexResolver(FakeCatalog(), use_utc=True)
        assert resolver._now().tzinfo is not None


class TestValidation:
    """调用参数校验测试."""

    @pytest.mark.parametrize(
        "name", ["", "_alias", ".hidden", "-logs", "Articles", "a b", "a*", "a:b"]
    )
    def test_invalid_name_raises_before_any_call(self, name: str) -> None:
        """测试不合法的逻辑名称在调用目录前抛出."""
        catalog = FakeCatalog()
        with pytest.raises(InvalidIndexNameError):
            make_resolver(catalog).ensure_index_ready(name)
        assert catalog.calls == []

    def test_non_mapping_settings_raises(self) -> None:
        """测试 settings 不是字典时抛出."""
        with pytest.raises(MappingDefinitionError):
            make_resolver(FakeCatalog()).ensure_index_ready(
                "articles", settings=["shards"]
            )


# ============================================================
# 幂等性
# ============================================================


class TestIdempotence:
    """重复调用测试."""

    @pytest.mark.parametrize("name", ["articles", "p_alias"])
    def test_second_call_is_noop(self, name: str) -> None:
        """测试第二次调用返回 NO_OP_ALREADY_EXISTS 且不创建."""
        catalog = FakeCatalog()
        resolver = make_resolver(catalog)

        first = resolver.ensure_index_ready(name)
        assert first.succeeded

        catalog.calls.clear()
        second = resolver.ensure_index_ready(name)

        assert second.kind is OutcomeKind.NO_OP_ALREADY_EXISTS
        assert catalog.call_names() == ["exists"]

    def test_existing_alias_short_circuits(self) -> None:
        """测试别名已存在时不列出目录."""
        catalog = FakeCatalog(["p_20200101000000"])
        catalog.aliases["p_alias"] = ["p_20200101000000"]

        outcome = make_resolver(catalog).ensure_index_ready("p_alias")

        assert outcome == ResolutionOutcome.no_op_already_exists("p_alias")
        assert catalog.call_names() == ["exists"]


# ============================================================
# 普通索引
# ============================================================


class TestPlainIndex:
    """普通名称解析测试."""

    def test_creates_index(self) -> None:
        """测试创建同名索引."""
        catalog = FakeCatalog()
        settings = {"number_of_shards": 1}
        mapping = {"article": {"properties": {"title": {"type": "text"}}}}

        outcome = make_resolver(catalog).ensure_index_ready(
            "articles", settings=settings, mapping=mapping
        )

        assert outcome == ResolutionOutcome.plain_index_created("articles")
        assert catalog.calls == [
            ("exists", "articles"),
            ("create_index", "articles", settings, mapping),
        ]

    def test_plain_name_never_touches_aliases(self) -> None:
        """测试普通名称不列出目录也不创建别名."""
        catalog = FakeCatalog(["articles_20200101000000"])
        make_resolver(catalog).ensure_index_ready("articles")
        assert "list_index_names" not in catalog.call_names()
        assert "create_or_update_alias" not in catalog.call_names()

    def test_create_rejected(self) -> None:
        """测试创建被拒绝."""
        catalog = FakeCatalog()
        catalog.index_status = 400

        outcome = make_resolver(catalog).ensure_index_ready("articles")

        assert outcome.kind is OutcomeKind.CREATE_FAILED
        assert outcome.step == "index"
        assert outcome.response.code == 400
        assert not outcome.succeeded


# ============================================================
# 别名分支选择
# ============================================================


class TestAliasBranches:
    """别名解析分支测试."""

    def test_points_to_newest_timestamped(self) -> None:
        """测试别名指向最新的时间戳索引且不创建索引."""
        catalog = FakeCatalog(["p_20200101000000", "p_20210601120000", "p"])

        outcome = make_resolver(catalog).ensure_index_ready("p_alias")

        assert outcome == ResolutionOutcome.alias_pointed_to_existing(
            "p_alias", "p_20210601120000"
        )
        assert "create_index" not in catalog.call_names()
        assert catalog.aliases == {"p_alias": ["p_20210601120000"]}

    def test_points_to_bare_index(self) -> None:
        """测试没有时间戳索引时指向同名索引."""
        catalog = FakeCatalog(["p"])

        outcome = make_resolver(catalog).ensure_index_ready("p_alias")

        assert outcome == ResolutionOutcome.alias_pointed_to_new_plain("p_alias", "p")
        assert "create_index" not in catalog.call_names()
        assert catalog.aliases == {"p_alias": ["p"]}

    def test_cold_start_creates_index_then_alias(self) -> None:
        """测试冷启动先创建时间戳索引再创建别名."""
        catalog = FakeCatalog(["unrelated"])
        mapping = {"properties": {"name": {"type": "keyword"}}}

        outcome = make_resolver(catalog).ensure_index_ready("p_alias", mapping=mapping)

        assert outcome == ResolutionOutcome.index_and_alias_created(
            "p_alias", "p_20150313120000"
        )
        assert catalog.calls == [
            ("exists", "p_alias"),
            ("list_index_names",),
            ("create_index", "p_20150313120000", {}, mapping),
            ("create_or_update_alias", "p_alias", ["p_20150313120000"]),
        ]

    def test_cold_start_index_rejected_skips_alias(self) -> None:
        """测试索引创建失败时不创建别名."""
        catalog = FakeCatalog()
        catalog.index_status = 400

        outcome = make_resolver(catalog).ensure_index_ready("p_alias")

        assert outcome.kind is OutcomeKind.CREATE_FAILED
        assert outcome.step == "index"
        assert outcome.target == "p_20150313120000"
        assert "create_or_update_alias" not in catalog.call_names()

    def test_cold_start_alias_rejected_keeps_index(self) -> None:
        """测试别名创建失败时不回滚已创建的索引."""
        catalog = FakeCatalog()
        catalog.alias_status = 400

        outcome = make_resolver(catalog).ensure_index_ready("p_alias")

        assert outcome.kind is OutcomeKind.CREATE_FAILED
        assert outcome.step == "alias"
        assert catalog.indices == ["p_20150313120000"]
        assert catalog.aliases == {}

    def test_alias_rejected_for_existing_index(self) -> None:
        """测试指向已有索引时别名创建失败."""
        catalog = FakeCatalog(["p_20200101000000"])
        catalog.alias_status = 500

        outcome = make_resolver(catalog).ensure_index_ready("p_alias")

        assert outcome.kind is OutcomeKind.CREATE_FAILED
        assert outcome.step == "alias"
        assert outcome.target == "p_20200101000000"

    def test_other_prefixes_ignored(self) -> None:
        """测试其他前缀的时间戳索引不会被选中."""
        catalog = FakeCatalog(["q_20300101000000", "pp_20300101000000"])

        outcome = make_resolver(catalog).ensure_index_ready("p_alias")

        assert outcome.kind is OutcomeKind.INDEX_AND_ALIAS_CREATED
        assert outcome.target == "p_20150313120000"

    def test_resolve_with_definition(self) -> None:
        """测试使用 IndexDefinition 解析."""
        catalog = FakeCatalog()
        definition = IndexDefinition(
            settings={"number_of_replicas": 0},
            mappings={"properties": {"id": {"type": "keyword"}}},
        )

        make_resolver(catalog).resolve("p_alias", definition)

        create_call = catalog.calls[2]
        assert create_call[2] == {"number_of_replicas": 0}
        assert create_call[3] == {"properties": {"id": {"type": "keyword"}}}

    def test_reporter_sees_each_step(self) -> None:
        """测试每个创建步骤都会报告."""
        catalog = FakeCatalog()
        reporter = MagicMock(spec=OutcomeReporter)
        reporter.report_index_created.return_value = True
        reporter.report_alias_created.return_value = True

        make_resolver(catalog, reporter=reporter).ensure_index_ready("p_alias")

        reporter.report_index_created.assert_called_once()
        assert reporter.report_index_created.call_args[0][0] == "p_20150313120000"
        reporter.report_alias_created.assert_called_once()
        assert reporter.report_alias_created.call_args[0][:2] == (
            "p_alias",
            "p_20150313120000",
        )


# ============================================================
# 搜索引擎不可达
# ============================================================


class TestHostUnreachable:
    """搜索引擎不可达测试."""

    def test_exists_unreachable(self) -> None:
        """测试存在性检查不可达时跳过且不再调用."""
        catalog = FakeCatalog()
        catalog.unreachable = {"exists"}

        outcome = make_resolver(catalog).ensure_index_ready("p_alias")

        assert outcome.kind is OutcomeKind.SKIPPED
        assert "connection refused" in outcome.reason
        assert catalog.call_names() == ["exists"]

    @pytest.mark.parametrize(
        "operation, indices, expected_calls",
        [
            ("list_index_names", [], ["exists", "list_index_names"]),
            ("create_index", [], ["exists", "list_index_names", "create_index"]),
            (
                "create_or_update_alias",
                ["p"],
                ["exists", "list_index_names", "create_or_update_alias"],
            ),
        ],
    )
    def test_later_call_unreachable(self, operation, indices, expected_calls) -> None:
        """测试后续调用不可达时跳过."""
        catalog = FakeCatalog(indices)
        catalog.unreachable = {operation}

        outcome = make_resolver(catalog).ensure_index_ready("p_alias")

        assert outcome.kind is OutcomeKind.SKIPPED
        assert catalog.call_names() == expected_calls

    def test_plain_create_unreachable(self) -> None:
        """测试普通索引创建不可达时跳过."""
        catalog = FakeCatalog()
        catalog.unreachable = {"create_index"}

        outcome = make_resolver(catalog).ensure_index_ready("articles")

        assert outcome == ResolutionOutcome.skipped(
            "articles", "create_index: connection refused"
        )

    def test_other_errors_propagate(self) -> None:
        """测试非连接类异常不会被吞掉."""
        catalog = MagicMock()
        catalog.exists.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            make_resolver(catalog).ensure_index_ready("articles")

    def test_listing_server_error_skips(self) -> None:
        """测试列出索引返回 503 时跳过，不向调用方抛出."""
        es_client = MagicMock()
        es_client.indices.exists.return_value = False
        es_client.indices.get_alias.side_effect = ApiError(
            message="unavailable",
            meta=MagicMock(status=503),
            body={"error": "cluster_block", "status": 503},
        )
        resolver = make_resolver(EsIndexCatalog(es_client))

        outcome = resolver.ensure_index_ready("p_alias")

        assert outcome.kind is OutcomeKind.SKIPPED
        assert "503" in outcome.reason
        es_client.indices.create.assert_not_called()
        es_client.indices.update_aliases.assert_not_called()

    def test_exists_server_error_skips(self) -> None:
        """测试存在性检查返回 401 时跳过."""
        es_client = MagicMock()
        es_client.indices.exists.side_effect = ApiError(
            message="unauthorized", meta=MagicMock(status=401), body={}
        )

        outcome = make_resolver(EsIndexCatalog(es_client)).ensure_index_ready("articles")

        assert outcome.kind is OutcomeKind.SKIPPED
        es_client.indices.create.assert_not_called()

    def test_skip_logged_as_error(self, caplog) -> None:
        """测试跳过时以 ERROR 级别记录."""
        catalog = FakeCatalog()
        catalog.unreachable = {"exists"}

        with caplog.at_level(logging.ERROR, logger="aliasflow.resolution.tool"):
            make_resolver(catalog).ensure_index_ready("p_alias")

        errors = [r for r in caplog.records if r.name == "aliasflow.resolution.tool"]
        assert errors
        assert errors[-1].levelno == logging.ERROR


# ============================================================
# 结果对象
# ============================================================


class TestOutcomeValues:
    """解析结果对象测试."""

    def test_create_failed_is_hashable(self) -> None:
        """测试带响应体的失败结果可以放入集合."""
        response = CatalogResponse(code=400, body={"error": "resource_already_exists"})
        outcome = ResolutionOutcome.create_failed("p_alias", "index", response)

        assert outcome.kind is OutcomeKind.CREATE_FAILED
        same = ResolutionOutcome.create_failed("p_alias", "index", response)
        assert len({outcome, same}) == 1

    def test_invalid_name_is_value_error(self) -> None:
        """测试不合法的逻辑名称抛出 ValueError 子类."""
        with pytest.raises(ValueError):
            make_resolver(FakeCatalog()).ensure_index_ready("")

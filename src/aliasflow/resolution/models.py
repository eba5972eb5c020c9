"""索引解析数据模型定义模块."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..catalog.models import CatalogResponse
from .exceptions import InvalidTimestampError

# 时间戳后缀宽度：YYYYMMDDHHMMSS
TIMESTAMP_WIDTH = 14

# strftime 格式，与 TIMESTAMP_WIDTH 对应
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


@dataclass(frozen=True)
class PlainIndex:
    """普通索引名称.

    Attributes:
        name: 索引名称
    """

    name: str


@dataclass(frozen=True)
class AliasTarget:
    """别名名称（以 ``_alias`` 结尾）.

    Attributes:
        alias: 完整别名
        prefix: 去掉 ``_alias`` 后缀的前缀
    """

    alias: str
    prefix: str


LogicalName = PlainIndex | AliasTarget


@dataclass(frozen=True, order=True)
class IndexTimestamp:
    """经过校验的索引时间戳后缀.

    按数值比较，数值越大表示索引越新。

    Attributes:
        value: 时间戳数值
        digits: 原始数字串
    """

    value: int
    digits: str

    @classmethod
    def parse(cls, text: str) -> IndexTimestamp:
        """解析时间戳后缀.

        Args:
            text: 后缀字符串，必须是 14 位 ASCII 十进制数字

        Returns:
            时间戳

        Raises:
            InvalidTimestampError: 后缀不合法时抛出
        """
        if (
            not isinstance(text, str)
            or len(text) != TIMESTAMP_WIDTH
            or not text.isascii()
            or not text.isdigit()
        ):
            raise InvalidTimestampError(f"时间戳后缀 {text!r} 不是 14 位数字")
        return cls(value=int(text), digits=text)

    @classmethod
    def from_datetime(cls, dt: datetime) -> IndexTimestamp:
        """根据时间生成时间戳."""
        return cls.parse(dt.strftime(TIMESTAMP_FORMAT))

    def __str__(self) -> str:
        return self.digits


@dataclass(frozen=True)
class ScanResult:
    """时间戳扫描结果.

    Attributes:
        untimestamped_exists: 是否存在与前缀同名的无时间戳索引
        newest: 最新的带时间戳索引名称
        newest_timestamp: 最新索引的时间戳
    """

    untimestamped_exists: bool = False
    newest: str | None = None
    newest_timestamp: IndexTimestamp | None = None


class OutcomeKind(str, Enum):
    """解析结果类型."""

    ALIAS_POINTED_TO_EXISTING = "alias_pointed_to_existing"  # 别名指向已有带时间戳索引
    ALIAS_POINTED_TO_NEW_PLAIN = "alias_pointed_to_new_plain"  # 别名指向无时间戳索引
    INDEX_AND_ALIAS_CREATED = "index_and_alias_created"  # 新建索引并创建别名
    PLAIN_INDEX_CREATED = "plain_index_created"  # 新建普通索引
    NO_OP_ALREADY_EXISTS = "no_op_already_exists"  # 目标已存在
    SKIPPED = "skipped"  # 搜索引擎不可达
    CREATE_FAILED = "create_failed"  # 创建被拒绝


@dataclass(frozen=True)
class ResolutionOutcome:
    """一次解析的结果.

    Attributes:
        kind: 结果类型
        logical_name: 请求解析的逻辑名称
        alias: 别名（别名相关结果）
        target: 别名或新建索引的名称
        step: 失败的步骤（"index" 或 "alias"），仅 CREATE_FAILED
        response: 失败时的响应，仅 CREATE_FAILED
        reason: 跳过原因，仅 SKIPPED
    """

    kind: OutcomeKind
    logical_name: str
    alias: str | None = None
    target: str | None = None
    step: str | None = None
    response: CatalogResponse | None = None
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        """目标是否已就绪（包括原本就存在）."""
        return self.kind not in (OutcomeKind.SKIPPED, OutcomeKind.CREATE_FAILED)

    @classmethod
    def alias_pointed_to_existing(cls, alias: str, target: str) -> ResolutionOutcome:
        return cls(OutcomeKind.ALIAS_POINTED_TO_EXISTING, alias, alias=alias, target=target)

    @classmethod
    def alias_pointed_to_new_plain(cls, alias: str, target: str) -> ResolutionOutcome:
        return cls(OutcomeKind.ALIAS_POINTED_TO_NEW_PLAIN, alias, alias=alias, target=target)

    @classmethod
    def index_and_alias_created(cls, alias: str, new_index: str) -> ResolutionOutcome:
        return cls(OutcomeKind.INDEX_AND_ALIAS_CREATED, alias, alias=alias, target=new_index)

    @classmethod
    def plain_index_created(cls, name: str) -> ResolutionOutcome:
        return cls(OutcomeKind.PLAIN_INDEX_CREATED, name, target=name)

    @classmethod
    def no_op_already_exists(cls, name: str) -> ResolutionOutcome:
        return cls(OutcomeKind.NO_OP_ALREADY_EXISTS, name)

    @classmethod
    def skipped(cls, name: str, reason: str) -> ResolutionOutcome:
        return cls(OutcomeKind.SKIPPED, name, reason=reason)

    @classmethod
    def create_failed(
        cls,
        name: str,
        step: str,
        response: CatalogResponse | None,
        target: str | None = None,
    ) -> ResolutionOutcome:
        return cls(OutcomeKind.CREATE_FAILED, name, target=target, step=step, response=response)

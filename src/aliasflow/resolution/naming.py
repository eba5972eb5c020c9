"""索引命名工具函数模块.

提供逻辑名称分类、时间戳索引扫描和索引名称校验功能。

命名约定：
    - 别名必须以字面后缀 ``_alias`` 结尾
    - 带时间戳的物理索引名为 ``<prefix>_<YYYYMMDDHHMMSS>``
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .exceptions import InvalidTimestampError
from .models import AliasTarget, IndexTimestamp, LogicalName, PlainIndex, ScanResult

# 别名后缀
ALIAS_SUFFIX = "_alias"

# 前缀与时间戳之间的分隔符
TIMESTAMP_SEPARATOR = "_"

# 索引名称中不允许出现的字符
_INVALID_INDEX_CHARS = frozenset(
    {",", "#", ":", "/", "\\", '"', "<", ">", "|", " ", "\t", "\n", "\r", "*", "?"}
)


def classify(name: str) -> LogicalName:
    """判断逻辑名称是普通索引名还是别名.

    只做精确的后缀匹配，不处理大小写和空白。

    Args:
        name: 逻辑名称

    Returns:
        以 ``_alias`` 结尾时返回 AliasTarget，否则返回 PlainIndex

    Examples:
        >>> classify("inmates_alias")
        AliasTarget(alias='inmates_alias', prefix='inmates')
        >>> classify("inmates")
        PlainIndex(name='inmates')
    """
    if name.endswith(ALIAS_SUFFIX):
        return AliasTarget(alias=name, prefix=name[: -len(ALIAS_SUFFIX)])
    return PlainIndex(name=name)


def scan(prefix: str, catalog: Iterable[str]) -> ScanResult:
    """在索引目录中查找与前缀对应的索引.

    - 名称等于 prefix 的索引记为无时间戳索引
    - 名称为 ``prefix_<14位数字>`` 的索引按时间戳数值比较，保留最新的一个
    - 其他名称忽略，后缀不是合法时间戳的也忽略

    时间戳相同时保留先出现的名称。

    Args:
        prefix: 别名前缀
        catalog: 索引名称序列

    Returns:
        扫描结果

    Examples:
        >>> result = scan("p", ["p_20200101000000", "p_20210601120000", "p"])
        >>> result.untimestamped_exists, result.newest
        (True, 'p_20210601120000')
    """
    head = prefix + TIMESTAMP_SEPARATOR
    untimestamped_exists = False
    newest: str | None = None
    newest_timestamp: IndexTimestamp | None = None

    for index_name in catalog:
        if index_name == prefix:
            untimestamped_exists = True
            continue
        if not index_name.startswith(head):
            continue
        try:
            timestamp = IndexTimestamp.parse(index_name[len(head) :])
        except InvalidTimestampError:
            continue
        if newest_timestamp is None or timestamp.value > newest_timestamp.value:
            newest = index_name
            newest_timestamp = timestamp

    return ScanResult(
        untimestamped_exists=untimestamped_exists,
        newest=newest,
        newest_timestamp=newest_timestamp,
    )


def timestamped_index_name(prefix: str, now: datetime) -> str:
    """生成带时间戳的物理索引名.

    Examples:
        >>> timestamped_index_name("inmates", datetime(2015, 3, 13, 3, 3, 3))
        'inmates_20150313030303'
    """
    return f"{prefix}{TIMESTAMP_SEPARATOR}{IndexTimestamp.from_datetime(now)}"


def validate_index_name(index_name: str) -> bool:
    """验证索引或别名名称是否符合 Elasticsearch 规范.

    Args:
        index_name: 索引名称

    Returns:
        是否有效

    Note:
        Elasticsearch 索引名称限制：
        - 只能使用小写字母
        - 不能以 . _ - + 开头
        - 不能是 . 或 ..
        - 不能包含 , # : / \\ * ? " < > | 空格
        - 长度不能超过 255 字节
    """
    if not index_name or not isinstance(index_name, str):
        return False

    if len(index_name.encode("utf-8")) > 255:
        return False

    # 检查是否为 . 或 ..
    if index_name in (".", ".."):
        return False

    if index_name.startswith((".", "_", "-", "+")):
        return False

    if index_name != index_name.lower():
        return False

    return not any(char in _INVALID_INDEX_CHARS for char in index_name)

"""创建结果报告模块."""

from __future__ import annotations

import logging

from ..catalog.models import CatalogResponse

logger = logging.getLogger(__name__)


class OutcomeReporter:
    """记录索引和别名创建结果.

    成功信息写入可配置的 sink（为 None 时不输出），
    失败信息始终以 ERROR 级别写入本模块日志。返回值表示调用是否成功，
    解析流程据此决定是否继续后续步骤。

    Args:
        sink: 接收成功信息的日志记录器，默认 None
    """

    def __init__(self, sink: logging.Logger | None = None):
        self.sink = sink

    def report_index_created(
        self, index_name: str, response: CatalogResponse | None
    ) -> bool:
        """报告索引创建结果.

        Args:
            index_name: 索引名称
            response: 创建响应

        Returns:
            是否创建成功
        """
        if response is not None and response.ok:
            if self.sink is not None:
                self.sink.info(f"已创建新索引 '{index_name}'")
            return True

        logger.error(f"无法创建索引 '{index_name}': {_describe(response)}")
        return False

    def report_alias_created(
        self, alias_name: str, target: str, response: CatalogResponse | None
    ) -> bool:
        """报告别名创建结果.

        Args:
            alias_name: 别名名称
            target: 别名指向的索引
            response: 更新别名的响应

        Returns:
            是否创建成功
        """
        if response is not None and response.ok:
            if self.sink is not None:
                self.sink.info(f"已创建别名 '{alias_name}'，指向索引 '{target}'")
            return True

        logger.error(
            f"创建别名 '{alias_name}' 失败，目标索引 '{target}': {_describe(response)}"
        )
        return False


def _describe(response: CatalogResponse | None) -> str:
    if response is None:
        return "无响应"
    return f"status={response.code} body={response.body}"

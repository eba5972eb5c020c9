"""AliasFlow 异常定义模块."""


class AliasFlowError(Exception):
    """AliasFlow 基础异常类."""

    pass

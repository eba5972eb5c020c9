"""索引目录客户端异常定义模块."""

from ..exceptions import AliasFlowError


class CatalogError(AliasFlowError):
    """索引目录客户端基础异常类."""

    pass


class CatalogConfigError(CatalogError):
    """客户端配置校验异常.

    当连接配置参数不合法时抛出，例如 hosts 为空、request_timeout 小于 0 等。
    """

    pass


class HostUnreachableError(CatalogError):
    """搜索引擎不可达异常.

    传输层失败（连接被拒绝、连接超时等）时抛出，存在性检查和列出索引时
    服务端返回错误（集群启动中的 503、认证失败的 401/403 等）也按不可用处理。
    创建索引或别名被服务端拒绝不会抛出此异常，而是以 CatalogResponse 的形式返回。
    """

    pass

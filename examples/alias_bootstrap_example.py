"""别名索引引导使用示例.

本文件展示了如何在应用启动时用 IndexResolver 确保别名和底层索引就绪，
以及如何在重建索引后把别名切换到新的时间戳索引。
"""

import logging

from aliasflow import (
    CatalogConfig,
    CatalogConfigError,
    EsIndexCatalog,
    IndexDefinition,
    IndexResolver,
    MappingBuilder,
    OutcomeKind,
    create_client,
)

logging.basicConfig(level=logging.INFO)

# 从环境变量读取连接配置（ALIASFLOW_HOSTS 等），未设置时使用本地地址
try:
    config = CatalogConfig.from_env()
except CatalogConfigError:
    config = CatalogConfig(hosts=["http://localhost:9200"])

catalog = EsIndexCatalog(create_client(config))
resolver = IndexResolver(catalog)


# ==================== 示例1：注册文档类型 ====================
def example_register_document_type():
    """启动时为 inmates_alias 准备索引和别名."""
    tree = (
        MappingBuilder()
        .field("id", type="keyword")
        .field("name", analyzer="standard")
        .nested("facility", lambda b: b.field("code", type="keyword").field("city"))
        .build()
    )
    definition = IndexDefinition.from_tree(
        tree, settings={"number_of_shards": 1, "number_of_replicas": 0}
    )

    outcome = resolver.resolve("inmates_alias", definition)

    print(f"结果: {outcome.kind.value}")
    if outcome.kind is OutcomeKind.SKIPPED:
        print(f"  搜索引擎不可达，稍后重试: {outcome.reason}")
    elif outcome.kind is OutcomeKind.CREATE_FAILED:
        print(f"  {outcome.step} 创建失败: {outcome.response}")
    elif outcome.target:
        print(f"  别名指向: {outcome.target}")

    return outcome


# ==================== 示例2：重复调用是安全的 ====================
def example_idempotent_call():
    """第二次调用不会创建任何东西."""
    outcome = resolver.ensure_index_ready("inmates_alias")
    print(f"结果: {outcome.kind.value}")
    return outcome


# ==================== 示例3：切换到重建后的索引 ====================
def example_switch_after_reindex(new_index: str):
    """把别名原子地切换到新的时间戳索引."""
    response = catalog.create_or_update_alias("inmates_alias", [new_index])
    print(f"切换别名: status={response.code}")
    return response


def main():
    """运行所有示例."""
    print("=" * 50)
    print("别名索引引导示例")
    print("=" * 50)

    print("\n1. 注册文档类型")
    print("-" * 50)
    example_register_document_type()

    print("\n2. 重复调用")
    print("-" * 50)
    example_idempotent_call()

    print("\n" + "=" * 50)
    print("所有示例运行完成！")
    print("=" * 50)


if __name__ == "__main__":
    main()

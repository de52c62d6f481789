"""流水线服务模块

拆分说明:
- staging.py: 暂存目录树管理
- source.py: git clone / checkout / reset
- swiftpm.py: add-product 与 swift build 调用
- packaging.py: 归档与校验和
- orchestrator.py: 代码仓 → 版本 → 库 → 平台 编排
"""

from prebuilts.services.orchestrator import PrebuiltsBuilder
from prebuilts.services.packaging import Packager, archive_name, sha256_file
from prebuilts.services.source import GitCheckout
from prebuilts.services.staging import StagingArea
from prebuilts.services.swiftpm import SwiftPackageBuilder

__all__ = [
    "PrebuiltsBuilder",
    "Packager",
    "archive_name",
    "sha256_file",
    "GitCheckout",
    "StagingArea",
    "SwiftPackageBuilder",
]

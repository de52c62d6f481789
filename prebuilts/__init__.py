"""swift-build-prebuilts: 预编译静态库产物矩阵构建工具"""

__version__ = "0.1.0"

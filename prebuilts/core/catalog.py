"""代码仓清单

声明需要构建预编译产物的代码仓 / 版本 / 库。清单作为显式值传给编排器，
不存在全局可变列表。

YAML 格式:
    repos:
      - url: https://github.com/swiftlang/swift-syntax
        libraries:
          - name: MacroSupport
            products: [SwiftSyntaxMacros, SwiftCompilerPlugin]
            c_modules: [_SwiftSyntaxCShims]
        versions:
          - tag: "600.0.1"
            c_module_paths:
              _SwiftSyntaxCShims: [Sources, _SwiftSyntaxCShims]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from prebuilts.core.exceptions import ConfigError, ValidationError
from prebuilts.core.models import LibrarySpec, PackageSpec, RepoSpec, VersionSpec
from prebuilts.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

SWIFT_SYNTAX_URL = "https://github.com/swiftlang/swift-syntax"

# swift-syntax 中宏插件依赖的全部 product
MACRO_SUPPORT_PRODUCTS = [
    "SwiftBasicFormat",
    "SwiftCompilerPlugin",
    "SwiftDiagnostics",
    "SwiftIDEUtils",
    "SwiftOperators",
    "SwiftParser",
    "SwiftParserDiagnostics",
    "SwiftRefactor",
    "SwiftSyntax",
    "SwiftSyntaxBuilder",
    "SwiftSyntaxMacros",
    "SwiftSyntaxMacroExpansion",
    "SwiftSyntaxMacrosTestSupport",
    "SwiftSyntaxMacrosGenericTestSupport",
    "_SwiftCompilerPluginMessageHandling",
    "_SwiftLibraryPluginProvider",
]


def default_repos() -> list[RepoSpec]:
    """内置清单: swift-syntax 600.0.1 的 MacroSupport"""
    return [
        RepoSpec(
            url=SWIFT_SYNTAX_URL,
            package=PackageSpec(libraries=[
                LibrarySpec(
                    name="MacroSupport",
                    products=list(MACRO_SUPPORT_PRODUCTS),
                    c_modules=["_SwiftSyntaxCShims"],
                ),
            ]),
            versions=[
                VersionSpec(
                    tag="600.0.1",
                    c_module_paths={"_SwiftSyntaxCShims": ["Sources", "_SwiftSyntaxCShims"]},
                ),
            ],
        ),
    ]


def _str_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{where} 必须是字符串列表")
    return list(value)


def _parse_library(data: Any, where: str) -> LibrarySpec:
    if not isinstance(data, dict):
        raise ConfigError(f"{where} 必须是映射")
    return LibrarySpec(
        name=str(data.get("name", "")),
        products=_str_list(data.get("products"), f"{where}.products"),
        c_modules=_str_list(data.get("c_modules"), f"{where}.c_modules"),
    )


def _tag(value: Any, where: str) -> str:
    # YAML 会把 601.10 解析成浮点数 601.1，tag 必须加引号
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"{where} 必须是字符串（请加引号）: {value!r}")
    return value


def _parse_version(data: Any, where: str) -> VersionSpec:
    # 允许简写: versions: ["600.0.1"]
    if not isinstance(data, dict):
        if isinstance(data, (str, int, float)):
            return VersionSpec(tag=_tag(data, where))
        raise ConfigError(f"{where} 必须是映射或 tag 字符串")
    raw_paths = data.get("c_module_paths") or {}
    if not isinstance(raw_paths, dict):
        raise ConfigError(f"{where}.c_module_paths 必须是映射")
    paths = {
        str(module): _str_list(segments, f"{where}.c_module_paths.{module}")
        for module, segments in raw_paths.items()
    }
    return VersionSpec(tag=_tag(data.get("tag"), f"{where}.tag"), c_module_paths=paths)


def parse_repos(data: dict[str, Any]) -> list[RepoSpec]:
    """把 YAML 映射解析为 RepoSpec 列表并校验"""
    raw_repos = data.get("repos")
    if not isinstance(raw_repos, list):
        raise ConfigError("代码仓清单缺少 repos 列表")

    repos: list[RepoSpec] = []
    for i, raw in enumerate(raw_repos):
        where = f"repos[{i}]"
        if not isinstance(raw, dict):
            raise ConfigError(f"{where} 必须是映射")
        libraries = raw.get("libraries") or []
        versions = raw.get("versions") or []
        if not isinstance(libraries, list) or not isinstance(versions, list):
            raise ConfigError(f"{where} 的 libraries / versions 必须是列表")
        repos.append(RepoSpec(
            url=str(raw.get("url", "")),
            package=PackageSpec(libraries=[
                _parse_library(lib, f"{where}.libraries[{j}]")
                for j, lib in enumerate(libraries)
            ]),
            versions=[
                _parse_version(ver, f"{where}.versions[{j}]")
                for j, ver in enumerate(versions)
            ],
        ))
    validate_repos(repos)
    return repos


def validate_repos(repos: list[RepoSpec]) -> None:
    """校验 url 全局唯一、tag 仓内唯一、库定义完整"""
    errors: list[str] = []
    seen_urls: set[str] = set()
    for repo in repos:
        if not repo.url:
            errors.append("代码仓 url 为必填")
            continue
        if repo.url in seen_urls:
            errors.append(f"代码仓 url 重复: {repo.url}")
        seen_urls.add(repo.url)

        seen_tags: set[str] = set()
        for version in repo.versions:
            if not version.tag:
                errors.append(f"{repo.url}: 版本 tag 为必填")
            elif version.tag in seen_tags:
                errors.append(f"{repo.url}: 版本 tag 重复: {version.tag}")
            seen_tags.add(version.tag)

        for library in repo.package.libraries:
            if not library.name:
                errors.append(f"{repo.url}: 库 name 为必填")
            elif not library.products:
                errors.append(f"{repo.url}: 库 {library.name} 未声明 products")

    if errors:
        raise ValidationError("代码仓清单校验失败: " + "; ".join(errors), details=errors)


def load_repos(path: str | Path, *, required: bool = False) -> list[RepoSpec]:
    """从 YAML 加载代码仓清单

    文件不存在时: required 为 False 则使用内置清单，否则抛 ConfigError。
    显式指定的清单路径应传 required=True。
    """
    p = Path(path)
    if not p.exists():
        if required:
            raise ConfigError(f"代码仓清单不存在: {p}")
        logger.info("代码仓清单不存在，使用内置清单: %s", p)
        return default_repos()
    repos = parse_repos(load_yaml(p))
    logger.info("代码仓清单已加载: %s (%d 个代码仓)", p, len(repos))
    return repos

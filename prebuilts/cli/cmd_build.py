"""CLI: 构建预编译产物矩阵"""

from __future__ import annotations

from pathlib import Path

import click

from prebuilts.cli import _load_config, config_option
from prebuilts.core.catalog import load_repos
from prebuilts.core.config import check_swift_version
from prebuilts.core.exceptions import PrebuiltsError
from prebuilts.core.host import host_platform
from prebuilts.core.models import BuildOptions
from prebuilts.core.platforms import parse_platform
from prebuilts.services.orchestrator import PrebuiltsBuilder
from prebuilts.utils.shell import detect_swift_version
from prebuilts.utils.yaml_io import save_yaml


def register(group: click.Group) -> None:
    group.add_command(build)


@click.command()
@config_option
@click.option("--stage-dir", default=None, help="产物生成目录（运行开始时会被清空重建）")
@click.option("--docker/--no-docker", default=None, help="对非本机 Linux 平台启用容器构建，缺省取配置文件")
@click.option("--docker-only/--no-docker-only", default=None, help="只构建 Linux 平台，全部经容器构建，缺省取配置文件")
@click.option("--docker-command", default=None, help="容器命令，默认 docker")
@click.option("--repos", "repos_file", default=None, help="代码仓清单 YAML")
@click.option("--swift-version", default=None, help="工具链 major.minor，缺省时自动检测")
@click.option("--platform", "platform_names", multiple=True, help="只构建指定平台（可多次指定）")
@click.option("--quiet/--no-quiet", "-q", default=None, help="丢弃子进程输出，缺省取配置文件")
@click.option("--summary", default="", help="把产物及校验和写入该 YAML 文件")
def build(
    config_path: str, stage_dir: str | None, docker: bool | None, docker_only: bool | None,
    docker_command: str | None, repos_file: str | None, swift_version: str | None,
    platform_names: tuple[str, ...], quiet: bool | None, summary: str,
) -> None:
    """checkout 各版本、逐平台构建、打包并计算校验和"""
    cfg = _load_config(config_path)

    try:
        platforms = [parse_platform(name) for name in platform_names] or None
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--platform") from e

    try:
        check_swift_version(swift_version or "")
    except PrebuiltsError as e:
        raise click.BadParameter(str(e), param_hint="--swift-version") from e

    try:
        host = host_platform(cfg.host_os)
        repos_path, required = cfg.repos_path(repos_file)
        repos = load_repos(repos_path, required=required)
        version = swift_version or cfg.swift_version or detect_swift_version(
            cwd=Path.cwd(), host=host,
        )
        options = BuildOptions(
            stage_dir=Path(stage_dir or cfg.stage_dir).absolute(),
            swift_version=version,
            docker=cfg.docker if docker is None else docker,
            docker_only=cfg.docker_only if docker_only is None else docker_only,
            docker_command=docker_command or cfg.docker_command,
            docker_image_root=cfg.docker_image_root,
            quiet=cfg.quiet if quiet is None else quiet,
        )
        report = PrebuiltsBuilder(options, host=host, platforms=platforms).run(repos)
    except PrebuiltsError as e:
        raise click.ClickException(str(e)) from e

    if summary:
        try:
            save_yaml(summary, report.to_dict())
        except OSError as e:
            raise click.ClickException(f"写入摘要失败: {e}") from e

    click.echo(f"产物目录: {report.stage_dir}")
    for artifact in report.artifacts:
        click.echo(f"  {artifact.repo}/{artifact.tag}/{artifact.path.name}  sha256={artifact.checksum}")
    click.echo(f"共 {len(report.artifacts)} 个产物")

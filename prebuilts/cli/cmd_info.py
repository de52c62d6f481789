"""CLI: 查看平台目录与代码仓清单"""

from __future__ import annotations

import click

from prebuilts.cli import _load_config, config_option
from prebuilts.core.catalog import load_repos
from prebuilts.core.exceptions import PrebuiltsError
from prebuilts.core.host import host_platform
from prebuilts.core.platforms import all_platforms, can_build


def register(group: click.Group) -> None:
    group.add_command(platforms)
    group.add_command(repos)


@click.command()
@config_option
@click.option("--docker/--no-docker", default=None, help="按启用容器构建计算可构建性，缺省取配置文件")
@click.option("--docker-only/--no-docker-only", default=None, help="按仅容器构建计算可构建性，缺省取配置文件")
def platforms(config_path: str, docker: bool | None, docker_only: bool | None) -> None:
    """列出支持的平台及在本机上的可构建性"""
    cfg = _load_config(config_path)
    try:
        host = host_platform(cfg.host_os)
    except PrebuiltsError as e:
        raise click.ClickException(str(e)) from e
    use_docker = cfg.docker if docker is None else docker
    only = cfg.docker_only if docker_only is None else docker_only

    click.echo(f"主机 OS: {host.os}")
    for p in all_platforms():
        mark = "yes" if can_build(p, host_os=host.os, docker=use_docker, docker_only=only) else "no"
        click.echo(f"  {p.value:24s} os={p.os.value:8s} arch={p.arch.value:8s} "
                   f"docker={p.docker_tag or '-':14s} buildable={mark}")


@click.command()
@config_option
@click.option("--repos", "repos_file", default=None, help="代码仓清单 YAML")
def repos(config_path: str, repos_file: str | None) -> None:
    """列出代码仓清单中的版本和库"""
    cfg = _load_config(config_path)
    try:
        path, required = cfg.repos_path(repos_file)
        items = load_repos(path, required=required)
    except PrebuiltsError as e:
        raise click.ClickException(str(e)) from e
    for repo in items:
        click.echo(f"{repo.name}  ({repo.url})")
        for version in repo.versions:
            click.echo(f"  tag {version.tag}")
        for library in repo.package.libraries:
            c_modules = ", ".join(library.c_modules) or "-"
            click.echo(f"  lib {library.name}: {len(library.products)} products, c_modules={c_modules}")

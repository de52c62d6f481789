"""prebuilts 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from prebuilts import __version__
from prebuilts.core.config import DEFAULT_CONFIG_FILE, Config
from prebuilts.core.exceptions import PrebuiltsError
from prebuilts.utils.logger import LOG_JSON_ENV, LOG_LEVEL_ENV, setup_logging


def _load_config(path: str) -> Config:
    """加载配置文件，错误转为 CLI 错误"""
    try:
        return Config.from_file(path)
    except PrebuiltsError as e:
        raise click.ClickException(str(e)) from e


config_option = click.option(
    "--config", "-c", "config_path", default=DEFAULT_CONFIG_FILE,
    show_default=True, help="配置文件路径",
)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """prebuilts - 预编译静态库产物矩阵构建"""
    setup_logging(
        level=os.getenv(LOG_LEVEL_ENV, "INFO"),
        json_output=os.getenv(LOG_JSON_ENV, "") == "1",
    )


# 注册各领域子命令
from prebuilts.cli.cmd_build import register as _reg_build  # noqa: E402
from prebuilts.cli.cmd_info import register as _reg_info  # noqa: E402

_reg_build(main)
_reg_info(main)

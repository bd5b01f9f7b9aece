"""CLI命令行接口模块"""

import os
import sys
from typing import Optional

import typer
from dotenv import load_dotenv
from loguru import logger

from dockstream.constants import DEFAULT_CONFIG_FILE
from dockstream.managers.config_manager import ConfigError, ConfigManager, ConnectionConfig
from dockstream.managers.image.base import DockstreamError
from dockstream.managers.image.utils import parse_image_name
from dockstream.managers.image_manager import ImageManager

# 创建CLI应用
app = typer.Typer(
    help="Docker镜像构建、推送工具",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback()
def connect(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", help="Docker守护进程地址，默认 http://localhost:2375"),
    registry: Optional[str] = typer.Option(None, "-r", "--registry", help="镜像仓库地址"),
    username: Optional[str] = typer.Option(None, "-u", "--username", help="仓库用户名"),
    password: Optional[str] = typer.Option(None, "-p", "--password", help="仓库密码"),
    email: Optional[str] = typer.Option(None, "--email", help="仓库邮箱"),
    timeout: Optional[int] = typer.Option(None, "--timeout", help="请求超时时间（秒）"),
    config_file: Optional[str] = typer.Option(None, "-c", "--config", help="JSON配置文件路径，默认读取当前目录的dockstream.json"),
):
    """连接参数，优先于配置文件和环境变量"""
    if config_file is None and os.path.exists(DEFAULT_CONFIG_FILE):
        config_file = DEFAULT_CONFIG_FILE
    try:
        ctx.obj = ConfigManager(config_file).build(
            url=url,
            server_address=registry,
            username=username,
            password=password,
            email=email,
            timeout=timeout,
        )
    except ConfigError as e:
        logger.error(f"错误：{str(e)}")
        sys.exit(1)


def get_image_manager(ctx: typer.Context) -> ImageManager:
    """
    根据命令行上下文创建镜像管理器

    Returns:
        ImageManager: 镜像管理器实例
    """
    config: ConnectionConfig = ctx.obj
    return ImageManager(config)


@app.command("build")
def build_image(
    ctx: typer.Context,
    build_context: str = typer.Argument(..., help="构建上下文目录"),
    tag: str = typer.Option(..., "-t", "--tag", help="镜像标签，例如 myapp:1.0"),
):
    """构建Docker镜像"""
    try:
        get_image_manager(ctx).build_image(build_context, tag)
        logger.success("镜像构建成功")
    except DockstreamError as e:
        logger.error(f"镜像构建失败：{str(e)}")
        sys.exit(1)


@app.command("push")
def push_image(
    ctx: typer.Context,
    repository: str = typer.Argument(..., help="镜像仓库，可以是 仓库名:标签 的形式"),
    tag: Optional[str] = typer.Option(None, "-t", "--tag", help="要推送的镜像标签，默认从仓库名解析，否则为latest"),
):
    """推送镜像到远程仓库"""
    if tag is None:
        repository, tag = parse_image_name(repository)
    try:
        get_image_manager(ctx).push_image(repository, tag)
        logger.success("镜像推送成功")
    except DockstreamError as e:
        logger.error(f"推送镜像失败：{str(e)}")
        sys.exit(1)


@app.command("tag")
def tag_image(
    ctx: typer.Context,
    image_id: str = typer.Argument(..., help="源镜像ID或名称"),
    target: str = typer.Argument(..., help="目标镜像，格式为 仓库名[:标签]"),
    tag: Optional[str] = typer.Option(None, "-t", "--tag", help="目标标签，优先于目标镜像中的标签"),
):
    """为镜像添加标签，已存在的标签会被覆盖"""
    repository, parsed_tag = parse_image_name(target)
    try:
        get_image_manager(ctx).tag_image(image_id, repository, tag or parsed_tag)
    except DockstreamError as e:
        logger.error(f"添加标签失败：{str(e)}")
        sys.exit(1)


@app.command("ping")
def ping(ctx: typer.Context):
    """检查Docker守护进程连接"""
    config: ConnectionConfig = ctx.obj
    if get_image_manager(ctx).ping():
        logger.success(f"Docker守护进程 {config.url} 连接正常")
    else:
        logger.error(f"无法连接到Docker守护进程 {config.url}")
        sys.exit(1)


def main():
    """主入口函数"""
    load_dotenv()
    app()


if __name__ == "__main__":
    main()

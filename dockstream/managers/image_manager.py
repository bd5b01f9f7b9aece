"""镜像管理器类 - 门面模式实现"""

from pathlib import Path
from typing import Any, Optional, Union

from .base_manager import BaseManager
from .config_manager import ConfigManager, ConnectionConfig
from .image.build import ImageBuilder
from .image.push import ImagePusher
from .image.tag import ImageTagger
from .transport import DaemonTransport


class ImageManager(BaseManager):
    """
    镜像管理器类，用于构建、推送镜像和添加标签

    每个实例持有一个传输层，同一时间只能执行一个操作；需要并发时请为每个线程创建独立的实例。
    """

    def __init__(
        self,
        config: ConnectionConfig,
        transport: Optional[DaemonTransport] = None,
        log: Optional[Any] = None,
    ) -> None:
        """
        初始化镜像管理器

        Args:
            config: 连接配置
            transport: 传输层，默认根据连接配置创建
            log: 日志记录器，默认使用loguru
        """
        super().__init__(config, transport, log)

        # 初始化子组件
        self.builder = ImageBuilder(self.transport, self.log)
        self.pusher = ImagePusher(self.transport, self.log)
        self.tagger = ImageTagger(self.transport, self.log)

    @classmethod
    def create(
        cls,
        url: Optional[str] = None,
        server_address: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        email: Optional[str] = None,
        timeout: Optional[int] = None,
        log: Optional[Any] = None,
    ) -> "ImageManager":
        """
        根据连接参数创建镜像管理器，未指定url时连接本地守护进程

        Args:
            url: Docker守护进程地址
            server_address: 镜像仓库地址
            username: 仓库用户名
            password: 仓库密码
            email: 仓库邮箱
            timeout: 请求超时时间（秒）
            log: 日志记录器

        Returns:
            ImageManager: 镜像管理器
        """
        config = ConfigManager(env={}).build(
            url=url,
            server_address=server_address,
            username=username,
            password=password,
            email=email,
            timeout=timeout,
        )
        return cls(config, log=log)

    def build_image(self, build_context: Union[str, Path], tag: str) -> None:
        """
        构建Docker镜像

        Args:
            build_context: 构建上下文目录
            tag: 镜像标签

        Raises:
            ImageValidationError: 参数为空时抛出
            ImageOperationError: 构建失败时抛出
            StreamDecodeError: 构建输出无法解析时抛出
        """
        self.builder.build(build_context, tag)

    def push_image(self, repository: str, tag: str) -> None:
        """
        推送镜像到远程仓库

        Args:
            repository: 镜像仓库
            tag: 镜像标签

        Raises:
            ImageValidationError: 参数为空时抛出
            ImageOperationError: 推送失败时抛出
            StreamDecodeError: 推送输出无法解析时抛出
        """
        self.pusher.push(repository, tag)

    def tag_image(self, image_id: str, repository: str, tag: str) -> None:
        """
        为镜像添加新标签，总是覆盖已有标签

        Args:
            image_id: 源镜像ID或名称
            repository: 目标仓库
            tag: 目标标签

        Raises:
            ImageValidationError: 参数为空时抛出
            ImageOperationError: 守护进程拒绝或连接失败时抛出
        """
        self.tagger.tag(image_id, repository, tag)

    def ping(self) -> bool:
        """检查守护进程是否可用"""
        return self._check_docker_connection()

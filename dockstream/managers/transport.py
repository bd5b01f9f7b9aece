"""Docker守护进程传输层"""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Iterator, Optional, Union

import docker
from docker.errors import APIError, DockerException
from loguru import logger
from requests.exceptions import RequestException

from ..constants import ERROR_MESSAGES
from .image.base import DaemonOperationError, DaemonTransportError, Operation

if TYPE_CHECKING:
    from .config_manager import ConnectionConfig


class StreamHandle:
    """
    守护进程返回的流式响应句柄

    只能迭代一次；无论正常结束、出错还是提前停止，都必须调用close()释放连接。
    """

    def __init__(
        self, chunks: Iterable[Union[bytes, str]], release: Optional[Callable[[], Any]] = None
    ) -> None:
        self._chunks = chunks
        self._release = release if release is not None else getattr(chunks, "close", None)
        self._consumed = False
        self.closed = False

    def __iter__(self) -> Iterator[Union[bytes, str]]:
        if self._consumed:
            raise RuntimeError("响应流已被消费，不能再次读取")
        self._consumed = True
        return iter(self._chunks)

    def close(self) -> None:
        """释放底层连接，可重复调用"""
        if self.closed:
            return
        self.closed = True
        if self._release is not None:
            self._release()

    def __enter__(self) -> "StreamHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class DaemonTransport:
    """Docker守护进程HTTP API的封装，同一时间只能执行一个操作"""

    def __init__(self, config: "ConnectionConfig", api_client: Optional[docker.APIClient] = None) -> None:
        """
        初始化传输层

        Args:
            config: 连接配置
            api_client: 已创建的Docker低级API客户端，默认在第一次调用时创建
        """
        self.config = config
        self._api = api_client

    @property
    def api(self) -> docker.APIClient:
        """Docker低级API客户端"""
        if self._api is None:
            kwargs: Dict[str, Any] = {"base_url": self.config.url}
            if self.config.timeout is not None:
                kwargs["timeout"] = self.config.timeout
            try:
                self._api = docker.APIClient(**kwargs)
                logger.debug(f"Docker客户端初始化成功: {self.config.url}")
            except (DockerException, RequestException) as e:
                logger.error(ERROR_MESSAGES["docker_connection"].format(e))
                raise
        return self._api

    def open_build_stream(self, build_context: str, tag: str) -> StreamHandle:
        """
        发起构建请求

        Args:
            build_context: 构建上下文目录
            tag: 镜像标签

        Returns:
            StreamHandle: 构建事件流
        """
        with _translate_errors(Operation.BUILD):
            chunks = self.api.build(path=str(build_context), tag=tag, rm=True, decode=False)
        return StreamHandle(chunks)

    def open_push_stream(self, repository: str, tag: str) -> StreamHandle:
        """
        发起推送请求，认证信息来自连接配置

        Args:
            repository: 镜像仓库
            tag: 镜像标签

        Returns:
            StreamHandle: 推送事件流
        """
        with _translate_errors(Operation.PUSH):
            chunks = self.api.push(
                repository, tag=tag, stream=True, decode=False, auth_config=self.config.auth_config
            )
        return StreamHandle(chunks)

    def tag_image(self, image_id: str, repository: str, tag: str, force: bool = True) -> None:
        """
        为镜像添加标签

        Args:
            image_id: 镜像ID或名称
            repository: 目标仓库
            tag: 目标标签
            force: 是否覆盖已有标签
        """
        with _translate_errors(Operation.TAG):
            self.api.tag(image_id, repository, tag=tag, force=force)


@contextmanager
def _translate_errors(operation: Operation) -> Iterator[None]:
    """将docker和requests异常转换为dockstream异常"""
    try:
        yield
    except APIError as e:
        # 守护进程返回了错误状态码
        raise DaemonOperationError(operation, e.explanation or str(e)) from e
    except (DockerException, RequestException, OSError) as e:
        raise DaemonTransportError(operation, str(e)) from e

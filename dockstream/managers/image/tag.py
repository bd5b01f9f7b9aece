"""镜像标签管理相关功能"""

from typing import TYPE_CHECKING, Any

from .utils import require_value

if TYPE_CHECKING:
    from ..transport import DaemonTransport


class ImageTagger:
    """镜像标签管理器类"""

    def __init__(self, transport: "DaemonTransport", log: Any) -> None:
        self.transport = transport
        self.log = log

    def tag(self, image_id: str, repository: str, tag: str) -> None:
        """
        为镜像添加新标签，已存在的同名标签会被覆盖

        Args:
            image_id: 源镜像ID或名称
            repository: 目标仓库
            tag: 目标标签

        Raises:
            ImageValidationError: 参数为空时抛出
        """
        require_value(image_id, "image_id")
        require_value(repository, "repository")
        require_value(tag, "tag")

        self.transport.tag_image(image_id, repository, tag, force=True)
        self.log.success(f"已为镜像 {image_id} 添加标签 {repository}:{tag}")

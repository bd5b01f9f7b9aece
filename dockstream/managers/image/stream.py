"""守护进程事件流解析"""

import codecs
import json
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Union

from docker.errors import APIError
from docker.utils.json_stream import split_buffer
from requests.exceptions import RequestException
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from .base import DaemonOperationError, DaemonTransportError, Operation, StreamDecodeError, StreamEvent

if TYPE_CHECKING:
    from ..transport import StreamHandle


class EventStream:
    """
    事件序列

    只能遍历一次。遍历结束、解析失败、读取失败或调用close()时都会释放
    响应句柄，即使还没有读取任何事件。
    """

    def __init__(self, handle: "StreamHandle", operation: Operation) -> None:
        self._handle = handle
        self._events = _read_events(handle, operation)

    def __iter__(self) -> "EventStream":
        return self

    def __next__(self) -> StreamEvent:
        return next(self._events)

    def close(self) -> None:
        """停止读取并释放响应句柄，可重复调用"""
        self._events.close()
        self._handle.close()

    def __enter__(self) -> "EventStream":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def iter_events(handle: "StreamHandle", operation: Operation = Operation.BUILD) -> EventStream:
    """
    将守护进程的流式响应解析为事件序列

    序列是惰性的且只能遍历一次。遍历结束、解析失败或调用方提前停止
    （调用close()）时都会关闭响应句柄。

    Args:
        handle: 尚未读取的响应句柄
        operation: 当前操作，用于错误信息

    Returns:
        EventStream: 每行JSON对应一个事件

    Raises:
        StreamDecodeError: 某一行不是合法的JSON对象
        DaemonOperationError: 守护进程返回了错误状态码
        DaemonTransportError: 读取响应时连接中断
    """
    return EventStream(handle, operation)


def _read_events(handle: "StreamHandle", operation: Operation) -> Iterator[StreamEvent]:
    with handle:
        lines = split_buffer(_decode_chunks(handle))
        while True:
            try:
                line = next(lines)
            except StopIteration:
                return
            except APIError as e:
                # 构建请求的状态码在开始读取时才检查
                raise DaemonOperationError(operation, e.explanation or str(e)) from e
            except (RequestException, Urllib3HTTPError, OSError) as e:
                raise DaemonTransportError(operation, f"读取守护进程响应失败: {e}") from e

            text = line.strip()
            if text:
                yield _parse_line(text)


def _decode_chunks(chunks: Iterable[Union[bytes, str]]) -> Iterator[str]:
    # 多字节字符可能被拆分到两个数据块中
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    for chunk in chunks:
        text = chunk if isinstance(chunk, str) else decoder.decode(chunk)
        if text:
            yield text
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


def _parse_line(text: str) -> StreamEvent:
    try:
        frame = json.loads(text)
    except ValueError as e:
        raise StreamDecodeError(f"无法解析守护进程响应: {text!r}", line=text) from e
    if not isinstance(frame, dict):
        raise StreamDecodeError(f"守护进程响应不是JSON对象: {text!r}", line=text)
    return StreamEvent.from_frame(frame)

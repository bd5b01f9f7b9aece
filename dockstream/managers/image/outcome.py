"""事件流结果判定"""

from typing import Any, Iterable, Optional

from .base import (
    DaemonOperationError,
    DaemonTransportError,
    FailureKind,
    Operation,
    Outcome,
    StreamDecodeError,
    StreamEvent,
)


def classify_events(events: Iterable[StreamEvent], log: Any) -> Outcome:
    """
    遍历整个事件流并得出最终结果

    HTTP状态码总是200，只有检查完整的事件流才能知道操作是否成功。
    守护进程报告的错误不会中断遍历，后续的输出仍然会写入日志；
    多个错误时以第一个为准。解析失败或连接中断会立即结束遍历。

    Args:
        events: iter_events返回的事件序列
        log: 日志记录器

    Returns:
        Outcome: 成功或失败（附带原因）
    """
    failure: Optional[Outcome] = None
    try:
        for event in events:
            if event.is_error:
                if failure is None:
                    failure = Outcome.failure(event.reason, FailureKind.DAEMON)
                    log.error(f"守护进程返回错误: {event.reason}")
                else:
                    log.warning(f"忽略后续错误: {event.reason}")
            elif event.message:
                log.info(event.message)
    except StreamDecodeError as e:
        log.error(str(e))
        return Outcome.failure(str(e), FailureKind.DECODE, fault=e)
    except DaemonTransportError as e:
        log.error(str(e))
        return Outcome.failure(e.reason, FailureKind.TRANSPORT, fault=e)
    finally:
        # 提前结束时关闭生成器，释放底层连接
        close = getattr(events, "close", None)
        if close is not None:
            close()

    return failure or Outcome.success()


def raise_for_outcome(outcome: Outcome, operation: Operation) -> None:
    """
    将失败结果转换为异常

    Raises:
        DaemonOperationError: 守护进程报告了错误
        DaemonTransportError: 连接中断
        StreamDecodeError: 响应无法解析
    """
    if outcome.ok:
        return
    if outcome.fault is not None:
        # 保留解析器给出的原始异常（包括出错的行）
        raise outcome.fault
    reason = outcome.reason or "未知错误"
    if outcome.failure_kind is FailureKind.DECODE:
        raise StreamDecodeError(reason)
    if outcome.failure_kind is FailureKind.TRANSPORT:
        raise DaemonTransportError(operation, reason)
    raise DaemonOperationError(operation, reason)

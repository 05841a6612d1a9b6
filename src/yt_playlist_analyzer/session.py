"""分析流程的状态机：Idle → Running → Succeeded / Failed。"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .analyzer import AnalysisError, InvalidInputError
from .models import AnalysisResult
from .utils import extract_playlist_id

INVALID_INPUT_MESSAGE = "Invalid YouTube playlist URL. Please enter a valid playlist URL."
GENERIC_FAILURE_MESSAGE = "Failed to analyze playlist. Please check the URL and try again."
COPY_FEEDBACK_SECONDS = 2.0

logger = logging.getLogger(__name__)

Analyzer = Callable[[str], AnalysisResult]


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SessionBusyError(RuntimeError):
    """已有分析在进行中。"""


class CopyFeedback:
    """复制成功提示，标记后在固定时间内有效。"""

    def __init__(self, duration: float = COPY_FEEDBACK_SECONDS, clock: Callable[[], float] = time.monotonic) -> None:
        self.duration = duration
        self._clock = clock
        self._copied_at: Optional[float] = None

    def mark_copied(self) -> None:
        self._copied_at = self._clock()

    def reset(self) -> None:
        self._copied_at = None

    @property
    def active(self) -> bool:
        if self._copied_at is None:
            return False
        return self._clock() - self._copied_at < self.duration


@dataclass(slots=True)
class Snapshot:
    """某一时刻的会话状态。"""

    state: SessionState
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None


class AnalysisSession:
    """管理一次次分析请求的状态转换。"""

    def __init__(self, analyzer: Analyzer, feedback: Optional[CopyFeedback] = None) -> None:
        self._analyzer = analyzer
        self.feedback = feedback or CopyFeedback()
        self._snapshot = Snapshot(SessionState.IDLE)

    @property
    def state(self) -> SessionState:
        return self._snapshot.state

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self._snapshot.result

    @property
    def error(self) -> Optional[str]:
        return self._snapshot.error

    def snapshot(self) -> Snapshot:
        return Snapshot(self._snapshot.state, self._snapshot.result, self._snapshot.error)

    def submit(self, url: str) -> Snapshot:
        """提交一次分析；结束时状态为 SUCCEEDED 或 FAILED。"""
        if self._snapshot.state is SessionState.RUNNING:
            raise SessionBusyError("已有分析正在进行")
        self.feedback.reset()
        if not extract_playlist_id(url):
            self._snapshot = Snapshot(SessionState.FAILED, error=INVALID_INPUT_MESSAGE)
            return self.snapshot()

        self._snapshot = Snapshot(SessionState.RUNNING)
        try:
            result = self._analyzer(url)
        except InvalidInputError:
            self._snapshot = Snapshot(SessionState.FAILED, error=INVALID_INPUT_MESSAGE)
        except AnalysisError as exc:
            logger.error("Error analyzing playlist: %s", exc)
            self._snapshot = Snapshot(SessionState.FAILED, error=GENERIC_FAILURE_MESSAGE)
        except Exception:
            logger.exception("Unexpected error analyzing playlist")
            self._snapshot = Snapshot(SessionState.FAILED, error=GENERIC_FAILURE_MESSAGE)
        else:
            self._snapshot = Snapshot(SessionState.SUCCEEDED, result=result)
        return self.snapshot()

    def mark_copied(self) -> None:
        if self._snapshot.state is not SessionState.SUCCEEDED:
            raise RuntimeError("没有可复制的结果")
        self.feedback.mark_copied()

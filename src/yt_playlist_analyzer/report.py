"""统计结果导出：文本摘要、剪贴板与文件。"""
from __future__ import annotations

import logging
from pathlib import Path

from .durations import format_hms
from .models import SPEED_FACTORS, AnalysisResult

logger = logging.getLogger(__name__)


class ClipboardError(RuntimeError):
    """写入系统剪贴板失败。"""


def render_summary(result: AnalysisResult) -> str:
    """生成固定格式的多行文本摘要。"""
    lines = [
        "Playlist Analysis Results:",
        "------------------------",
        f"Title: {result.title}",
        f"Creator: {result.creator}",
        f"Total Videos: {result.video_count} ({result.unavailable_count} unavailable)",
        f"Average Video Length: {format_hms(result.average_duration)}",
        f"Total Duration: {format_hms(result.total_duration)}",
        "",
        "Estimated Watching Time:",
    ]
    for factor in SPEED_FACTORS:
        lines.append(f"- At {factor:.2f}x speed: {format_hms(result.speed_duration(factor))}")
    return "\n".join(lines)


def copy_to_clipboard(text: str) -> None:
    """通过 Tk 将文本写入系统剪贴板。"""
    try:
        import tkinter as tk
    except ImportError as exc:
        raise ClipboardError("当前Python未包含tkinter") from exc
    try:
        root = tk.Tk()
    except tk.TclError as exc:
        raise ClipboardError(f"无法访问剪贴板: {exc}") from exc
    try:
        root.withdraw()
        root.clipboard_clear()
        root.clipboard_append(text)
        root.update()
    except tk.TclError as exc:
        raise ClipboardError(f"写入剪贴板失败: {exc}") from exc
    finally:
        root.destroy()


def export_summary(result: AnalysisResult) -> bool:
    """复制摘要到剪贴板，失败只记录日志并返回False。"""
    try:
        copy_to_clipboard(render_summary(result))
    except ClipboardError as exc:
        logger.error("Failed to copy results: %s", exc)
        return False
    return True


def write_summary(result: AnalysisResult, path: Path, encoding: str = "utf-8") -> Path:
    """将摘要写入文本文件。"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_summary(result) + "\n", encoding=encoding)
    return path

"""命令行入口。"""
from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Optional

import typer

from .analyzer import analyze_playlist
from .config_store import API_KEY_ENV, ConfigRepository
from .durations import format_hms, format_verbose
from .models import SPEED_FACTORS, AnalysisResult
from .report import export_summary, write_summary
from .session import INVALID_INPUT_MESSAGE, AnalysisSession, SessionState
from .utils import build_session, extract_playlist_id

app = typer.Typer(add_completion=False, help="统计YouTube播放列表总时长与倍速观看时间")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _validate_limits(timeout: Optional[float], max_pages: Optional[int]) -> None:
    if timeout is not None and timeout <= 0:
        raise typer.BadParameter("timeout必须大于0")
    if max_pages is not None and max_pages <= 0:
        raise typer.BadParameter("max_pages必须大于0")


def _create_analysis_session(
    repo: ConfigRepository,
    api_key: Optional[str],
    timeout: Optional[float],
    max_pages: Optional[int],
) -> AnalysisSession:
    key = repo.resolve_api_key(api_key)
    if not key:
        typer.secho(
            f"未配置API Key，请使用--api-key、环境变量{API_KEY_ENV}或configure命令设置。",
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)
    analyzer = partial(
        analyze_playlist,
        api_key=key,
        session=build_session(),
        timeout=timeout if timeout is not None else repo.config.timeout,
        max_pages=max_pages if max_pages is not None else repo.config.max_pages,
    )
    return AnalysisSession(analyzer)


def _print_result(result: AnalysisResult) -> None:
    typer.secho(result.title, bold=True)
    typer.echo(f"创建者：{result.creator}")
    videos = f"视频总数：{result.video_count}"
    if result.unavailable_count > 0:
        videos += f"（其中{result.unavailable_count}个不可用）"
    typer.echo(videos)
    typer.echo(f"平均时长：{format_hms(result.average_duration)}")
    total = result.total_duration
    typer.echo(f"总时长：{format_hms(total)}")
    sentence = format_verbose(total)
    if sentence:
        typer.echo(f"        {sentence}")
    typer.echo("不同倍速下的观看时间：")
    for factor in SPEED_FACTORS:
        typer.echo(f"  {factor:g}x：{format_hms(result.speed_duration(factor))}")


def _copy_result(session: AnalysisSession) -> None:
    if export_summary(session.result):
        session.mark_copied()
    if session.feedback.active:
        typer.secho("已复制到剪贴板。", fg=typer.colors.GREEN)
    else:
        typer.secho("复制失败，详情见日志。", fg=typer.colors.YELLOW)


@app.command(name="analyze")
def analyze_command(
    url: str = typer.Argument(..., help="YouTube播放列表URL"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="YouTube Data API Key"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="请求超时时间(秒)"),
    max_pages: Optional[int] = typer.Option(None, "--max-pages", help="最多抓取的分页数"),
    copy: bool = typer.Option(False, "--copy", help="将结果摘要复制到剪贴板"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="将结果摘要写入文件"),
    encoding: str = typer.Option("utf-8", "--encoding", "-e", help="输出文件编码"),
    config_path: Optional[Path] = typer.Option(None, "--config-path", help="自定义配置文件路径"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """分析单个播放列表。"""
    _configure_logging(verbose)
    _validate_limits(timeout, max_pages)
    if not extract_playlist_id(url):
        raise typer.BadParameter(INVALID_INPUT_MESSAGE)

    repo = ConfigRepository(config_path)
    session = _create_analysis_session(repo, api_key, timeout, max_pages)

    typer.echo("正在分析播放列表...")
    snapshot = session.submit(url)
    if snapshot.state is SessionState.FAILED:
        typer.secho(snapshot.error, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    _print_result(snapshot.result)
    if output is not None:
        path = write_summary(snapshot.result, output, encoding)
        typer.echo(f"摘要已写入：{path}")
    if copy:
        _copy_result(session)
    raise typer.Exit(code=0)


@app.command()
def interactive(
    api_key: Optional[str] = typer.Option(None, "--api-key", help="YouTube Data API Key"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="请求超时时间(秒)"),
    max_pages: Optional[int] = typer.Option(None, "--max-pages", help="最多抓取的分页数"),
    config_path: Optional[Path] = typer.Option(None, "--config-path", help="自定义配置文件路径"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """交互式地连续分析多个播放列表。"""
    _configure_logging(verbose)
    _validate_limits(timeout, max_pages)
    repo = ConfigRepository(config_path)
    session = _create_analysis_session(repo, api_key, timeout, max_pages)
    typer.echo("输入播放列表URL查看总时长与不同倍速下的观看时间，直接回车退出。")

    while True:
        url = typer.prompt("播放列表URL", default="", show_default=False).strip()
        if not url:
            typer.echo("已退出。")
            raise typer.Exit(code=0)
        typer.echo("正在分析播放列表...")
        snapshot = session.submit(url)
        if snapshot.state is SessionState.FAILED:
            typer.secho(snapshot.error, fg=typer.colors.RED)
            continue
        _print_result(snapshot.result)
        if typer.confirm("复制结果到剪贴板？", default=False):
            _copy_result(session)


@app.command()
def configure(
    api_key: Optional[str] = typer.Option(None, "--api-key", help="保存的YouTube Data API Key"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="默认请求超时时间(秒)"),
    max_pages: Optional[int] = typer.Option(None, "--max-pages", help="默认最多抓取的分页数"),
    config_path: Optional[Path] = typer.Option(None, "--config-path", help="自定义配置文件路径"),
) -> None:
    """保存默认配置。"""
    _validate_limits(timeout, max_pages)
    repo = ConfigRepository(config_path)
    config = repo.update(api_key=api_key, timeout=timeout, max_pages=max_pages)
    masked = f"{config.api_key[:4]}****" if config.api_key else "(未设置)"
    typer.echo(f"配置已保存：{repo.storage_path}")
    typer.echo(f"API Key：{masked}，超时：{config.timeout}s，分页上限：{config.max_pages}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()

"""配置存储与数据模型。"""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from .yt_client import DEFAULT_MAX_PAGES

APP_DIR_NAME = "yt_playlist_analyzer"
CONFIG_FILENAME = "config.json"
API_KEY_ENV = "YOUTUBE_API_KEY"


@dataclass(slots=True)
class AppConfig:
    """运行配置。"""

    api_key: Optional[str] = None
    timeout: float = 10.0
    max_pages: int = DEFAULT_MAX_PAGES

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        api_key = data.get("api_key")
        return cls(
            api_key=str(api_key) if api_key else None,
            timeout=_positive(data.get("timeout"), float, 10.0),
            max_pages=_positive(data.get("max_pages"), int, DEFAULT_MAX_PAGES),
        )


def _positive(value, cast, default):
    """非正数或无法解析的值回退到默认值。"""
    try:
        number = cast(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _resolve_config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def default_config_path() -> Path:
    return _resolve_config_dir() / CONFIG_FILENAME


class ConfigRepository:
    """管理配置文件的读写。"""

    def __init__(self, storage_path: Optional[Path] = None) -> None:
        self.storage_path = storage_path or default_config_path()
        self.config = AppConfig()
        self.load()

    def load(self) -> None:
        if not self.storage_path.exists():
            self.config = AppConfig()
            return
        try:
            content = self.storage_path.read_text(encoding="utf-8")
        except OSError:
            self.config = AppConfig()
            return
        try:
            raw = json.loads(content)
        except json.JSONDecodeError:
            self.config = AppConfig()
            return
        self.config = AppConfig.from_dict(raw if isinstance(raw, dict) else {})

    def save(self) -> None:
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        data = self.config.to_dict()
        self.storage_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def update(self, **changes) -> AppConfig:
        for name, value in changes.items():
            if value is not None:
                setattr(self.config, name, value)
        self.save()
        return self.config

    def resolve_api_key(self, override: Optional[str] = None) -> Optional[str]:
        """按 命令行参数 > 环境变量 > 配置文件 的顺序取得API Key。"""
        return override or os.environ.get(API_KEY_ENV) or self.config.api_key

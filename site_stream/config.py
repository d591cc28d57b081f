# === FILE: site_stream/config.py ===
"""
Модуль для загрузки и валидации конфигурации сервера SiteStream.
Используется Pydantic для описания схемы и проверки данных,
переменные окружения (и файл .env) переопределяют значения из файла.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Settings(BaseModel):
    """Конфигурация процесса: сервер, лимиты обхода и рендерер."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field("0.0.0.0", min_length=1, description="Адрес для прослушивания.")
    port: int = Field(5000, ge=0, le=65535, description="TCP-порт сервера.")
    max_pages: int = Field(1000, ge=1, description="Жесткий лимит по числу страниц за сессию.")
    navigation_timeout: float = Field(30.0, gt=0, description="Таймаут навигации (секунд).")
    keepalive_interval: float = Field(30.0, gt=0, description="Интервал ping/pong WebSocket (секунд).")
    max_sessions: int = Field(8, ge=1, description="Сколько сессий обхода рендерят одновременно.")
    renderer: Literal["playwright", "http"] = Field("playwright", description="Реализация рендерера.")
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        "networkidle", description="Условие завершения навигации в браузере."
    )
    headless: bool = Field(True, description="Запуск браузера без окна.")
    user_agent: str = Field("SiteStreamBot/1.0", min_length=1, description="Заголовок User-Agent.")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Уровень логирования, если не задан --log-level."
    )

    @field_validator("renderer", "wait_until", mode="before")
    def _lowercase(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("log_level", mode="before")
    def _uppercase(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")

# переменная окружения -> поле Settings
ENV_OVERRIDES: Dict[str, str] = {
    "SITE_STREAM_HOST": "host",
    "SITE_STREAM_PORT": "port",
    "SITE_STREAM_MAX_PAGES": "max_pages",
    "SITE_STREAM_NAVIGATION_TIMEOUT": "navigation_timeout",
    "SITE_STREAM_KEEPALIVE_INTERVAL": "keepalive_interval",
    "SITE_STREAM_MAX_SESSIONS": "max_sessions",
    "SITE_STREAM_RENDERER": "renderer",
    "SITE_STREAM_USER_AGENT": "user_agent",
    "SITE_STREAM_LOG_LEVEL": "log_level",
}


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    # строки приводит к нужным типам сам Pydantic
    return {field: environ[name] for name, field in ENV_OVERRIDES.items() if name in environ}


def load_config(
    path: Union[str, Path, None] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Читает YAML или JSON, накладывает переменные окружения и возвращает Settings.
    Без явного пути используется configs/default.yaml, если он есть, иначе значения по умолчанию.
    При отсутствии явно указанного файла бросает FileNotFoundError.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    data: dict[str, Any] = {}
    if path is None:
        path_obj = _DEFAULT_CFG if _DEFAULT_CFG.is_file() else None
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    if path_obj is not None:
        suffix = path_obj.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = _read_yaml(path_obj)
        elif suffix == ".json":
            data = _read_json(path_obj)
        else:
            raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    data.update(_env_overrides(environ))
    return Settings(**data)


__all__ = ["Settings", "load_config", "ENV_OVERRIDES"]

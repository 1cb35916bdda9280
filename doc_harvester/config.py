# === FILE: doc_harvester/config.py ===
"""
Модуль для загрузки и валидации конфигурации DocHarvester.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64)"


class HarvestConfig(BaseModel):
    """Конфигурация одного запуска сбора документации."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    catalog_path: Path = Field(Path("api-docs-urls.csv"), description="CSV-каталог API.")
    name_column: str = Field("API_Name", min_length=1, description="Колонка с именем API.")
    url_column: str = Field(
        "Official_Documentation_URL", min_length=1, description="Колонка с URL документации."
    )
    staging_dir: Path = Field(Path("storage"), description="Временная папка для сырых записей.")
    dataset_dir: Path = Field(Path("datasets"), description="Итоговая папка датасета.")

    policy_concurrency: int = Field(10, ge=1, description="Одновременных проверок robots.txt.")
    policy_timeout: float = Field(5.0, gt=0, description="Таймаут загрузки robots.txt (секунд).")
    user_agent: str = Field(BROWSER_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    disallow_marker: str = Field(
        "Disallow: /", min_length=1, description="Подстрока, запрещающая обход всего сайта."
    )
    not_found_marker: str = Field(
        "404", min_length=1, description="Подстрока заголовка страницы «не найдено»."
    )

    max_concurrency: int = Field(10, ge=1, description="Одновременных загрузок страниц.")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    retry_times: int = Field(3, ge=0, description="Число повторных попыток при 5xx/429.")

    @field_validator("catalog_path", "staging_dir", "dataset_dir", mode="before")
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        return v

    @field_validator("staging_dir")
    def _staging_not_cwd(cls, v: Path) -> Path:
        # staging удаляется рекурсивно в конце прогона
        if v in (Path(""), Path("."), Path("/")):
            raise ValueError("staging_dir не может указывать на текущую или корневую папку")
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


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


def load_config(path: Union[str, Path, None]) -> HarvestConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект HarvestConfig.
    Без явного пути использует configs/default.yaml, а если его нет, значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return HarvestConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return HarvestConfig(**data)


__all__ = ["HarvestConfig", "load_config", "BROWSER_USER_AGENT"]

# === FILE: tree_crawler/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера TreeCrawler.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


class CrawlConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: str = Field(..., min_length=1, description="Стартовый URL; используется как есть.")
    max_depth: int = Field(4, description="Максимальная глубина обхода; <= 0 — пустой результат.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("TreeCrawler/1.0", min_length=1, description="Заголовок User-Agent.")
    max_concurrency: Optional[int] = Field(
        None, ge=1, description="Лимит одновременных загрузок; None — без лимита."
    )
    same_host_only: bool = Field(True, description="Переходить только по ссылкам того же хоста.")
    graph_file: Optional[Path] = Field(
        None, description="YAML/JSON-граф страниц вместо HTTP (для демонстрации и тестов)."
    )

    @field_validator("seed_url")
    def _no_blank_seed(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("seed_url must not be blank")
        return v

    @field_validator("graph_file", mode="before")
    def _resolve_graph_file(cls, v: Any, info: ValidationInfo) -> Any:
        # относительный путь считается от каталога конфига
        base_dir = (info.context or {}).get("base_dir")
        if v is not None and base_dir is not None and not Path(v).is_absolute():
            return Path(base_dir) / v
        return v

    @model_validator(mode="after")
    def _check_graph_file_exists(self) -> CrawlConfig:
        if self.graph_file is not None and not self.graph_file.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(self.graph_file))
        return self


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


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlConfig.
    При отсутствии файла конфига или графа страниц бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG.resolve()
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

    return CrawlConfig.model_validate(data, context={"base_dir": path_obj.parent})


__all__ = ["CrawlConfig", "load_config"]

# cluster_sizer/config.py
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .model.resources import ResourceVector
from .types import GI_B

log = logging.getLogger(__name__)

ENV_PREFIX = "SIZER_"
CONFIG_ENV = "SIZER_CONFIG"


class SizerSettings(BaseModel):
    """
    Настройки расчёта.

    system_tax_per_node_*: запросы платформы на одну ноду.
      sum by (resource) (kube_pod_container_resource_requests{namespace=~"openshift-.*",
      resource=~"cpu|memory"}) / count(kube_node_info)
    base_reserved_*: резерв на кластер до применения правил.
    max_worker_nodes: верхняя граница поиска в size_for().
    """

    model_config = ConfigDict(frozen=True)

    system_tax_per_node_memory: int = Field(20 * GI_B, ge=0)
    system_tax_per_node_cpus: int = Field(8, ge=0)
    base_reserved_memory: int = Field(0, ge=0)
    base_reserved_cpus: int = Field(0, ge=0)
    max_worker_nodes: int = Field(512, ge=1)
    control_plane_policy: str = "workers_first"
    log_level: str = "INFO"

    @property
    def system_tax_per_node(self) -> ResourceVector:
        return ResourceVector.of(
            memory=self.system_tax_per_node_memory,
            cpus=self.system_tax_per_node_cpus,
        )

    @property
    def base_reserved(self) -> ResourceVector:
        return ResourceVector.of(
            memory=self.base_reserved_memory,
            cpus=self.base_reserved_cpus,
        )


DEFAULT_SETTINGS = SizerSettings()


def _from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for name in SizerSettings.model_fields:
        key = ENV_PREFIX + name.upper()
        if key in environ:
            result[name] = environ[key]
    return result


def load_settings(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SizerSettings:
    """
    Собирает настройки: значения по умолчанию <- JSON-файл <- переменные SIZER_*.

    Путь к файлу берётся из аргумента или из SIZER_CONFIG.
    """
    env = os.environ if environ is None else environ
    data: Dict[str, Any] = {}

    cfg_path = path or env.get(CONFIG_ENV)
    if cfg_path:
        p = Path(cfg_path)
        data.update(json.loads(p.read_text("utf-8")))
        log.info("Loaded sizer settings from %s", p)

    overrides = _from_env(env)
    if overrides:
        log.info("Settings overridden from env: %s", ", ".join(sorted(overrides)))
    data.update(overrides)

    return SizerSettings(**data)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

from .io_utils import ensure_dir


logger = logging.getLogger(__name__)

PARAMS_FILE = "enhance_params.json"
METRICS_FILE = "metrics.json"


def load_json_list(path: Path) -> List[Any]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Historique illisible, réinitialisé: %s (%s)", path, e)
            return []
    if not isinstance(data, list):
        data = [data]
    return data


def _append_json_list(path: Path, entry: Any) -> None:
    hist = load_json_list(path)
    hist.append(entry)
    with path.open("w", encoding="utf-8") as f:
        json.dump(hist, f, ensure_ascii=False, indent=2)


def save_params_json(models_dir: str | Path, params: dict) -> Path:
    models_path = Path(models_dir)
    ensure_dir(models_path)
    json_file = models_path / PARAMS_FILE
    _append_json_list(json_file, params)
    return json_file


def append_run_metrics(models_dir: str | Path, run_metrics: dict) -> Path:
    models_path = Path(models_dir)
    ensure_dir(models_path)
    metrics_file = models_path / METRICS_FILE
    _append_json_list(metrics_file, run_metrics)
    return metrics_file

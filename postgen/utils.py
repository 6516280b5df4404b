from __future__ import annotations

import datetime as dt
import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def parse_csv(value: object) -> list[str]:
    if isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value]
    else:
        items = [item.strip() for item in str(value or "").split(",")]
    return [item for item in items if item]


def iso_date(value: dt.datetime) -> str:
    value = value.replace(tzinfo=dt.timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def clean_output_dir(output_dir: Path, project_root: Path) -> None:
    if not output_dir.exists():
        return
    output_resolved = output_dir.resolve()
    root_resolved = project_root.resolve()
    if output_resolved == root_resolved:
        raise ValueError("Refusing to clean project root.")
    if not output_resolved.is_relative_to(root_resolved):
        raise ValueError("Refusing to clean output directory outside project root.")
    logger.debug("Removing %s", output_dir)
    shutil.rmtree(output_dir)

"""
Script-Lift Configuration Store

One configuration per campaign id, last write wins. `put` stamps
`last_modified`; `created_at` is kept from the first save.

Backends:
- InMemoryScriptLiftStore: keyed dict, process lifetime
- JsonFileScriptLiftStore: single JSON document {"configs": {id: record}}
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
import json
import logging

from ..config.settings import Settings, StoreBackendType, get_settings
from ..lift.models import ScriptLiftConfig

logger = logging.getLogger(__name__)


class ScriptLiftConfigStore(ABC):
    """Persistence interface for script-lift configurations."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock

    @abstractmethod
    def get(self, campaign_id: str) -> Optional[ScriptLiftConfig]:
        pass

    @abstractmethod
    def all(self) -> dict[str, ScriptLiftConfig]:
        pass

    @abstractmethod
    def delete(self, campaign_id: str) -> bool:
        """Remove a configuration; False if none was stored."""
        pass

    @abstractmethod
    def _write(self, config: ScriptLiftConfig) -> None:
        pass

    def put(self, config: ScriptLiftConfig) -> ScriptLiftConfig:
        """Save a configuration and return the stamped copy that was stored."""
        existing = self.get(config.campaign_id)
        update = {"last_modified": self._clock()}
        if existing is not None:
            update["created_at"] = existing.created_at
        stamped = config.model_copy(update=update, deep=True)
        self._write(stamped)
        logger.info("Saved script lift configuration for campaign %s", config.campaign_id)
        return stamped


class InMemoryScriptLiftStore(ScriptLiftConfigStore):
    """Dict-backed store; snapshots are deep-copied in and out."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        super().__init__(clock)
        self._configs: dict[str, ScriptLiftConfig] = {}

    def get(self, campaign_id: str) -> Optional[ScriptLiftConfig]:
        config = self._configs.get(campaign_id)
        return config.model_copy(deep=True) if config is not None else None

    def all(self) -> dict[str, ScriptLiftConfig]:
        return {k: v.model_copy(deep=True) for k, v in self._configs.items()}

    def delete(self, campaign_id: str) -> bool:
        return self._configs.pop(campaign_id, None) is not None

    def _write(self, config: ScriptLiftConfig) -> None:
        self._configs[config.campaign_id] = config.model_copy(deep=True)


class JsonFileScriptLiftStore(ScriptLiftConfigStore):
    """
    All configurations in one JSON document.

    The file is read on every access and rewritten on every change, so
    several stores pointed at the same path see each other's writes.
    Records use the camelCase field names of ScriptLiftConfig.to_record().
    """

    def __init__(self, path, clock: Callable[[], datetime] = datetime.now):
        super().__init__(clock)
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            document = json.load(f)
        return document.get("configs", {})

    def _dump(self, records: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump({"configs": records}, f, indent=2)
        tmp.replace(self.path)

    def get(self, campaign_id: str) -> Optional[ScriptLiftConfig]:
        record = self._load().get(campaign_id)
        return ScriptLiftConfig.from_record(record) if record is not None else None

    def all(self) -> dict[str, ScriptLiftConfig]:
        return {k: ScriptLiftConfig.from_record(v) for k, v in self._load().items()}

    def delete(self, campaign_id: str) -> bool:
        records = self._load()
        if campaign_id not in records:
            return False
        del records[campaign_id]
        self._dump(records)
        return True

    def _write(self, config: ScriptLiftConfig) -> None:
        records = self._load()
        records[config.campaign_id] = config.to_record()
        self._dump(records)


def create_script_lift_store(settings: Settings = None) -> ScriptLiftConfigStore:
    """Build the store backend selected in settings."""
    store_config = (settings or get_settings()).store

    if store_config.backend == StoreBackendType.IN_MEMORY:
        return InMemoryScriptLiftStore()
    elif store_config.backend == StoreBackendType.JSON_FILE:
        return JsonFileScriptLiftStore(store_config.json_path)
    else:
        raise ValueError(f"Unsupported store backend: {store_config.backend}")

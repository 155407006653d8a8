"""
Flat-file JSON document store

Every document is a pretty-printed JSON file under the data directory.
Archived weekly rosters live in <data_dir>/archive/.
"""
import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel


logger = logging.getLogger(__name__)

STATE_FILE = "registration-state.json"
REGISTRATIONS_FILE = "registrations.json"
WINNERS_FILE = "winners.json"
ARCHIVE_DIR = "archive"
ARCHIVE_PREFIX = "registrations-"

M = TypeVar("M", bound=BaseModel)


def archive_name(week_start: date) -> str:
    """archive/registrations-YYYY-MM-DD.json for the given week start"""
    return f"{ARCHIVE_DIR}/{ARCHIVE_PREFIX}{week_start.isoformat()}.json"


class JsonStore:
    """Read and write typed JSON documents by file name"""

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)

    @property
    def archive_dir(self) -> Path:
        return self.data_dir / ARCHIVE_DIR

    def ensure_directories(self) -> None:
        self.archive_dir.mkdir(parents=True, exist_ok=True)

    def path(self, name: str) -> Path:
        return self.data_dir / name

    def _load(self, name: str):
        self.ensure_directories()
        path = self.path(name)
        if not path.exists():
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def read(self, name: str, model: Type[M]) -> Optional[M]:
        """
        Read a single document

        Returns:
            Parsed model, or None if the file does not exist
        """
        raw = self._load(name)
        if raw is None:
            return None
        return model.model_validate(raw)

    def read_list(self, name: str, model: Type[M]) -> Optional[List[M]]:
        """Read a document holding a JSON array of models"""
        raw = self._load(name)
        if raw is None:
            return None
        return [model.model_validate(item) for item in raw]

    def write(self, name: str, value: Union[BaseModel, Sequence[BaseModel]]) -> None:
        """Serialize a model (or list of models) by alias, indent=2"""
        self.ensure_directories()
        if isinstance(value, BaseModel):
            payload = value.model_dump(mode="json", by_alias=True)
        else:
            payload = [item.model_dump(mode="json", by_alias=True) for item in value]

        path = self.path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        logger.debug(f"Wrote {path}")

    def list_archives(self) -> List[str]:
        """Archive document names, most recent week first"""
        self.ensure_directories()
        files = [
            p.name for p in self.archive_dir.iterdir()
            if p.is_file() and p.name.startswith(ARCHIVE_PREFIX) and p.name.endswith(".json")
        ]
        # YYYY-MM-DD sorts lexically in date order
        return [f"{ARCHIVE_DIR}/{name}" for name in sorted(files, reverse=True)]

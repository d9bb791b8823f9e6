# app/rules/loader.py

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, List

from schemas import FaraidReference

REFERENCES_PATH = Path(__file__).resolve().parent.parent / "data" / "references.json"


def load_json(path: Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as f:
        return json.load(f)


@lru_cache(maxsize=None)
def load_references(path: Path = REFERENCES_PATH) -> List[FaraidReference]:
    """Quranic references shown alongside a distribution; invalid entries raise."""
    return [FaraidReference.model_validate(item) for item in load_json(path)]

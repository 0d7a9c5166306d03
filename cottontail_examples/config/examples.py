import os
from pathlib import Path
from typing import List, Tuple

from cottontail_examples.protocol import pb

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "resources"

DEFAULT_ENTITIES: List[Tuple[str, int]] = [
    ("scalablecolor", 64),
    ("cedd", 144),
    ("jhist", 576),
]

# One id per entity: cedd, jhist, scalablecolor.
DEFAULT_WHERE_IDS: List[str] = [
    "fca0132f519e71d13fb82b86964872",
    "0b414f0e6e82cd0aefae3d2bd791b2",
    "0f412c5bd41f9b91d8635bb1a886a36",
]


def _parse_entities(raw) -> List[Tuple[str, int]]:
    """Accept ``[{name=..., dimension=...}]`` tables or ``"name:dim,name:dim"``."""

    if isinstance(raw, str):
        entities = []
        for chunk in raw.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            name, _, dim = chunk.partition(":")
            if not dim:
                raise ValueError(f"Entity '{chunk}' is missing a dimension (expected name:dim)")
            entities.append((name.strip(), int(dim)))
        return entities
    return [(str(item["name"]), int(item["dimension"])) for item in raw]


def _split_ids(raw: str) -> List[str]:
    return [token.strip() for token in raw.split(",") if token.strip()]


class Examples:
    def __init__(self, config: dict | None = None) -> None:
        ex_cfg = (config or {}).get("examples", {})
        self.SCHEMA_NAME: str = str(ex_cfg.get("schema", os.getenv("COTTONTAIL_SCHEMA", "cottontail_example")))
        self.DATA_DIR: Path = Path(ex_cfg.get("data_dir", os.getenv("COTTONTAIL_DATA_DIR", str(_DEFAULT_DATA_DIR))))
        self.SELECT_LIMIT: int = int(ex_cfg.get("select_limit", os.getenv("COTTONTAIL_SELECT_LIMIT", "3")))
        self.KNN_K: int = int(ex_cfg.get("knn_k", os.getenv("COTTONTAIL_KNN_K", "10")))
        self.KNN_DISTANCE: str = str(ex_cfg.get("knn_distance", os.getenv("COTTONTAIL_KNN_DISTANCE", "L2"))).upper()
        distances = pb.Knn.Distance.keys()
        if self.KNN_DISTANCE not in distances:
            raise ValueError(
                f"Unknown kNN distance '{self.KNN_DISTANCE}'; expected one of {', '.join(distances)}"
            )

        entities_raw = ex_cfg.get("entities", os.getenv("COTTONTAIL_ENTITIES"))
        self.ENTITIES: List[Tuple[str, int]] = (
            _parse_entities(entities_raw) if entities_raw else list(DEFAULT_ENTITIES)
        )

        where_raw = ex_cfg.get("where_ids")
        if isinstance(where_raw, str):
            self.WHERE_IDS: List[str] = _split_ids(where_raw)
        elif where_raw:
            self.WHERE_IDS = [str(item) for item in where_raw]
        else:
            self.WHERE_IDS = list(DEFAULT_WHERE_IDS)

    def qualified(self, entity: str) -> str:
        """Return ``schema.entity`` for ``entity``."""
        return f"{self.SCHEMA_NAME}.{entity}"

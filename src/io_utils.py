import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

DRAW_COLUMNS = ["iteration", "bottleneck_size", "bottleneck_length", "theta", "mutation_rate"]


def load_gfsr_state(path: str) -> Optional[Dict[str, Any]]:
    """
    Read a stored MT19937 register written by `save_gfsr_state`.
    Returns None when no state has been stored yet.
    """
    p = Path(path)
    if not p.exists():
        return None
    with p.open("r", encoding="utf-8") as f:
        payload = json.load(f)

    if not isinstance(payload, dict) or payload.get("bit_generator") != "MT19937" or "state" not in payload:
        raise ValueError(f"GFSR state file {p.resolve()} does not hold an MT19937 register.")
    state = payload["state"]
    if not isinstance(state, dict) or "key" not in state or "pos" not in state:
        raise ValueError(f"GFSR state file {p.resolve()} is missing 'key' or 'pos'.")

    return {
        "bit_generator": "MT19937",
        "state": {
            "key": np.asarray(state["key"], dtype=np.uint32),
            "pos": int(state["pos"]),
        },
    }


def save_gfsr_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "bit_generator": state["bit_generator"],
        "state": {
            "key": [int(k) for k in np.asarray(state["state"]["key"])],
            "pos": int(state["state"]["pos"]),
        },
    }
    p.write_text(json.dumps(payload) + "\n", encoding="utf-8")


def iteration_draws_frame(draws: List[Any]) -> pd.DataFrame:
    rows = []
    for idx, params in enumerate(draws):
        row = {"iteration": idx}
        row.update(asdict(params))
        rows.append(row)
    return pd.DataFrame(rows, columns=DRAW_COLUMNS)


def write_iteration_draws(draws: List[Any], path: str) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    iteration_draws_frame(draws).to_csv(out, index=False)
    return out

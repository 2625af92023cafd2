"""Persistence of finished plans."""

import json
import logging
from pathlib import Path
from typing import Sequence, Union

import pandas as pd

from battery_planner.errors import WriteError
from battery_planner.models.records import PlanEntry

logger = logging.getLogger(__name__)

PLAN_KEY = "planning"
PLAN_COLUMNS = ["start", "end", "energy_from_battery", "energy_to_battery"]


def plan_to_json(plan: Sequence[PlanEntry]) -> str:
    """Pretty-printed JSON document with the plan under the ``planning`` key."""
    return json.dumps({PLAN_KEY: [entry.to_dict() for entry in plan]}, indent=2)


def save_plan(plan: Sequence[PlanEntry], file_path: Union[str, Path]) -> None:
    """
    Save the generated battery usage plan to a JSON file.

    Raises:
        WriteError: if the file cannot be written
    """
    path = Path(file_path)
    try:
        path.write_text(plan_to_json(plan), encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Unable to write plan to file: {path}") from exc
    logger.info("Saved planning to %s", path)


def plan_to_frame(plan: Sequence[PlanEntry]) -> pd.DataFrame:
    """Tabulate a plan, one row per interval."""
    df = pd.DataFrame(
        [
            {
                "start": entry.start,
                "end": entry.end,
                "energy_from_battery": entry.energy_from_battery,
                "energy_to_battery": entry.energy_to_battery,
            }
            for entry in plan
        ],
        columns=PLAN_COLUMNS,
    )
    df["action"] = "hold"
    df.loc[df["energy_to_battery"] > 0, "action"] = "charge"
    df.loc[df["energy_from_battery"] > 0, "action"] = "discharge"
    return df


def export_plan_csv(plan: Sequence[PlanEntry], file_path: Union[str, Path]) -> None:
    """
    Write the plan as CSV.

    Raises:
        WriteError: if the file cannot be written
    """
    path = Path(file_path)
    try:
        plan_to_frame(plan).to_csv(path, index=False)
    except OSError as exc:
        raise WriteError(f"Unable to write plan to CSV file: {path}") from exc
    logger.info("Wrote %s (rows = %d)", path, len(plan))

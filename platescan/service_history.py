# platescan/service_history.py

import json
import logging
import os
from typing import List, Optional

from .config import SERVICE_HISTORY_PATH
from .schemas import HistorySummary, ServiceVisit

logger = logging.getLogger(__name__)


def _plate_key(plate: Optional[str]) -> str:
    return (plate or "").replace(" ", "").replace("-", "").upper()


def lookup_service_history(plate: Optional[str], path: str = SERVICE_HISTORY_PATH) -> List[ServiceVisit]:
    """
    Look up service visits for a plate from data/service_history.json.
    JSON format:
        {
          "plates":  {"ABC1234": [visit, ...]},
          "default": [visit, ...]
        }
    Plates without their own entry get the "default" visits.
    """
    if not plate:
        return []
    if not os.path.exists(path):
        logger.warning("Service history data not found at %s", path)
        return []

    with open(path, encoding="utf-8") as f:
        db = json.load(f)

    wanted = _plate_key(plate)
    records = None
    for key, visits in (db.get("plates") or {}).items():
        if _plate_key(key) == wanted:
            records = visits
            break
    if records is None:
        records = db.get("default") or []

    visits = [ServiceVisit.model_validate(r) for r in records]
    visits.sort(key=lambda v: v.visit_number)
    logger.info("Found %d service visits for %s", len(visits), wanted)
    return visits


def summarize_history(visits: List[ServiceVisit]) -> HistorySummary:
    return HistorySummary(
        total_visits=len(visits),
        total_spent=sum(v.total_cost for v in visits),
        total_services=sum(len(v.repairs) for v in visits),
    )

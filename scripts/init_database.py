# scripts/init_database.py

import json
import logging
from pathlib import Path
from typing import Tuple, Union

from sqlalchemy.orm import Session

from app.db.models import Badge, Requirement

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog.json"


def init_catalog(path: Union[str, Path], db: Session) -> Tuple[int, int]:
    """
    Load badges and requirements from a JSON export of the form
    {"badges": [...], "requirements": [...]}. Rows already present are
    skipped, so the script can be re-run. Returns (badges, requirements) added.
    """
    with open(path, encoding="utf-8") as f:
        catalog = json.load(f)

    added_badges = 0
    for item in catalog.get("badges", []):
        badge_id = int(item["badge_id"])
        if db.get(Badge, badge_id) is not None:
            continue
        db.add(Badge(
            badge_id=badge_id,
            badge_name=item["badge_name"],
            image_url=item.get("imageUrl") or item.get("image_url"),
            categories=item.get("categories"),
        ))
        added_badges += 1
    # Requirements reference badges by FK
    db.flush()

    added_requirements = 0
    for item in catalog.get("requirements", []):
        badge_id = int(item["badge_id"])
        requirement_id = int(item["requirement_id"])
        exists = (
            db.query(Requirement)
            .filter(Requirement.badge_id == badge_id, Requirement.requirement_id == requirement_id)
            .first()
        )
        if exists:
            continue
        if db.get(Badge, badge_id) is None:
            logger.warning(f"Skipping requirement {requirement_id}: badge {badge_id} is not in the catalog")
            continue
        db.add(Requirement(
            badge_id=badge_id,
            requirement_id=requirement_id,
            requirement_string=item["requirement_string"],
        ))
        added_requirements += 1

    db.commit()
    logger.info(f"Catalog initialized: {added_badges} badges, {added_requirements} requirements added.")
    return added_badges, added_requirements

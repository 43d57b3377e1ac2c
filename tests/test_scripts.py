"""
Tests for the catalog seeding script.
"""
import json

from app.core.database import Base, build_engine, build_session_factory
from app.db.models import Badge, Requirement
from scripts.init_database import DEFAULT_CATALOG, init_catalog


def fresh_session():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    return build_session_factory(engine)()


def test_seeds_default_catalog():
    db = fresh_session()
    badges, requirements = init_catalog(DEFAULT_CATALOG, db)
    assert badges == db.query(Badge).count() == 6
    assert requirements == db.query(Requirement).count() == 10
    db.close()


def test_rerun_skips_existing_rows():
    db = fresh_session()
    init_catalog(DEFAULT_CATALOG, db)
    assert init_catalog(DEFAULT_CATALOG, db) == (0, 0)
    db.close()


def test_requirements_for_unknown_badges_are_skipped(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({
        "badges": [{"badge_id": 10, "badge_name": "Astronomer", "image_url": "astro.png", "categories": "Skills"}],
        "requirements": [
            {"requirement_id": 1, "badge_id": 10, "requirement_string": "Identify three constellations."},
            {"requirement_id": 1, "badge_id": 11, "requirement_string": "Orphaned."},
        ],
    }))
    db = fresh_session()
    assert init_catalog(path, db) == (1, 1)
    assert db.get(Badge, 10).image_url == "astro.png"
    db.close()

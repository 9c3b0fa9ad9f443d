# File: fundiflow/db/init_db.py

"""
Database initialization helpers.

Models are imported so their tables get registered on Base.metadata.
"""

import logging
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from fundiflow.db.session import engine
from fundiflow.models.base import Base, utcnow
from fundiflow.models import announcement, notification, user, work_session  # noqa: F401
from fundiflow.models.project import Project
from fundiflow.models.worker import Worker

logger = logging.getLogger(__name__)


SAMPLE_WORKERS = [
    {"name": "Alice Johnson", "avatar_url": "https://i.pravatar.cc/150?u=a042581f4e29026704d",
     "skills": ["Soldering", "Final Assembly", "QA Testing"], "availability": "40 hours/week",
     "past_performance": 0.98},
    {"name": "Bob Williams", "avatar_url": "https://i.pravatar.cc/150?u=a042581f4e29026705d",
     "skills": ["Circuit Board Assembly", "Wiring"], "availability": "30 hours/week",
     "past_performance": 0.92},
    {"name": "Charlie Brown", "avatar_url": "https://i.pravatar.cc/150?u=a042581f4e29026706d",
     "skills": ["Soldering", "Mechanical Assembly"], "availability": "40 hours/week",
     "past_performance": 0.95},
    {"name": "Diana Prince", "avatar_url": "https://i.pravatar.cc/150?u=a042581f4e29026707d",
     "skills": ["Final Assembly", "Packaging"], "availability": "20 hours/week",
     "past_performance": 0.99},
]


def _component(cid: str, name: str, required: int, completed: int) -> dict:
    return {
        "id": cid,
        "name": name,
        "quantity_required": required,
        "quantity_completed": completed,
        "available_processes": [],
        "completed_processes": [],
    }


def _sample_projects() -> list[dict]:
    today = utcnow()
    return [
        {
            "name": "Model-X Circuit Board",
            "quantity": 100,
            "description": "Assemble main circuit board for the Model-X drone. "
                           "Requires precision soldering and component placement.",
            "deadline": today + timedelta(days=14),
            "status": "In Progress",
            "components": [
                _component("C01", "Microcontroller", 100, 50),
                _component("C02", "Resistor Pack", 500, 350),
                _component("C03", "Capacitor Kit", 300, 120),
            ],
        },
        {
            "name": "Guardian Security Bot - Chassis",
            "quantity": 50,
            "description": "Mechanical assembly of the main chassis for the Guardian Security Bot.",
            "deadline": today + timedelta(days=30),
            "status": "Not Started",
            "components": [
                _component("C04", "Frame", 50, 0),
                _component("C05", "Armor Plating", 200, 0),
                _component("C06", "Wheel Assembly", 200, 0),
            ],
        },
        {
            "name": "AudioPhonic-9000 Speakers",
            "quantity": 200,
            "description": "Final assembly and QA testing for the high-end AudioPhonic-9000 speaker system.",
            "deadline": today + timedelta(days=7),
            "status": "In Progress",
            "components": [
                _component("C07", "Speaker Cone", 400, 380),
                _component("C08", "Amplifier Unit", 200, 190),
                _component("C09", "Housing", 200, 200),
            ],
        },
        {
            "name": "Project Phoenix",
            "quantity": 1,
            "description": "Top-secret R&D project. High-level clearance required.",
            "deadline": today + timedelta(days=60),
            "status": "On Hold",
            "components": [_component("C10", "Core Fusion Reactor", 1, 0)],
        },
    ]


def init_db() -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    Base.metadata.create_all(bind=engine)


def seed_initial_data(db: Session, owner_id: str | None = None) -> bool:
    """
    Insert demo workers and projects when the store has no projects yet.

    Returns True when data was inserted.
    """
    if db.scalars(select(Project.id).limit(1)).first() is not None:
        return False

    for data in SAMPLE_WORKERS:
        db.add(Worker(owner_id=owner_id, **data))
    projects = _sample_projects()
    for data in projects:
        db.add(Project(owner_id=owner_id, image_url="https://placehold.co/600x400.png", **data))
    db.commit()
    logger.info("[SEED] Inserted %d workers and %d projects", len(SAMPLE_WORKERS), len(projects))
    return True

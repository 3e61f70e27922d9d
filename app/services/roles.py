"""Seed the fixed role rows. Safe to run on every startup."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Role, RoleName

logger = logging.getLogger(__name__)


def seed_roles(session: Session) -> list[RoleName]:
    """Create any missing RoleName rows. Returns the names that were created."""
    existing = {name for (name,) in session.query(Role.name).all()}
    created: list[RoleName] = []
    for name in RoleName:
        if name in existing:
            continue
        session.add(Role(name=name))
        created.append(name)
    if not created:
        logger.debug("Roles already seeded")
        return created
    try:
        session.commit()
    except IntegrityError:
        # another process seeded concurrently
        session.rollback()
        logger.info("Roles were seeded concurrently; nothing to do")
        return []
    logger.info("Seeded roles: %s", ", ".join(n.value for n in created))
    return created


def roles_seeded(session: Session) -> bool:
    """True when every RoleName has its row."""
    existing = {name for (name,) in session.query(Role.name).all()}
    return existing >= set(RoleName)

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models
from .auth import Role
from .schemas import AccessTokenRecord, RunnerCreate, RunnerRecord, UserRecord
from .security import hash_password, verify_password
from .settings import Settings

logger = logging.getLogger(__name__)


class DuplicateAccessToken(ValueError):
    pass

class DuplicateRunner(ValueError):
    pass

class RunnerNotFound(LookupError):
    pass

# ---------------------------
# Users / auth
# ---------------------------

def ensure_superadmin(session: Session, settings: Settings) -> None:
    """Ensure the superadmin account from settings exists in DB."""
    email = settings.LAPTRACKER_ADMIN_EMAIL
    existing = get_user_by_email(session, email)

    if existing:
        if existing.role != Role.SUPERADMIN.value:
            existing.role = Role.SUPERADMIN.value
            session.commit()
        return

    u = models.User(
        email=email,
        name="Admin",
        role=Role.SUPERADMIN.value,
        password_hash=hash_password(settings.LAPTRACKER_ADMIN_PASSWORD),
    )
    session.add(u)
    session.commit()
    logger.info("created superadmin account %s", email)

def create_user(session: Session, *, email: str, password: str, role: Role, name: str = "") -> models.User:
    u = models.User(email=email, name=name, role=role.value, password_hash=hash_password(password))
    session.add(u)
    session.commit()
    return u

def get_user_by_email(session: Session, email: str) -> Optional[models.User]:
    return session.execute(select(models.User).where(models.User.email == email)).scalar_one_or_none()

def authenticate_user(session: Session, email: str, password: str) -> Optional[models.User]:
    u = get_user_by_email(session, email)
    if not u:
        return None
    if verify_password(password, u.password_hash):
        return u
    return None

# ---------------------------
# Access tokens
# ---------------------------

def create_access_token(session: Session, user: models.User) -> dict:
    """Create the access token owned by ``user``.

    Returns the token record merged with the owner's record under
    ``createdBy``. The store's unique constraint on the owner is the only
    duplicate check. An integrity error is raised as DuplicateAccessToken only
    when a token for the owner is present after the rollback; every other
    store error propagates.
    """
    token = models.AccessToken(user_uuid=user.uuid)
    session.add(token)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if _access_token_exists(session, user.uuid):
            raise DuplicateAccessToken(user.uuid) from e
        raise
    except Exception:
        session.rollback()
        raise
    session.refresh(token)
    logger.info("access token %s created for %s", token.uuid, user.email)
    data = AccessTokenRecord.model_validate(token).to_json()
    data["createdBy"] = UserRecord.model_validate(user).to_json()
    return data

def _access_token_exists(session: Session, user_uuid: str) -> bool:
    q = select(models.AccessToken.uuid).where(models.AccessToken.user_uuid == user_uuid)
    return session.execute(q).first() is not None

# ---------------------------
# Runners / laps
# ---------------------------

def _runner_query():
    return (
        select(models.Runner, func.count(models.Lap.id))
        .outerjoin(models.Lap, models.Lap.runner_id == models.Runner.id)
        .group_by(models.Runner.id)
        .order_by(models.Runner.number.asc())
    )

def list_runners(session: Session) -> list[RunnerRecord]:
    rows = session.execute(_runner_query()).all()
    return [RunnerRecord.from_row(runner, laps) for runner, laps in rows]

def get_runner(session: Session, number: int) -> RunnerRecord:
    row = session.execute(_runner_query().where(models.Runner.number == number)).first()
    if row is None:
        raise RunnerNotFound(number)
    runner, laps = row
    return RunnerRecord.from_row(runner, laps)

def create_runner(session: Session, payload: RunnerCreate) -> RunnerRecord:
    runner = models.Runner(
        number=payload.number,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        grade=payload.grade.strip(),
        house=payload.house.strip(),
    )
    session.add(runner)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        taken = session.execute(select(models.Runner.id).where(models.Runner.number == payload.number)).first()
        if taken is not None:
            raise DuplicateRunner(payload.number) from e
        raise
    logger.info("runner %s created", payload.number)
    return RunnerRecord.from_row(runner, 0)

def delete_runner(session: Session, number: int) -> RunnerRecord:
    runner = session.execute(select(models.Runner).where(models.Runner.number == number)).scalar_one_or_none()
    if runner is None:
        raise RunnerNotFound(number)
    record = RunnerRecord.from_row(runner, len(runner.laps))
    # laps go with the runner (delete-orphan cascade)
    session.delete(runner)
    session.commit()
    logger.info("runner %s deleted", number)
    return record

def add_lap(session: Session, number: int) -> RunnerRecord:
    runner = session.execute(select(models.Runner).where(models.Runner.number == number)).scalar_one_or_none()
    if runner is None:
        raise RunnerNotFound(number)
    session.add(models.Lap(runner_id=runner.id))
    session.commit()
    return get_runner(session, number)

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from . import services
from .auth import staff_required, superadmin_required
from .db import get_session
from .errors import APIError, MSG_ACCESS_TOKEN_EXISTS, MSG_RUNNER_EXISTS, MSG_RUNNER_NOT_FOUND
from .schemas import RunnerCreate
from .security import SessionToken

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------------------------
# Access tokens
# ---------------------------

@router.post("/accessTokens/create")
def create_access_token(
    token: SessionToken = Depends(superadmin_required),
    session: Session = Depends(get_session),
):
    # No fields required in the body. Expiry is not accepted yet.
    user = services.get_user_by_email(session, token.email)
    if not user:
        raise HTTPException(status_code=403, detail="Unknown user")
    try:
        data = services.create_access_token(session, user)
    except services.DuplicateAccessToken:
        raise APIError(400, MSG_ACCESS_TOKEN_EXISTS)
    return {"data": data}

# ---------------------------
# Runners
# ---------------------------

@router.get("/runners", dependencies=[Depends(staff_required)])
def list_runners(session: Session = Depends(get_session)):
    return {"data": [r.to_json() for r in services.list_runners(session)]}

@router.post("/runners", dependencies=[Depends(staff_required)])
def create_runner(payload: RunnerCreate, session: Session = Depends(get_session)):
    try:
        runner = services.create_runner(session, payload)
    except services.DuplicateRunner:
        raise APIError(400, MSG_RUNNER_EXISTS)
    return {"data": runner.to_json()}

@router.get("/runners/{number}", dependencies=[Depends(staff_required)])
def get_runner(number: int, session: Session = Depends(get_session)):
    try:
        runner = services.get_runner(session, number)
    except services.RunnerNotFound:
        raise APIError(404, MSG_RUNNER_NOT_FOUND)
    return {"data": runner.to_json()}

@router.delete("/runners/{number}")
def delete_runner(
    number: int,
    token: SessionToken = Depends(staff_required),
    session: Session = Depends(get_session),
):
    try:
        runner = services.delete_runner(session, number)
    except services.RunnerNotFound:
        raise APIError(404, MSG_RUNNER_NOT_FOUND)
    logger.info("%s deleted runner %s", token.email, number)
    return {"data": runner.to_json()}

@router.post("/runners/{number}/laps", dependencies=[Depends(staff_required)])
def add_lap(number: int, session: Session = Depends(get_session)):
    try:
        runner = services.add_lap(session, number)
    except services.RunnerNotFound:
        raise APIError(404, MSG_RUNNER_NOT_FOUND)
    return {"data": runner.to_json()}

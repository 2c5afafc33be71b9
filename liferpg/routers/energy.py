"""
Energy router.

GET  /energy              — Today's energy (created on first read)
POST /energy              — Morning input (sleep / physical / mental)
POST /energy/spend        — Spend EP
POST /energy/recover      — Recover EP from the catalog
GET  /energy/history      — Last N days with stats
GET  /energy/recoveries   — Recovery catalog with today's usage
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from liferpg.db.base import get_db
from liferpg.models.energy import EnergyLog
from liferpg.models.user import User
from liferpg.routers.deps import get_current_user
from liferpg.schemas.common import ErrorResponse
from liferpg.schemas.energy import (
    EnergyChangeResponse,
    EnergyHistoryResponse,
    EnergyRecoveryResponse,
    EnergyResponse,
    MorningRequest,
    RecoverRequest,
    RecoveryOptionResponse,
    SpendRequest,
)
from liferpg.services import energy_log as svc
from liferpg.services.energy import EventKind, energy_status
from liferpg.services.users import today_for

router = APIRouter(prefix="/energy", tags=["energy"])


def _log_to_response(log: EnergyLog) -> EnergyResponse:
    return EnergyResponse(
        day=log.day,
        sleep_score=log.sleep_score,
        physical_score=log.physical_score,
        mental_score=log.mental_score,
        base_energy=log.base_energy,
        streak_bonus=log.streak_bonus,
        current_energy=log.current_energy,
        spent_total=log.spent_total,
        recovered_total=log.recovered_total,
        is_burnout=log.is_burnout,
        morning_done=log.morning_done,
        status=energy_status(log.current_energy, log.base_energy),
        recoveries=[
            EnergyRecoveryResponse(recovery_type=ev.recovery_type, applied=ev.applied)
            for ev in log.events
            if ev.kind == EventKind.RECOVER
        ],
    )


@router.get("", response_model=EnergyResponse, summary="Today's energy")
def read_today(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    The day starts at 100 EP. Burnout (three or more earlier days in a row
    that ended in overdraft) is decided when the day is first read and then
    kept for the rest of it.
    """
    return _log_to_response(svc.get_today(db, user, today_for(user)))


@router.post(
    "",
    response_model=EnergyResponse,
    summary="Submit morning input",
    responses={422: {"model": ErrorResponse, "description": "Score outside 0-100."}},
)
def morning(payload: MorningRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    base = round(sleep×0.4 + physical×0.3 + mental×0.3), halved under burnout,
    plus up to +15 streak bonus. Spending and recovery already recorded today
    are kept.
    """
    log = svc.submit_morning(
        db, user, today_for(user),
        sleep_score=payload.sleep_score,
        physical_score=payload.physical_score,
        mental_score=payload.mental_score,
    )
    return _log_to_response(log)


@router.post(
    "/spend",
    response_model=EnergyChangeResponse,
    summary="Spend energy",
    responses={422: {"model": ErrorResponse, "description": "No cost given, or amount not positive."}},
)
def spend(payload: SpendRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Costs 1.5× while already in overdraft; the balance never goes below -20.
    `applied` is what was actually deducted.
    """
    cost = svc.resolve_cost(
        amount=payload.amount,
        difficulty=payload.difficulty,
        importance=payload.importance,
        discomfort=payload.discomfort,
        urgency=payload.urgency,
    )
    change = svc.spend_energy(db, user, today_for(user), cost)
    return EnergyChangeResponse(energy=_log_to_response(change.log), applied=change.applied)


@router.post(
    "/recover",
    response_model=EnergyChangeResponse,
    summary="Recover energy",
    responses={
        409: {"model": ErrorResponse, "description": "Daily limit for this recovery type reached."},
        422: {"model": ErrorResponse, "description": "Unknown recovery type."},
    },
)
def recover(payload: RecoverRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Capped at 100 EP; `applied` is what was actually restored."""
    change = svc.recover_energy(db, user, today_for(user), payload.type)
    return EnergyChangeResponse(energy=_log_to_response(change.log), applied=change.applied)


@router.get("/history", response_model=EnergyHistoryResponse, summary="Energy history")
def history(
    range_days: int = Query(default=7, ge=1, le=90, alias="range", description="Days including today."),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return svc.get_history(db, user, today_for(user), range_days=range_days)


@router.get("/recoveries", response_model=list[RecoveryOptionResponse], summary="Recovery catalog")
def recoveries(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return svc.recovery_catalog(db, user, today_for(user))

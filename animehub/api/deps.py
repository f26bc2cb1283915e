from collections.abc import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from animehub.db.session import get_db
from animehub.db.unit_of_work import UnitOfWork


def db_session() -> Generator[Session, None, None]:
    yield from get_db()


def unit_of_work(db: Session = Depends(db_session)) -> UnitOfWork:
    return UnitOfWork(db)


def requester_is_adult(x_requester_adult: bool = Header(default=False)) -> bool:
    """Adult flag forwarded by the upstream auth layer."""
    return x_requester_adult


UnitOfWorkDep = Depends(unit_of_work)
RequesterAdultDep = Depends(requester_is_adult)

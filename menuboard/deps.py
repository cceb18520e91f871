from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from sqlalchemy import select
from sqlalchemy.orm import Session
from menuboard.config import settings
from menuboard.db import get_db
from menuboard.models.core import User, UserRole, AppRole
from menuboard.services.clock import Clock, SystemClock
from menuboard.services.store import Store
from menuboard.util.security import decode_token

auth_scheme = HTTPBearer(auto_error=False)

_clock = SystemClock(settings.TZ)

def get_clock() -> Clock:
    return _clock

def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)

def require_auth(
    creds: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    db: Session = Depends(get_db),
) -> str:
    if not creds:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Não autorizado")
    try:
        sub = decode_token(creds.credentials)
    except (jwt.PyJWTError, KeyError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Não autorizado")
    user = db.get(User, sub)
    if not user or not user.active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Não autorizado")
    return sub

def is_admin(db: Session, user_id: str) -> bool:
    row = db.scalars(
        select(UserRole).where(UserRole.user_id == user_id, UserRole.role == AppRole.ADMIN)
    ).first()
    return row is not None

def require_admin(sub: str = Depends(require_auth), db: Session = Depends(get_db)) -> str:
    if not is_admin(db, sub):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso negado.")
    return sub

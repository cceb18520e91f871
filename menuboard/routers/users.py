# menuboard/routers/users.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from menuboard.db import get_db
from menuboard.deps import require_admin
from menuboard.util.security import hash_pw
from menuboard.models.core import AppRole, User, UserRole

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger("menuboard.users")

ROLES = {r.value for r in AppRole}


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(400, detail="Corpo da requisição inválido")
    if not isinstance(body, dict):
        raise HTTPException(400, detail="Corpo da requisição inválido")
    return body


def create_user_account(db: Session, email: str, password: str, role: AppRole = AppRole.USER) -> User:
    """Insert a user plus its role row; new accounts default to the plain user role."""
    u = User(email=email, pass_hash=hash_pw(password))
    db.add(u)
    db.flush()
    db.add(UserRole(user_id=u.id, role=role))
    db.commit()
    db.refresh(u)
    return u


# ── Users ───────────────────────────────────────────────────────────────────

@router.post("")
async def create_user(request: Request, db: Session = Depends(get_db), sub: str = Depends(require_admin)):
    """
    body: {email, password, role?: "admin" | "user"}
    """
    body = await _json_body(request)
    email = (body.get("email") or "").strip().lower()
    password = body.get("password") or ""
    if not email or not password:
        raise HTTPException(400, detail="E-mail e senha são obrigatórios")
    role = body.get("role") or AppRole.USER.value
    if role not in ROLES:
        raise HTTPException(400, detail=f"Função inválida: {role}")
    if db.scalars(select(User).where(User.email == email)).first():
        raise HTTPException(400, detail="E-mail já cadastrado")

    try:
        u = create_user_account(db, email, password, AppRole(role))
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("create user failed: %s", e)
        raise HTTPException(400, detail="Não foi possível criar o usuário")
    logger.info("user %s created by %s with role %s", u.id, sub, role)
    return {"user": {"id": u.id, "email": u.email, "created_at": u.created_at.isoformat(), "role": role}}


@router.get("", summary="List users with their role")
def list_users(db: Session = Depends(get_db), sub: str = Depends(require_admin)):
    users = db.scalars(select(User).order_by(User.created_at.asc())).all()
    roles = {r.user_id: r.role.value for r in db.scalars(select(UserRole)).all()}
    return {
        "users": [
            {
                "id": u.id,
                "email": u.email,
                "created_at": u.created_at.isoformat(),
                "role": roles.get(u.id, AppRole.USER.value),
            }
            for u in users
        ]
    }


@router.post("/role", summary="Change another user's role")
async def update_role(request: Request, db: Session = Depends(get_db), sub: str = Depends(require_admin)):
    """
    body: {user_id, role}
    """
    body = await _json_body(request)
    user_id, role = body.get("user_id"), body.get("role")
    if not user_id or not role:
        raise HTTPException(400, detail="user_id e role são obrigatórios")
    if role not in ROLES:
        raise HTTPException(400, detail=f"Função inválida: {role}")
    if user_id == sub:
        raise HTTPException(400, detail="Você não pode alterar sua própria função.")
    if not db.get(User, user_id):
        raise HTTPException(400, detail="Usuário não encontrado")

    row = db.get(UserRole, user_id)
    if row is None:
        db.add(UserRole(user_id=user_id, role=AppRole(role)))
    else:
        row.role = AppRole(role)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("role update failed: %s", e)
        raise HTTPException(400, detail="Não foi possível atualizar a função")
    return {"success": True}

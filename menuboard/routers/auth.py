from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session
from menuboard.schemas.common import LoginIn, Token
from menuboard.util.security import create_token, verify_pw
from menuboard.models.core import User
from menuboard.db import get_db

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=Token)
def login(body: LoginIn, db: Session = Depends(get_db)):
    user = db.scalars(select(User).where(User.email == body.email.strip().lower())).first()
    if not user or not user.active or not verify_pw(user.pass_hash, body.password):
        raise HTTPException(status_code=401, detail="Credenciais inválidas")
    return Token(access_token=create_token(user.id))

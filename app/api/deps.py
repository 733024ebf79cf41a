from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.db.models.user import User
from app.db.session import SessionLocal


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(x_user_id: str | None = Header(default=None), db: Session=Depends(get_db)) -> User:
    # session handling lives upstream; it hands us the caller's id in a header
    if not x_user_id:
        raise HTTPException(status_code=401, detail="unauthorized")

    user = db.get(User, x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="unauthorized")
    return user

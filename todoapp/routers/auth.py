from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

import todoapp.config as config
from todoapp.database import get_db
from todoapp.models.user import User
from todoapp.schemas.user import UserCreate, UserLogin, UserOut
from todoapp.utils.auth import create_token, hash_password, require_principal, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserOut, status_code=201)
def register(user: UserCreate, db: Session = Depends(get_db)):
    exists = db.query(User).filter(User.email == user.email).first()
    if exists:
        raise HTTPException(status_code=400, detail="Email already exists")

    try:
        hashed = hash_password(user.password)
    except ValueError as e:
        # map hashing/validation errors to a 400 so client gets a clear message
        raise HTTPException(status_code=400, detail=str(e))

    new_user = User(email=user.email, password=hashed, name=user.name)
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user


@router.post("/login")
def login(user: UserLogin, response: Response, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == user.email).first()
    if not db_user or not verify_password(user.password, db_user.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_token(db_user.id)
    response.set_cookie(
        config.SESSION_COOKIE_NAME,
        token,
        httponly=True,
        samesite="lax",
        max_age=int(config.ACCESS_TOKEN_EXPIRE_MINUTES * 60),
    )
    return {"token": token}


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(config.SESSION_COOKIE_NAME)
    return {"detail": "signed out"}


@router.get("/session")
def session(db: Session = Depends(get_db), principal: str = Depends(require_principal)):
    user = db.get(User, principal)
    return {"user": UserOut.model_validate(user).model_dump()}


@router.get("/providers")
def providers():
    return {"emailAndPassword": True, "social": sorted(config.SOCIAL_PROVIDERS)}

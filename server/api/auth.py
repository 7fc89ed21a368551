# server/api/auth.py

import logging
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from pydantic import BaseModel
from passlib.context import CryptContext
from fastapi import APIRouter, HTTPException, status, Depends
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from core import config
from core.crud import UniqueViolation, create_user, get_user_by_email
from database import get_db


logger = logging.getLogger(__name__)

router = APIRouter()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=config.BCRYPT_ROUNDS,
)


class RegisterRequest(BaseModel):
    email: str
    password: str
    username: str


class LoginRequest(BaseModel):
    email: str
    password: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(subject: int | str, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    # JWT requires `sub` to be a string
    to_encode = {"sub": str(subject), "exp": expire}
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


@router.post("/register")
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    hashed = get_password_hash(req.password)
    try:
        user = create_user(db, email=req.email, username=req.username, password_hash=hashed)
    except UniqueViolation:
        logger.warning("Registration rejected, email already in use")
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"message": "Email already exists"})
    except Exception:
        logger.exception("Registration failed")
        return JSONResponse(status_code=500, content={"message": "Internal Server Error"})

    logger.info("Registered user %s", user.id)
    return {"message": f"{user.email} created successfully"}


@router.post("/login")
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = get_user_by_email(db, req.email)
    if not user:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "User not found"})

    if not verify_password(req.password, user.password):
        logger.warning("Invalid credentials for user %s", user.id)
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"message": "Invalid credentials"})

    token = create_access_token(user.id)
    logger.info("User %s logged in", user.id)
    return {"message": "Login successful", "token": token}


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login")

def get_current_user_id(token: str = Depends(oauth2_scheme)) -> int:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(
            token,
            config.SECRET_KEY,
            algorithms=[config.ALGORITHM],
            options={"require_exp": True, "require_sub": True},
        )
        subject = payload.get("sub")
        if subject is None:
            raise credentials_exception
        return int(subject)
    except (JWTError, ValueError) as e:
        logger.warning("Rejected bearer token: %s", e)
        raise credentials_exception

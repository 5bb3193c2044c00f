from fastapi import APIRouter, HTTPException, Depends, Request, status
from psycopg2.errors import UniqueViolation
from services import storage
from services.rate_limiter import limiter, REGISTER_LIMIT, LOGIN_LIMIT
from models.auth import UserCreate, UserLogin
from auth.utils import hash_password, verify_password, create_access_token
from auth.dependencies import get_current_user
from core.logger import setup_logger

router = APIRouter(prefix="/api/auth", tags=["Authentication"])
logger = setup_logger("routers.auth")


def _public_user(user: dict) -> dict:
    return {
        "id": user['id'],
        "username": user['username'],
        "email": user['email'],
        "name": user['name'],
        "major": user.get('major'),
        "university": user.get('university'),
        "target_position": user.get('target_position')
    }


@router.post("/register", response_model=dict)
@limiter.limit(REGISTER_LIMIT)
async def register(request: Request, user: UserCreate):
    """Register a new user"""
    try:
        if storage.get_user_by_email(user.email):
            raise HTTPException(status_code=400, detail="Email already registered")

        new_user = storage.create_user(
            username=user.username,
            name=user.name,
            email=user.email,
            password_hash=hash_password(user.password),
            major=user.major,
            university=user.university,
            target_position=user.target_position
        )

        logger.info(f"Registered user {new_user['id']}")
        return {
            "message": "User registered successfully",
            "access_token": create_access_token(new_user['id'], new_user['email']),
            "token_type": "bearer",
            "user": _public_user(new_user)
        }

    except HTTPException:
        raise
    except UniqueViolation:
        # lost a race with a concurrent registration, or the username is taken
        raise HTTPException(status_code=400, detail="Email or username already registered")
    except Exception as e:
        logger.exception("Registration failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/login", response_model=dict)
@limiter.limit(LOGIN_LIMIT)
async def login(request: Request, credentials: UserLogin):
    """Login and get access token"""
    try:
        user = storage.get_user_by_email(credentials.email)

        if not user or not verify_password(credentials.password, user['password']):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
            )

        storage.record_login(user['id'])

        return {
            "access_token": create_access_token(user['id'], user['email']),
            "token_type": "bearer",
            "user": _public_user(user)
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Login failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/me", response_model=dict)
async def get_me(current_user: dict = Depends(get_current_user)):
    """Get current user info"""
    return _public_user(current_user)

# routers/auth.py — Registration and login
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from auth import UserRegister, UserLogin
from database import get_db_session
from schemas import TokenResponse, UserOut
from services.users import UserService

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(db)


@router.post("/register", response_model=UserOut, status_code=201)
async def register(
    user_data: UserRegister,
    service: UserService = Depends(get_user_service),
):
    """Register a new user account"""
    return await service.register(user_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    service: UserService = Depends(get_user_service),
):
    """Authenticate and receive a bearer token"""
    token = await service.authenticate(credentials.email, credentials.password)
    if token is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return token

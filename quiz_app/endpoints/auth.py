# Fixed-credential login gate in front of the quiz selection
# quiz_app/endpoints/auth.py
from fastapi import APIRouter
from pydantic import BaseModel

from quiz_app.utils.config import settings
from quiz_app.utils.logger import logger

router = APIRouter()

class LoginRequest(BaseModel):
    username: str
    password: str

class LoginResponse(BaseModel):
    success: bool
    message: str

@router.post("/", response_model=LoginResponse)
async def login(request: LoginRequest):
    if request.username == settings.login_username and request.password == settings.login_password:
        logger.info(f"Login successful for '{request.username}'.")
        return LoginResponse(success=True, message="Login successful!")
    logger.info(f"Rejected login attempt for '{request.username}'.")
    return LoginResponse(success=False, message="Invalid username or password.")

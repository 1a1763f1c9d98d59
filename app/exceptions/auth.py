# app/exceptions/auth.py
from fastapi import HTTPException, status

class AuthenticationError(HTTPException):
    """Missing or unknown access token"""
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail
        )

class UserAlreadyExistsError(HTTPException):
    """User already exists"""
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists"
        )

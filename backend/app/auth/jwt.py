"""
Gestion des tokens JWT pour l'authentification
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any
from jose import JWTError, jwt
from fastapi import HTTPException, status
from pydantic import BaseModel

from app.core.clock import utc_now
from app.core.settings import get_settings

settings = get_settings()


class TokenData(BaseModel):
    """Données contenues dans un token"""
    user_id: str
    email: str
    exp: datetime


class JWTManager:
    """Gestionnaire des tokens JWT"""

    def __init__(self):
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.access_token_expire_minutes = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

    def create_access_token(self, data: Dict[str, Any]) -> str:
        """Crée un access token JWT"""
        to_encode = data.copy()
        expire = utc_now() + timedelta(minutes=self.access_token_expire_minutes)
        to_encode.update({"exp": expire, "type": "access"})

        encoded_jwt = jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)
        return encoded_jwt

    def create_user_token(self, user_id: str, email: str) -> str:
        """Crée un access token pour un utilisateur"""
        return self.create_access_token({"sub": str(user_id), "email": email})

    def verify_token(self, token: str, token_type: str = "access") -> TokenData:
        """Vérifie et décode un token JWT"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])

            # Vérifier le type de token
            if payload.get("type") != token_type:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail=f"Invalid token type. Expected {token_type}"
                )

            user_id: str = payload.get("sub")
            email: str = payload.get("email")
            exp: datetime = datetime.fromtimestamp(payload.get("exp"), tz=timezone.utc)

            if user_id is None or email is None:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid token payload"
                )

            return TokenData(user_id=user_id, email=email, exp=exp)

        except JWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not validate credentials"
            )


# Instance globale
jwt_manager = JWTManager()


def get_current_user_id(token: str) -> str:
    """Extrait l'ID utilisateur du token (pour dependency injection)"""
    token_data = jwt_manager.verify_token(token)
    return token_data.user_id

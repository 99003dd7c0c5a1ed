import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from axii.core.config import settings
from axii.db.repositories.user import get_user_by_id
from axii.db.session import get_db

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Sem auto_error para devolver sempre 401 (o cliente limpa o token e volta ao login)
bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Gera um JWT com os claims recebidos; `sub` deve ser o id do usuário."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> dict:
    """Dependência FastAPI: valida o Bearer token e devolve o payload."""
    if credentials is None:
        raise _unauthorized("Token não informado")
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise _unauthorized("Token inválido ou expirado")
    if not payload.get("sub"):
        raise _unauthorized("Token inválido ou expirado")
    return payload


async def get_current_user(
    token: dict = Depends(decode_access_token),
    db: AsyncSession = Depends(get_db)
):
    try:
        user_id = int(token["sub"])
    except (TypeError, ValueError):
        raise _unauthorized("Token inválido ou expirado")

    user = await get_user_by_id(db, user_id)
    if not user:
        logger.info("Token válido para usuário inexistente ou inativo: %s", user_id)
        raise _unauthorized("Usuário não encontrado ou inativo")
    return user

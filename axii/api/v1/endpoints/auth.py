import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from axii.core.security import create_access_token, verify_password, get_password_hash
from axii.core.validation import ValidationFailed, validate_registration
from axii.db.repositories.user import get_user_by_email, create_user, update_last_login
from axii.schemas.user import AuthResponse, UserAuth, UserCreate, UserRead
from axii.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, db: AsyncSession = Depends(get_db)):
    """
    Cadastro de usuário.
    - **name**: Nome (mínimo 3 caracteres)
    - **email**: E-mail
    - **password**: Senha (mínimo 6 caracteres)
    - **confirm_password**: Confirmação, opcional
    - **Retorna**: token JWT e dados do usuário
    """
    try:
        validate_registration(user.name, user.email, user.password, user.confirm_password)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    try:
        new_user = await create_user(db, {
            "name": user.name,
            "email": user.email,
            "hashed_password": get_password_hash(user.password),
        })
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info("Novo usuário cadastrado: id=%s", new_user.id)
    access_token = create_access_token({"sub": str(new_user.id)})
    return {
        "message": "Cadastro realizado com sucesso!",
        "token": access_token,
        "user": UserRead.model_validate(new_user),
    }

@router.post("/login", response_model=AuthResponse)
async def login(user: UserAuth, db: AsyncSession = Depends(get_db)):
    """
    Autenticação por e-mail e senha.
    - **email**: E-mail
    - **password**: Senha
    - **Retorna**: token JWT se as credenciais estiverem corretas
    """
    if not user.email or not user.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Preencha todos os campos")

    existing_user = await get_user_by_email(db, user.email)

    if not existing_user or not verify_password(user.password, existing_user.hashed_password):
        logger.info("Falha de login para %s", user.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="E-mail ou senha incorretos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    await update_last_login(db, existing_user)

    access_token = create_access_token({"sub": str(existing_user.id)})
    return {
        "message": "Login realizado com sucesso!",
        "token": access_token,
        "user": UserRead.model_validate(existing_user),
    }

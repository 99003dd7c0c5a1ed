import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from axii.core.security import get_current_user, get_password_hash, verify_password
from axii.core.validation import (
    ValidationFailed,
    password_strength,
    validate_password_change,
    validate_profile,
)
from axii.db.models.user import User
from axii.db.repositories.device import delete_all_devices
from axii.db.repositories.user import (
    deactivate_user,
    get_preferences,
    update_password,
    update_preferences,
    update_profile,
)
from axii.db.session import get_db
from axii.schemas.user import (
    AccountDelete,
    MessageResponse,
    PasswordCheck,
    PasswordStrengthResponse,
    PasswordUpdate,
    Preferences,
    PreferencesResponse,
    PreferencesUpdate,
    ProfileUpdate,
    UserRead,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

DELETE_ACCOUNT_CONFIRMATION = "EXCLUIR CONTA"

@router.get("/me", response_model=UserResponse)
async def get_profile(user: User = Depends(get_current_user)):
    return {"user": UserRead.model_validate(user)}

@router.put("/me", response_model=UserResponse)
async def edit_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        validate_profile(data.name, data.email)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    try:
        user = await update_profile(db, user, data.name, data.email, data.photo)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info("Perfil do usuário %s atualizado", user.id)
    return {"message": "Perfil atualizado com sucesso!", "user": UserRead.model_validate(user)}

@router.put("/me/password", response_model=MessageResponse)
async def change_password(
    data: PasswordUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        validate_password_change(data.current_password, data.new_password, data.confirm_password)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    if not verify_password(data.current_password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Senha atual incorreta")

    await update_password(db, user, get_password_hash(data.new_password))
    logger.info("Senha do usuário %s alterada", user.id)
    return {"message": "Senha alterada com sucesso!"}

@router.post("/validate-password", response_model=PasswordStrengthResponse)
async def validate_password(data: PasswordCheck):
    """Medidor de força de senha; não exige login (usado também no cadastro)."""
    return {"strength": password_strength(data.password)}

@router.get("/me/preferences", response_model=PreferencesResponse)
async def read_preferences(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    preferences = await get_preferences(db, user)
    return {"preferences": Preferences.model_validate(preferences)}

@router.put("/me/preferences", response_model=PreferencesResponse)
async def edit_preferences(
    data: PreferencesUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    preferences = await update_preferences(db, user, data.model_dump(exclude_unset=True))
    return {"message": "Preferência atualizada com sucesso!", "preferences": Preferences.model_validate(preferences)}

@router.delete("/me", response_model=MessageResponse)
async def delete_account(
    data: AccountDelete,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    if data.confirmation != DELETE_ACCOUNT_CONFIRMATION:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Operação cancelada.")

    removed = await delete_all_devices(db, user.id)
    await deactivate_user(db, user)
    logger.warning("Conta %s desativada (%d dispositivo(s) removido(s))", user.id, removed)
    return {"message": "Conta excluída com sucesso!"}

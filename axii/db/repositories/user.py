from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from axii.db.models.user import User
from axii.db.models.device import Device  # noqa: F401  (registra o mapeamento de User.devices)
from axii.db.models.preferences import UserPreferences

PREFERENCE_FIELDS = (
    "dark_mode",
    "email_notifications",
    "device_alerts",
    "schedule_reminders",
    "system_updates",
    "public_profile",
    "show_online_status",
    "share_activity",
)

async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Busca um usuário ativo pelo e-mail (usado no login)."""
    result = await db.execute(
        select(User).filter(User.email == email.strip().lower(), User.is_active == True).limit(1)
    )
    return result.scalars().first()

async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(
        select(User).filter(User.id == user_id, User.is_active == True).limit(1)
    )
    return result.scalars().first()

async def email_in_use(db: AsyncSession, email: str, exclude_user_id: int | None = None) -> bool:
    # Contas desativadas continuam reservando o e-mail (a coluna é única)
    query = select(User.id).filter(User.email == email.strip().lower())
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    result = await db.execute(query)
    return result.first() is not None

async def create_user(db: AsyncSession, user_data: dict) -> User:
    email = user_data["email"].strip().lower()
    if await email_in_use(db, email):
        raise ValueError("E-mail já cadastrado")

    user = User(**{**user_data, "email": email, "name": user_data["name"].strip()})
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user

async def update_last_login(db: AsyncSession, user: User) -> None:
    user.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(user)

async def update_profile(db: AsyncSession, user: User, name: str, email: str, photo: str | None = None) -> User:
    email = email.strip().lower()
    if await email_in_use(db, email, exclude_user_id=user.id):
        raise ValueError("Este e-mail já está em uso por outra conta")

    user.name = name.strip()
    user.email = email
    if photo is not None:
        user.photo = photo.strip() or None
    user.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(user)
    return user

async def update_password(db: AsyncSession, user: User, hashed_password: str) -> None:
    user.hashed_password = hashed_password
    user.updated_at = datetime.utcnow()
    await db.commit()

async def deactivate_user(db: AsyncSession, user: User) -> None:
    """Exclusão lógica: a conta deixa de aparecer nas buscas e o token perde validade."""
    user.is_active = False
    user.updated_at = datetime.utcnow()
    await db.commit()

async def get_preferences(db: AsyncSession, user: User) -> UserPreferences:
    """Devolve as preferências do usuário, criando a linha com os padrões na primeira vez."""
    result = await db.execute(select(UserPreferences).filter(UserPreferences.user_id == user.id))
    preferences = result.scalars().first()
    if preferences is None:
        preferences = UserPreferences(
            user_id=user.id,
            dark_mode=False,
            email_notifications=True,
            device_alerts=True,
            schedule_reminders=True,
            system_updates=False,
            public_profile=True,
            show_online_status=False,
            share_activity=False,
        )
        db.add(preferences)
        await db.commit()
        await db.refresh(preferences)
    return preferences

async def update_preferences(db: AsyncSession, user: User, changes: dict) -> UserPreferences:
    preferences = await get_preferences(db, user)
    for field, value in changes.items():
        if field in PREFERENCE_FIELDS and value is not None:
            setattr(preferences, field, value)
    await db.commit()
    await db.refresh(preferences)
    return preferences

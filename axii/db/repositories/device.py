from datetime import datetime
from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from axii.core.config import settings
from axii.db.models.device import Device
from axii.db.models.user import User  # noqa: F401  (registra o mapeamento de Device.owner)
from axii.db.models.preferences import UserPreferences  # noqa: F401

EDITABLE_FIELDS = ("name", "ip", "type", "room", "description", "status")

async def list_devices(
    db: AsyncSession,
    owner_id: int,
    type: str | None = None,
    room: str | None = None,
    status: str | None = None,
) -> list[Device]:
    query = select(Device).filter(Device.owner_id == owner_id)
    if type:
        query = query.filter(Device.type == type)
    if room:
        query = query.filter(Device.room == room)
    if status:
        query = query.filter(Device.status == status)

    result = await db.execute(query.order_by(Device.id))
    return list(result.scalars().all())

async def get_device(db: AsyncSession, owner_id: int, device_id: int) -> Device | None:
    result = await db.execute(
        select(Device).filter(Device.id == device_id, Device.owner_id == owner_id)
    )
    return result.scalars().first()

async def ip_in_use(db: AsyncSession, owner_id: int, ip: str, exclude_device_id: int | None = None) -> bool:
    query = select(Device.id).filter(Device.owner_id == owner_id, Device.ip == ip)
    if exclude_device_id is not None:
        query = query.filter(Device.id != exclude_device_id)
    result = await db.execute(query)
    return result.first() is not None

async def create_device(db: AsyncSession, owner_id: int, device_data: dict) -> Device:
    if await ip_in_use(db, owner_id, device_data["ip"]):
        raise ValueError("Já existe um dispositivo com este IP")

    device = Device(
        owner_id=owner_id,
        name=device_data["name"].strip(),
        ip=device_data["ip"],
        type=device_data["type"],
        room=(device_data.get("room") or "").strip() or settings.DEFAULT_ROOM,
        description=device_data.get("description") or "",
        status="offline",  # Ainda não enviou heartbeat
        is_active=True,
        last_seen=datetime.utcnow(),
    )
    db.add(device)
    await db.commit()
    await db.refresh(device)
    return device

async def update_device(db: AsyncSession, device: Device, changes: dict) -> Device:
    ip = changes.get("ip")
    if ip and ip != device.ip and await ip_in_use(db, device.owner_id, ip, exclude_device_id=device.id):
        raise ValueError("Já existe um dispositivo com este IP")

    for field, value in changes.items():
        if field not in EDITABLE_FIELDS or value is None:
            continue
        if field == "room":
            value = value.strip() or settings.DEFAULT_ROOM
        setattr(device, field, value)

    await db.commit()
    await db.refresh(device)
    return device

async def toggle_device(db: AsyncSession, device: Device) -> Device:
    device.is_active = not device.is_active
    await db.commit()
    await db.refresh(device)
    return device

async def set_active_many(db: AsyncSession, devices: list[Device], is_active: bool) -> None:
    for device in devices:
        device.is_active = is_active
    await db.commit()

async def set_status(db: AsyncSession, device: Device, status: str) -> Device:
    device.status = status
    await db.commit()
    await db.refresh(device)
    return device

async def record_heartbeat(db: AsyncSession, device: Device) -> Device:
    device.last_seen = datetime.utcnow()
    # Em manutenção o status só muda manualmente
    if device.status != "manutencao":
        device.status = "online"
    await db.commit()
    await db.refresh(device)
    return device

async def delete_device(db: AsyncSession, device: Device) -> None:
    await db.delete(device)
    await db.commit()

async def delete_all_devices(db: AsyncSession, owner_id: int) -> int:
    result = await db.execute(delete(Device).where(Device.owner_id == owner_id))
    await db.commit()
    return result.rowcount or 0

async def mark_stale_devices_offline(db: AsyncSession, older_than: datetime) -> int:
    """Dispositivos online sem heartbeat desde `older_than` passam para offline."""
    result = await db.execute(
        update(Device)
        .where(Device.status == "online")
        .where(Device.last_seen < older_than)
        .values(status="offline")
    )
    await db.commit()
    return result.rowcount or 0

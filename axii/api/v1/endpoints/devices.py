import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from axii.core.security import get_current_user
from axii.db.models.user import User
from axii.db.repositories import device as device_repo
from axii.db.session import get_db
from axii.schemas.device import (
    DeviceCreate,
    DeviceListResponse,
    DeviceRead,
    DeviceResponse,
    DeviceStatus,
    DeviceStatsResponse,
    DeviceStatusUpdate,
    DeviceType,
    DeviceUpdate,
    RoomDetailResponse,
    RoomListResponse,
)
from axii.schemas.user import MessageResponse
from axii.services import dashboard

logger = logging.getLogger(__name__)

router = APIRouter()

# Maior INTEGER aceito pelo SQLite
MAX_DEVICE_ID = 2**63 - 1


async def _get_owned_device(db: AsyncSession, user: User, device_id: int):
    device = await device_repo.get_device(db, user.id, device_id)
    if not device:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Dispositivo não encontrado")
    return device


@router.get("", response_model=DeviceListResponse)
async def list_devices(
    type_: Optional[DeviceType] = Query(None, alias="type"),
    room: Optional[str] = None,
    status_: Optional[DeviceStatus] = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    devices = await device_repo.list_devices(
        db,
        user.id,
        type=type_.value if type_ else None,
        room=room,
        status=status_.value if status_ else None,
    )
    return {"devices": [DeviceRead.from_device(d) for d in devices]}


@router.post("", response_model=DeviceResponse, status_code=status.HTTP_201_CREATED)
async def create_device(
    data: DeviceCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    if not data.name.strip() or not data.ip or not data.type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Por favor, preencha os campos obrigatórios (Nome, IP, Tipo)."
        )

    try:
        device = await device_repo.create_device(db, user.id, {
            "name": data.name,
            "ip": data.ip,
            "type": data.type.value,
            "room": data.room,
            "description": data.description,
        })
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info("Dispositivo %s criado por usuário %s", device.id, user.id)
    return {"message": "Dispositivo adicionado com sucesso!", "device": DeviceRead.from_device(device)}


@router.delete("", response_model=MessageResponse)
async def clear_devices(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Zona de perigo: remove todos os dispositivos do usuário."""
    removed = await device_repo.delete_all_devices(db, user.id)
    logger.warning("Usuário %s removeu todos os seus dispositivos (%d)", user.id, removed)
    return {"message": f"{removed} dispositivo(s) removido(s)"}


@router.get("/stats", response_model=DeviceStatsResponse)
async def device_stats(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    devices = await device_repo.list_devices(db, user.id)
    return {"stats": dashboard.device_stats(devices)}


@router.get("/rooms", response_model=RoomListResponse)
async def list_rooms(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    devices = await device_repo.list_devices(db, user.id)
    return {"rooms": dashboard.room_summaries(devices)}


@router.get("/rooms/{room}", response_model=RoomDetailResponse)
async def room_detail(room: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    devices = await device_repo.list_devices(db, user.id, room=room)
    detail = dashboard.room_detail(devices, room)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sala não encontrada")

    for group in detail["groups"]:
        group["devices"] = [DeviceRead.from_device(d) for d in group["devices"]]
    return {"room": detail}


@router.post("/rooms/{room}/types/{device_type}/toggle", response_model=DeviceListResponse)
async def toggle_group(
    room: str,
    device_type: DeviceType,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Interruptor do grupo: liga ou desliga todos os dispositivos controláveis do tipo na sala."""
    devices = await device_repo.list_devices(db, user.id, type=device_type.value, room=room)
    if not devices:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Nenhum dispositivo deste tipo na sala")

    if not dashboard.controllable_devices(devices):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Todos os dispositivos estão em manutenção")

    turn_on, changed = dashboard.plan_group_toggle(devices)
    await device_repo.set_active_many(db, changed, turn_on)
    logger.info("Grupo %s/%s: %d dispositivo(s) %s", room, device_type.value, len(changed), "ligado(s)" if turn_on else "desligado(s)")
    return {
        "message": "Dispositivos ligados" if turn_on else "Dispositivos desligados",
        "devices": [DeviceRead.from_device(d) for d in devices],
    }


@router.get("/{device_id}", response_model=DeviceResponse)
async def get_device(
    device_id: int = Path(..., ge=1, le=MAX_DEVICE_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    device = await _get_owned_device(db, user, device_id)
    return {"device": DeviceRead.from_device(device)}


@router.put("/{device_id}", response_model=DeviceResponse)
async def update_device(
    data: DeviceUpdate,
    device_id: int = Path(..., ge=1, le=MAX_DEVICE_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    device = await _get_owned_device(db, user, device_id)

    changes = data.model_dump(exclude_unset=True)
    if "name" in changes and not (changes["name"] or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="O nome do dispositivo é obrigatório")
    if "ip" in changes and not changes["ip"]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="O IP do dispositivo é obrigatório")
    for key in ("type", "status"):
        if changes.get(key) is not None:
            changes[key] = changes[key].value

    try:
        device = await device_repo.update_device(db, device, changes)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info("Dispositivo %s atualizado", device.id)
    return {"message": "Dispositivo atualizado com sucesso!", "device": DeviceRead.from_device(device)}


@router.post("/{device_id}/toggle", response_model=DeviceResponse)
async def toggle_device(
    device_id: int = Path(..., ge=1, le=MAX_DEVICE_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    device = await _get_owned_device(db, user, device_id)
    device = await device_repo.toggle_device(db, device)
    return {
        "message": "Dispositivo ligado" if device.is_active else "Dispositivo desligado",
        "device": DeviceRead.from_device(device),
    }


@router.patch("/{device_id}/status", response_model=DeviceResponse)
async def update_status(
    data: DeviceStatusUpdate,
    device_id: int = Path(..., ge=1, le=MAX_DEVICE_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    device = await _get_owned_device(db, user, device_id)
    device = await device_repo.set_status(db, device, data.status.value)
    logger.info("Status do dispositivo %s alterado para %s", device.id, device.status)
    return {"message": "Status atualizado", "device": DeviceRead.from_device(device)}


@router.post("/{device_id}/heartbeat", response_model=DeviceResponse)
async def heartbeat(
    device_id: int = Path(..., ge=1, le=MAX_DEVICE_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    device = await _get_owned_device(db, user, device_id)
    device = await device_repo.record_heartbeat(db, device)
    return {"device": DeviceRead.from_device(device)}


@router.delete("/{device_id}", response_model=MessageResponse)
async def delete_device(
    device_id: int = Path(..., ge=1, le=MAX_DEVICE_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    device = await _get_owned_device(db, user, device_id)
    await device_repo.delete_device(db, device)
    logger.info("Dispositivo %s removido por usuário %s", device_id, user.id)
    return {"message": "Dispositivo excluído com sucesso"}

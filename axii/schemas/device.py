import ipaddress
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, field_validator

class DeviceType(str, Enum):
    COMPUTER = "computador"
    PROJECTOR = "projetor"
    LIGHTING = "iluminacao"
    AIR_CONDITIONING = "ar_condicionado"
    OTHER = "outro"

class DeviceStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    MAINTENANCE = "manutencao"


def _check_ip(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return value
    value = value.strip()
    try:
        ipaddress.ip_address(value)
    except ValueError:
        raise ValueError("IP inválido")
    return value


class DeviceCreate(BaseModel):
    # Campos obrigatórios chegam vazios do formulário; a checagem fica no endpoint
    name: str = ""
    ip: str = ""
    type: Optional[DeviceType] = None
    room: str = ""
    description: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def blank_type_is_missing(cls, value):
        return value or None

    @field_validator("ip")
    @classmethod
    def ip_must_be_valid(cls, value):
        return _check_ip(value)

class DeviceUpdate(BaseModel):
    name: Optional[str] = None
    ip: Optional[str] = None
    type: Optional[DeviceType] = None
    room: Optional[str] = None
    description: Optional[str] = None
    status: Optional[DeviceStatus] = None

    @field_validator("ip")
    @classmethod
    def ip_must_be_valid(cls, value):
        return _check_ip(value)

class DeviceStatusUpdate(BaseModel):
    status: DeviceStatus

class DeviceRead(BaseModel):
    id: int
    name: str
    ip: str
    type: str
    room: str
    description: str
    status: str
    active: bool
    last_seen: Optional[datetime] = None

    @classmethod
    def from_device(cls, device) -> "DeviceRead":
        return cls(
            id=device.id,
            name=device.name,
            ip=device.ip,
            type=device.type,
            room=device.room,
            description=device.description or "",
            status=device.status,
            active=device.is_active,
            last_seen=device.last_seen,
        )

class DeviceResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    device: DeviceRead

class DeviceListResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    devices: list[DeviceRead]

class DeviceStats(BaseModel):
    total: int
    online: int
    offline: int
    manutencao: int

class DeviceStatsResponse(BaseModel):
    success: bool = True
    stats: DeviceStats

class RoomSummary(BaseModel):
    name: str
    devices: int
    online: int
    offline: int

class RoomListResponse(BaseModel):
    success: bool = True
    rooms: list[RoomSummary]

class TypeGroup(BaseModel):
    type: str
    devices: list[DeviceRead]
    controllable: int
    active_controllable: int
    switch_state: str  # all_on, some_on, none_on, disabled

class RoomDetail(BaseModel):
    name: str
    stats: DeviceStats
    groups: list[TypeGroup]

class RoomDetailResponse(BaseModel):
    success: bool = True
    room: RoomDetail

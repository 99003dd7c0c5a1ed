"""
Agregações do painel: filtros, estatísticas, salas e grupos por tipo.

Funções puras sobre listas de dispositivos (qualquer objeto com os atributos
do modelo Device), sem acesso ao banco.
"""
from typing import Iterable, Optional

ONLINE = "online"
OFFLINE = "offline"
MAINTENANCE = "manutencao"


def filter_devices(devices: Iterable, type: Optional[str] = None, room: Optional[str] = None, status: Optional[str] = None) -> list:
    result = []
    for device in devices:
        if type and device.type != type:
            continue
        if room and device.room != room:
            continue
        if status and device.status != status:
            continue
        result.append(device)
    return result


def device_stats(devices: Iterable) -> dict:
    devices = list(devices)
    return {
        "total": len(devices),
        "online": sum(1 for d in devices if d.status == ONLINE),
        "offline": sum(1 for d in devices if d.status == OFFLINE),
        "manutencao": sum(1 for d in devices if d.status == MAINTENANCE),
    }


def _distinct(values: Iterable) -> list:
    # Mantém a ordem da primeira ocorrência
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def list_rooms(devices: Iterable) -> list[str]:
    return _distinct(d.room for d in devices)


def room_summaries(devices: Iterable) -> list[dict]:
    devices = list(devices)
    summaries = []
    for room in list_rooms(devices):
        room_devices = [d for d in devices if d.room == room]
        summaries.append({
            "name": room,
            "devices": len(room_devices),
            "online": sum(1 for d in room_devices if d.status == ONLINE),
            "offline": sum(1 for d in room_devices if d.status == OFFLINE),
        })
    return summaries


def controllable_devices(devices: Iterable) -> list:
    """Dispositivos em manutenção não podem ser ligados nem desligados."""
    return [d for d in devices if d.status != MAINTENANCE]


def switch_state(devices: Iterable) -> str:
    controllable = controllable_devices(devices)
    if not controllable:
        return "disabled"
    active = sum(1 for d in controllable if d.is_active)
    if active == len(controllable):
        return "all_on"
    if active == 0:
        return "none_on"
    return "some_on"


def type_groups(devices: Iterable) -> list[dict]:
    devices = list(devices)
    groups = []
    for device_type in _distinct(d.type for d in devices):
        group_devices = [d for d in devices if d.type == device_type]
        controllable = controllable_devices(group_devices)
        groups.append({
            "type": device_type,
            "devices": group_devices,
            "controllable": len(controllable),
            "active_controllable": sum(1 for d in controllable if d.is_active),
            "switch_state": switch_state(group_devices),
        })
    return groups


def room_detail(devices: Iterable, room: str) -> Optional[dict]:
    room_devices = [d for d in devices if d.room == room]
    if not room_devices:
        return None
    return {
        "name": room,
        "stats": device_stats(room_devices),
        "groups": type_groups(room_devices),
    }


def plan_group_toggle(devices: Iterable) -> tuple[bool, list]:
    """
    Decide o que o interruptor de um grupo faz.

    Liga tudo quando no máximo metade dos controláveis está ligada, senão
    desliga tudo. Devolve o novo estado e os dispositivos que precisam mudar.
    """
    controllable = controllable_devices(devices)
    active = sum(1 for d in controllable if d.is_active)
    turn_on = active <= len(controllable) / 2
    return turn_on, [d for d in controllable if d.is_active != turn_on]

from dataclasses import dataclass


ROOM_NOT_FOUND = 'RoomNotFound'
STAY_NOT_FOUND = 'StayNotFound'
CLIENT_NOT_FOUND = 'ClientNotFound'
INVALID_DATE_RANGE = 'InvalidDateRange'
INSUFFICIENT_POINTS = 'InsufficientPoints'
ALREADY_CHECKED_OUT = 'AlreadyCheckedOut'
STAY_NOT_ACTIVE = 'StayNotActive'
INVALID_CHARGE = 'InvalidCharge'
INVALID_CATEGORY = 'InvalidCategory'
INVALID_GUEST_COUNT = 'InvalidGuestCount'
DUPLICATE_ROOM = 'DuplicateRoom'
DUPLICATE_EMPLOYEE = 'DuplicateEmployee'
SERVICE_REQUEST_NOT_FOUND = 'ServiceRequestNotFound'
MENU_ITEM_NOT_FOUND = 'MenuItemNotFound'
INVALID_CONFIG = 'InvalidConfig'
INVALID_REQUEST = 'InvalidRequest'


@dataclass(frozen=True)
class DeskError:
    """A rejected front-desk command. Carried on the left side of an Either."""

    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


def room_not_found(number: str) -> DeskError:
    return DeskError(ROOM_NOT_FOUND, f"Room {number} not found")


def stay_not_found(stay_id: str) -> DeskError:
    return DeskError(STAY_NOT_FOUND, f"Stay {stay_id} not found")


def client_not_found(client_id: str) -> DeskError:
    return DeskError(CLIENT_NOT_FOUND, f"Client {client_id} not found")

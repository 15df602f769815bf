import enum


class OwnerCheck(enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


def authorize_owner_action(entity, caller_id: str, owner_attr: str = "created_by_id") -> OwnerCheck:
    """Decide whether ``caller_id`` may mutate ``entity``.

    Meetings and events are owned through ``created_by_id``; bookings through
    ``user_id``. The mutating write must still filter on the owner itself.
    """
    if entity is None:
        return OwnerCheck.NOT_FOUND
    if str(getattr(entity, owner_attr)) != str(caller_id):
        return OwnerCheck.FORBIDDEN
    return OwnerCheck.OK

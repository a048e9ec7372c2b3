import enum


class ActivityCode(str, enum.Enum):
    # auth
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    CHANGE_PASSWORD = "CHANGE_PASSWORD"

    # orders
    CREATE_ORDER = "CREATE_ORDER"
    DELETE_ORDER = "DELETE_ORDER"
    UPDATE_STAGE_DATA = "UPDATE_STAGE_DATA"
    ADVANCE_STAGE = "ADVANCE_STAGE"

    # decisions
    CLIENT_DECISION = "CLIENT_DECISION"
    ADMIN_OVERRIDE = "ADMIN_OVERRIDE"

# hackathons/permissions.py
"""
Coordinator permission flags.

The wire format uses camelCase keys (canViewTeams, ...). Each key maps to
exactly one boolean column on Coordinator. Unknown keys are rejected rather
than treated as False.
"""
from core.exceptions import ValidationError

PERM_VIEW_TEAMS = "canViewTeams"
PERM_EDIT_TEAMS = "canEditTeams"
PERM_CHECK_IN = "canCheckIn"
PERM_ASSIGN_TABLES = "canAssignTables"
PERM_VIEW_SUBMISSIONS = "canViewSubmissions"
PERM_ELIMINATE_TEAMS = "canEliminateTeams"
PERM_COMMUNICATE = "canCommunicate"

PERMISSION_FIELDS = {
    PERM_VIEW_TEAMS: "can_view_teams",
    PERM_EDIT_TEAMS: "can_edit_teams",
    PERM_CHECK_IN: "can_check_in",
    PERM_ASSIGN_TABLES: "can_assign_tables",
    PERM_VIEW_SUBMISSIONS: "can_view_submissions",
    PERM_ELIMINATE_TEAMS: "can_eliminate_teams",
    PERM_COMMUNICATE: "can_communicate",
}

ALL_PERMISSIONS = tuple(PERMISSION_FIELDS)


def field_for(permission: str) -> str:
    try:
        return PERMISSION_FIELDS[permission]
    except KeyError:
        raise ValueError(f"Unknown coordinator permission: {permission}")


def parse_permissions(data) -> dict:
    """
    Validate an incoming {"canCheckIn": true, ...} map.
    Returns {model_field: bool} for the keys present.
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("permissions must be an object")

    unknown = sorted(set(data) - set(PERMISSION_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown permission(s): {', '.join(unknown)}")

    parsed = {}
    for key, value in data.items():
        if not isinstance(value, bool):
            raise ValidationError(f"Permission {key} must be true or false")
        parsed[PERMISSION_FIELDS[key]] = value
    return parsed


def has_permission(coordinator, permission: str) -> bool:
    return bool(getattr(coordinator, field_for(permission)))


def permissions_dict(coordinator) -> dict:
    return {key: getattr(coordinator, field) for key, field in PERMISSION_FIELDS.items()}

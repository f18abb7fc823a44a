"""Shared constants and enums used across the application."""

from enum import StrEnum


class PolicyStatus(StrEnum):
    """Lifecycle status of an insurance policy (free-form admin edits)."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class RequestType(StrEnum):
    """Kinds of change a client can ask an admin to make."""

    NEW_POLICY = "new_policy"
    EDIT_POLICY = "edit_policy"
    DELETE_POLICY = "delete_policy"


class RequestStatus(StrEnum):
    """Policy request review status. PENDING is the only non-terminal state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewDecision(StrEnum):
    """Decisions an admin can take on a pending request."""

    APPROVED = "approved"
    REJECTED = "rejected"


# Substituted for a profile that a foreign key points at but cannot be found.
UNKNOWN_FIRST_NAME = "Unknown"
UNKNOWN_LAST_NAME = "User"

PROFILE_SEARCH_LIMIT = 10

"""
Models package: re-exports Base and all models.

Import models here so Alembic's `target_metadata = Base.metadata`
picks up every table automatically.

When adding a new model:
    1. Create `policyportal/db/models/<table_name>.py`
    2. Import it here
"""

from policyportal.db.models.base import Base
from policyportal.db.models.profile import Profile
from policyportal.db.models.family import Family
from policyportal.db.models.family_member import FamilyMember
from policyportal.db.models.policy import Policy
from policyportal.db.models.policy_request import PolicyRequest
from policyportal.db.models.admin_user import AdminUser

__all__ = [
    "Base",
    "Profile",
    "Family",
    "FamilyMember",
    "Policy",
    "PolicyRequest",
    "AdminUser",
]

"""
Data access for the portal tables.

Modules map one-to-one onto tables (profiles, families + family_members,
policies, policy_requests, admin_users). Functions take the request's
`AsyncSession` first, may flush to obtain ids or surface constraint
violations, and leave commit/rollback to `get_db`. Multi-row writes that
must fail independently use `session.begin_nested()` at the call site.
"""

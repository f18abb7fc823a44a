"""
Services package: business logic between the API and the repositories.

Services raise `PortalError` subclasses and never commit; the request's
session is committed by the `get_db` dependency.
"""

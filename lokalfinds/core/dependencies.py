"""
Application-level singletons and FastAPI dependencies
Reference: https://fastapi.tiangolo.com/tutorial/dependencies/
"""
from functools import lru_cache

from lokalfinds.core.database import async_session_maker
from lokalfinds.core.local_storage import get_local_storage
from lokalfinds.services.auth import AuthFacade, WorkOSAuthProvider
from lokalfinds.services.gateway import DataGateway
from lokalfinds.services.session import SessionStore


@lru_cache()
def get_gateway() -> DataGateway:
    """
    Get a singleton DataGateway bound to the application session factory.

    Reference: https://docs.python.org/3/library/functools.html#functools.lru_cache
    """
    return DataGateway(async_session_maker)


@lru_cache()
def get_auth_provider() -> WorkOSAuthProvider:
    """
    Get a singleton WorkOSAuthProvider.

    Using lru_cache reuses one WorkOS client across callers instead of
    re-initializing it for every operation.
    """
    return WorkOSAuthProvider()


@lru_cache()
def get_session_store() -> SessionStore:
    return SessionStore()


@lru_cache()
def get_auth_facade() -> AuthFacade:
    """Get the process-wide AuthFacade wired to the shared SessionStore."""
    return AuthFacade(get_auth_provider(), get_session_store(), get_local_storage())

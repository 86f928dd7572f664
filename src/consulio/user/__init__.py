from .context import ContextAlreadyInitialized, ContextNotInitialized, SessionUser, UserContext

__all__ = ["ContextAlreadyInitialized", "ContextNotInitialized", "SessionUser", "UserContext"]

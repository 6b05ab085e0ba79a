from app.services.auth.service import AuthService

__all__ = ["AuthService"]

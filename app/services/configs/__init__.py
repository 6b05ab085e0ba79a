from app.services.configs.collection import ConfigCollection

__all__ = ["ConfigCollection"]

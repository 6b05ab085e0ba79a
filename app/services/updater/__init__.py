from app.services.updater.service import AutoUpdater, run_process

__all__ = ["AutoUpdater", "run_process"]

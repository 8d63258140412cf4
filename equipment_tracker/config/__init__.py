from equipment_tracker.config.settings import settings, Settings

__all__ = ["settings", "Settings"]

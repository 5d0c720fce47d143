from daybell.adapters.storage.json_store import CalendarStoreError, JsonCalendarStore

__all__ = ["CalendarStoreError", "JsonCalendarStore"]

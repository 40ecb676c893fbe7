from collabhub.db.store import EntityStore

__all__ = ["EntityStore"]

from .database import DATABASE_FILE, Database, init_database

__all__ = ["DATABASE_FILE", "Database", "init_database"]

class PersistenceError(Exception):
    """Raised when a single document read or write fails in the database."""

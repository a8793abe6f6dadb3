# incident_hub/db/session.py
from incident_hub.db.mongo import get_database


def get_db():
    """
    FastAPI dependency that returns Mongo database instance
    """
    return get_database()

import os
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient

# MongoDB Setup
client = None
db = None

def init_db(app):
    global client, db
    MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/shift_tracker")
    client = AsyncIOMotorClient(MONGODB_URI)
    db = client.get_default_database()
    app.state.db = db

def get_db():
    return db

def close_db():
    if client is not None:
        client.close()

def collection_path(user_id: Optional[str] = None) -> str:
    """
    Resolve the namespace for a tenant. This is a naming convention only,
    nothing checks who is asking.
    """
    if user_id:
        return f"users/{user_id}/shifts"
    return os.getenv("SHIFTS_COLLECTION", "shifts")

from datetime import datetime
from typing import Optional

from beanie import Document
from pydantic import Field
from pymongo import IndexModel
from pymongo.collation import Collation
from fastapi_users_db_beanie import BeanieBaseUser, BeanieUserDatabase


class User(BeanieBaseUser, Document):
    full_name: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"
        email_collation = Collation("en", strength=2)  # Case-insensitive collation for email queries
        indexes = [
            IndexModel("email", unique=True),
            IndexModel("email", name="case_insensitive_email_index", collation=Collation("en", strength=2)),
        ]


async def get_user_db():
    yield BeanieUserDatabase(User)

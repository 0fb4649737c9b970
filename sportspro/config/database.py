from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from sportspro.models.equipmentModel import Equipment
from sportspro.models.cartModel import Cart
from sportspro.models.userModel import User
from .settings import settings

DOCUMENT_MODELS = [User, Equipment, Cart]


# Call this from within your event loop to get beanie setup.
async def startDB():
    # Create Motor client
    client = AsyncIOMotorClient(settings.MONGO_URI, uuidRepresentation="standard")
    database = client[settings.MONGO_DATABASE]

    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    return client

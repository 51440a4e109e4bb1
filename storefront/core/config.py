from enum import Enum
from pydantic_settings import BaseSettings
from pydantic import Field


class StoreVariant(str, Enum):
    RETAIL = "retail"
    FOOD = "food"
    EVENTS = "events"


class Settings(BaseSettings):
    PROJECT_NAME: str = "Storefront Checkout API"
    DATABASE_URL: str = "sqlite:///./storefront.db"
    SQL_ECHO: bool = False
    SECRET_KEY: str = "supersecretkey_change_me_in_production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 1 week

    # Checkout
    STORE_VARIANT: StoreVariant = StoreVariant.RETAIL
    DECREMENT_STOCK_ON_CHECKOUT: bool = True
    ORDERS_PAGE_SIZE: int = Field(20, ge=1, le=100)

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

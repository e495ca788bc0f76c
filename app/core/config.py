from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Durable cart storage
    DATABASE_URL: str = "sqlite+aiosqlite:///./cart.db"
    CART_STORAGE_KEY: str = "@RocketShoes:cart"

    # Stock / product API
    STOCK_API_BASE_URL: str = "http://localhost:3333"
    STOCK_API_TIMEOUT: float = 10.0

    # Shop Configuration
    SHOP_NAME: str = "RocketShoes"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

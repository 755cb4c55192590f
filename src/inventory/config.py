import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuration lue dans l'environnement (préfixe INVENTORY_)
    ou dans un fichier .env.
    """

    model_config = SettingsConfigDict(env_prefix="INVENTORY_", env_file=".env")

    database_url: str = "sqlite:///inventory.db"
    low_stock_threshold: int = 10
    log_level: str = "INFO"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

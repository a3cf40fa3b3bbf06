# model_lab/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict

from .schemas import ModelFamily


class Settings(BaseSettings):
    """Manages model lab configuration using environment variables."""
    # Model family selected when a workflow is mounted or restarted
    default_model: ModelFamily = ModelFamily.SARIMAX

    # Seed for the synthetic datasets; None draws fresh noise on every build
    dataset_seed: int | None = None

    # Decimal places kept on mean and standard deviation
    display_decimals: int = 1

    ingest_points: int = 30
    decomposition_points: int = 24
    evaluation_points: int = 18

    # Variables are read as MODEL_LAB_<NAME>, optionally from a .env file
    model_config = SettingsConfigDict(
        env_prefix="MODEL_LAB_",
        env_file=".env",
        env_file_encoding='utf-8',
        extra='ignore',
    )

# Create a single, importable instance of the settings
settings = Settings()

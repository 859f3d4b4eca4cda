"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here and read once at startup.
The settings object is frozen and passed to every component that needs it.
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for model-invoking endpoints.
        database_url: SQLAlchemy URL of the prediction results store.
        local_model_path: Model script path, relative to the module root.
        local_data_file: Input dataset path, relative to the module root.
        python_exec: Interpreter used to launch the local model.
        prediction_window: Look-back window passed to every backend.
        anomaly_threshold: Confidence below this value flags an anomaly.
        default_feature: Feature used when a request names none.
        cloud_model_url: Remote prediction endpoint. Cloud calls fail without it.
        local_timeout_seconds: Upper bound on one local model run.
        cloud_timeout_seconds: Upper bound on one cloud model call.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", frozen=True
    )

    project_name: str = "Financial Forecasting Service"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    database_url: str = "sqlite:///./forecasting.db"

    # Local model process
    local_model_path: str = "models/predict.py"
    local_data_file: str = "data/financial_data.csv"
    python_exec: str = "python"
    prediction_window: int = Field(default=30, ge=1)
    anomaly_threshold: Decimal = Decimal("0.5")
    default_feature: str = "bid_price"
    local_timeout_seconds: float = Field(default=600.0, gt=0)

    # Cloud model
    cloud_model_url: Optional[str] = None
    cloud_timeout_seconds: float = Field(default=30.0, gt=0)


settings = Settings()

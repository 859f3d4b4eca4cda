"""
Shared fixtures for the forecast test suite.

Provides settings builders, throwaway model scripts and an in-memory
SQLite prediction store. No external services are required.
"""

import sys
import textwrap
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from forecasting.core.config import Settings
from forecasting.infrastructure.forecast.path_resolver import MODULE_ROOT_NAME
from forecasting.infrastructure.forecast.prediction_result_repository import (
    PredictionResultRepositoryAdapter,
)

SCRIPT_RELATIVE_PATH = "models/predict.py"
DATA_RELATIVE_PATH = "data/prices.csv"


def make_settings(**overrides) -> Settings:
    """Build isolated settings that ignore the environment's .env file."""
    values = {
        "local_model_path": SCRIPT_RELATIVE_PATH,
        "local_data_file": DATA_RELATIVE_PATH,
        "python_exec": sys.executable,
        "prediction_window": 30,
        "anomaly_threshold": Decimal("0.5"),
        "default_feature": "bid_price",
        "local_timeout_seconds": 30.0,
        "cloud_model_url": "https://models.example.com/predict",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def write_script(root: Path, body: str) -> Path:
    """Write a model script at ``root / SCRIPT_RELATIVE_PATH``."""
    script = root / SCRIPT_RELATIVE_PATH
    script.parent.mkdir(parents=True, exist_ok=True)
    script.write_text(textwrap.dedent(body), encoding="utf-8")
    return script


ECHO_MODEL = """
import argparse
import json

parser = argparse.ArgumentParser()
for flag in ("--data", "--window", "--epochs", "--out_dir", "--algorithm", "--feature"):
    parser.add_argument(flag)
args = parser.parse_args()
print(json.dumps({
    "predicted_value": 150.25,
    "confidence_score": 0.42,
    "args": vars(args),
}))
"""


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def module_root(tmp_path: Path) -> Path:
    """The module-root candidate directory under a temporary run root."""
    root = tmp_path / MODULE_ROOT_NAME
    root.mkdir()
    return root


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across connections."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield eng
    eng.dispose()


@pytest.fixture
def repository(engine) -> PredictionResultRepositoryAdapter:
    repo = PredictionResultRepositoryAdapter(engine=engine)
    repo.ensure_table()
    return repo


@pytest.fixture
def settings_factory():
    """Return the settings builder so tests can override single fields."""
    return make_settings


@pytest.fixture
def model_script():
    """Return a writer for throwaway model scripts."""
    return write_script


@pytest.fixture
def echo_model_source() -> str:
    """Model script reporting 150.25 / 0.42 and echoing its arguments."""
    return ECHO_MODEL

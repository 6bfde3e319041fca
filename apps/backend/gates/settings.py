# settings.py - gates service configuration
import json
import logging.config
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from decouple import AutoConfig, Choices

from apps.backend.gates.domain.business_hours import BusinessWeek

BASE_DIR = Path(__file__).resolve().parent

STORAGE_DYNAMODB = "dynamodb"
STORAGE_MEMORY = "memory"


def _business_week(value: str) -> BusinessWeek:
    if not value:
        return BusinessWeek.default()
    return BusinessWeek.from_record(json.loads(value))


@dataclass(frozen=True)
class GatesSettings:
    # ==========================================
    # STORAGE
    # ==========================================
    storage: str = STORAGE_DYNAMODB
    dynamo_db_table_name: str = "Gates"
    # Local DynamoDB; when set, the table is created on startup
    dynamo_db_endpoint_url: Optional[str] = None
    aws_region: str = "eu-central-1"

    # ==========================================
    # BEHAVIOUR
    # ==========================================
    demo_mode: bool = False
    business_hours_enabled: bool = True
    business_week: BusinessWeek = field(default_factory=BusinessWeek.default)

    # ==========================================
    # LOGGING
    # ==========================================
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_local_dynamo_db(self) -> bool:
        return bool(self.dynamo_db_endpoint_url)


def load_settings(config=None) -> GatesSettings:
    """
    Read settings from the environment (and a .env/settings.ini next to this
    module, if present).

    Args:
        config: A decouple config callable; defaults to AutoConfig.
    """
    config = config or AutoConfig(search_path=BASE_DIR)
    return GatesSettings(
        storage=config(
            "GATES_STORAGE",
            default=STORAGE_DYNAMODB,
            cast=Choices([STORAGE_DYNAMODB, STORAGE_MEMORY]),
        ),
        dynamo_db_table_name=config("GATES_DYNAMO_DB_TABLE_NAME", default="Gates"),
        dynamo_db_endpoint_url=config("GATES_DYNAMO_DB_ENDPOINT_URL", default="") or None,
        aws_region=config("GATES_AWS_REGION", default="eu-central-1"),
        demo_mode=config("GATES_DEMO_MODE", default=False, cast=bool),
        business_hours_enabled=config("GATES_BUSINESS_HOURS_ENABLED", default=True, cast=bool),
        business_week=config("GATES_BUSINESS_WEEK", default="", cast=_business_week),
        log_level=config("GATES_LOG_LEVEL", default="INFO").upper(),
        log_format=config("GATES_LOG_FORMAT", default="json", cast=Choices(["json", "simple"])),
    )


# ==========================================
# LOGGING
# ==========================================
def logging_config(settings: GatesSettings) -> dict:
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '{levelname} {name} [{correlation_id}] {message}',
                'style': '{',
            },
            'json': {
                '()': 'pythonjsonlogger.json.JsonFormatter',
                'format': '%(asctime)s %(name)s %(levelname)s %(message)s %(funcName)s %(correlation_id)s',
            },
        },
        'filters': {
            'correlation_id': {
                '()': 'apps.backend.gates.logging_filter.CorrelationIDFilter',
            },
        },
        'handlers': {
            'console': {
                'level': settings.log_level,
                'class': 'logging.StreamHandler',
                'formatter': settings.log_format,
                'filters': ['correlation_id'],
            },
        },
        'loggers': {
            'apps.backend.gates': {
                'handlers': ['console'],
                'level': settings.log_level,
                'propagate': False,
            },
            'botocore': {
                'handlers': ['console'],
                'level': 'WARNING',
                'propagate': False,
            },
        },
    }


def configure_logging(settings: GatesSettings) -> None:
    logging.config.dictConfig(logging_config(settings))

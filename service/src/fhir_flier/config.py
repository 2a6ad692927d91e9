import json
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from .errors import InitializationError

logger = logging.getLogger(__name__)


class FlierConfig(BaseModel):
    base_url: str | None = None  # FHIR server base, e.g. https://hapi.fhir.org/baseR4
    timeout: float = 60.0
    media_type: str = "application/fhir+json"
    log_level: str = "INFO"

    @staticmethod
    def from_file(file: str | Path) -> "FlierConfig":
        """Load the configuration from a JSON or YAML file."""
        file = Path(file)

        try:
            content = file.read_text(encoding="utf-8")

            if file.suffix.lower() in (".yaml", ".yml"):
                config = FlierConfig.model_validate(yaml.safe_load(content) or {})
            else:
                config = FlierConfig.model_validate_json(content)

        except ValidationError as e:
            msg = f"failed to load config from {str(file)}"
            logger.error(msg)
            logger.error(e.errors())
            raise InitializationError(msg)

        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            msg = f"failed to read config from {str(file)}: {e}"
            logger.error(msg)
            raise InitializationError(msg)

        return config

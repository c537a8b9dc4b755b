"""Configuration management for the InputFilter service.

This module defines the Pydantic settings and the request models used by the
HTTP layer. Settings are loaded from environment variables (prefixed with
`INPUTFILTER_`) or a `.env` file.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables.

    Attributes:
        PROJECT_NAME (str): The name of the application.
        POLICY_PATH (str): Path to the YAML filtering policy.
        LOG_LEVEL (str): Root log level for the service.
    """
    PROJECT_NAME: str = "InputFilter"
    POLICY_PATH: str = "inputfilter.yaml"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="INPUTFILTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


class FilterRequest(BaseModel):
    """A single value to clean.

    Attributes:
        value (Any): The value; lists and objects are cleaned element-wise.
        type (str): The filter name (e.g. "string", "html", "int").
    """
    value: Any = None
    type: str = "string"


class PayloadRequest(BaseModel):
    """A JSON object whose string fields should be cleaned.

    Attributes:
        payload (Dict[str, Any]): The data content.
        type (str): The filter applied to each selected string field.
        fields (Optional[List[str]]): Keys to clean. Defaults to all keys.
    """
    payload: Dict[str, Any]
    type: str = "string"
    fields: Optional[List[str]] = Field(default=None)


settings = Settings()

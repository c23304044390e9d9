"""
Messenger configuration file (``~/.connect-messenger/config.json``).

The path can be overridden with the CONNECT_MESSENGER_CONFIG environment
variable. A missing or unreadable file means the default configuration.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

import pydantic
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CONNECT_MESSENGER_CONFIG"
CONFIG_FILE = Path.home() / ".connect-messenger" / "config.json"


class MessengerConfig(BaseModel):
    # Extra message classes as "package.module:ClassName"
    message_types: list[str] = Field(default_factory=list)
    include_defaults: bool = True
    indent: Optional[int] = None


def config_path(path: Union[str, Path, None] = None) -> Path:
    if path is not None:
        return Path(path)
    env = os.environ.get(CONFIG_ENV_VAR)
    return Path(env) if env else CONFIG_FILE


def load_config(path: Union[str, Path, None] = None) -> MessengerConfig:
    file = config_path(path)
    try:
        raw = json.loads(file.read_text())
    except FileNotFoundError:
        return MessengerConfig()
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", file, e)
        return MessengerConfig()

    try:
        return MessengerConfig.model_validate(raw)
    except pydantic.ValidationError as e:
        logger.warning("Ignoring invalid config %s: %s", file, e)
        return MessengerConfig()


def save_config(config: MessengerConfig, path: Union[str, Path, None] = None) -> Path:
    file = config_path(path)
    file.parent.mkdir(parents=True, exist_ok=True)
    file.write_text(json.dumps(config.model_dump(), indent=2))
    return file

import json
import logging
import re
from pathlib import Path
from typing import List, Optional

# Configuration Constants
CONFIG_FILE_NAME = "config.json"
CONFIG_KEY_HEADERS_TO_PROCESS = "headers_to_process"
CONFIG_KEY_CONFIRM_NO_TOC = "confirm_no_toc"

DEFAULT_HEADERS_TO_PROCESS = ["1", "2"]

# Default Configuration Values
DEFAULT_CONFIG = {
    CONFIG_KEY_HEADERS_TO_PROCESS: list(DEFAULT_HEADERS_TO_PROCESS),
    CONFIG_KEY_CONFIRM_NO_TOC: True,
}

_HEADER_LEVEL_RE = re.compile(r'[1-6]')


def _get_config_path() -> Path:
    """Returns the absolute path to the configuration file.
    Looks for the project root (a directory containing .git) up to 5 levels
    above this module, falling back to the module's own directory.
    """
    current_path = Path(__file__).resolve().parent
    project_root = None
    # Ascend up to 5 levels to find .git directory
    for _ in range(5):
        if (current_path / ".git").is_dir():
            project_root = current_path
            break
        if current_path.parent == current_path: # Reached the root of the filesystem
            break
        current_path = current_path.parent

    if project_root:
        config_path = project_root / CONFIG_FILE_NAME
    else:
        config_path = Path(__file__).resolve().parent / CONFIG_FILE_NAME
        logging.debug(f"Could not determine project root. Using config path: {config_path}")

    return config_path.resolve()


def load_app_config(config_path: Optional[Path] = None) -> dict:
    """Loads the application configuration from config.json.
    If the file doesn't exist or is invalid, returns default values.

    Args:
        config_path (Path, optional): Explicit config file location.

    Returns:
        dict: The configuration dictionary, merged with defaults.
    """
    config = json.loads(json.dumps(DEFAULT_CONFIG)) # Deep copy of defaults
    config_path = Path(config_path) if config_path else _get_config_path()

    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
            if isinstance(user_config, dict):
                config.update(user_config) # Override defaults with user settings
            else:
                logging.warning(f"{CONFIG_FILE_NAME} at {config_path} is not a JSON object. Using default config.")
        except json.JSONDecodeError as e:
            logging.warning(f"Could not parse {CONFIG_FILE_NAME} at {config_path}: {e}. Using default config.")
        except IOError as e:
            logging.warning(f"Could not read {CONFIG_FILE_NAME} at {config_path}: {e}. Using default config.")
    else:
        logging.info(f"{CONFIG_FILE_NAME} not found at {config_path}. Using default config.")

    return config


def save_app_config(config_data: dict, config_path: Optional[Path] = None) -> bool:
    """Saves the application configuration to config.json.

    Args:
        config_data (dict): The configuration dictionary to save.
        config_path (Path, optional): Explicit config file location.

    Returns:
        bool: True if saving was successful, False otherwise.
    """
    config_path = Path(config_path) if config_path else _get_config_path()
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            json.dump(config_data, f, indent=2)
        return True
    except IOError as e:
        logging.error(f"Could not write to {CONFIG_FILE_NAME} at {config_path}: {e}")
        return False
    except TypeError as e:
        logging.error(f"Invalid data type provided for saving to {CONFIG_FILE_NAME}: {e}")
        return False


def get_headers_to_process(config: dict) -> List[str]:
    """Returns the header levels ("1".."6") the header commands should process.

    A missing or non-list setting falls back to DEFAULT_HEADERS_TO_PROCESS.
    A list keeps only its valid entries and may therefore come back empty,
    which callers report as "no headers configured".
    """
    headers = config.get(CONFIG_KEY_HEADERS_TO_PROCESS)
    if not isinstance(headers, list):
        return list(DEFAULT_HEADERS_TO_PROCESS)
    return [h for h in headers if isinstance(h, str) and _HEADER_LEVEL_RE.fullmatch(h)]

"""Configuration persistence for MorseWav.

Saves and restores default codec parameters used by the command line.
"""
from dataclasses import asdict, dataclass, fields
from typing import Dict, Any, Optional
import json
import logging
import os
import sys
from mwav_signal import DEFAULT_MIN_SIGNAL_MS, DEFAULT_SIGNAL_THRESHOLD
from mwav_utils import DEFAULT_SAMPLE_RATE, DEFAULT_TONE_HZ, DEFAULT_WPM

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'MORSEWAV_CONFIG'


@dataclass
class CodecSettings:
    """Defaults for encoding and decoding."""
    wpm: int = DEFAULT_WPM
    character_wpm: Optional[int] = None
    tone_hz: int = DEFAULT_TONE_HZ
    sample_rate: int = DEFAULT_SAMPLE_RATE
    signal_threshold: float = DEFAULT_SIGNAL_THRESHOLD
    min_signal_ms: int = DEFAULT_MIN_SIGNAL_MS


def get_config_path() -> str:
    """Get platform-appropriate config file path.

    The MORSEWAV_CONFIG environment variable overrides the platform default.

    Returns:
        Path to the config file.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return override

    if sys.platform == 'win32':
        # Windows: Use AppData\Local
        base = os.environ.get('LOCALAPPDATA', os.path.expanduser('~'))
        config_dir = os.path.join(base, 'MorseWav')
    elif sys.platform == 'darwin':
        # macOS: Use ~/Library/Application Support
        config_dir = os.path.join(os.path.expanduser('~'), 'Library', 'Application Support', 'MorseWav')
    else:
        # Linux/Unix: Use XDG_CONFIG_HOME or ~/.config
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.join(os.path.expanduser('~'), '.config'))
        config_dir = os.path.join(xdg_config, 'morsewav')

    return os.path.join(config_dir, 'config.json')


def load_config() -> Dict[str, Any]:
    """Load configuration from disk.

    Returns:
        Dictionary with configuration data, or empty dict if the file is
        missing or unreadable.
    """
    config_path = get_config_path()
    if not os.path.exists(config_path):
        return {}

    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("ignoring unreadable config %s: %s", config_path, e)
        return {}
    return config if isinstance(config, dict) else {}


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to disk.

    Args:
        config: Dictionary with configuration data to save.

    Raises:
        OSError: if the file cannot be written.
    """
    config_path = get_config_path()
    os.makedirs(os.path.dirname(config_path) or '.', exist_ok=True)
    with open(config_path, 'w') as f:
        json.dump(config, indent=2, fp=f)


def coerce_setting(key: str, value: Any) -> Any:
    """Convert a raw value to the type of the matching CodecSettings field.

    Accepts strings from the command line as well as JSON values, so
    ``"15"`` and ``15`` both give ``15`` for ``wpm``.

    Raises:
        ValueError: if ``key`` is not a setting or the value does not convert.
        TypeError: if the value has a type that cannot be converted.
    """
    if key not in {f.name for f in fields(CodecSettings)}:
        raise ValueError(f"unknown setting {key!r}")
    if key == 'character_wpm':
        if value is None or (isinstance(value, str) and value.strip().lower() in ('', 'none', 'null')):
            return None
        return int(value)
    return type(getattr(CodecSettings(), key))(value)


def settings_from_config(config: Dict[str, Any]) -> CodecSettings:
    """Build CodecSettings from a config dict.

    Unknown keys are ignored. Values that do not convert to the field's
    type are skipped with a warning and the default is kept.
    """
    known = {f.name for f in fields(CodecSettings)}
    values = {}
    for key, value in config.items():
        if key not in known:
            continue
        try:
            values[key] = coerce_setting(key, value)
        except (TypeError, ValueError) as e:
            logger.warning("ignoring config value %s=%r: %s", key, value, e)
    return CodecSettings(**values)


def settings_to_config(settings: CodecSettings) -> Dict[str, Any]:
    return asdict(settings)

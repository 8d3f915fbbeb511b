# --- roomtools_lib/config.py ---
import configparser
import logging
from dataclasses import dataclass

log = logging.getLogger("roomtools.config")

DEFAULT_CONFIG_PATH = "roomtools.cfg"


@dataclass
class OverlaySettings:
    """Typed view of the [Overlay] and [Logging] sections."""

    auto_refresh_seconds: float = 5.0
    highlight_delay_ms: int = 100
    log_problem_blocks: bool = True
    color_logs: bool = False
    debug_topics: str = ""


class ConfigService:
    """Manages reading from and writing to the roomtools.cfg file."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = config_path
        self.defaults = {
            "Overlay": {
                "auto_refresh_seconds": "5.0",
                "highlight_delay_ms": "100",
                "log_problem_blocks": "true",
            },
            "Logging": {
                "color_logs": "false",
                "debug_topics": "",
            },
        }

    def get_settings(self) -> dict:
        """Reads settings from the config file, applying defaults if missing."""
        config = configparser.ConfigParser()
        for section, values in self.defaults.items():
            config[section] = values

        try:
            found = config.read(self.config_path)
        except configparser.Error as e:
            log.error("Could not parse %s, using defaults: %s", self.config_path, e)
            config = configparser.ConfigParser()
            for section, values in self.defaults.items():
                config[section] = values
            return self._config_to_dict(config)

        if not found:
            log.info("Config file not found at %s. Creating with defaults.", self.config_path)
            self.save_settings(self._config_to_dict(config))

        return self._config_to_dict(config)

    def save_settings(self, settings: dict):
        """Saves a dictionary of settings to the config file."""
        config = configparser.ConfigParser()
        for section, values in settings.items():
            config[section] = {k: str(v) for k, v in values.items()}

        try:
            with open(self.config_path, "w") as configfile:
                config.write(configfile)
            log.info("Settings successfully saved to %s", self.config_path)
        except IOError as e:
            log.error("Failed to write settings to %s: %s", self.config_path, e)

    def load_overlay_settings(self) -> OverlaySettings:
        """Returns typed settings; unparsable values fall back to their defaults."""
        settings = self.get_settings()
        overlay = settings.get("Overlay", {})
        logging_cfg = settings.get("Logging", {})
        defaults = OverlaySettings()
        return OverlaySettings(
            auto_refresh_seconds=_as_float(
                overlay.get("auto_refresh_seconds"), defaults.auto_refresh_seconds
            ),
            highlight_delay_ms=_as_int(
                overlay.get("highlight_delay_ms"), defaults.highlight_delay_ms
            ),
            log_problem_blocks=_as_bool(
                overlay.get("log_problem_blocks"), defaults.log_problem_blocks
            ),
            color_logs=_as_bool(logging_cfg.get("color_logs"), defaults.color_logs),
            debug_topics=logging_cfg.get("debug_topics", defaults.debug_topics),
        )

    def _config_to_dict(self, config: configparser.ConfigParser) -> dict:
        """Converts a ConfigParser object to a nested dictionary."""
        return {s: dict(config.items(s)) for s in config.sections()}


def _as_float(value, default):
    try:
        return float(value)
    except (TypeError, ValueError):
        log.warning("Invalid number %r in config, using %s.", value, default)
        return default


def _as_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        log.warning("Invalid integer %r in config, using %s.", value, default)
        return default


def _as_bool(value, default):
    if value is None:
        return default
    lowered = str(value).strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    log.warning("Invalid boolean %r in config, using %s.", value, default)
    return default

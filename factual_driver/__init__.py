import os
import tomllib
from pathlib import Path

from factual_driver.core.exceptions import ConfigError


class Configurator:
    """Loads a dict of config from TOML file(s) and behaves like an object, ie config.VALUE"""

    configuration = None

    def __init__(self):
        if not self.configuration:
            self.configure()

    def configure(self):
        # load default settings
        configuration = self._load(Path(__file__).parent / "config_default.toml")

        # override with local settings
        local_settings = os.environ.get("FACTUAL_SETTINGS", Path.cwd() / "config.toml")
        if Path(local_settings).exists():
            configuration.update(self._load(local_settings))

        # override with os env settings
        for config_key in configuration:
            if config_key in os.environ:
                value = os.getenv(config_key)
                # Casting env value
                try:
                    if isinstance(configuration[config_key], list):
                        value = value.split(",")
                    elif isinstance(configuration[config_key], bool):
                        value = value.lower() in ["true", "1", "t", "y", "yes"]
                    elif isinstance(configuration[config_key], int):
                        value = int(value)
                    elif isinstance(configuration[config_key], float):
                        value = float(value)
                except ValueError as e:
                    raise ConfigError(f"Invalid value for {config_key}: {value!r}") from e
                configuration[config_key] = value

        self.configuration = configuration
        self.check()

    @staticmethod
    def _load(path) -> dict:
        try:
            with open(path, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed parsing config file {path}: {e}") from e

    def override(self, **kwargs):
        self.configuration.update(kwargs)
        self.check()

    def check(self):
        """Sanity check on config"""
        endpoint = self.configuration.get("API_ENDPOINT")
        if not endpoint or not str(endpoint).startswith("http"):
            raise ConfigError(f"API_ENDPOINT must be an absolute http(s) URL, got {endpoint!r}")
        # routes are appended straight to the endpoint
        if not endpoint.endswith("/"):
            self.configuration["API_ENDPOINT"] = f"{endpoint}/"
        if not self.configuration.get("DRIVER_VERSION"):
            raise ConfigError("DRIVER_VERSION must be set")

    def __getattr__(self, __name):
        return self.configuration.get(__name)

    @property
    def __dict__(self):
        return self.configuration


config = Configurator()

import yaml
import os
import logging
from netrc import netrc, NetrcParseError
from urllib.parse import urlparse
from platformdirs import PlatformDirs
from pathlib import Path

HOST_KEY = 'default_host'
USERNAME_KEY = 'username'
PASSWORD_KEY = 'password'

ENV_VARS = {
    HOST_KEY: 'CYTOMINE_HOST',
    USERNAME_KEY: 'CYTOMINE_USERNAME',
    PASSWORD_KEY: 'CYTOMINE_PASSWORD'
}

_LOGGER = logging.getLogger(__name__)

DIRS = PlatformDirs(appname='cytomine')
CONFIG_FILE = os.path.join(DIRS.user_config_dir, 'cytomine.yaml')


def read_config() -> dict:
    if os.path.exists(CONFIG_FILE):
        with open(CONFIG_FILE, 'r') as configfile:
            return yaml.safe_load(configfile) or {}
    return {}


def _get_netrc_credentials(host: str | None) -> tuple[str, str] | None:
    """Look up the login and password stored in ``~/.netrc`` for the machine of `host`."""
    if host is None:
        return None
    machine = urlparse(host).hostname or host
    netrc_file = Path.home() / ".netrc"
    if netrc_file.exists():
        token = netrc(netrc_file).authenticators(machine)
        if token is not None:
            return token[0], token[2]
    return None


def set_value(key: str,
              value):
    config = read_config()
    config[key] = value
    config_dir = os.path.dirname(CONFIG_FILE)
    if not os.path.exists(config_dir):
        os.makedirs(config_dir, exist_ok=True)
    with open(CONFIG_FILE, 'w') as configfile:
        yaml.dump(config, configfile)
    _LOGGER.debug(f"Configuration saved to {CONFIG_FILE}.")


def get_value(key: str,
              default=None,
              include_envvars: bool = True):
    if include_envvars:
        if key in ENV_VARS:
            env_var = os.getenv(ENV_VARS[key])
            if env_var is not None:
                return env_var

    if key in (USERNAME_KEY, PASSWORD_KEY):
        try:
            credentials = _get_netrc_credentials(get_value(HOST_KEY, include_envvars=include_envvars))
            if credentials is not None:
                _LOGGER.info("Credentials loaded from netrc file.")
                return credentials[0] if key == USERNAME_KEY else credentials[1]
        except (OSError, NetrcParseError) as e:
            _LOGGER.info(f"Error reading credentials from .netrc file: {e}.")

    config = read_config()
    return config.get(key, default)


def clear_all_configurations():
    if os.path.exists(CONFIG_FILE):
        os.remove(CONFIG_FILE)

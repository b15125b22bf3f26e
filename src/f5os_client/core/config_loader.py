"""
F5OS Client - Configuration Loader

This module loads device credentials from multiple sources with cascading
priority: environment variables → config file → keyring.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import keyring
from keyring.errors import KeyringError
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .models import F5OSConfig

logger = logging.getLogger("f5os-client")

TRUE_VALUES = ("true", "1", "yes")


class ConfigLoader:
    """
    Configuration loader for F5OS device credentials.

    Priority order for credential sources:
    1. Environment variables (highest priority) - for CI/CD and containers
    2. Config file (~/.f5os-client/config.json) - for multiple profiles
    3. Keyring storage (lowest priority) - password for a stored profile

    Profiles written to the config file may omit the password; it is then
    looked up in the keyring under the profile name.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".f5os-client"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"
    REQUIRED_FILE_PERMISSIONS = 0o600
    KEYRING_SERVICE_NAME = "f5os-client"

    @classmethod
    def load(cls, profile: str = "default") -> F5OSConfig:
        """
        Load F5OS configuration for the specified profile.

        Args:
            profile: Profile name to load (default: "default")

        Returns:
            F5OSConfig object with credentials

        Raises:
            ConfigurationError: If no credentials found or configuration invalid
        """
        logger.debug(f"Loading configuration for profile: {profile}")

        config = cls._load_from_env()
        if config:
            logger.info("Loaded configuration from environment variables")
            return config

        config = cls._load_from_config_file(profile)
        if config:
            logger.info(f"Loaded configuration for profile '{profile}' from config file")
            return config

        config = cls._load_from_keyring(profile)
        if config:
            logger.info(f"Loaded configuration for profile '{profile}' from keyring")
            return config

        raise ConfigurationError(
            f"No credentials found for profile '{profile}'. "
            f"Please configure credentials using 'f5os setup' or set environment variables "
            f"(F5OS_HOST, F5OS_USERNAME, F5OS_PASSWORD)"
        )

    @classmethod
    def _load_from_env(cls) -> Optional[F5OSConfig]:
        """Load configuration from environment variables."""
        host = os.getenv("F5OS_HOST")
        username = os.getenv("F5OS_USERNAME")
        password = os.getenv("F5OS_PASSWORD")

        if not (host and username and password):
            return None

        try:
            values: Dict[str, Any] = {
                "host": host,
                "username": username,
                "password": password,
                "verify_ssl": os.getenv("F5OS_VERIFY_SSL", "true").lower() in TRUE_VALUES,
                "teem_disabled": os.getenv("F5OS_TEEM_DISABLE", "false").lower() in TRUE_VALUES,
            }
            if os.getenv("F5OS_PORT"):
                values["port"] = int(os.environ["F5OS_PORT"])
            if os.getenv("F5OS_API_TIMEOUT"):
                values["api_timeout"] = float(os.environ["F5OS_API_TIMEOUT"])
            return F5OSConfig(**values)
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Invalid configuration in environment variables: {e}")
            raise ConfigurationError(f"Invalid configuration in environment variables: {e}")

    @classmethod
    def _load_from_config_file(cls, profile: str) -> Optional[F5OSConfig]:
        """Load configuration from config file."""
        config_file = cls.DEFAULT_CONFIG_FILE

        if not config_file.exists():
            logger.debug(f"Config file not found: {config_file}")
            return None

        cls._verify_file_permissions(config_file)

        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)

            if profile not in config_data:
                logger.debug(f"Profile '{profile}' not found in config file")
                return None

            profile_config = dict(config_data[profile])
            if not profile_config.get("password"):
                profile_config["password"] = cls._keyring_password(profile)
                if not profile_config["password"]:
                    raise ConfigurationError(
                        f"Profile '{profile}' has no password in the config file or keyring"
                    )
            return F5OSConfig(**profile_config)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}")
            raise ConfigurationError(f"Invalid JSON in config file: {e}")
        except PydanticValidationError as e:
            logger.error(f"Invalid profile '{profile}' in config file: {e}")
            raise ConfigurationError(f"Invalid profile '{profile}' in config file: {e}")
        except OSError as e:
            logger.error(f"Error loading config file: {e}")
            raise ConfigurationError(f"Error loading config file: {e}")

    @classmethod
    def _load_from_keyring(cls, profile: str) -> Optional[F5OSConfig]:
        """Load a full profile stored as JSON in the keyring."""
        try:
            stored = keyring.get_password(cls.KEYRING_SERVICE_NAME, f"profile:{profile}")
            if not stored:
                return None
            return F5OSConfig(**json.loads(stored))
        except (KeyringError, ValueError, TypeError) as e:
            logger.debug(f"Could not load from keyring: {e}")
            return None

    @classmethod
    def _keyring_password(cls, profile: str) -> Optional[str]:
        try:
            return keyring.get_password(cls.KEYRING_SERVICE_NAME, profile)
        except KeyringError as e:
            logger.debug(f"Could not read password from keyring: {e}")
            return None

    @classmethod
    def save_profile(cls, profile: str, config: F5OSConfig, use_keyring: bool = False) -> None:
        """
        Save configuration profile to config file.

        Args:
            profile: Profile name
            config: F5OS configuration to save
            use_keyring: Store the password in the keyring instead of the file

        Raises:
            ConfigurationError: If save operation fails
        """
        config_file = cls.DEFAULT_CONFIG_FILE
        config_file.parent.mkdir(parents=True, exist_ok=True)

        config_data = cls._read_config_file() if config_file.exists() else {}

        entry = config.model_dump(exclude_none=True)
        if use_keyring:
            try:
                keyring.set_password(cls.KEYRING_SERVICE_NAME, profile, config.password)
            except KeyringError as e:
                raise ConfigurationError(f"Could not store password in keyring: {e}")
            entry.pop("password")
        config_data[profile] = entry

        try:
            with open(config_file, 'w') as f:
                json.dump(config_data, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Could not write config file: {e}")

        cls._set_secure_permissions(config_file)

        logger.info(f"Saved profile '{profile}' to config file")

    @classmethod
    def delete_profile(cls, profile: str) -> None:
        """
        Delete a profile from the config file and its keyring password.

        Raises:
            ConfigurationError: If profile doesn't exist or deletion fails
        """
        config_file = cls.DEFAULT_CONFIG_FILE

        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")

        config_data = cls._read_config_file()

        if profile not in config_data:
            raise ConfigurationError(f"Profile '{profile}' not found")

        del config_data[profile]

        with open(config_file, 'w') as f:
            json.dump(config_data, f, indent=2)

        cls._set_secure_permissions(config_file)

        try:
            keyring.delete_password(cls.KEYRING_SERVICE_NAME, profile)
        except KeyringError:
            logger.debug(f"No keyring password stored for profile '{profile}'")

        logger.info(f"Deleted profile '{profile}' from config file")

    @classmethod
    def list_profiles(cls) -> List[str]:
        """List all configured profiles."""
        if not cls.DEFAULT_CONFIG_FILE.exists():
            return []
        return list(cls._read_config_file().keys())

    @classmethod
    def get_profile_info(cls, profile: str) -> Dict[str, Any]:
        """
        Get non-sensitive information about a profile.

        Returns:
            Dictionary with host, port, username and verify_ssl (no password)

        Raises:
            ConfigurationError: If profile doesn't exist
        """
        config_file = cls.DEFAULT_CONFIG_FILE

        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")

        config_data = cls._read_config_file()

        if profile not in config_data:
            raise ConfigurationError(f"Profile '{profile}' not found")

        profile_config = config_data[profile]
        return {
            "host": profile_config.get("host"),
            "port": profile_config.get("port"),
            "username": profile_config.get("username"),
            "verify_ssl": profile_config.get("verify_ssl", True),
            "password_in": "config file" if profile_config.get("password") else "keyring",
        }

    @classmethod
    def _read_config_file(cls) -> Dict[str, Any]:
        config_file = cls.DEFAULT_CONFIG_FILE
        cls._verify_file_permissions(config_file)
        try:
            with open(config_file, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file: {e}")

    @classmethod
    def _set_secure_permissions(cls, file_path: Path) -> None:
        """Set secure file permissions (0600 - owner read/write only)."""
        try:
            os.chmod(file_path, cls.REQUIRED_FILE_PERMISSIONS)
            logger.debug(f"Set secure permissions on {file_path}")
        except OSError as e:
            logger.warning(f"Could not set secure permissions on {file_path}: {e}")

    @classmethod
    def _verify_file_permissions(cls, file_path: Path) -> None:
        """Verify file has secure permissions and fix them if not."""
        try:
            current_perms = os.stat(file_path).st_mode & 0o777
        except OSError as e:
            logger.debug(f"Could not verify file permissions: {e}")
            return

        if current_perms != cls.REQUIRED_FILE_PERMISSIONS:
            logger.warning(
                f"Config file {file_path} has insecure permissions {oct(current_perms)}. "
                f"Recommended: {oct(cls.REQUIRED_FILE_PERMISSIONS)}"
            )
            cls._set_secure_permissions(file_path)

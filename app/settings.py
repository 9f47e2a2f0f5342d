import json
from pathlib import Path
from typing import Set, Any, Dict, List
from urllib.request import getproxies

import dotenv
from loguru import logger
from pydantic import SecretStr, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from telegram.ext import Application

dotenv.load_dotenv()


PROJECT_DIR = Path(__file__).parent
LOG_DIR = PROJECT_DIR.joinpath("logs")

DEEPL_FREE_API_BASE_URL = "https://api-free.deepl.com/v2"
DEEPL_PRO_API_BASE_URL = "https://api.deepl.com/v2"

# Fields google-auth needs to sign tokens for a service account
SERVICE_ACCOUNT_KEYS = ["client_email", "private_key", "token_uri"]


class ConfigurationError(RuntimeError):
    """Startup configuration cannot be used; the bot must not start polling."""


class MissingConfigurationError(ConfigurationError):
    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing required settings: {', '.join(missing)}")


class InvalidConfigurationError(ConfigurationError):
    pass


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    TELEGRAM_BOT_API_TOKEN: SecretStr = Field(
        default="", description="Bot API token issued by https://t.me/BotFather"
    )

    DEEPL_API_KEY: SecretStr = Field(
        default="", description="DeepL API authentication key. Free-plan keys end with `:fx`."
    )

    DEEPL_API_BASE_URL: str = Field(
        default="",
        description="DeepL API endpoint. Derived from DEEPL_API_KEY when left empty.",
    )

    GOOGLE_APPLICATION_CREDENTIALS_JSON: SecretStr = Field(
        default="",
        description="Google Cloud service account key (the JSON document itself, not a path) "
        "with access to the Cloud Vision API.",
    )

    TELEGRAM_CHAT_WHITELIST: str = Field(
        default="", description="Comma separated chat ids allowed to use the bot. Empty allows all."
    )

    whitelist: Set[int] = Field(
        default_factory=set,
        description="Chat ids parsed from TELEGRAM_CHAT_WHITELIST",
    )

    LOG_LEVEL: str = Field(default="DEBUG", description="Lowest level written to stdout")

    LOG_TIMEZONE: str = Field(default="UTC", description="Time zone of log timestamps")

    HTTP_REQUEST_TIMEOUT: float = Field(
        default=75.0,
        description="Timeout in seconds for Telegram API calls and image downloads. "
        "The library default is 5 seconds, which is too short for large photos.",
    )

    def model_post_init(self, context: Any, /) -> None:
        try:
            if not self.whitelist and self.TELEGRAM_CHAT_WHITELIST:
                self.whitelist = {
                    int(i.strip()) for i in filter(None, self.TELEGRAM_CHAT_WHITELIST.split(","))
                }
        except Exception as err:
            logger.warning(f"Failed to parse TELEGRAM_CHAT_WHITELIST - {err}")

        if not self.DEEPL_API_BASE_URL:
            api_key = self.DEEPL_API_KEY.get_secret_value()
            self.DEEPL_API_BASE_URL = (
                DEEPL_FREE_API_BASE_URL if api_key.endswith(":fx") else DEEPL_PRO_API_BASE_URL
            )

    def ensure_required(self) -> None:
        """Raise MissingConfigurationError listing every required setting that is empty."""
        required = {
            "TELEGRAM_BOT_API_TOKEN": self.TELEGRAM_BOT_API_TOKEN,
            "DEEPL_API_KEY": self.DEEPL_API_KEY,
            "GOOGLE_APPLICATION_CREDENTIALS_JSON": self.GOOGLE_APPLICATION_CREDENTIALS_JSON,
        }
        missing = [name for name, value in required.items() if not value.get_secret_value()]
        if missing:
            raise MissingConfigurationError(missing)

    def google_credentials_info(self) -> Dict[str, Any]:
        raw = self.GOOGLE_APPLICATION_CREDENTIALS_JSON.get_secret_value()
        try:
            info = json.loads(raw)
        except json.JSONDecodeError as err:
            raise InvalidConfigurationError(
                f"GOOGLE_APPLICATION_CREDENTIALS_JSON is not valid JSON - {err}"
            ) from err
        if not isinstance(info, dict):
            raise InvalidConfigurationError(
                "GOOGLE_APPLICATION_CREDENTIALS_JSON must be a JSON object"
            )
        if missing := [key for key in SERVICE_ACCOUNT_KEYS if not info.get(key)]:
            raise InvalidConfigurationError(
                "GOOGLE_APPLICATION_CREDENTIALS_JSON lacks service account keys: "
                f"{', '.join(missing)}"
            )
        return info

    def get_default_application(self) -> Application:
        _base_builder = (
            Application.builder()
            .token(self.TELEGRAM_BOT_API_TOKEN.get_secret_value())
            .connect_timeout(self.HTTP_REQUEST_TIMEOUT)
            .write_timeout(self.HTTP_REQUEST_TIMEOUT)
            .read_timeout(self.HTTP_REQUEST_TIMEOUT)
        )
        if proxy_url := getproxies().get("http"):
            logger.success(f"Using proxy: {proxy_url}")
            application = _base_builder.proxy(proxy_url).get_updates_proxy(proxy_url).build()
        else:
            application = _base_builder.build()

        return application


settings = Settings()  # type: ignore

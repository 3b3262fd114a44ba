"""Configuration management for the weather CLI."""

import os
import sys
from typing import Optional, Dict, Any
from pathlib import Path
from dotenv import load_dotenv

# 環境変数ファイルの読み込み
# カレントディレクトリの.envファイルを優先順に読み込む
env_files = ['.env', '.env.local']
for env_file in env_files:
    if os.path.exists(env_file):
        load_dotenv(env_file)
        break


UNIT_MATCH_STRATEGIES = ('substring', 'exact')


class Config:
    """Configuration class for the weather CLI."""

    # 環境設定
    ENVIRONMENT: str = os.getenv('ENVIRONMENT', 'development')

    # OpenWeatherMap API Configuration
    OWM_API_KEY: str = os.getenv('OWM_API_KEY', '')
    OWM_BASE_URL: str = os.getenv('OWM_BASE_URL', 'https://api.openweathermap.org/data/2.5')

    # IP Geolocation Configuration
    GEOLOCATION_URL: str = os.getenv('GEOLOCATION_URL', 'http://ip-api.com/json')

    # HTTP Configuration
    HTTP_REQUEST_TIMEOUT: float = float(os.getenv('HTTP_REQUEST_TIMEOUT', '30'))  # seconds
    HTTP_CONNECT_TIMEOUT: float = float(os.getenv('HTTP_CONNECT_TIMEOUT', '10'))  # seconds
    WEATHER_MAX_RETRIES: int = int(os.getenv('WEATHER_MAX_RETRIES', '0'))

    # Lookup Configuration
    UNIT_MATCH_STRATEGY: str = os.getenv('UNIT_MATCH_STRATEGY', 'substring').lower()
    FORECAST_DAYS: int = int(os.getenv('FORECAST_DAYS', '5'))

    # Logging Configuration
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', '')
    LOG_FILE: str = os.getenv('LOG_FILE', '')

    # 環境別設定
    def __init__(self):
        """環境に応じた設定を初期化"""
        self._apply_environment_settings()

    def _apply_environment_settings(self):
        """環境に応じた設定を適用"""
        if not self.LOG_LEVEL:
            if self.ENVIRONMENT == 'development':
                self.LOG_LEVEL = 'WARNING'
            elif self.ENVIRONMENT == 'staging':
                self.LOG_LEVEL = 'INFO'
            else:
                self.LOG_LEVEL = 'ERROR'

        # ログファイルパスの調整（相対パスはlogs/配下）
        if self.LOG_FILE and not os.path.isabs(self.LOG_FILE):
            self.LOG_FILE = str(Path('logs') / self.LOG_FILE)

    @classmethod
    def validate(cls) -> bool:
        """Validate configuration values."""
        config_instance = cls()
        errors = []

        if config_instance.UNIT_MATCH_STRATEGY not in UNIT_MATCH_STRATEGIES:
            errors.append(
                f"UNIT_MATCH_STRATEGY must be one of {', '.join(UNIT_MATCH_STRATEGIES)}"
            )
        if config_instance.HTTP_REQUEST_TIMEOUT <= 0:
            errors.append("HTTP_REQUEST_TIMEOUT must be positive")
        if config_instance.HTTP_CONNECT_TIMEOUT <= 0:
            errors.append("HTTP_CONNECT_TIMEOUT must be positive")
        if config_instance.WEATHER_MAX_RETRIES < 0:
            errors.append("WEATHER_MAX_RETRIES must not be negative")
        if config_instance.FORECAST_DAYS <= 0:
            errors.append("FORECAST_DAYS must be positive")

        if errors:
            raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

        return True

    def get_api_key(self) -> str:
        """APIキーを取得（呼び出し時点の環境変数を優先）"""
        return os.getenv('OWM_API_KEY', self.OWM_API_KEY)

    def _mask_secret(self, value: Optional[str]) -> str:
        """APIキーなどの機密情報をマスク"""
        if not value:
            return ''
        if len(value) <= 4:
            return '***'
        return f"{value[:4]}***"

    def get_environment_info(self) -> Dict[str, Any]:
        """環境情報を取得"""
        return {
            "environment": self.ENVIRONMENT,
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
            "log_level": self.LOG_LEVEL,
            "log_file": self.LOG_FILE,
            "api_key": self._mask_secret(self.get_api_key()),
            "base_url": self.OWM_BASE_URL,
            "unit_match_strategy": self.UNIT_MATCH_STRATEGY,
        }


# Global config instance
config = Config()

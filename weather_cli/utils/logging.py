"""Logging configuration for the weather CLI."""

import logging
import logging.handlers
import sys
import json
from datetime import datetime
from pathlib import Path
from weather_cli.config import config


LOGGER_NAME = "weather_cli"


class JSONFormatter(logging.Formatter):
    """JSON形式のログフォーマッター"""

    def format(self, record):
        """ログレコードをJSON形式に変換"""
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        # 例外情報があれば追加
        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
            }

        # 追加のコンテキスト情報があれば追加
        if hasattr(record, 'context') and record.context:
            log_data['context'] = record.context

        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(level: str = None, log_file: str = None) -> logging.Logger:
    """Set up logging configuration for the CLI.

    標準出力は描画結果専用のため、コンソールハンドラーは標準エラー出力に書き込む。
    """
    level_name = (level or config.LOG_LEVEL or 'WARNING').upper()
    log_file = config.LOG_FILE if log_file is None else log_file

    # Create logger
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level_name, logging.WARNING))

    # Clear existing handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    # 環境に応じたフォーマッターを選択
    if config.ENVIRONMENT == 'production':
        # 本番環境ではJSON形式
        detailed_formatter = JSONFormatter()
    else:
        # 開発環境では読みやすいテキスト形式
        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        )
    simple_formatter = logging.Formatter('%(levelname)s: %(message)s')

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logger.level)
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    # File handler with rotation（LOG_FILEが設定されている場合のみ）
    if log_file:
        file_path = Path(log_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            file_path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    # ルートロガーへの伝播を止め、二重出力を防ぐ
    logger.propagate = False

    logger.debug(f"ログシステムを初期化しました - 環境: {config.ENVIRONMENT}, レベル: {level_name}")

    return logger


class ContextLogger:
    """コンテキスト情報付きのロガー"""

    def __init__(self, logger, context=None):
        self.logger = logger
        self.context = context or {}

    def _log_with_context(self, level, msg, *args, **kwargs):
        """コンテキスト情報を付加してログを記録"""
        if kwargs.get('extra') is None:
            kwargs['extra'] = {}
        kwargs['extra']['context'] = self.context
        getattr(self.logger, level)(msg, *args, **kwargs)

    def debug(self, msg, *args, **kwargs):
        self._log_with_context('debug', msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self._log_with_context('info', msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self._log_with_context('warning', msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self._log_with_context('error', msg, *args, **kwargs)

    def with_context(self, **context):
        """新しいコンテキスト情報を追加したロガーを返す"""
        new_context = {**self.context, **context}
        return ContextLogger(self.logger, new_context)


# Global logger instance
base_logger = setup_logging()
logger = ContextLogger(base_logger)

"""ログ設定のユニットテスト"""

import json
import logging

from weather_cli.utils.logging import ContextLogger, JSONFormatter, LOGGER_NAME, setup_logging


class TestLogging:
    """ログ設定のテストクラス"""

    def test_setup_logging_writes_file(self, tmp_path):
        """ログファイル出力のテスト"""
        log_file = tmp_path / "logs" / "weather.log"
        logger = setup_logging(level="DEBUG", log_file=str(log_file))
        try:
            logger.debug("debug message")
            for handler in logger.handlers:
                handler.flush()

            assert logger.name == LOGGER_NAME
            assert logger.level == logging.DEBUG
            assert "debug message" in log_file.read_text(encoding="utf-8")
        finally:
            setup_logging(log_file="")

    def test_context_logger_attaches_context(self):
        """コンテキスト情報の付加テスト"""
        records = []

        class ListHandler(logging.Handler):
            def emit(self, record):
                records.append(record)

        base = logging.getLogger("weather_cli.test_context")
        base.setLevel(logging.INFO)
        base.addHandler(ListHandler())

        logger = ContextLogger(base, {"location": "Dublin"}).with_context(mode="forecast")
        logger.info("hello")

        assert records[0].context == {"location": "Dublin", "mode": "forecast"}

    def test_json_formatter(self):
        """JSON形式のフォーマットテスト"""
        record = logging.LogRecord("weather_cli", logging.ERROR, __file__, 10, "失敗: %s", ("Dublin",), None)
        record.context = {"mode": "current"}

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "ERROR"
        assert data["message"] == "失敗: Dublin"
        assert data["context"] == {"mode": "current"}

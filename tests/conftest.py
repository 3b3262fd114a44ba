"""
pytest設定ファイル

全テストで共通して使用されるフィクスチャとセットアップを定義します。
"""

import os

import pytest


@pytest.fixture(autouse=True)
def setup_test_environment():
    """テスト環境のセットアップ"""
    # テスト用の環境変数を設定
    original_env = {}
    test_env = {
        'TESTING': 'true',
        'OWM_API_KEY': 'test_api_key',
    }

    for key, value in test_env.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield

    # 環境変数を復元
    for key, value in original_env.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def current_weather_payload():
    """モック用の現在の天気レスポンス"""
    return {
        "coord": {"lon": -75.1638, "lat": 39.9523},
        "weather": [
            {"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}
        ],
        "main": {
            "temp": 72,
            "feels_like": 71.2,
            "temp_min": 68,
            "temp_max": 75,
            "pressure": 1018,
            "humidity": 40
        },
        "dt": 1700000000,
        "id": 4560349,
        "name": "Philadelphia"
    }


@pytest.fixture
def forecast_payload():
    """モック用の天気予報レスポンス（2件）"""
    return {
        "cnt": 2,
        "list": [
            {
                "dt": 1700006400,
                "main": {"temp": 280.3, "temp_min": 279.1, "temp_max": 281.0, "pressure": 1012, "humidity": 81},
                "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
                "dt_txt": "2023-11-15 00:00:00"
            },
            {
                "dt": 1700017200,
                "main": {"temp": 278.9, "temp_min": 278.0, "temp_max": 279.5, "pressure": 1013, "humidity": 85},
                "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04n"}],
                "dt_txt": "2023-11-15 03:00:00"
            }
        ],
        "city": {
            "id": 2964574,
            "name": "Dublin",
            "coord": {"lat": 53.3441, "lon": -6.2675},
            "country": "IE"
        }
    }


@pytest.fixture
def location_payload():
    """モック用のジオロケーションレスポンス"""
    return {
        "status": "success",
        "country": "Ireland",
        "countryCode": "IE",
        "region": "L",
        "regionName": "Leinster",
        "city": "Dublin",
        "zip": "D02",
        "lat": 53.3498,
        "lon": -6.2603,
        "timezone": "Europe/Dublin",
        "isp": "Example ISP",
        "org": "Example Org",
        "as": "AS0000 Example",
        "query": "203.0.113.7"
    }


def pytest_collection_modifyitems(config, items):
    """テスト収集時の処理"""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def suppress_logs():
    """ログ出力を抑制"""
    import logging
    logging.disable(logging.CRITICAL)
    yield
    logging.disable(logging.NOTSET)

"""GeolocationServiceのユニットテスト"""

from unittest.mock import AsyncMock, patch

import pytest

from weather_cli.models.location import LocationInfo
from weather_cli.services.api_client import WeatherAPIDecodeError, WeatherAPIServerError
from weather_cli.services.geolocation_service import GeolocationService, GeolocationError
from http_mocks import make_response, make_session


class TestGeolocationService:
    """GeolocationServiceのユニットテストクラス"""

    @pytest.fixture
    def geolocation_service(self):
        return GeolocationService(url="http://geo.example.test/json")

    @pytest.mark.asyncio
    async def test_locate_success(self, geolocation_service, location_payload):
        """所在地取得成功のテスト"""
        with patch.object(geolocation_service, '_make_request', new_callable=AsyncMock) as mock_request:
            mock_request.return_value = location_payload

            result = await geolocation_service.locate()

            assert isinstance(result, LocationInfo)
            assert result.city == "Dublin"
            assert result.country_code == "IE"
            assert result.region_name == "Leinster"
            assert result.as_number == "AS0000 Example"
            assert result.lat == 53.3498
            assert result.message is None
            mock_request.assert_awaited_once_with("http://geo.example.test/json")

    @pytest.mark.asyncio
    async def test_locate_minimal_payload(self, geolocation_service):
        """都市名のみのレスポンスのテスト"""
        with patch.object(geolocation_service, '_make_request', new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {"city": "Dublin"}

            result = await geolocation_service.locate()

            assert result.city == "Dublin"
            assert result.country == ""
            assert result.lat == 0.0

    @pytest.mark.asyncio
    async def test_locate_fail_status(self, geolocation_service):
        """APIが失敗を返した場合のテスト"""
        with patch.object(geolocation_service, '_make_request', new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {"status": "fail", "message": "private range", "query": "10.0.0.1"}

            with pytest.raises(GeolocationError, match="private range"):
                await geolocation_service.locate()

    @pytest.mark.asyncio
    async def test_locate_without_city(self, geolocation_service):
        """都市名が無い場合のテスト"""
        with patch.object(geolocation_service, '_make_request', new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {"status": "success", "country": "Ireland"}

            with pytest.raises(GeolocationError, match="都市名"):
                await geolocation_service.locate()

    @pytest.mark.asyncio
    async def test_locate_invalid_payload(self, geolocation_service):
        """不正なレスポンスのテスト"""
        with patch.object(geolocation_service, '_make_request', new_callable=AsyncMock) as mock_request:
            mock_request.return_value = "Dublin"
            with pytest.raises(WeatherAPIDecodeError):
                await geolocation_service.locate()

            mock_request.return_value = {"city": "Dublin", "lat": "north"}
            with pytest.raises(WeatherAPIDecodeError, match="所在地データの解析"):
                await geolocation_service.locate()

    @pytest.mark.asyncio
    async def test_locate_http_error(self, geolocation_service):
        """HTTPエラーのテスト"""
        geolocation_service.max_retries = 0
        geolocation_service.session = make_session(make_response(503, ""))

        with pytest.raises(WeatherAPIServerError):
            await geolocation_service.locate()

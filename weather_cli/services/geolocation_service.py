"""
IPジオロケーションサービス

実行環境のIPアドレスからおおよその所在地を取得する
"""

from typing import Optional

from ..config import config
from ..models.location import LocationInfo
from .api_client import APIClient, WeatherAPIError, WeatherAPIDecodeError


class GeolocationError(WeatherAPIError):
    """所在地を特定できなかった場合のエラー"""
    pass


class GeolocationService(APIClient):
    """ip-api.com を使ったジオロケーションサービス"""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None, **kwargs):
        super().__init__(timeout=timeout, **kwargs)
        self.url = url or config.GEOLOCATION_URL

    async def locate(self) -> LocationInfo:
        """
        現在地を取得

        Returns:
            所在地情報

        Raises:
            GeolocationError: APIが失敗を返した、または都市名が得られない場合
            WeatherAPIError: API呼び出しに失敗した場合
        """
        data = await self._make_request(self.url)

        if not isinstance(data, dict):
            raise WeatherAPIDecodeError("ジオロケーションのレスポンス形式が不正です")

        try:
            location = LocationInfo.from_dict(data)
        except (TypeError, ValueError) as e:
            self.logger.debug(f"所在地データの解析に失敗しました: {str(e)}")
            raise WeatherAPIDecodeError(f"所在地データの解析に失敗しました: {str(e)}")

        if not location.is_success:
            message = location.message or '理由不明'
            self.logger.debug(f"所在地を特定できませんでした: {message} ({location.query})")
            raise GeolocationError(f"所在地を特定できませんでした: {message}")

        if not location.city:
            raise GeolocationError("所在地の都市名を取得できませんでした")

        self.logger.info(f"所在地を取得しました: {location.city}, {location.country}")
        return location

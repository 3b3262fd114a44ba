"""
OpenWeatherMap APIサービス

現在の天気（地名・座標・都市ID）と5日間予報を取得するサービス
"""

from typing import Any, Dict, List, Optional, Tuple

from ..config import config
from ..models.weather import (
    Coordinates,
    CurrentWeather,
    ForecastCity,
    ForecastEntry,
    ForecastWeather,
    MainMeasurements,
    WeatherCondition,
)
from .api_client import APIClient, WeatherAPIError, WeatherAPIDecodeError
from .units import validate_unit, provider_units


class WeatherService(APIClient):
    """OpenWeatherMap APIサービス"""

    USER_AGENT = 'weather-cli/1.0 (OpenWeatherMap client)'

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[float] = None, unit_match_strategy: Optional[str] = None,
                 **kwargs):
        """WeatherServiceの初期化"""
        super().__init__(timeout=timeout, **kwargs)
        self._api_key = api_key
        self.base_url = (base_url or config.OWM_BASE_URL).rstrip('/')
        self.unit_match_strategy = unit_match_strategy

    @property
    def api_key(self) -> str:
        """APIキー（未指定の場合は呼び出し時点の環境変数）"""
        if self._api_key is not None:
            return self._api_key
        return config.get_api_key()

    def _build_current_url(self) -> str:
        """現在の天気APIのURLを構築"""
        return f"{self.base_url}/weather"

    def _build_forecast_url(self) -> str:
        """天気予報APIのURLを構築"""
        return f"{self.base_url}/forecast"

    def _build_params(self, query: Dict[str, Any], unit: str, lang: str) -> Tuple[Dict[str, Any], str]:
        """
        クエリパラメータを構築

        単位と言語の検証はリクエスト前にここで行う

        Returns:
            (クエリパラメータ, 一致した単位トークン)
        """
        token = validate_unit(unit, self.unit_match_strategy)

        if not lang or len(lang) != 2:
            raise WeatherAPIError(f"言語コードは2文字で指定してください: {lang!r}")

        params = dict(query)
        params['units'] = provider_units(token)
        params['lang'] = lang.lower()
        params['appid'] = self.api_key
        return params, token

    def _name_query(self, location: str) -> Dict[str, Any]:
        if not location or not location.strip():
            raise WeatherAPIError("地名が指定されていません")
        return {'q': location.strip()}

    def _coordinates_query(self, lat: float, lon: float) -> Dict[str, Any]:
        if not -90 <= lat <= 90 or not -180 <= lon <= 180:
            raise WeatherAPIError(f"無効な座標です: {lat}, {lon}")
        return {'lat': f"{lat:f}", 'lon': f"{lon:f}"}

    def _id_query(self, city_id: int) -> Dict[str, Any]:
        if isinstance(city_id, bool) or not isinstance(city_id, int) or city_id <= 0:
            raise WeatherAPIError(f"無効な都市IDです: {city_id}")
        return {'id': city_id}

    def _forecast_query(self, query: Dict[str, Any], days: int) -> Dict[str, Any]:
        if days <= 0:
            raise WeatherAPIError(f"予報件数は1以上で指定してください: {days}")
        return {**query, 'cnt': days}

    # ------------------------------------------------------------------
    # 現在の天気
    # ------------------------------------------------------------------

    async def current_by_name(self, location: str, unit: str, lang: str) -> CurrentWeather:
        """
        地名から現在の天気を取得

        Args:
            location: 地名（例: "Philadelphia", "Las Vegas"）
            unit: 単位（'c', 'f', 'k'）
            lang: 2文字の言語コード

        Returns:
            現在の天気データ

        Raises:
            WeatherAPIError: 検証またはAPI呼び出しに失敗した場合
        """
        params, token = self._build_params(self._name_query(location), unit, lang)
        return await self._fetch_current(params, token)

    async def current_by_coordinates(self, lat: float, lon: float, unit: str, lang: str) -> CurrentWeather:
        """座標から現在の天気を取得"""
        params, token = self._build_params(self._coordinates_query(lat, lon), unit, lang)
        return await self._fetch_current(params, token)

    async def current_by_id(self, city_id: int, unit: str, lang: str) -> CurrentWeather:
        """都市IDから現在の天気を取得"""
        params, token = self._build_params(self._id_query(city_id), unit, lang)
        return await self._fetch_current(params, token)

    async def _fetch_current(self, params: Dict[str, Any], unit: str) -> CurrentWeather:
        data = await self._make_request(self._build_current_url(), params)
        weather = self._parse_current_weather(data, unit)
        self.logger.info(f"現在の天気を取得しました: {weather.name}")
        return weather

    # ------------------------------------------------------------------
    # 天気予報
    # ------------------------------------------------------------------

    async def forecast(self, location: str, unit: str, lang: str, days: int = 5) -> ForecastWeather:
        """
        地名から天気予報を取得

        Args:
            location: 地名
            unit: 単位（'c', 'f', 'k'）
            lang: 2文字の言語コード
            days: 取得する予報エントリ数（APIの cnt パラメータ）

        Returns:
            天気予報データ

        Raises:
            WeatherAPIError: 検証またはAPI呼び出しに失敗した場合
        """
        query = self._forecast_query(self._name_query(location), days)
        params, token = self._build_params(query, unit, lang)
        return await self._fetch_forecast(params, token)

    async def forecast_by_coordinates(self, lat: float, lon: float, unit: str, lang: str,
                                      days: int = 5) -> ForecastWeather:
        """座標から天気予報を取得"""
        query = self._forecast_query(self._coordinates_query(lat, lon), days)
        params, token = self._build_params(query, unit, lang)
        return await self._fetch_forecast(params, token)

    async def forecast_by_id(self, city_id: int, unit: str, lang: str, days: int = 5) -> ForecastWeather:
        """都市IDから天気予報を取得"""
        query = self._forecast_query(self._id_query(city_id), days)
        params, token = self._build_params(query, unit, lang)
        return await self._fetch_forecast(params, token)

    async def _fetch_forecast(self, params: Dict[str, Any], unit: str) -> ForecastWeather:
        data = await self._make_request(self._build_forecast_url(), params)
        forecast = self._parse_forecast(data, unit)
        self.logger.info(f"天気予報を取得しました: {forecast.city.name} - {len(forecast.list)}件")
        return forecast

    # ------------------------------------------------------------------
    # レスポンスの解析
    # ------------------------------------------------------------------

    def _parse_conditions(self, items: Any) -> List[WeatherCondition]:
        conditions = []
        for item in items or []:
            conditions.append(WeatherCondition(
                id=item.get('id', 0),
                main=item.get('main', ''),
                description=item.get('description', ''),
                icon=item.get('icon', '')
            ))
        return conditions

    def _parse_main(self, main: Optional[Dict[str, Any]]) -> MainMeasurements:
        main = main or {}
        return MainMeasurements(
            temp=main.get('temp', 0),
            feels_like=main.get('feels_like', 0),
            temp_min=main.get('temp_min', 0),
            temp_max=main.get('temp_max', 0),
            pressure=main.get('pressure', 0),
            humidity=main.get('humidity', 0)
        )

    def _parse_coordinates(self, coord: Optional[Dict[str, Any]]) -> Optional[Coordinates]:
        if not coord:
            return None
        return Coordinates(
            latitude=coord.get('lat', 0.0),
            longitude=coord.get('lon', 0.0)
        )

    def _parse_current_weather(self, data: Any, unit: str) -> CurrentWeather:
        """現在の天気レスポンスをモデルに変換"""
        if not isinstance(data, dict):
            raise WeatherAPIDecodeError("現在の天気のレスポンス形式が不正です")

        try:
            return CurrentWeather(
                name=data.get('name', ''),
                weather=self._parse_conditions(data.get('weather')),
                main=self._parse_main(data.get('main')),
                unit=unit,
                id=data.get('id'),
                coordinates=self._parse_coordinates(data.get('coord')),
                dt=data.get('dt')
            )
        except (AttributeError, TypeError) as e:
            self.logger.debug(f"天気データの解析に失敗しました: {str(e)}")
            raise WeatherAPIDecodeError(f"天気データの解析に失敗しました: {str(e)}")

    def _parse_forecast(self, data: Any, unit: str) -> ForecastWeather:
        """天気予報レスポンスをモデルに変換"""
        if not isinstance(data, dict):
            raise WeatherAPIDecodeError("天気予報のレスポンス形式が不正です")

        try:
            city_data = data.get('city') or {}
            city = ForecastCity(
                name=city_data.get('name', ''),
                id=city_data.get('id'),
                country=city_data.get('country', ''),
                coordinates=self._parse_coordinates(city_data.get('coord'))
            )

            # APIの返却順を保持する
            entries = []
            for item in data.get('list') or []:
                entries.append(ForecastEntry(
                    dt=item.get('dt'),
                    dt_txt=item.get('dt_txt', ''),
                    weather=self._parse_conditions(item.get('weather')),
                    main=self._parse_main(item.get('main'))
                ))

            return ForecastWeather(
                city=city,
                list=entries,
                cnt=data.get('cnt', len(entries)),
                unit=unit
            )
        except (AttributeError, TypeError) as e:
            self.logger.debug(f"予報データの解析に失敗しました: {str(e)}")
            raise WeatherAPIDecodeError(f"予報データの解析に失敗しました: {str(e)}")

"""天気データ用のモデル定義"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Coordinates:
    """緯度経度"""
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass
class WeatherCondition:
    """天気の状態（分類と説明）"""
    id: int = 0
    main: str = ''
    description: str = ''
    icon: str = ''


@dataclass
class MainMeasurements:
    """気温・気圧・湿度の計測値"""
    temp: float = 0
    feels_like: float = 0
    temp_min: float = 0
    temp_max: float = 0
    pressure: float = 0
    humidity: float = 0


@dataclass
class CurrentWeather:
    """現在の天気データ"""
    name: str
    weather: List[WeatherCondition] = field(default_factory=list)
    main: MainMeasurements = field(default_factory=MainMeasurements)
    unit: str = ''
    id: Optional[int] = None
    coordinates: Optional[Coordinates] = None
    dt: Optional[int] = None


@dataclass
class ForecastEntry:
    """予報の1エントリ"""
    dt: Optional[int]
    dt_txt: str
    weather: List[WeatherCondition] = field(default_factory=list)
    main: MainMeasurements = field(default_factory=MainMeasurements)


@dataclass
class ForecastCity:
    """予報対象の都市"""
    name: str
    id: Optional[int] = None
    country: str = ''
    coordinates: Optional[Coordinates] = None


@dataclass
class ForecastWeather:
    """天気予報データ（エントリはAPIの返却順）"""
    city: ForecastCity
    list: List[ForecastEntry] = field(default_factory=list)
    cnt: int = 0
    unit: str = ''

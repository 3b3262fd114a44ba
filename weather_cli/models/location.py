"""IPジオロケーションの結果モデル"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class LocationInfo:
    """ip-api.com のレスポンス"""
    status: str
    country: str
    country_code: str
    region: str
    region_name: str
    city: str
    zip: str
    lat: float
    lon: float
    timezone: str
    isp: str
    org: str
    as_number: str
    query: str
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LocationInfo':
        """APIのJSONキーからモデルを作成"""
        return cls(
            status=data.get('status', ''),
            country=data.get('country', ''),
            country_code=data.get('countryCode', ''),
            region=data.get('region', ''),
            region_name=data.get('regionName', ''),
            city=data.get('city', ''),
            zip=data.get('zip', ''),
            lat=float(data.get('lat') or 0.0),
            lon=float(data.get('lon') or 0.0),
            timezone=data.get('timezone', ''),
            isp=data.get('isp', ''),
            org=data.get('org', ''),
            as_number=data.get('as', ''),
            query=data.get('query', ''),
            message=data.get('message'),
        )

    @property
    def is_success(self) -> bool:
        return self.status != 'fail'

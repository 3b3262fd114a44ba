"""
単位の検証

CLIで指定する1文字の単位をAPIの units パラメータへ対応付ける
"""

import logging
from typing import Optional

from ..config import config, UNIT_MATCH_STRATEGIES
from .api_client import WeatherAPIError


# 受け付ける単位とAPIの units 値の対応表
DATA_UNITS = {
    'c': 'metric',    # 摂氏
    'f': 'imperial',  # 華氏
    'k': 'standard',  # ケルビン
}

logger = logging.getLogger(__name__)


class UnsupportedUnitError(WeatherAPIError):
    """未対応の単位"""
    pass


def _resolve_strategy(strategy: Optional[str]) -> str:
    resolved = (strategy or config.UNIT_MATCH_STRATEGY or 'substring').lower()
    if resolved not in UNIT_MATCH_STRATEGIES:
        raise ValueError(f"未対応の照合方式です: {resolved}")
    return resolved


def validate_unit(unit: str, strategy: Optional[str] = None) -> str:
    """
    単位を検証し、一致した単位トークンを返す

    substring 方式では小文字化した入力にトークンが含まれていれば一致とみなす。
    exact 方式では完全一致のみ受け付ける。

    Args:
        unit: 指定された単位
        strategy: 'substring' または 'exact'（省略時は設定値）

    Returns:
        一致した単位トークン（'c', 'f', 'k'）

    Raises:
        UnsupportedUnitError: 単位が未対応の場合
    """
    unit_choice = (unit or '').lower()
    match_strategy = _resolve_strategy(strategy)

    for token in DATA_UNITS:
        if match_strategy == 'exact':
            matched = unit_choice == token
        else:
            matched = token in unit_choice
        if matched:
            logger.debug(f"単位を受け付けました: {unit!r} -> {token} ({match_strategy})")
            return token

    raise UnsupportedUnitError(f"未対応の単位です: {unit!r}")


def provider_units(token: str) -> str:
    """単位トークンをAPIの units 値に変換"""
    return DATA_UNITS[token]

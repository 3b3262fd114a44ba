"""
JSON APIクライアント

天気APIとジオロケーションAPIで共有するHTTPセッション管理、
ステータスチェック、JSONデコード、エラー分類を提供する
"""

import asyncio
import logging
import json
from typing import Dict, Optional, Any
import aiohttp
from aiohttp import ClientTimeout, ClientError

from ..config import config


class WeatherAPIError(Exception):
    """API関連のエラー"""
    def __init__(self, message: str, status_code: Optional[int] = None, retry_after: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after


class WeatherAPINetworkError(WeatherAPIError):
    """ネットワークエラー"""
    pass


class WeatherAPITimeoutError(WeatherAPIError):
    """タイムアウトエラー"""
    pass


class WeatherAPIStatusError(WeatherAPIError):
    """想定外のHTTPステータス"""
    pass


class WeatherAPIRateLimitError(WeatherAPIStatusError):
    """レート制限エラー"""
    pass


class WeatherAPIServerError(WeatherAPIStatusError):
    """サーバーエラー"""
    pass


class WeatherAPIDecodeError(WeatherAPIError):
    """レスポンスのデコードエラー"""
    pass


class APIClient:
    """aiohttpセッションを1つ保持するJSON APIクライアント"""

    # リトライ設定
    RETRY_DELAY = 1.0  # 秒
    BACKOFF_FACTOR = 2.0
    MAX_RETRY_DELAY = 60.0  # 最大リトライ間隔

    USER_AGENT = 'weather-cli/1.0'

    # ログに出さないクエリパラメータ
    REDACTED_PARAMS = ('appid',)

    def __init__(self, timeout: Optional[float] = None, connect_timeout: Optional[float] = None,
                 max_retries: Optional[int] = None):
        self.logger = logging.getLogger(__name__)
        self.session: Optional[aiohttp.ClientSession] = None

        self.request_timeout = timeout if timeout is not None else config.HTTP_REQUEST_TIMEOUT
        self.connect_timeout = connect_timeout if connect_timeout is not None else config.HTTP_CONNECT_TIMEOUT
        self.max_retries = max_retries if max_retries is not None else config.WEATHER_MAX_RETRIES

    async def __aenter__(self):
        """非同期コンテキストマネージャーの開始"""
        await self.start_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """非同期コンテキストマネージャーの終了"""
        await self.close_session()

    async def start_session(self):
        """HTTPセッションを開始"""
        if self.session is None or self.session.closed:
            timeout = ClientTimeout(
                total=self.request_timeout,
                connect=self.connect_timeout
            )
            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers={
                    'User-Agent': self.USER_AGENT,
                    'Accept': 'application/json',
                }
            )
            self.logger.debug("HTTPセッションを開始しました")

    async def close_session(self):
        """HTTPセッションを終了"""
        if self.session and not self.session.closed:
            await self.session.close()
            self.logger.debug("HTTPセッションを終了しました")

    def _describe_request(self, url: str, params: Optional[Dict[str, Any]]) -> str:
        """ログ用にAPIキーを伏せたリクエスト表記を作成"""
        if not params:
            return url
        shown = {
            key: ('***' if key in self.REDACTED_PARAMS else value)
            for key, value in params.items()
        }
        query = '&'.join(f"{key}={value}" for key, value in shown.items())
        return f"{url}?{query}"

    def _retry_delay(self, retries: int) -> float:
        return min(self.RETRY_DELAY * (self.BACKOFF_FACTOR ** retries), self.MAX_RETRY_DELAY)

    def _extract_error_message(self, body: str) -> str:
        """エラーレスポンスの本文からメッセージを取り出す"""
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, TypeError):
            return ''
        if isinstance(data, dict):
            return str(data.get('message', ''))
        return ''

    async def _make_request(self, url: str, params: Optional[Dict[str, Any]] = None, retries: int = 0) -> Any:
        """
        GETリクエストを実行しJSONを返す（リトライ機能付き）

        Args:
            url: リクエストURL
            params: クエリパラメータ
            retries: 現在のリトライ回数

        Returns:
            デコード済みのJSONデータ

        Raises:
            WeatherAPIError: API呼び出しに失敗した場合
        """
        if self.session is None or self.session.closed:
            await self.start_session()

        description = self._describe_request(url, params)

        try:
            self.logger.debug(f"APIリクエスト開始: {description}")

            async with self.session.get(url, params=params) as response:
                # レスポンスヘッダーからレート制限情報を取得
                retry_after = None
                if 'Retry-After' in response.headers:
                    try:
                        retry_after = int(response.headers['Retry-After'])
                    except ValueError:
                        pass

                try:
                    body = await response.text()
                except UnicodeDecodeError as e:
                    self.logger.debug(f"レスポンス本文のデコードエラー: {description} - {str(e)}")
                    raise WeatherAPIDecodeError(
                        f"レスポンス本文のデコードに失敗しました: {str(e)}",
                        status_code=response.status
                    )

                # HTTPステータスコードをチェック（デコードより先に行う）
                if 200 <= response.status < 300:
                    try:
                        data = json.loads(body)
                    except json.JSONDecodeError as e:
                        self.logger.debug(f"JSONデコードエラー: {description} - {str(e)}")
                        raise WeatherAPIDecodeError(
                            f"レスポンスのJSONデコードに失敗しました: {str(e)}",
                            status_code=response.status
                        )
                    self.logger.debug(f"APIリクエスト成功: {description}")
                    return data

                detail = self._extract_error_message(body)
                suffix = f": {detail}" if detail else ""

                if response.status == 429:  # レート制限
                    self.logger.debug(f"レート制限に達しました: {description}")
                    raise WeatherAPIRateLimitError(
                        f"レート制限に達しました (HTTP {response.status}){suffix}",
                        status_code=response.status,
                        retry_after=retry_after
                    )

                elif response.status >= 500:  # サーバーエラー
                    self.logger.debug(f"サーバーエラー: {description} (HTTP {response.status})")
                    raise WeatherAPIServerError(
                        f"サーバーエラー (HTTP {response.status}){suffix}",
                        status_code=response.status,
                        retry_after=retry_after
                    )

                else:
                    self.logger.debug(f"想定外のステータス: {description} (HTTP {response.status})")
                    raise WeatherAPIStatusError(
                        f"想定外のステータスです (HTTP {response.status}){suffix}",
                        status_code=response.status
                    )

        except asyncio.TimeoutError:
            self.logger.debug(f"タイムアウトエラー: {description}")

            if retries < self.max_retries:
                delay = self._retry_delay(retries)
                self.logger.info(f"タイムアウトのためリトライします ({retries + 1}/{self.max_retries}) - {delay}秒後")
                await asyncio.sleep(delay)
                return await self._make_request(url, params, retries + 1)
            raise WeatherAPITimeoutError(f"リクエストがタイムアウトしました: {url}")

        except WeatherAPIServerError:
            if retries < self.max_retries:
                delay = self._retry_delay(retries)
                self.logger.info(f"サーバーエラーのためリトライします ({retries + 1}/{self.max_retries}) - {delay}秒後")
                await asyncio.sleep(delay)
                return await self._make_request(url, params, retries + 1)
            raise

        except ClientError as e:
            self.logger.debug(f"ネットワークエラー: {description} - {str(e)}")

            if retries < self.max_retries:
                delay = self._retry_delay(retries)
                self.logger.info(f"ネットワークエラーのためリトライします ({retries + 1}/{self.max_retries}) - {delay}秒後")
                await asyncio.sleep(delay)
                return await self._make_request(url, params, retries + 1)
            raise WeatherAPINetworkError(f"ネットワークエラー: {str(e)}")

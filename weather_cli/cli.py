"""天気情報CLIのエントリーポイント"""

import asyncio
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

import click

from weather_cli.config import config
from weather_cli.utils.logging import logger
from weather_cli.utils.templates import render_current, render_forecast, TemplateRenderError
from weather_cli.services.api_client import WeatherAPIError
from weather_cli.services.units import validate_unit
from weather_cli.services.weather_service import WeatherService
from weather_cli.services.geolocation_service import GeolocationService


HERE = 'here'
MODE_CURRENT = 'current'


@dataclass(frozen=True)
class CLIOptions:
    """解析済みのコマンドライン引数"""
    location: str
    unit: str
    lang: str
    mode: str = MODE_CURRENT

    def has_valid_shape(self) -> bool:
        """引数の長さのみを検証（値の意味は検証しない）"""
        return (
            len(self.location) > 1
            and len(self.unit) == 1
            and len(self.lang) == 2
            and len(self.mode) > 1
        )

    @property
    def is_here(self) -> bool:
        return self.location.lower() == HERE


async def _lookup(options: CLIOptions, weather_service: WeatherService,
                  geolocation_service: Optional[GeolocationService]) -> str:
    """天気を取得して描画済みのテキストを返す"""
    log = logger.with_context(location=options.location, mode=options.mode)

    if options.is_here:
        # 現在地の場合はモード指定に関わらず現在の天気を表示
        if geolocation_service is None:
            geolocation_service = GeolocationService()
        async with geolocation_service:
            location = await geolocation_service.locate()
        log.info(f"現在地を {location.city} と判定しました")

        async with weather_service:
            weather = await weather_service.current_by_name(location.city, options.unit, options.lang)
        return render_current(weather)

    if options.mode == MODE_CURRENT:
        async with weather_service:
            weather = await weather_service.current_by_name(options.location, options.unit, options.lang)
        return render_current(weather)

    async with weather_service:
        forecast = await weather_service.forecast(
            options.location, options.unit, options.lang, days=config.FORECAST_DAYS
        )
    return render_forecast(forecast)


def _usage_text() -> str:
    with click.Context(main, info_name='weather-cli') as ctx:
        return ctx.get_help()


def run(options: CLIOptions, weather_service: Optional[WeatherService] = None,
        geolocation_service: Optional[GeolocationService] = None,
        out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> int:
    """
    天気を取得して出力し、終了コードを返す

    各コンポーネントのエラーはここで一括して扱い、1行のエラーメッセージにする

    Returns:
        0: 成功、1: 引数の形式エラーまたは処理の失敗
    """
    if not options.has_valid_shape():
        click.echo(_usage_text(), file=err, err=err is None)
        return 1

    log = logger.with_context(location=options.location, mode=options.mode)

    try:
        config.validate()
    except ValueError as e:
        return _report_error(log, e, err)

    try:
        # HTTP通信の前に単位を検証する
        validate_unit(options.unit)

        if weather_service is None:
            weather_service = WeatherService()
        text = asyncio.run(_lookup(options, weather_service, geolocation_service))
    except (WeatherAPIError, TemplateRenderError) as e:
        return _report_error(log, e, err)

    click.echo(text, file=out, nl=False)
    return 0


def _report_error(log, error: Exception, err: Optional[TextIO]) -> int:
    log.debug(f"天気情報の取得に失敗しました: {error}", exc_info=True)
    click.echo(f"Error: {error}", file=err, err=err is None)
    return 1


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('-w', '--where', 'where', default='',
              help='Location to get weather. If location has a space, wrap the location in double quotes. '
                   'Use "here" to detect the location from your IP address.')
@click.option('-u', '--unit', 'unit', default='', help='Unit of measure to display temps in (c, f or k)')
@click.option('-l', '--lang', 'lang', default='', help='Language to display temps in (two-letter code)')
@click.option('-t', '--type', 'when', default=MODE_CURRENT, show_default=True, help='current | forecast')
@click.pass_context
def main(ctx, where, unit, lang, when):
    """Look up the current weather or a 5-day forecast from OpenWeatherMap.

    \b
    Examples:
        weather-cli -w Philadelphia -u f -l en
        weather-cli -w here -u f -l ru
        weather-cli -w "Las Vegas" -u k -l es -t forecast
    """
    options = CLIOptions(location=where, unit=unit, lang=lang, mode=when)
    ctx.exit(run(options))


if __name__ == '__main__':
    sys.exit(main())

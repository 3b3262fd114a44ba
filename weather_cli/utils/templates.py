"""出力テンプレートの描画"""

from typing import Any, Dict

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError

from weather_cli.models.weather import CurrentWeather, ForecastWeather


CURRENT_TEMPLATE = """Current weather for {{ name }}:
    Conditions: {% for w in weather %} {{ w.description }} {% endfor %}
    Now:         {{ main.temp }} {{ unit }}
    High:        {{ main.temp_max }} {{ unit }}
    Low:         {{ main.temp_min }} {{ unit }}
"""

FORECAST_TEMPLATE = """Weather Forecast for {{ city.name }}:
{% for e in list %}Date & Time: {{ e.dt_txt }}
Conditions:  {% for w in e.weather %}{{ w.main }} {{ w.description }}{% endfor %}
Temp:        {{ e.main.temp }}
High:        {{ e.main.temp_max }}
Low:         {{ e.main.temp_min }}

{% endfor %}
"""

TEMPLATES = {
    'current': CURRENT_TEMPLATE,
    'forecast': FORECAST_TEMPLATE,
}


class TemplateRenderError(Exception):
    """テンプレートの解析・描画エラー"""
    pass


def create_environment(templates: Dict[str, str] = None) -> Environment:
    """テキスト出力用のjinja2環境を作成"""
    return Environment(
        loader=DictLoader(templates or TEMPLATES),
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )


_environment = create_environment()


def render(name: str, record: Any, environment: Environment = None) -> str:
    """
    レコードの属性をテンプレート変数として描画

    Raises:
        TemplateRenderError: テンプレートが存在しない、解析または描画に失敗した場合
    """
    env = environment or _environment
    try:
        template = env.get_template(name)
        return template.render(**vars(record))
    except TemplateError as e:
        raise TemplateRenderError(f"テンプレート '{name}' の描画に失敗しました: {e}") from e


def render_current(weather: CurrentWeather) -> str:
    return render('current', weather)


def render_forecast(forecast: ForecastWeather) -> str:
    return render('forecast', forecast)

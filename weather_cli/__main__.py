"""python -m weather_cli で実行するためのエントリーポイント"""

from weather_cli.cli import main


if __name__ == '__main__':
    main(prog_name='weather-cli')

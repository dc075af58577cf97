"""Open-Meteo Weather Adapter

WeatherSource ABC の実装。
固定座標（学校所在地）の現在気温と WMO 天気コードを取得し、
ダッシュボード用の5状態（晴れ/曇り/雨/雪/霧）に変換する。

API: https://api.open-meteo.com/v1/forecast?latitude=..&longitude=..&current=temperature_2m,weather_code
"""

from __future__ import annotations

import logging

import httpx

from schooldesk.domain.errors import WeatherUnavailableError
from schooldesk.domain.models import WeatherCondition, WeatherReport
from schooldesk.domain.ports import WeatherSource

logger = logging.getLogger(__name__)

_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
_TIMEOUT_SECONDS = 5.0


def condition_from_code(code: int) -> WeatherCondition:
    """WMO 天気コードを表示状態にマッピング。未知のコードは FOG（既定表示）"""
    if code == 0:
        return WeatherCondition.CLEAR
    if code in (1, 2, 3):
        return WeatherCondition.PARTLY_CLOUDY
    if 51 <= code <= 67 or 80 <= code <= 82 or 95 <= code <= 99:
        return WeatherCondition.RAIN
    if 71 <= code <= 77 or code in (85, 86):
        return WeatherCondition.SNOW
    return WeatherCondition.FOG


class OpenMeteoWeatherSource(WeatherSource):
    """Open-Meteo の無料エンドポイントを使った実装（APIキー不要）"""

    def __init__(
        self,
        latitude: float,
        longitude: float,
        location_name: str = "",
        timezone: str = "Asia/Seoul",
        client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            latitude: 緯度
            longitude: 経度
            location_name: 表示用の地名（例: "김천시 다수동"）
            timezone: 応答の時刻に使うタイムゾーン
            client: テスト時に差し替える httpx クライアント
        """
        self._params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": "temperature_2m,weather_code",
            "timezone": timezone,
        }
        self._location_name = location_name
        self._client = client or httpx.Client(timeout=_TIMEOUT_SECONDS)

    def current(self) -> WeatherReport:
        """
        現在の天気を取得。

        Raises:
            WeatherUnavailableError: 通信エラー・不正なレスポンスの場合
        """
        try:
            response = self._client.get(_FORECAST_URL, params=self._params)
            response.raise_for_status()
            current = response.json()["current"]
            temperature = float(current["temperature_2m"])
            code = int(current["weather_code"])
        except httpx.HTTPError as e:
            logger.warning("Weather request failed: %s", e)
            raise WeatherUnavailableError(str(e)) from e
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Unexpected weather response: %s", e)
            raise WeatherUnavailableError(f"unexpected response: {e}") from e

        report = WeatherReport(
            temperature=temperature,
            condition=condition_from_code(code),
            weather_code=code,
            location_name=self._location_name,
        )
        logger.info(
            "Weather fetched: temp=%.1f, code=%d, condition=%s",
            temperature,
            code,
            report.condition.value,
        )
        return report

"""Ports - 外部サービスのインターフェース定義（ABC）

各Port（抽象基底クラス）は外部サービスとの契約を定義します。
実装クラス（Adapter）はこれらのABCを継承し、全ての抽象メソッドを実装する必要があります。
ABC なので実装漏れはインスタンス化時に検出されます。
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from schooldesk.domain.models import (
    MonthlyExportRow,
    Schedule,
    WeatherReport,
    WeeklyExportRow,
)


class RemoteRecordStore(ABC):
    """リモートの構造化レコードストア（Firestore等）

    レコードは dict で受け渡しし、ドメインモデルへの変換は呼び出し側が行う。
    通信・認証エラーは RemoteStoreError として送出する。
    """

    @abstractmethod
    def fetch_all(
        self,
        collection: str,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        """コレクションの全レコードを取得（order_by 指定時はその順序）"""
        pass

    @abstractmethod
    def fetch_where(self, collection: str, field: str, value: object) -> list[dict]:
        """field == value のレコードを取得"""
        pass

    @abstractmethod
    def upsert(self, collection: str, record_id: str, data: dict) -> None:
        """id をキーにレコード全体を作成または置換"""
        pass

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> None:
        """id のレコードを削除"""
        pass


class LocalCache(ABC):
    """端末ローカルのキー・バリュー文字列ストレージ"""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """値を取得。存在しない場合は None"""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """値を保存（上書き）"""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """値を削除。存在しなくてもエラーにしない"""
        pass


class WeatherSource(ABC):
    """天気予報の取得（Open-Meteo等）"""

    @abstractmethod
    def current(self) -> WeatherReport:
        """固定座標の現在の天気を取得"""
        pass


class ExportRenderer(ABC):
    """エクスポート行をダウンロード用ファイルに変換（Excel等）"""

    @abstractmethod
    def render_weekly(self, title: str, rows: list[WeeklyExportRow]) -> bytes:
        """週間表をファイルのバイト列に変換"""
        pass

    @abstractmethod
    def render_monthly(self, title: str, rows: list[MonthlyExportRow]) -> bytes:
        """月間表をファイルのバイト列に変換"""
        pass


class CalendarFeedRenderer(ABC):
    """iCalフィードのレンダリング"""

    @abstractmethod
    def render(self, schedules: list[Schedule]) -> str:
        """Schedule のリストからiCal形式の文字列を生成"""
        pass


class PasswordHasher(ABC):
    """パスワードのハッシュ化と照合"""

    @abstractmethod
    def hash(self, password: str) -> str:
        """ソルト付きハッシュ文字列を返す"""
        pass

    @abstractmethod
    def verify(self, password: str, hashed: str) -> bool:
        """平文パスワードがハッシュと一致するか"""
        pass

"""ドメイン固有の例外クラス"""


class SchoolDeskError(Exception):
    """SchoolDesk の基底例外"""

    pass


class RemoteStoreError(SchoolDeskError):
    """リモートストアとの通信エラー（Firestore等）"""

    pass


class ValidationError(SchoolDeskError):
    """入力値の検証エラー（必須項目の欠落等）"""

    pass


class AuthenticationError(SchoolDeskError):
    """ログイン失敗・セッション切れ"""

    pass


class PermissionDeniedError(SchoolDeskError):
    """作成者・管理者以外による編集/削除、未ログインでの「自分の予定」表示"""

    pass


class RecordNotFoundError(SchoolDeskError):
    """指定IDのレコードが存在しない"""

    pass


class ConfirmationRequiredError(SchoolDeskError):
    """削除操作に明示的な確認が付いていない"""

    pass


class WeatherUnavailableError(SchoolDeskError):
    """天気予報APIの取得エラー"""

    pass


class ImportFormatError(ValidationError):
    """CSV 一括登録で有効な行が1件もない"""

    pass

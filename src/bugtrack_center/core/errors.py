from __future__ import annotations


class BugTrackError(Exception):
    """入口網站所有錯誤的基底例外。"""


class ConfigurationError(BugTrackError):
    """設定或環境變數錯誤。"""


class InvalidInputError(BugTrackError, ValueError):
    """使用者輸入未通過驗證。"""


class AuthenticationError(BugTrackError):
    """帳號或密碼錯誤。"""


class DuplicateUserError(BugTrackError):
    """使用者名稱已被註冊。"""


class PermissionDeniedError(BugTrackError):
    """未登入或缺少管理員權限。"""


class NotFoundError(BugTrackError):
    """找不到指定的資料列。"""


class DuplicateVersionError(BugTrackError):
    """遊戲版本已存在。"""


class SubmissionLimitError(BugTrackError):
    """使用者的回報編號已用盡（Z9）。"""


class CounterConflictError(BugTrackError):
    """提交計數器在讀取後被其他請求修改。"""


class MediaRejectedError(BugTrackError):
    """附件類型或大小不被接受。"""

"""
PhotoShare Backend - Message Localization
===========================================

What:  Message catalogs (Korean, English, Japanese) and lookup helpers.
Why:   Every user-facing message (errors and success notices) is returned in
       the language the client asked for through Accept-Language.
How:   Services and exceptions only know dotted keys ("PHOTO.NOT_FOUND").
       `translate()` resolves a key against the request language held in
       `language_var`, falling back to Korean and finally to the key itself.
Who:   Used by exception handlers, success responses, and the language
       middleware.
"""

from contextvars import ContextVar
from typing import Any, Dict, Optional

from photoshare.config import SUPPORTED_LANGUAGES, settings

# Coroutine-local request language, set by LanguageMiddleware
language_var: ContextVar[str] = ContextVar("language", default=settings.default_language)

FALLBACK_LANGUAGE = "ko"

MESSAGES: Dict[str, Dict[str, str]] = {
    "ko": {
        "GLOBAL.INTERNAL_ERROR": "서버 내부 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
        "GLOBAL.UNEXPECTED": "예기치 않은 오류가 발생했습니다.",
        "GLOBAL.FORBIDDEN": "이 작업을 수행할 권한이 없습니다.",
        "GLOBAL.NOT_FOUND": "요청한 리소스를 찾을 수 없습니다.",
        "GLOBAL.CONFLICT": "이미 존재하는 리소스입니다.",
        "GLOBAL.RATE_LIMITED": "요청이 너무 많습니다. {retry_after}초 후에 다시 시도해주세요.",
        "VALIDATION.FAILED": "입력값이 올바르지 않습니다.",
        "AUTH.AUTHENTICATION_TOKEN_REQUIRED": "인증 토큰이 필요합니다.",
        "AUTH.INVALID_TOKEN": "유효하지 않은 토큰입니다.",
        "AUTH.TOKEN_EXPIRED": "토큰이 만료되었습니다. 다시 로그인해주세요.",
        "AUTH.USER_NOT_FOUND": "토큰의 사용자를 찾을 수 없습니다.",
        "AUTH.INVALID_CREDENTIALS": "이메일 또는 비밀번호가 올바르지 않습니다.",
        "AUTH.EMAIL_ALREADY_EXISTS": "이미 사용 중인 이메일입니다.",
        "AUTH.PASSWORD_TOO_SHORT": "비밀번호는 {min_length}자 이상이어야 합니다.",
        "AUTH.REGISTER": "회원가입이 완료되었습니다.",
        "AUTH.LOGIN": "로그인되었습니다.",
        "AUTH.LOGOUT": "로그아웃되었습니다.",
        "USER.NOT_FOUND": "사용자를 찾을 수 없습니다.",
        "USER.ACCOUNT_DELETED": "계정이 삭제되었습니다.",
        "PHOTO.NOT_FOUND": "사진을 찾을 수 없습니다.",
        "PHOTO.IS_PRIVATE": "비공개 사진입니다.",
        "PHOTO.NOT_OWNER": "본인의 사진만 수정하거나 삭제할 수 있습니다.",
        "PHOTO.UNSUPPORTED_TYPE": "지원하지 않는 파일 형식입니다 ({extension}). 허용: {allowed}",
        "PHOTO.TOO_LARGE": "파일 크기는 최대 {max_mb}MB까지 가능합니다.",
        "PHOTO.EMPTY_FILE": "빈 파일은 업로드할 수 없습니다.",
        "PHOTO.INVALID_IMAGE": "올바른 이미지 파일이 아닙니다.",
        "PHOTO.STORAGE_FAILED": "이미지를 저장하지 못했습니다. 다시 시도해주세요.",
        "PHOTO.IMAGE_NOT_FOUND": "이미지를 찾을 수 없습니다.",
        "PHOTO.DELETED": "사진이 삭제되었습니다.",
        "PHOTO.ADDED_TO_COLLECTION": "사진이 컬렉션에 추가되었습니다.",
        "PHOTO.REMOVED_FROM_COLLECTION": "사진이 컬렉션에서 제거되었습니다.",
        "SERIES.NOT_FOUND": "시리즈를 찾을 수 없습니다.",
        "SERIES.IS_PRIVATE": "비공개 시리즈입니다.",
        "SERIES.NOT_OWNER": "본인의 시리즈만 수정하거나 삭제할 수 있습니다.",
        "SERIES.PHOTO_NOT_OWNED": "본인의 사진만 시리즈에 추가할 수 있습니다.",
        "SERIES.PHOTO_ALREADY_ADDED": "이미 시리즈에 포함된 사진입니다.",
        "SERIES.PHOTO_NOT_IN_SERIES": "시리즈에 포함되지 않은 사진입니다.",
        "SERIES.INVALID_ORDER": "사진 순서는 시리즈의 모든 사진을 0부터 연속된 위치로 지정해야 합니다.",
        "SERIES.DELETED": "시리즈가 삭제되었습니다.",
        "COLLECTION.NOT_FOUND": "컬렉션을 찾을 수 없습니다.",
        "COLLECTION.NOT_OWNER": "본인의 컬렉션만 접근할 수 있습니다.",
        "COLLECTION.PHOTO_ALREADY_ADDED": "이미 컬렉션에 있는 사진입니다.",
        "COLLECTION.PHOTO_NOT_IN_COLLECTION": "컬렉션에 없는 사진입니다.",
        "COLLECTION.DEFAULT_UNDELETABLE": "기본 컬렉션은 삭제할 수 없습니다.",
        "COLLECTION.DEFAULT_TITLE": "저장한 사진",
        "COLLECTION.DEFAULT_DESCRIPTION": "사용자가 저장한 사진들을 모아둔 기본 컬렉션입니다.",
        "COLLECTION.DELETED": "컬렉션이 삭제되었습니다.",
        "COMMENT.NOT_FOUND": "댓글을 찾을 수 없습니다.",
        "COMMENT.CONTENT_REQUIRED": "댓글 내용을 입력해주세요.",
        "COMMENT.PARENT_NOT_FOUND": "부모 댓글을 찾을 수 없습니다.",
        "COMMENT.PARENT_MISMATCH": "부모 댓글이 이 리소스에 속하지 않습니다.",
        "COMMENT.NOT_AUTHOR": "본인이 작성한 댓글만 삭제할 수 있습니다.",
        "COMMENT.DELETED": "댓글이 삭제되었습니다.",
        "LIKE.TARGET_REQUIRED": "photo_id, series_id, comment_id 중 정확히 하나를 지정해야 합니다.",
        "FOLLOW.CANNOT_FOLLOW_YOURSELF": "자기 자신을 팔로우할 수 없습니다.",
        "NOTIFICATION.IDS_REQUIRED": "notification_ids는 비어 있지 않은 배열이어야 합니다.",
        "NOTIFICATION.MARKED_READ": "알림을 읽음으로 표시했습니다.",
        "NOTIFICATION.EVENT.NEW_LIKE": "{actor}님이 회원님의 게시물을 좋아합니다.",
        "NOTIFICATION.EVENT.NEW_COMMENT": "{actor}님이 회원님의 게시물에 댓글을 남겼습니다.",
        "NOTIFICATION.EVENT.NEW_REPLY": "{actor}님이 회원님의 댓글에 답글을 남겼습니다.",
        "NOTIFICATION.EVENT.NEW_FOLLOW": "{actor}님이 회원님을 팔로우하기 시작했습니다.",
        "NOTIFICATION.EVENT.NEW_SERIES": "{actor}님이 새 시리즈를 공개했습니다.",
    },
    "en": {
        "GLOBAL.INTERNAL_ERROR": "An internal error occurred. Please try again later.",
        "GLOBAL.UNEXPECTED": "An unexpected error occurred.",
        "GLOBAL.FORBIDDEN": "You are not allowed to perform this action.",
        "GLOBAL.NOT_FOUND": "The requested resource was not found.",
        "GLOBAL.CONFLICT": "The resource already exists.",
        "GLOBAL.RATE_LIMITED": "Too many requests. Please wait {retry_after} seconds before retrying.",
        "VALIDATION.FAILED": "The request is invalid.",
        "AUTH.AUTHENTICATION_TOKEN_REQUIRED": "An authentication token is required.",
        "AUTH.INVALID_TOKEN": "The token is invalid.",
        "AUTH.TOKEN_EXPIRED": "The token has expired. Please log in again.",
        "AUTH.USER_NOT_FOUND": "The user for this token no longer exists.",
        "AUTH.INVALID_CREDENTIALS": "Invalid email or password.",
        "AUTH.EMAIL_ALREADY_EXISTS": "This email is already registered.",
        "AUTH.PASSWORD_TOO_SHORT": "Password must be at least {min_length} characters.",
        "AUTH.REGISTER": "Registration complete.",
        "AUTH.LOGIN": "Logged in.",
        "AUTH.LOGOUT": "Logged out.",
        "USER.NOT_FOUND": "User not found.",
        "USER.ACCOUNT_DELETED": "Your account has been deleted.",
        "PHOTO.NOT_FOUND": "Photo not found.",
        "PHOTO.IS_PRIVATE": "This photo is private.",
        "PHOTO.NOT_OWNER": "You can only modify or delete your own photos.",
        "PHOTO.UNSUPPORTED_TYPE": "File type '{extension}' is not supported. Allowed: {allowed}",
        "PHOTO.TOO_LARGE": "File size exceeds the maximum of {max_mb}MB.",
        "PHOTO.EMPTY_FILE": "Empty files cannot be uploaded.",
        "PHOTO.INVALID_IMAGE": "The file is not a valid image.",
        "PHOTO.STORAGE_FAILED": "Failed to save the image. Please try again.",
        "PHOTO.IMAGE_NOT_FOUND": "Image not found.",
        "PHOTO.DELETED": "Photo deleted.",
        "PHOTO.ADDED_TO_COLLECTION": "Photo added to your collection.",
        "PHOTO.REMOVED_FROM_COLLECTION": "Photo removed from your collection.",
        "SERIES.NOT_FOUND": "Series not found.",
        "SERIES.IS_PRIVATE": "This series is private.",
        "SERIES.NOT_OWNER": "You can only modify or delete your own series.",
        "SERIES.PHOTO_NOT_OWNED": "Only your own photos can be added to a series.",
        "SERIES.PHOTO_ALREADY_ADDED": "The photo is already in this series.",
        "SERIES.PHOTO_NOT_IN_SERIES": "The photo is not in this series.",
        "SERIES.INVALID_ORDER": "The order must place every photo of the series at consecutive positions starting at 0.",
        "SERIES.DELETED": "Series deleted.",
        "COLLECTION.NOT_FOUND": "Collection not found.",
        "COLLECTION.NOT_OWNER": "You can only access your own collections.",
        "COLLECTION.PHOTO_ALREADY_ADDED": "The photo is already in this collection.",
        "COLLECTION.PHOTO_NOT_IN_COLLECTION": "The photo is not in this collection.",
        "COLLECTION.DEFAULT_UNDELETABLE": "The default collection cannot be deleted.",
        "COLLECTION.DEFAULT_TITLE": "Saved photos",
        "COLLECTION.DEFAULT_DESCRIPTION": "Default collection of photos you saved.",
        "COLLECTION.DELETED": "Collection deleted.",
        "COMMENT.NOT_FOUND": "Comment not found.",
        "COMMENT.CONTENT_REQUIRED": "Comment content cannot be empty.",
        "COMMENT.PARENT_NOT_FOUND": "Parent comment not found.",
        "COMMENT.PARENT_MISMATCH": "The parent comment does not belong to this resource.",
        "COMMENT.NOT_AUTHOR": "You can only delete your own comments.",
        "COMMENT.DELETED": "Comment deleted.",
        "LIKE.TARGET_REQUIRED": "Exactly one of photo_id, series_id or comment_id is required.",
        "FOLLOW.CANNOT_FOLLOW_YOURSELF": "You cannot follow yourself.",
        "NOTIFICATION.IDS_REQUIRED": "notification_ids must be a non-empty array.",
        "NOTIFICATION.MARKED_READ": "Notifications marked as read.",
        "NOTIFICATION.EVENT.NEW_LIKE": "{actor} liked your post.",
        "NOTIFICATION.EVENT.NEW_COMMENT": "{actor} commented on your post.",
        "NOTIFICATION.EVENT.NEW_REPLY": "{actor} replied to your comment.",
        "NOTIFICATION.EVENT.NEW_FOLLOW": "{actor} started following you.",
        "NOTIFICATION.EVENT.NEW_SERIES": "{actor} published a new series.",
    },
    "ja": {
        "GLOBAL.INTERNAL_ERROR": "サーバー内部エラーが発生しました。しばらくしてから再度お試しください。",
        "GLOBAL.UNEXPECTED": "予期しないエラーが発生しました。",
        "GLOBAL.FORBIDDEN": "この操作を行う権限がありません。",
        "GLOBAL.NOT_FOUND": "リソースが見つかりません。",
        "GLOBAL.CONFLICT": "既に存在するリソースです。",
        "GLOBAL.RATE_LIMITED": "リクエストが多すぎます。{retry_after}秒後に再度お試しください。",
        "VALIDATION.FAILED": "入力内容が正しくありません。",
        "AUTH.AUTHENTICATION_TOKEN_REQUIRED": "認証トークンが必要です。",
        "AUTH.INVALID_TOKEN": "無効なトークンです。",
        "AUTH.TOKEN_EXPIRED": "トークンの有効期限が切れています。再度ログインしてください。",
        "AUTH.USER_NOT_FOUND": "トークンのユーザーが見つかりません。",
        "AUTH.INVALID_CREDENTIALS": "メールアドレスまたはパスワードが正しくありません。",
        "AUTH.EMAIL_ALREADY_EXISTS": "このメールアドレスは既に登録されています。",
        "AUTH.PASSWORD_TOO_SHORT": "パスワードは{min_length}文字以上である必要があります。",
        "AUTH.REGISTER": "会員登録が完了しました。",
        "AUTH.LOGIN": "ログインしました。",
        "AUTH.LOGOUT": "ログアウトしました。",
        "USER.NOT_FOUND": "ユーザーが見つかりません。",
        "USER.ACCOUNT_DELETED": "アカウントを削除しました。",
        "PHOTO.NOT_FOUND": "写真が見つかりません。",
        "PHOTO.IS_PRIVATE": "非公開の写真です。",
        "PHOTO.NOT_OWNER": "自分の写真のみ編集・削除できます。",
        "PHOTO.UNSUPPORTED_TYPE": "サポートされていないファイル形式です ({extension})。使用可能: {allowed}",
        "PHOTO.TOO_LARGE": "ファイルサイズは最大{max_mb}MBです。",
        "PHOTO.EMPTY_FILE": "空のファイルはアップロードできません。",
        "PHOTO.INVALID_IMAGE": "有効な画像ファイルではありません。",
        "PHOTO.STORAGE_FAILED": "画像を保存できませんでした。再度お試しください。",
        "PHOTO.IMAGE_NOT_FOUND": "画像が見つかりません。",
        "PHOTO.DELETED": "写真を削除しました。",
        "PHOTO.ADDED_TO_COLLECTION": "写真をコレクションに追加しました。",
        "PHOTO.REMOVED_FROM_COLLECTION": "写真をコレクションから削除しました。",
        "SERIES.NOT_FOUND": "シリーズが見つかりません。",
        "SERIES.IS_PRIVATE": "非公開のシリーズです。",
        "SERIES.NOT_OWNER": "自分のシリーズのみ編集・削除できます。",
        "SERIES.PHOTO_NOT_OWNED": "シリーズには自分の写真のみ追加できます。",
        "SERIES.PHOTO_ALREADY_ADDED": "既にシリーズに含まれている写真です。",
        "SERIES.PHOTO_NOT_IN_SERIES": "シリーズに含まれていない写真です。",
        "SERIES.INVALID_ORDER": "並び順はシリーズの全写真を0から連続した位置で指定する必要があります。",
        "SERIES.DELETED": "シリーズを削除しました。",
        "COLLECTION.NOT_FOUND": "コレクションが見つかりません。",
        "COLLECTION.NOT_OWNER": "自分のコレクションのみアクセスできます。",
        "COLLECTION.PHOTO_ALREADY_ADDED": "既にコレクションにある写真です。",
        "COLLECTION.PHOTO_NOT_IN_COLLECTION": "コレクションにない写真です。",
        "COLLECTION.DEFAULT_UNDELETABLE": "デフォルトのコレクションは削除できません。",
        "COLLECTION.DEFAULT_TITLE": "保存した写真",
        "COLLECTION.DEFAULT_DESCRIPTION": "保存した写真をまとめたデフォルトのコレクションです。",
        "COLLECTION.DELETED": "コレクションを削除しました。",
        "COMMENT.NOT_FOUND": "コメントが見つかりません。",
        "COMMENT.CONTENT_REQUIRED": "コメントを入力してください。",
        "COMMENT.PARENT_NOT_FOUND": "親コメントが見つかりません。",
        "COMMENT.PARENT_MISMATCH": "親コメントがこのリソースに属していません。",
        "COMMENT.NOT_AUTHOR": "自分のコメントのみ削除できます。",
        "COMMENT.DELETED": "コメントを削除しました。",
        "LIKE.TARGET_REQUIRED": "photo_id、series_id、comment_id のいずれか1つを指定してください。",
        "FOLLOW.CANNOT_FOLLOW_YOURSELF": "自分自身をフォローすることはできません。",
        "NOTIFICATION.IDS_REQUIRED": "notification_ids は空でない配列である必要があります。",
        "NOTIFICATION.MARKED_READ": "通知を既読にしました。",
        "NOTIFICATION.EVENT.NEW_LIKE": "{actor}さんがあなたの投稿にいいねしました。",
        "NOTIFICATION.EVENT.NEW_COMMENT": "{actor}さんがあなたの投稿にコメントしました。",
        "NOTIFICATION.EVENT.NEW_REPLY": "{actor}さんがあなたのコメントに返信しました。",
        "NOTIFICATION.EVENT.NEW_FOLLOW": "{actor}さんがあなたをフォローしました。",
        "NOTIFICATION.EVENT.NEW_SERIES": "{actor}さんが新しいシリーズを公開しました。",
    },
}


def resolve_language(header: Optional[str]) -> str:
    """
    Pick the first supported language from an Accept-Language header.

    "en-US,en;q=0.9" → "en"; "fr, ja" → "ja"; nothing usable → default.
    Quality weights are not re-sorted: clients list preferences in order.
    """
    if not header:
        return settings.default_language
    for part in header.split(","):
        tag = part.split(";")[0].strip().lower()
        primary = tag.split("-")[0]
        if primary in SUPPORTED_LANGUAGES:
            return primary
    return settings.default_language


def translate(key: str, lang: Optional[str] = None, **params: Any) -> str:
    """
    Resolve a message key in `lang` (or the current request language).

    Missing keys fall back to Korean, then to the key itself, so a typo
    never turns into a 500.
    """
    lang = lang or language_var.get()
    template = MESSAGES.get(lang, {}).get(key) or MESSAGES[FALLBACK_LANGUAGE].get(key) or key
    if not params:
        return template
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        return template

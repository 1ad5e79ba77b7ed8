class AppError(Exception):
    """Base for errors that reach the API caller with a status and a message"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(AppError):
    status_code = 500


class QuotaExceeded(AppError):
    status_code = 403

    def __init__(self, message: str = "Document limit reached. Please upgrade to Premium."):
        super().__init__(message)


class UploadError(AppError):
    status_code = 502


class ExtractionError(AppError):
    status_code = 422


class AnalysisError(AppError):
    status_code = 502


class ChatError(AppError):
    status_code = 502


class NotFoundOrForbidden(AppError):
    status_code = 404

    def __init__(self, message: str = "Contract not found or access denied"):
        super().__init__(message)

"""Error types raised across the notifier."""

from typing import Optional


class NotifierError(Exception):
    """Base class for all notifier errors."""


class ConfigurationError(NotifierError):
    """The configuration cannot produce a working notifier (e.g. no webhook URL)."""


class TemplateNotFound(NotifierError, LookupError):
    def __init__(self, name: str):
        super().__init__(f"Template not found: {name}")
        self.name = name


class DeliveryError(NotifierError):
    """The webhook answered with a non-2xx status."""

    def __init__(self, status_code: int, text: str):
        super().__init__(f"HTTP {status_code}: {text}")
        self.status_code = status_code
        self.text = text


class NetworkError(NotifierError):
    """The webhook could not be reached at all."""


class PayloadError(NotifierError):
    """The webhook request could not be built from the message."""


class UploadError(NotifierError):
    """Image upload to the hosting service failed."""


class AnswerTimeout(NotifierError, TimeoutError):
    def __init__(self, question_id: str, timeout_seconds: float):
        super().__init__(f"Question timed out after {timeout_seconds:g} seconds")
        self.question_id = question_id
        self.timeout_seconds = timeout_seconds


class AnswerNotFound(NotifierError):
    def __init__(self, question_id: Optional[str] = None):
        super().__init__("Question not found or has expired")
        self.question_id = question_id


class AnswerMissing(NotifierError):
    def __init__(self):
        super().__init__("Answer is required")

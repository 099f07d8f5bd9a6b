"""Exception hierarchy for tofuboi.

Budget errors come from the splitter/accumulator, transcript errors from the
YouTube fetch collaborator, and SendFailure from the Telegram sender. The
request handler catches TofuboiError subclasses and renders them to the user.
"""


class TofuboiError(Exception):
    """Base exception for all tofuboi errors."""


class InvalidBudget(TofuboiError, ValueError):
    """Raised when the message budget is not a positive number of bytes."""

    def __init__(self, budget: int) -> None:
        self.budget = budget
        super().__init__(f"max_bytes must be greater than zero (got {budget})")


class BudgetTooSmall(TofuboiError, ValueError):
    """Raised when a single character is wider than the message budget."""

    def __init__(self, budget: int, char: str) -> None:
        self.budget = budget
        self.char = char
        super().__init__(
            f"max_bytes ({budget}) is too small to fit the next character "
            f"({len(char.encode('utf-8'))} bytes)"
        )


class TranscriptError(TofuboiError):
    """Base class for failures reported by the transcript fetcher."""


class InvalidVideoId(TranscriptError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Impossible to retrieve YouTube video ID from {value!r}")


class TooManyRequests(TranscriptError):
    def __init__(self) -> None:
        super().__init__(
            "YouTube is receiving too many requests from this IP and now requires "
            "solving a captcha to continue"
        )


class VideoUnavailable(TranscriptError):
    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(f"The video is no longer available ({video_id})")


class TranscriptsDisabled(TranscriptError):
    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(f"Transcript is disabled on this video ({video_id})")


class TranscriptNotAvailable(TranscriptError):
    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(f"No transcripts are available for this video ({video_id})")


class LanguageUnavailable(TranscriptError):
    """Requested caption language is missing; carries what the video offers."""

    def __init__(self, lang: str, available: list[str], video_id: str) -> None:
        self.lang = lang
        self.available = list(available)
        self.video_id = video_id
        super().__init__(
            f"No transcripts are available in {lang} for this video ({video_id}). "
            f"Available languages: {', '.join(self.available)}"
        )


class FetchFailure(TranscriptError):
    """Transport-level or unexpected failure while talking to YouTube."""


class SendFailure(TofuboiError):
    """Raised when the chat transport rejects an outgoing message."""

"""Error taxonomy shared by the stores, the session and the HTTP layer."""


class QuizError(Exception):
    """Base class. ``status_code`` is what the HTTP layer answers with."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class VocabularyUnavailable(QuizError):
    status_code = 500


class PersistenceError(QuizError):
    status_code = 500


class InsufficientVocabulary(QuizError):
    status_code = 409


class InvalidSubmission(QuizError):
    status_code = 400


class InvalidTransition(QuizError):
    status_code = 409


class SessionNotFound(QuizError):
    status_code = 401

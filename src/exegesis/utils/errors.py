"""
Error Taxonomy

Every error the study pipeline raises derives from StudyError and carries a
user-displayable message. Only ConfigurationError and StudyGenerationFailed
ever reach the caller; GenerationError lives inside a single attempt.
"""

from typing import Optional

MISSING_API_KEY_MESSAGE = (
    "A chave de API do Gemini não está configurada. "
    "Por favor, configure a variável de ambiente GOOGLE_API_KEY."
)

GENERATION_FAILED_MESSAGE = (
    "Falha ao gerar o estudo. Verifique a configuração ou tente novamente."
)


class StudyError(Exception):
    """Base class for study pipeline errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(StudyError):
    """Raised when the generation credential is missing. Never retried."""

    def __init__(self, message: str = MISSING_API_KEY_MESSAGE):
        super().__init__(message)


class GenerationError(StudyError):
    """Raised when a single generation attempt yields empty or malformed output."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StudyGenerationFailed(StudyError):
    """Generic failure surfaced after retries are exhausted or a terminal error occurs."""

    def __init__(self, message: str = GENERATION_FAILED_MESSAGE):
        super().__init__(message)

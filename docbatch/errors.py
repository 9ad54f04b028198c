# docbatch/errors.py


class DocBatchError(Exception):
    """Base class for every error raised by docbatch."""


# Input validation: reported immediately, nothing attempted.

class InvalidColorError(DocBatchError, ValueError):
    pass


class UnsupportedTemplateError(DocBatchError, ValueError):
    pass


class InvalidPlaceholderError(DocBatchError, ValueError):
    pass


class DuplicatePlaceholderError(InvalidPlaceholderError):
    pass


class AIConfigurationError(DocBatchError, ValueError):
    pass


class LayoutError(DocBatchError, ValueError):
    pass


# External collaborators.

class TemplateProcessingError(DocBatchError):
    pass


class OcrError(DocBatchError):
    pass


class AIResponseError(DocBatchError):
    pass


# Generation.

class DocumentBuildError(DocBatchError):
    pass


class GenerationError(DocBatchError):
    pass


class SessionBusyError(DocBatchError):
    pass

"""Application error types."""


class CloudGreetError(Exception):
    """Base class for application errors."""


class InvalidWebhookError(CloudGreetError):
    """Webhook body is missing required event metadata."""


class PersistenceError(CloudGreetError):
    """A database read or write failed.

    Carries the call and business identifiers so the failure can be logged
    with context by whoever catches it.
    """

    def __init__(
        self,
        message: str,
        call_control_id: str | None = None,
        business_id: int | None = None,
    ) -> None:
        super().__init__(message)
        self.call_control_id = call_control_id
        self.business_id = business_id


class ConversationRelayError(CloudGreetError):
    """The conversation endpoint could not be reached or answered garbage."""


class LLMGenerationError(CloudGreetError):
    """The language model call failed."""


class NotFoundError(CloudGreetError):
    """A referenced business or agent does not exist."""

"""Ordering exceptions not covered by ``protean.exceptions``.

Validation failures use ``protean.exceptions.ValidationError`` and missing
records ``protean.exceptions.ObjectNotFoundError``. Each class here carries a
``messages`` dict shaped like Protean's, ``{field: [message, ...]}``.
"""


class OrderingError(Exception):
    def __init__(self, messages):
        if isinstance(messages, str):
            messages = {"_entity": [messages]}
        self.messages = messages
        super().__init__(messages)


class AuthenticationError(OrderingError):
    """Missing, malformed or expired bearer credential."""


class AuthorizationError(OrderingError):
    """The caller is authenticated but not allowed to perform the action."""


class ConflictError(OrderingError):
    """The stored state no longer matches what the caller expected."""


class RoleConflictError(ConflictError):
    """A chef or admin attempted a customer-only action such as checkout."""


class PaymentFailure(OrderingError):
    """The payment processor declined, timed out, or returned a mismatched intent."""


class ServerError(OrderingError):
    """A dependency needed to complete the request is unavailable."""

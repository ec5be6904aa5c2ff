from typing import Dict, List


class ValidationError(Exception):
    """A save was refused because one or more fields broke a rule.

    ``errors`` maps a field identifier to its messages, e.g.
    ``{'email': ['is invalid']}``. Nothing has been written when this is raised.
    """

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        super().__init__('; '.join(self.full_messages()))

    @property
    def fields(self) -> List[str]:
        return list(self.errors)

    def full_messages(self) -> List[str]:
        return [
            f"{field.replace('_', ' ').capitalize()} {message}"
            for field, messages in self.errors.items()
            for message in messages
        ]


class ConstraintError(ValidationError):
    """The database rejected a write that passed validation (e.g. a unique index race)."""

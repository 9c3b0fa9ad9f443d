# File: fundiflow/core/exceptions.py


class NotFoundError(LookupError):
    """A record addressed by id does not exist."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class UnknownTemplateError(KeyError):
    def __init__(self, template_type: str):
        self.template_type = template_type
        super().__init__(f"Unknown notification template: {template_type}")

    def __str__(self) -> str:
        return self.args[0]

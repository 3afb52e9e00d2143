class ValidationError(ValueError):
    pass


def require(condition: bool, message: str) -> None:
    if not condition:
        raise ValidationError(message)


def normalize_input(text: str | None) -> str:
    return (text or "").strip()


def validate_record_id(record_id: str) -> None:
    require(bool(record_id and record_id.strip()), "record_id is required")

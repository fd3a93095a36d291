from flask import request


def json_body() -> dict:
    """Request payload from a JSON body, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def text_field(data: dict, key: str, strip: bool = True) -> str:
    value = data.get(key)
    if value is None:
        return ""
    value = str(value)
    return value.strip() if strip else value

from functools import wraps
from flask import request, jsonify
from marshmallow import ValidationError


def request_payload():
    """JSON body, or the form fields of a multipart/urlencoded request"""
    if request.is_json:
        return request.get_json(silent=True)
    return request.form.to_dict()


def validate_schema(schema_class):
    """Decorator to validate request data against schema"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            schema = schema_class()
            payload = request_payload()
            if payload is None:
                return jsonify({'error': 'Malformed JSON body'}), 400
            try:
                request.validated_data = schema.load(payload)
            except ValidationError as err:
                return jsonify({'error': 'Validation error', 'messages': err.messages}), 400
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def parse_bool_arg(name, default=False):
    """Query-string flag: true/1/yes are truthy"""
    raw = request.args.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes')

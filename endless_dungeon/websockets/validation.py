"""Lightweight websocket payload validation utilities.

Minimal schema-like checking with clear, consistent error responses. Returns
(ok, value_or_error) tuples; the caller decides whether to emit an error event.

Schema mini-language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int', 'num' (finite int or float)
Extras:
  min_len / max_len (str), choices (str), min / max (int, num)

Example:
 schema = {'direction': ('str', True, {'choices': ('left', 'up', 'right', 'down')})}
 ok, data_or_err = validate(data, schema)

If invalid: (False, {'field': 'direction', 'error': 'not an allowed value', 'code': 'choices'})
If valid: (True, normalized_data)
"""
from __future__ import annotations

import math
from typing import Any, Dict, Tuple

PRIMITIVES = {
    'str': (str,),
    'int': (int,),
    'num': (int, float),
}

DIRECTIONS = ('left', 'up', 'right', 'down')
MAX_PIXELS = 100_000


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, rule in schema.items():
        type_name, required = rule[0], rule[1]
        extras = rule[2] if len(rule) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload:
            if required:
                return _fail(name, 'missing required field', 'required')
            continue
        value = payload[name]
        # bool is an int subclass; never accept it as a number
        if isinstance(value, bool) or not isinstance(value, PRIMITIVES[type_name]):
            return _fail(name, f'expected {type_name}', 'type')
        if type_name == 'str':
            value = value.strip()
            if not value:
                return _fail(name, 'must not be empty', 'empty')
            if 'max_len' in extras and len(value) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
            if 'min_len' in extras and len(value) < extras['min_len']:
                return _fail(name, 'too short', 'min_len')
            if 'choices' in extras and value not in extras['choices']:
                return _fail(name, 'not an allowed value', 'choices')
        else:
            if isinstance(value, float) and not math.isfinite(value):
                return _fail(name, 'must be a finite number', 'type')
            if 'min' in extras and value < extras['min']:
                return _fail(name, f'must be >= {extras["min"]}', 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(name, f'must be <= {extras["max"]}', 'max')
        out[name] = value
    return True, out


# Predefined schemas used by handlers
VIEWPORT = {
    'container_width': ('num', True, {'min': 0, 'max': MAX_PIXELS}),
    'container_height': ('num', True, {'min': 0, 'max': MAX_PIXELS}),
    'window_width': ('num', True, {'min': 0, 'max': MAX_PIXELS}),
    'window_height': ('num', True, {'min': 0, 'max': MAX_PIXELS}),
}
KEY_EVENT = {
    'code': ('str', True, {'min_len': 1, 'max_len': 32}),
}
SWIPE = {
    'start_x': ('num', True),
    'start_y': ('num', True),
    'end_x': ('num', True),
    'end_y': ('num', True),
}
MOVE = {
    'direction': ('str', True, {'choices': DIRECTIONS}),
}

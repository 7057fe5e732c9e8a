"""
Binder Module - Black Box Interface

Purpose: Map an untyped request payload onto shell environment assignments
Interface: bind(), sanitize_env_name(), ParameterValue
Hidden: Value rendering rules, identifier sanitizing, shell quoting

Pure and side-effect free; safe to call before any external action.
"""

from .binder import ParameterValue, ValueTag, bind, is_valid_env_name, sanitize_env_name

__all__ = ["ParameterValue", "ValueTag", "bind", "is_valid_env_name", "sanitize_env_name"]

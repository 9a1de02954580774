"""
Runtime - Tree-walking evaluator for transcript programs.

This module provides:
- Interpreter: Evaluates syntax tree nodes
- Value: Tagged runtime values
- Environment: Chained variable scopes
"""

from .values import (
    Value,
    ValueType,
    null_val,
    number_val,
    bool_val,
    object_val,
    to_python,
    format_value,
)

from .environment import (
    Environment,
    create_global_environment,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    execute,
    run,
)

__all__ = [
    # Values
    'Value',
    'ValueType',
    'null_val',
    'number_val',
    'bool_val',
    'object_val',
    'to_python',
    'format_value',

    # Environment
    'Environment',
    'create_global_environment',

    # Interpreter
    'Interpreter',
    'ExecutionResult',
    'execute',
    'run',
]

"""sqlstub core - statement and parameter matching.

Architecture Overview:
- parameters.py: ParameterBinding, value comparison and the subset/exact strategies
- registry.py: ordered per-category storage of response entries
- matcher.py: statement text matching (exact, substring, regular expression)
- resolver.py: first-match selection across statement keys and entries
- ledger.py: record of executed statements and their parameter sets
"""

from sqlstub.core.ledger import InvocationLedger, ParameterSets
from sqlstub.core.matcher import StatementMatcher
from sqlstub.core.parameters import (
    ExactParameterMatch,
    ParameterBinding,
    ParameterMatchStrategy,
    SubsetParameterMatch,
    compare_parameter,
    create_parameter_binding,
    get_parameter_strategy,
)
from sqlstub.core.registry import ResponseCategory, ResponseEntry, StatementRegistry
from sqlstub.core.resolver import ResponseResolver

__all__ = (
    "ExactParameterMatch",
    "InvocationLedger",
    "ParameterBinding",
    "ParameterMatchStrategy",
    "ParameterSets",
    "ResponseCategory",
    "ResponseEntry",
    "ResponseResolver",
    "StatementMatcher",
    "StatementRegistry",
    "SubsetParameterMatch",
    "compare_parameter",
    "create_parameter_binding",
    "get_parameter_strategy",
)

"""sqlstub: stub-response matching for mocked database drivers."""

from sqlstub import config, core, exceptions, handler, typing, utils
from sqlstub.config import MatchConfig, load_match_config_from_env
from sqlstub.core import (
    ExactParameterMatch,
    InvocationLedger,
    ParameterBinding,
    ParameterSets,
    ResponseCategory,
    ResponseEntry,
    ResponseResolver,
    StatementMatcher,
    StatementRegistry,
    SubsetParameterMatch,
    compare_parameter,
    create_parameter_binding,
)
from sqlstub.exceptions import ImproperConfigurationError, RegistrationError, SimulatedSQLError, SQLStubError
from sqlstub.handler import ParameterResultSetHandler

__version__ = "0.1.0"

__all__ = (
    "ExactParameterMatch",
    "ImproperConfigurationError",
    "InvocationLedger",
    "MatchConfig",
    "ParameterBinding",
    "ParameterResultSetHandler",
    "ParameterSets",
    "RegistrationError",
    "ResponseCategory",
    "ResponseEntry",
    "ResponseResolver",
    "SQLStubError",
    "SimulatedSQLError",
    "StatementMatcher",
    "StatementRegistry",
    "SubsetParameterMatch",
    "__version__",
    "compare_parameter",
    "config",
    "core",
    "create_parameter_binding",
    "exceptions",
    "handler",
    "load_match_config_from_env",
    "typing",
    "utils",
)

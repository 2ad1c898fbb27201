"""clausal — guarded multiple dispatch.

Several implementations of one operation, each qualified by guards over its
arguments; calls go to the first clause whose guards all hold, else to the
default. All public types are exported from this module for flat imports:

    from clausal import Dispatching, operation, either, exact, having
"""

__version__ = "0.1.0"

# Combinators
from clausal._capabilities import Having, Supporting, having, supporting
from clausal._combinators import (
    ANY,
    MAX_DEPTH,
    NOTHING,
    Anything,
    Bound,
    Either,
    Exact,
    FullMatch,
    Negated,
    Nothing,
    bound,
    either,
    exact,
    full_match,
    guard_depth,
    negated,
)

# Config types — see clausal._config for details
from clausal._config import (
    AllGuardConfig,
    AnyGuardConfig,
    CapabilityGuardConfig,
    ClauseConfig,
    ConfigParseError,
    CustomGuardConfig,
    EitherGuardConfig,
    ExactGuardConfig,
    GuardConfig,
    HavingGuardConfig,
    LiteralGuardConfig,
    NotGuardConfig,
    OperationConfig,
    PredicateGuardConfig,
    RegexGuardConfig,
    SequenceGuardConfig,
    SupportingGuardConfig,
    TableConfig,
    TypedConfig,
    TypeGuardConfig,
    parse_guard_config,
    parse_table_config,
)

# Engine
from clausal._engine import (
    ResolutionError,
    clause_matches,
    dispatch,
    invoke,
    resolve,
)
from clausal._guards import DispatchError, GuardError, Symbol, match_guard, sym

# Loader — see clausal._loader for details
from clausal._loader import (
    MAX_GUARDS_PER_COMPOUND,
    InvalidConfigError,
    Loader,
    LoaderBuilder,
    TooManyGuardsError,
    UnknownNameError,
    register_builtin_types,
)

# Host integration
from clausal._operation import (
    Dispatching,
    DispatchTable,
    Operation,
    UnknownOperationError,
    operation,
)
from clausal._pattern import (
    MAX_REGEX_PATTERN_LENGTH,
    Pattern,
    PatternTooLongError,
    pattern,
)

# Registry
from clausal._registry import (
    MAX_CLAUSES,
    Clause,
    GuardTooDeepError,
    RegistrationError,
    Registry,
    RegistryBuilder,
    TooManyClausesError,
)
from clausal._types import CAPABILITY_PREFIX, PREDICATE_MARKER, GuardMatcher

__all__ = [
    # Protocols
    "GuardMatcher",
    "CAPABILITY_PREFIX",
    "PREDICATE_MARKER",
    # Guards
    "Symbol",
    "sym",
    "match_guard",
    # Combinators
    "Anything",
    "Nothing",
    "ANY",
    "NOTHING",
    "Either",
    "FullMatch",
    "Negated",
    "Exact",
    "Bound",
    "Having",
    "Supporting",
    "Pattern",
    "either",
    "full_match",
    "negated",
    "exact",
    "bound",
    "having",
    "supporting",
    "pattern",
    "guard_depth",
    "MAX_DEPTH",
    "MAX_REGEX_PATTERN_LENGTH",
    # Registry
    "Clause",
    "Registry",
    "RegistryBuilder",
    "MAX_CLAUSES",
    # Engine
    "resolve",
    "clause_matches",
    "invoke",
    "dispatch",
    # Host integration
    "Operation",
    "operation",
    "Dispatching",
    "DispatchTable",
    # Config types
    "TypedConfig",
    "TypeGuardConfig",
    "ExactGuardConfig",
    "LiteralGuardConfig",
    "RegexGuardConfig",
    "PredicateGuardConfig",
    "CapabilityGuardConfig",
    "SequenceGuardConfig",
    "EitherGuardConfig",
    "AllGuardConfig",
    "NotGuardConfig",
    "HavingGuardConfig",
    "SupportingGuardConfig",
    "AnyGuardConfig",
    "CustomGuardConfig",
    "GuardConfig",
    "ClauseConfig",
    "OperationConfig",
    "TableConfig",
    "ConfigParseError",
    "parse_guard_config",
    "parse_table_config",
    # Loader
    "LoaderBuilder",
    "Loader",
    "register_builtin_types",
    "MAX_GUARDS_PER_COMPOUND",
    # Errors
    "DispatchError",
    "GuardError",
    "GuardTooDeepError",
    "PatternTooLongError",
    "RegistrationError",
    "TooManyClausesError",
    "ResolutionError",
    "UnknownOperationError",
    "UnknownNameError",
    "InvalidConfigError",
    "TooManyGuardsError",
]

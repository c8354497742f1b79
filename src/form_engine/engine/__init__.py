"""
Schema evaluation engine.

Pure functions over a list of fields and a data bag:
- rule, field and form validation
- derived value computation
- the derivation refresh loop and its dependency graph
"""

from form_engine.engine.derived import (
    CustomComputationHook,
    age_on,
    compute_derived_value,
)
from form_engine.engine.graph import DependencyGraph
from form_engine.engine.refresh import (
    RefreshResult,
    initialize_form_data,
    refresh_derived_values,
)
from form_engine.engine.rules import (
    CustomRuleHook,
    evaluate_rule,
    is_missing,
)
from form_engine.engine.validator import (
    validate_field,
    validate_form,
)

__all__ = [
    # Validation
    "CustomRuleHook",
    "evaluate_rule",
    "is_missing",
    "validate_field",
    "validate_form",
    # Derived values
    "CustomComputationHook",
    "age_on",
    "compute_derived_value",
    # Refresh loop
    "DependencyGraph",
    "RefreshResult",
    "initialize_form_data",
    "refresh_derived_values",
]

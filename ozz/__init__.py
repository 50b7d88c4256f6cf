"""Public interface for the ``ozz`` package.

Rule-based categorization and renaming of Organizze transactions. This module
only re-exports the engine entry points and result types; the API client and
CLI live in :mod:`ozz.client` and :mod:`ozz.cli`.
"""

__version__ = "0.1.0"

from .config import CategoryTable, ConfigError, Rule, RuleConfig, load_all_config
from .installments import InstallmentCache, InvoiceSource, base_description, resolve_installment
from .matching import match_category, match_rename
from .models import Action, Changes, InvoiceRef, ProcessResult, Reason, Transaction
from .processor import ProcessOptions, get_tags_for_category, process_batch, should_skip

__all__ = [
    "__version__",
    # Engine
    "process_batch",
    "should_skip",
    "get_tags_for_category",
    "match_category",
    "match_rename",
    "resolve_installment",
    "base_description",
    "InstallmentCache",
    "InvoiceSource",
    "ProcessOptions",
    # Config
    "load_all_config",
    "RuleConfig",
    "CategoryTable",
    "Rule",
    "ConfigError",
    # Models / types
    "Transaction",
    "ProcessResult",
    "Changes",
    "Action",
    "Reason",
    "InvoiceRef",
]

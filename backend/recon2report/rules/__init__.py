"""Rule corpus schema and loader."""

from recon2report.rules.loader import (
    RuleDocumentError,
    default_rules_dir,
    load_corpus,
    load_file,
    load_one,
)

__all__ = [
    "RuleDocumentError",
    "default_rules_dir",
    "load_corpus",
    "load_file",
    "load_one",
]

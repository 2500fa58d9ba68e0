"""Bundled manufacturer rule tables.

Each table is plain data consumed by loader.build_provider(). Adding a
manufacturer means adding a table here; no engine code changes.
"""

from .airoha import AIROHA_RULES
from .generic import GENERIC_RULES
from .murata import MURATA_RULES
from .st import ST_RULES
from .ti import TI_RULES
from .winbond import WINBOND_RULES

# Order is the registration order, used as the last dispatch tie-breaker
BUNDLED_RULES = [
    TI_RULES,
    ST_RULES,
    MURATA_RULES,
    WINBOND_RULES,
    AIROHA_RULES,
]

FALLBACK_RULES = GENERIC_RULES

__all__ = ["BUNDLED_RULES", "FALLBACK_RULES"]

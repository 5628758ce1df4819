"""Card-company parser refinements.

Each refinement extends GenericParser and overrides only its header regex
tables and cancellation handling; row walking is shared.
"""

from .kb import KBCardParser
from .samsung import SamsungCardParser

__all__ = ["SamsungCardParser", "KBCardParser"]

"""valkit - Catalog of single-value validation rules exposed as boolean functions.

valkit wraps small, stateless validation rules (Base64, CIDR, numeric range,
substring presence, ...) into uniformly shaped three-valued functions that a
host can list and call by name.
"""

__version__ = "0.1.0"
__author__ = "rpapub"
__email__ = "contact@rpapub.dev"
__description__ = "Catalog of single-value validation rules exposed as boolean functions"

from valkit.config import ValkitConfig
from valkit.values import Presence, Value

__all__ = [
    "__version__",
    "__author__",
    "__email__",
    "__description__",
    "Presence",
    "ValkitConfig",
    "Value",
]

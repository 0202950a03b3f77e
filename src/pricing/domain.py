"""Pricing bounded context: cart conditions and the pricing pipeline.

Conditions (discounts, taxes, fees, shipping surcharges) are addressed with a
small target DSL and resolved phase by phase against a cart-like data source.
Condition definitions are authored and activated through the catalogue
aggregate in this domain.
"""

from protean.domain import Domain

from pricing.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
pricing = Domain(name="pricing")

"""
Test suite for recordlib.

Covers the core system (errors, registry, settings, loader, validation) and
the schema system (types, coercion, builder, parser, definitions, records,
named and self references, thread safety).
"""

import logging

# Configure test logging
logging.basicConfig(level=logging.WARNING)  # Reduce noise during tests

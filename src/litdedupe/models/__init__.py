"""Shared data types for litdedupe.

Domain-specific types live closer to their consumers:
- Comparison types → litdedupe.scoring.models
- Group types → litdedupe.clustering.models
- Judgment types → litdedupe.judgment.models
"""

from litdedupe.models.records import BibliographicRecord

__all__ = ["BibliographicRecord"]

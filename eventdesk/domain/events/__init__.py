"""
Events bounded context — domain layer.

This module contains all domain logic for the listing pipeline:
- Event and market entities
- Locale and settings resolution
- Cache-tag registry
- Client filter state
- Display pricing, new badges, sports routing
"""

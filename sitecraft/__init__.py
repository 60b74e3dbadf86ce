"""
SiteCraft Results Client

Async client for the SiteCraft accessibility/SEO auditing service:
- Backend API access (analyses, tiered reports, PDF export)
- Polling analyses until they finish
- Overview/detailed report tiers
- Score severity presentation
- Session-scoped result caching
"""

__version__ = "0.1.0"

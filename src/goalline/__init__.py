"""
Goalline - Fantasy Football Competition Ledger

Three players per team. One announcement. Top ten get paid.

Structure:
    engine/  - Settlement core
        roster      - Fixed player catalog
        scoring     - Goals/assists -> points
        registry    - Team registration
        ranking     - Dense ranks with id tie-break
        settlement  - Open/Closed lifecycle and reward rule
        ledger      - Aggregate that owns all of the above
    data/    - Storage and integration
        schemas     - Pydantic models (teams, events)
        db_manager  - SQLite snapshot store
        reader      - Read-only queries
        api_client  - Live stats for announcements

Usage:
    from goalline import Ledger
    from goalline.data import LedgerDatabaseManager
"""

from goalline.engine.ledger import Ledger

__all__ = ["Ledger", "__version__"]
__version__ = "0.1.0"

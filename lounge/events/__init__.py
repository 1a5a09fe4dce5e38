"""
Lounge Discord Bot - Events Package
===================================

Gateway event Cogs, loaded with load_extension() like the command cogs.

Event routing:
- messages.py: AFK clearing and AFK mention notices
"""

# =============================================================================
# Event Cog Registry
# =============================================================================

EVENT_COGS = [
    "lounge.events.messages",
]

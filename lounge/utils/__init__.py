"""
Lounge Discord Bot - Utilities Package
======================================

Small helpers shared by cogs and the command tree.
"""

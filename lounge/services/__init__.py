"""
Lounge Discord Bot - Services Package
=====================================

Long-lived helpers owned by the bot:
- reminders.py: ReminderScheduler for /remind
- content_api.py: aiohttp client for the meme and pat GIF APIs
"""

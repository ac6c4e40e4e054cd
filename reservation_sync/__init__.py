"""
Reservation Sync.

Turns reservation-confirmation emails into calendar events:
- Selects unread confirmation emails from IMAP
- Extracts venue name and visit time from the body
- Creates a Google Calendar event with popup reminders
- Marks the email read once it has been handled
"""

__version__ = "1.0.0"

"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler parses a manager's command, delegates
to StaffService, and sends the response back.
No business logic lives here.
"""

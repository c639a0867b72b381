"""Services module"""

from bookclub.services.database_service import DatabaseService, get_db
from bookclub.services.email_service import EmailService, get_email_service

__all__ = ["DatabaseService", "get_db", "EmailService", "get_email_service"]

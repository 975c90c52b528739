# salon_booking/services/calendar/google_calendar_service.py
from datetime import timedelta, datetime, timezone
from typing import Dict, Optional

from salon_booking.config.settings import get_settings
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from cryptography.fernet import Fernet
from sqlalchemy.orm import Session
import logging
from salon_booking.models import CalendarIntegration

settings = get_settings()

logger = logging.getLogger(__name__)


class GoogleCalendarService:
    """Pushes appointment events to Google Calendar with stored salon credentials"""
    SCOPES = ['https://www.googleapis.com/auth/calendar']
    TOKEN_URI = "https://oauth2.googleapis.com/token"

    def __init__(self, encryption_key: Optional[str] = None):
        key = encryption_key or settings.CALENDAR_ENCRYPTION_KEY
        if not key:
            raise ValueError("CALENDAR_ENCRYPTION_KEY is not set")
        self.fernet = Fernet(key.encode() if isinstance(key, str) else key)

    def get_valid_credentials(self, integration: CalendarIntegration, db: Session) -> Credentials:
        """Get valid credentials, refreshing if necessary"""
        now = datetime.now(timezone.utc)
        if not integration.token_expires_at or integration.token_expires_at <= now + timedelta(minutes=5):
            return self.refresh_access_token(integration, db)
        access_token = self.fernet.decrypt(integration.access_token_encrypted).decode()
        refresh_token = self.fernet.decrypt(integration.refresh_token_encrypted).decode()
        return Credentials(
            token=access_token,
            refresh_token=refresh_token,
            token_uri=self.TOKEN_URI,
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET
        )

    def refresh_access_token(self, integration: CalendarIntegration, db: Session) -> Credentials:
        """Refresh expired access token using refresh token"""
        refresh_token = self.fernet.decrypt(integration.refresh_token_encrypted).decode()
        credentials = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=self.TOKEN_URI,
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET
        )
        credentials.refresh(Request())
        integration.access_token_encrypted = self.fernet.encrypt(credentials.token.encode())
        # google-auth reports expiry as naive UTC
        expiry = credentials.expiry
        if expiry is not None and expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        integration.token_expires_at = expiry
        db.commit()
        logger.info(f"Refreshed Google access token for integration {integration.id}")
        return credentials

    def _events(self, integration: CalendarIntegration, db: Session):
        credentials = self.get_valid_credentials(integration, db)
        service = build('calendar', 'v3', credentials=credentials, cache_discovery=False)
        return service.events()

    def create_event(self, integration: CalendarIntegration, db: Session, calendar_id: str, body: Dict) -> str:
        """Insert an event and return its id"""
        event = self._events(integration, db).insert(calendarId=calendar_id, body=body).execute()
        return event['id']

    def update_event(self, integration: CalendarIntegration, db: Session, calendar_id: str, event_id: str, body: Dict) -> str:
        event = self._events(integration, db).patch(calendarId=calendar_id, eventId=event_id, body=body).execute()
        return event['id']

    def delete_event(self, integration: CalendarIntegration, db: Session, calendar_id: str, event_id: str) -> None:
        try:
            self._events(integration, db).delete(calendarId=calendar_id, eventId=event_id).execute()
        except HttpError as e:
            # Already removed on the calendar side
            if e.resp.status in (404, 410):
                logger.info(f"Google event {event_id} already gone")
                return
            raise

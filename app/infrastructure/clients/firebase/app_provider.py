"""Firebase Admin SDK app provider.

Initializes one firebase_admin App per process from FirebaseSettings and
hands out the SDK clients built on it. Constructed once at startup and
injected, instead of initializing the SDK at import time.
"""

import json
from threading import Lock
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore

from core.logging import get_module_logger
from infrastructure.configuration.integrations.firebase import FirebaseSettings

logger = get_module_logger()

# firebase_admin name of the default App
DEFAULT_APP_NAME = "[DEFAULT]"


class FirebaseAppProvider:
    """Lazily initialized firebase_admin App.

    Args:
        firebase_settings: Credentials and project configuration
        app_name: Name of the firebase_admin App (default app when omitted)
    """

    def __init__(
        self,
        firebase_settings: FirebaseSettings,
        app_name: str = DEFAULT_APP_NAME,
    ) -> None:
        self._settings = firebase_settings
        self._app_name = app_name
        self._app: Optional[firebase_admin.App] = None
        self._lock = Lock()

    def _credential(self) -> credentials.Base:
        if self._settings.FIREBASE_CREDENTIALS_JSON:
            return credentials.Certificate(
                json.loads(self._settings.FIREBASE_CREDENTIALS_JSON)
            )
        if self._settings.FIREBASE_CREDENTIALS_PATH:
            return credentials.Certificate(self._settings.FIREBASE_CREDENTIALS_PATH)
        return credentials.ApplicationDefault()

    @property
    def app(self) -> firebase_admin.App:
        """The initialized App, created on first access."""
        with self._lock:
            if self._app is not None:
                return self._app
            try:
                self._app = firebase_admin.get_app(self._app_name)
            except ValueError:
                options = {}
                if self._settings.FIREBASE_PROJECT_ID:
                    options["projectId"] = self._settings.FIREBASE_PROJECT_ID
                self._app = firebase_admin.initialize_app(
                    self._credential(), options=options, name=self._app_name
                )
                logger.info(
                    "firebase_app_initialized",
                    app_name=self._app_name,
                    project_id=self._settings.FIREBASE_PROJECT_ID,
                )
            return self._app

    def firestore_client(self):
        """Firestore client bound to this App."""
        return firestore.client(app=self.app)

"""Firebase integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class FirebaseSettings(IntegrationSettings):
    """Firebase Admin SDK configuration.

    Credentials are resolved in order: inline JSON, then a file path, then
    Application Default Credentials when neither is set.

    Environment Variables:
        FIREBASE_PROJECT_ID: Firebase / GCP project id
        FIREBASE_CREDENTIALS_PATH: Path to a service account JSON file
        FIREBASE_CREDENTIALS_JSON: Service account JSON document as a string

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        project_id = settings.firebase.FIREBASE_PROJECT_ID
        ```
    """

    FIREBASE_PROJECT_ID: str | None = Field(default=None, alias="FIREBASE_PROJECT_ID")
    FIREBASE_CREDENTIALS_PATH: str | None = Field(
        default=None, alias="FIREBASE_CREDENTIALS_PATH"
    )
    FIREBASE_CREDENTIALS_JSON: str | None = Field(
        default=None, alias="FIREBASE_CREDENTIALS_JSON"
    )

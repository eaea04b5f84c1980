"""Identity hand-off constants.

The identity provider sits in front of the application and forwards the
already-authenticated user as request headers.
"""

USER_ID_HEADER: str = "X-User-Id"
USER_ROLE_HEADER: str = "X-User-Role"
CONSOLE_PROFESSOR_ID: str = "professor"

"""Bootstrap an administrator account.

Registers a fixed ``admin`` user through the backend and prints the SQL that
promotes it. The role change is applied by hand on the database; the backend
has no endpoint for it.

Running it twice fails at registration, the account already exists.
"""
from typing import Optional

import httpx

from . import config
from .schemas import RegistrationRequest

ADMIN_ACCOUNT = RegistrationRequest(
    username="admin",
    email="admin@gmail.com",
    password="admin123",
    phoneNumber="1234567890",
)
ADMIN_ROLE = "ADMIN"


def promote_sql(user_id) -> str:
    """Build the promotion statement; only integer ids or digit strings are accepted."""
    if isinstance(user_id, bool):
        raise ValueError(f"not a numeric user id: {user_id!r}")
    if isinstance(user_id, str) and user_id.isascii() and user_id.isdigit():
        user_id = int(user_id)
    if not isinstance(user_id, int):
        raise ValueError(f"not a numeric user id: {user_id!r}")
    return f"UPDATE users SET role = '{ADMIN_ROLE}' WHERE id = {user_id};"


def _response_body(resp: httpx.Response):
    try:
        return resp.json()
    except ValueError:
        return resp.text


def create_admin(client: Optional[httpx.Client] = None) -> Optional[str]:
    """Register the admin user. Returns the promotion SQL, or None on failure."""
    url = config.backend_url(config.REGISTER_PATH)
    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=config.BACKEND_TIMEOUT)

    try:
        print("Registering admin user...")
        try:
            r = client.post(url, json=ADMIN_ACCOUNT.model_dump())
        except httpx.HTTPError as e:
            print(f"Error: {e}")
            return None

        if not r.is_success:
            print("Error:", _response_body(r))
            return None

        data = _response_body(r)
        print("User registered successfully:", data)

        try:
            user_id = data["user"]["id"]
            # ids are numeric; anything else never reaches the SQL text
            sql = promote_sql(user_id)
        except (KeyError, TypeError, ValueError):
            print(f"Error: registration response carries no numeric user id: {data}")
            return None
        print("User ID:", user_id)

        print("\nNow run this SQL command to make the user an admin:")
        print(sql)
        return sql
    finally:
        if owns_client:
            client.close()


def main() -> int:
    return 0 if create_admin() else 1

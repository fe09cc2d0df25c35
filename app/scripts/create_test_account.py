# app/scripts/create_test_account.py
import argparse
import asyncio
from datetime import timedelta

from app.core.config import settings
from app.db.session import async_session
from app.services.account_service import get_payment_status, issue_session, provision_account

# -----------------------------
# Configurable test data
# -----------------------------
TEST_USER_ID = "test-user-001"
TEST_EMAIL = "test@example.com"


# -----------------------------
# Async main
# -----------------------------
async def main(user_id: str, email: str) -> None:
    async with async_session() as db:
        # -----------------------------
        # Ensure account exists
        # -----------------------------
        account = await provision_account(db, user_id, email)
        status = await get_payment_status(db, account.id)
        print(f"✅ Account ready: {account.id} <{account.email}>")
        print(f"   → paid: {status.paid if status else False}")

        # -----------------------------
        # Issue a session token
        # -----------------------------
        token = await issue_session(db, account.id, ttl=timedelta(hours=settings.SESSION_TTL_HOURS))
        print("✅ Issued session token (shown once, store securely)")
        print(f"   → X-Session-Token: {token}")


# -----------------------------
# Run the script
# -----------------------------
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a local account and session token")
    parser.add_argument("--user-id", default=TEST_USER_ID)
    parser.add_argument("--email", default=TEST_EMAIL)
    args = parser.parse_args()
    asyncio.run(main(args.user_id, args.email))

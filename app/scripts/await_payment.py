# app/scripts/await_payment.py
"""
Run the confirmation-page poller from a terminal:

    python -m app.scripts.await_payment "http://localhost:3000/success?success=true&userId=u1"
"""
import argparse
import asyncio
import sys

from app.core.errors import ConfirmationError
from app.services.payment_poller import ConfirmationParams, HttpStatusReader, PaymentStatusPoller


async def _navigate(path: str) -> None:
    print(f"→ redirecting to {path}")


async def main(confirmation_url: str, api_url: str, rechecks: int) -> int:
    try:
        params = ConfirmationParams.from_url(confirmation_url)
    except ConfirmationError as e:
        print(f"❌ {e}")
        return 2

    poller = PaymentStatusPoller(
        params.user_id,
        HttpStatusReader(api_url),
        redirect_countdown=0,
        on_confirmed=_navigate,
    )
    outcome = await poller.run()

    while outcome == "failed" and rechecks > 0:
        rechecks -= 1
        print("… not confirmed yet, checking once more")
        outcome = await poller.recheck()

    print(f"{'✅' if outcome == 'confirmed' else '❌'} payment {outcome} after {poller.attempts} read(s)")
    if poller.last_error:
        print(f"   last error: {poller.last_error}")
    return 0 if outcome == "confirmed" else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Poll payment status for a confirmation URL")
    parser.add_argument("confirmation_url")
    parser.add_argument("--api-url", default="http://localhost:8000")
    parser.add_argument("--rechecks", type=int, default=0)
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.confirmation_url, args.api_url, args.rechecks)))

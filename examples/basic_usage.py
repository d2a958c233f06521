"""
Hotmart Payments Python SDK - Basic Usage Example

This example demonstrates the basic usage of the Hotmart Payments Python SDK.
"""

import asyncio
import logging

from hotmart_payments import (
    ApiError,
    AsyncHotmartClient,
    Environment,
    HotmartClient,
    HotmartConfig,
    TransportError,
    ValidationError,
)


def sync_example():
    """Synchronous client example."""
    print("=== Sync Client Example ===\n")

    # Initialize client against the sandbox
    client = HotmartClient(HotmartConfig(
        client_id="your-client-id",
        client_secret="your-client-secret",
        basic="Basic your-basic-token",
        environment=Environment.SANDBOX,
        debug=True,
    ))

    try:
        auth = client.authenticate()
        client.set_token(auth.body["access_token"])
        print("Authenticated")

        subscriptions = client.list_subscriptions({"status": "ACTIVE", "max_results": 10})
        for item in subscriptions.body.get("items", []):
            print(f"{item['subscriber_code']}: {item['status']}")

        client.change_billing_due_day("ABC123", 10)
    except ValidationError as e:
        print(f"Invalid input: {e.message}")
    except ApiError as e:
        print(f"API error ({e.status_code}): {e.message}")
    except TransportError as e:
        print(f"Network failure: {e.message}")
    finally:
        client.close()


async def async_example():
    """Asynchronous client example."""
    print("\n=== Async Client Example ===\n")

    async with AsyncHotmartClient(HotmartConfig.from_env()) as client:
        try:
            valid = await client.check_token("Bearer some-token")
            print(f"Token valid: {valid}")

            await client.cancel_subscriptions_bulk(["ABC123", "DEF456"], send_mail=True)
        except (ApiError, TransportError) as e:
            print(f"Error: {type(e).__name__}: {e.message}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    sync_example()
    asyncio.run(async_example())

"""
Example: Local Listener Authentication (Development Only)

This example captures an access token through the local callback listener
and lists the next week of events from every calendar you own.

Prerequisites:
1. Create a Google Cloud Project and enable the Google Calendar API
2. Create OAuth 2.0 credentials (Desktop application type)
3. Download the credentials as 'credentials.json' (or point
   GOOGLE_CREDENTIALS_PATH at them)

Usage:
    python example_local_auth.py
"""

import asyncio
import logging

from gcal_client import (
    CalendarListClient, Client, EventClient, GcalClientError,
    capture_access_token, client_parameters_from_file, credentials_from_client_parameters
)


async def main():
    print("=" * 60)
    print("Local Listener Authentication Example")
    print("=" * 60)
    print()

    try:
        params = client_parameters_from_file()
    except FileNotFoundError:
        print("ERROR: credentials.json not found!")
        print("Please download your OAuth credentials from Google Cloud Console")
        print("and save them as 'credentials.json' in this directory.")
        return

    print("Starting authentication...")
    print("Your browser will open automatically.")
    print()

    try:
        params = await capture_access_token(params, timeout=300, open_browser=True)
    except asyncio.TimeoutError:
        print("✗ Authentication timed out. Please try again.")
        return
    except GcalClientError as e:
        print(f"✗ Error: {e}")
        return

    print("✓ Authentication successful!")

    # Save credentials for future use
    with open('user_token.json', 'w') as f:
        f.write(credentials_from_client_parameters(params).to_json())
    print("✓ Credentials saved to user_token.json")
    print()

    async with Client(params.access_key) as client:
        calendars = await CalendarListClient(client).list()
        results = await EventClient(client).query().next_days(7).order_by_start_time().execute_multiple_calendars(
            [calendar.id for calendar in calendars]
        )

    for calendar in calendars:
        events = results[calendar.id]
        print(f"{calendar.display_name()}: {len(events)} upcoming events")
        for event in events:
            print(f"  {event.start_datetime()}  {event.summary}")

    print()
    print("=" * 60)
    print("Setup complete! You can now use the saved credentials.")
    print("=" * 60)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())

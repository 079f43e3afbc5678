#!/usr/bin/env python3
"""Reset the data directory by clearing all users and journal entries."""

import os
import sys

from dotenv import load_dotenv

load_dotenv()

from moodmate.config import load_config  # noqa: E402
from moodmate.storage import StorageError, Stores  # noqa: E402


def reset_all_collections(data_dir: str) -> None:
    """Empty both collections, keeping their backing files in place."""
    stores = Stores(data_dir).load()

    print("Clearing all collections...")
    for collection in (stores.users, stores.journals):
        removed = collection.clear()
        print(f"   - Cleared {collection.name} ({removed} records)")

    print("\nData reset complete.")


if __name__ == "__main__":
    data_dir = load_config()["DATA_DIR"]
    print(f"Resetting data in {os.path.abspath(data_dir)}")
    print("   This will DELETE ALL existing users and journal entries.")
    print("   Stop the server first; it would rewrite the files from memory.")

    confirm = input("\nAre you sure? Type 'yes' to continue: ")
    if confirm.lower() != "yes":
        print("Reset cancelled.")
        sys.exit(0)

    try:
        reset_all_collections(data_dir)
    except StorageError as exc:
        print(f"Reset failed: {exc}")
        sys.exit(1)

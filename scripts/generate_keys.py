#!/usr/bin/env python3
"""
Generate credentials for a new deployment.
Run from backend directory: python3 scripts/generate_keys.py

Prints an operator API key (only its hash goes in .env) and a webhook
secret to share with the job board.
"""
import sys
from pathlib import Path

# Ensure backend root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.utils.api_key import generate_api_key, hash_api_key


def main():
    api_key = generate_api_key()
    key_hash = hash_api_key(api_key)
    webhook_secret = generate_api_key()

    print("=" * 50)
    print(f"Operator API key:   {api_key}")
    print(f"API_KEY_HASH={key_hash}")
    print(f"WEBHOOK_SECRET={webhook_secret}")
    print("=" * 50)
    print("\n1. Add API_KEY_HASH and WEBHOOK_SECRET to .env and restart the server.")
    print("2. Send the operator key in the 'X-API-Key' header for /webhook-logs and /job-mappings.")
    print("3. Enter WEBHOOK_SECRET as the signing secret in the job board's webhook settings.")
    print("\n⚠️  Save the operator key now; only its hash is stored.")


if __name__ == "__main__":
    main()

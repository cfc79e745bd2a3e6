#!/usr/bin/env python3
"""
Smoke-check the login lockout of a running login-guard server over HTTP.

The script signs up a throwaway account, sends a burst of wrong passwords for
it and reports how the server answered each one.  It passes when the server
switches to HTTP 429 with a Retry-After header, and also checks that the
correct password is refused while the account is locked.

Requirements:
  pip install requests

Typical use:
  python lockout_smoke.py --base-url http://127.0.0.1:5000 --attempts 6
"""

from __future__ import annotations

import argparse
import sys
import uuid
from dataclasses import dataclass

import requests


PASSWORD = "Automation123!"


@dataclass
class SmokeAccount:
    session: requests.Session
    email: str
    password: str


def signup(base_url: str, account: SmokeAccount) -> None:
    payload = {"email": account.email, "password": account.password}
    resp = account.session.post(f"{base_url}/auth/signup", json=payload)
    if resp.status_code != 201:
        raise RuntimeError(f"Signup failed for {account.email}: status {resp.status_code}")


def attempt_login(base_url: str, account: SmokeAccount, password: str) -> requests.Response:
    payload = {"email": account.email, "password": password}
    return account.session.post(f"{base_url}/auth/login", json=payload)


def lockout_status(base_url: str, account: SmokeAccount) -> dict:
    resp = account.session.get(
        f"{base_url}/auth/lockout-status", params={"email": account.email}
    )
    resp.raise_for_status()
    return resp.json()


def run_smoke_check(base_url: str, attempts: int) -> bool:
    account = SmokeAccount(
        session=requests.Session(),
        email=f"smoke_{uuid.uuid4().hex[:8]}@example.com",
        password=PASSWORD,
    )
    signup(base_url, account)

    locked_at = None
    for i in range(1, attempts + 1):
        resp = attempt_login(base_url, account, "wrong-password")
        if resp.status_code == 429:
            print(f"  attempt {i}: 429, retry after {resp.headers.get('Retry-After')}s")
            locked_at = locked_at or i
        elif resp.status_code == 401:
            remaining = resp.json().get("remaining_attempts")
            print(f"  attempt {i}: 401, {remaining} left")
        else:
            print(
                f"[FAIL] Unexpected status {resp.status_code} on attempt {i}.",
                file=sys.stderr,
            )
            return False

    if locked_at is None:
        print(f"[FAIL] No lockout after {attempts} wrong passwords.", file=sys.stderr)
        return False

    resp = attempt_login(base_url, account, account.password)
    if resp.status_code != 429:
        print(
            f"[FAIL] Correct password accepted while locked: status {resp.status_code}",
            file=sys.stderr,
        )
        return False

    status = lockout_status(base_url, account)
    print(f"[PASS] Locked after attempt {locked_at}; status: {status}")
    return True


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Check that repeated failed logins lock an account."
    )
    parser.add_argument(
        "--base-url",
        required=True,
        help="Root URL of a running login-guard instance (e.g. http://127.0.0.1:5000)",
    )
    parser.add_argument(
        "--attempts",
        type=int,
        default=6,
        help="How many wrong passwords to send (default: 6).",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    base_url = args.base_url.rstrip("/")
    try:
        ok = run_smoke_check(base_url, args.attempts)
    except (requests.RequestException, RuntimeError) as exc:
        print(f"[FAIL] {exc}", file=sys.stderr)
        return 1
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())

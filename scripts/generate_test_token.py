#!/usr/bin/env python3
"""Print bearer tokens for a company user and an instructor user."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from instructormatch.core.auth import create_access_token  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--company", default="company-test", help="company user id")
    parser.add_argument("--instructor", default="instructor-test", help="instructor user id")
    args = parser.parse_args()

    company_token = create_access_token(
        args.company, email=f"{args.company}@example.com", first_name="Acme"
    )
    print(f"Company Token ({args.company}):\n{company_token}\n")

    instructor_token = create_access_token(
        args.instructor, email=f"{args.instructor}@example.com", first_name="Ada"
    )
    print(f"Instructor Token ({args.instructor}):\n{instructor_token}")


if __name__ == "__main__":
    main()

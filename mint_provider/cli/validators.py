"""Input validation for CLI arguments."""
import sys

from mint_provider.vaults.workflows.resource_models import NAME_PATTERN


def validate_name(kind: str, name: str) -> None:
    """
    Validate a vault, secret or variable name.

    Mint allows only: [a-zA-Z0-9_-]

    Args:
        kind: What is being named ("vault", "secret", "variable"), used in messages
        name: Name to validate

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not name:
        print(f"Error: {kind.capitalize()} name cannot be empty", file=sys.stderr)
        print(f"\n{kind.capitalize()} names must match: [a-zA-Z0-9_-]", file=sys.stderr)
        sys.exit(2)

    if not NAME_PATTERN.match(name):
        print(f"Error: Invalid {kind} name '{name}'", file=sys.stderr)
        print("\nAllowed characters: letters, numbers, underscores (_), hyphens (-)", file=sys.stderr)
        print("Not allowed: dots (.), slashes, spaces, special characters (@, $, !, etc.)", file=sys.stderr)
        print("\nExamples of valid names:", file=sys.stderr)
        print("  ✓ MY_SECRET", file=sys.stderr)
        print("  ✓ api-key-prod", file=sys.stderr)
        print("\nExamples of invalid names:", file=sys.stderr)
        print("  ✗ api.key (contains dot)", file=sys.stderr)
        print("  ✗ prod/db (contains slash)", file=sys.stderr)
        sys.exit(2)


def validate_value(kind: str, value: str) -> None:
    """
    Validate a secret or variable value is not empty.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not value:
        print(f"Error: {kind.capitalize()} value cannot be empty", file=sys.stderr)
        sys.exit(2)

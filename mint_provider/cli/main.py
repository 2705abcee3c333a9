"""CLI entrypoint for the Mint provider."""
import os
import sys
import argparse
import logging
from pathlib import Path

from .validators import validate_name, validate_value

VERSION = "0.1.0"
SECRET_VALUE_ENV_VAR = "MINT_SECRET_VALUE"

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr
    )


def _client():
    from mint_provider.vaults.workflows.provider import configure_provider

    return configure_provider(VERSION)


def _validate_target(args, kind: str) -> None:
    validate_name("vault", args.vault)
    validate_name(kind, args.name)


def cmd_version(args):
    """Show version information."""
    print(f"mint-provider {VERSION}")


def cmd_config_set_path(args):
    """Set config file path preference."""
    from mint_provider.vaults.domains.preferences import set_preference

    config_path = Path(args.path).resolve()

    if not config_path.exists():
        print(f"Error: Config file does not exist: {config_path}", file=sys.stderr)
        sys.exit(1)

    if not config_path.is_file():
        print(f"Error: Path is not a file: {config_path}", file=sys.stderr)
        sys.exit(1)

    set_preference("config_path", str(config_path))
    print(f"Config path set to: {config_path}")


def cmd_config_show(args):
    """Show current config file path and resolved host."""
    from mint_provider.vaults.domains.config_loader import DEFAULT_HOST, HOST_ENV_VAR, default_config_path
    from mint_provider.vaults.domains.preferences import get_preference

    config_path_pref = get_preference("config_path")

    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            print(f"Config path: {config_path}")
        else:
            print(f"Config path (from preference, but file not found): {config_path}")
        print("Source: preference")
    else:
        default_config = default_config_path()
        print(f"Config path: {default_config}")
        if default_config.exists():
            print("Source: default")
        else:
            print("Source: default (file not found)")

    print(f"Host override ({HOST_ENV_VAR}): {os.getenv(HOST_ENV_VAR) or f'unset, default {DEFAULT_HOST}'}")


def cmd_config_clear(args):
    """Clear config path preference."""
    from mint_provider.vaults.domains.config_loader import default_config_path
    from mint_provider.vaults.domains.preferences import clear_preference

    clear_preference("config_path")
    print(f"Config path preference cleared. Will use default: {default_config_path()}")


def _secret_model(args):
    from mint_provider.vaults.workflows.resource_models import SecretModel

    _validate_target(args, "secret")
    secret_value = args.value or os.getenv(SECRET_VALUE_ENV_VAR, "")
    validate_value("secret", secret_value)
    return SecretModel(
        vault=args.vault,
        name=args.name,
        secret_value=secret_value,
        description=args.description,
    )


def cmd_secrets_create(args):
    """Create a secret, failing if it already exists."""
    from mint_provider.vaults.workflows.secret_resource import SecretResource

    plan = _secret_model(args)
    with _client() as client:
        state = SecretResource(client).create(plan)
    print(f"Secret '{plan.name}' created in vault '{plan.vault}' (version {state.version})")


def cmd_secrets_update(args):
    """Overwrite a secret's value and description."""
    from mint_provider.vaults.workflows.secret_resource import SecretResource

    plan = _secret_model(args)
    with _client() as client:
        state = SecretResource(client).update(plan)
    print(f"Secret '{plan.name}' updated in vault '{plan.vault}' (version {state.version})")


def cmd_secrets_read(args):
    """Show a secret's metadata. The value itself is never shown."""
    from mint_provider.vaults.workflows.resource_models import SecretModel, SecretState
    from mint_provider.vaults.workflows.secret_resource import SecretResource

    _validate_target(args, "secret")
    state = SecretState(
        model=SecretModel(vault=args.vault, name=args.name),
        version=args.known_version,
    )
    with _client() as client:
        refreshed = SecretResource(client).read(state)

    if refreshed is None:
        print(f"Error: Secret '{args.name}' not found in vault '{args.vault}'", file=sys.stderr)
        sys.exit(1)

    print(f"Secret '{args.name}' in vault '{args.vault}'")
    print(f"  Version: {refreshed.version}")
    print(f"  Description: {refreshed.model.description or ''}")
    if args.known_version is not None and args.known_version != refreshed.version:
        print(f"  Changed since version {args.known_version}")


def cmd_secrets_delete(args):
    """Delete a secret."""
    from mint_provider.vaults.workflows.resource_models import SecretModel, SecretState
    from mint_provider.vaults.workflows.secret_resource import SecretResource

    _validate_target(args, "secret")
    with _client() as client:
        SecretResource(client).delete(SecretState(model=SecretModel(vault=args.vault, name=args.name)))
    print(f"Secret '{args.name}' deleted from vault '{args.vault}'")


def _variable_model(args):
    from mint_provider.vaults.workflows.resource_models import VariableModel

    _validate_target(args, "variable")
    validate_value("variable", args.value)
    return VariableModel(vault=args.vault, name=args.name, value=args.value)


def cmd_vars_create(args):
    """Create a variable, failing if it already exists."""
    from mint_provider.vaults.workflows.variable_resource import VariableResource

    plan = _variable_model(args)
    with _client() as client:
        VariableResource(client).create(plan)
    print(f"Variable '{plan.name}' created in vault '{plan.vault}'")


def cmd_vars_update(args):
    """Overwrite a variable's value."""
    from mint_provider.vaults.workflows.variable_resource import VariableResource

    plan = _variable_model(args)
    with _client() as client:
        VariableResource(client).update(plan)
    print(f"Variable '{plan.name}' updated in vault '{plan.vault}'")


def _print_variable(variable, quiet: bool) -> None:
    if quiet:
        print(variable.value)
    else:
        print(f"Variable '{variable.name}' in vault '{variable.vault}': {variable.value}")


def cmd_vars_read(args):
    """Print a variable's value."""
    from mint_provider.vaults.workflows.resource_models import VariableModel
    from mint_provider.vaults.workflows.variable_resource import VariableResource

    _validate_target(args, "variable")
    with _client() as client:
        variable = VariableResource(client).read(VariableModel(vault=args.vault, name=args.name))

    if variable is None:
        print(f"Error: Variable '{args.name}' not found in vault '{args.vault}'", file=sys.stderr)
        sys.exit(1)

    _print_variable(variable, args.quiet)


def cmd_vars_delete(args):
    """Delete a variable."""
    from mint_provider.vaults.workflows.resource_models import VariableModel
    from mint_provider.vaults.workflows.variable_resource import VariableResource

    _validate_target(args, "variable")
    with _client() as client:
        VariableResource(client).delete(VariableModel(vault=args.vault, name=args.name))
    print(f"Variable '{args.name}' deleted from vault '{args.vault}'")


def cmd_vars_import(args):
    """Look up an existing variable by <vault>/<name>."""
    from mint_provider.vaults.domains.errors import ValidationError
    from mint_provider.vaults.workflows.variable_resource import VariableResource, parse_import_id

    try:
        target = parse_import_id(args.import_id)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    validate_name("vault", target.vault)
    validate_name("variable", target.name)

    with _client() as client:
        variable = VariableResource(client).import_state(args.import_id)

    if variable is None:
        print(f"Error: Variable '{target.name}' not found in vault '{target.vault}'", file=sys.stderr)
        sys.exit(1)

    _print_variable(variable, args.quiet)


def _add_target_arguments(parser, kind: str) -> None:
    parser.add_argument(
        "--vault",
        required=True,
        help=f"Name of the vault holding the {kind} (format: [a-zA-Z0-9_-]+)"
    )
    parser.add_argument(
        "--name",
        required=True,
        help=f"Name of the {kind} (format: [a-zA-Z0-9_-]+)"
    )


def build_parser():
    """Build the argument parser and return it with its sub-parsers keyed by command."""
    parser = argparse.ArgumentParser(
        prog="mint-provider",
        description="Mint provider CLI - manage secrets and variables in Mint vaults",
        epilog=f"""
Exit codes:
  0 - Success
  1 - Runtime error (authentication, network, resource not found, etc.)
  2 - Usage error (invalid arguments, invalid name format, etc.)

Environment variables:
  RWX_ACCESS_TOKEN - Access token (used when the config file sets none)
  MINT_HOST - Mint host (default: cloud.rwx.com)
  {SECRET_VALUE_ENV_VAR} - Secret value for 'secrets create/update' when --value is omitted

Configuration:
  Default location: ~/.config/mint-provider/config.yml
  Custom path: Set with 'mint-provider config set-path <path>'
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log requests and configuration details to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of mint-provider"
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage mint-provider configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    config_set_path_parser = config_subparsers.add_parser(
        "set-path",
        help="Set config file path",
        description="""
Set the configuration file path preference.

This stores the absolute path to your config file in:
~/.config/mint-provider/preferences.json
        """
    )
    config_set_path_parser.add_argument("path", help="Path to config file")

    config_subparsers.add_parser(
        "show",
        help="Show current config path",
        description="Display the configuration file path and its source (preference or default)"
    )
    config_subparsers.add_parser(
        "clear",
        help="Clear config path preference",
        description="Remove the config path preference and fall back to ~/.config/mint-provider/config.yml"
    )

    # secrets command
    secrets_parser = subparsers.add_parser(
        "secrets",
        help="Secret management operations",
        description="Manage secrets in Mint vaults. Secret values are write-only."
    )
    secrets_subparsers = secrets_parser.add_subparsers(dest="secrets_command")

    for action, help_text in (
        ("create", "Create a secret (fails if it already exists)"),
        ("update", "Overwrite a secret"),
    ):
        secret_write_parser = secrets_subparsers.add_parser(action, help=help_text, description=help_text)
        _add_target_arguments(secret_write_parser, "secret")
        secret_write_parser.add_argument(
            "--value",
            help=f"Secret value (prefer the {SECRET_VALUE_ENV_VAR} environment variable to keep it out of shell history)"
        )
        secret_write_parser.add_argument("--description", help="Optional description of the secret")

    secrets_read_parser = secrets_subparsers.add_parser(
        "read",
        help="Show secret metadata",
        description="Show a secret's description and version. The value is never returned by Mint."
    )
    _add_target_arguments(secrets_read_parser, "secret")
    secrets_read_parser.add_argument(
        "--known-version",
        type=int,
        help="Last version you saw; reports whether the secret changed since"
    )

    secrets_delete_parser = secrets_subparsers.add_parser(
        "delete",
        help="Delete a secret",
        description="Delete a secret. Deleting a missing secret succeeds."
    )
    _add_target_arguments(secrets_delete_parser, "secret")

    # vars command
    vars_parser = subparsers.add_parser(
        "vars",
        help="Variable management operations",
        description="Manage variables in Mint vaults"
    )
    vars_subparsers = vars_parser.add_subparsers(dest="vars_command")

    for action, help_text in (
        ("create", "Create a variable (fails if it already exists)"),
        ("update", "Overwrite a variable"),
    ):
        var_write_parser = vars_subparsers.add_parser(action, help=help_text, description=help_text)
        _add_target_arguments(var_write_parser, "variable")
        var_write_parser.add_argument("--value", required=True, help="Variable value")

    vars_read_parser = vars_subparsers.add_parser(
        "read",
        help="Print a variable",
        description="Print a variable's value"
    )
    _add_target_arguments(vars_read_parser, "variable")
    vars_read_parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Output only the value (useful for scripts)"
    )

    vars_delete_parser = vars_subparsers.add_parser(
        "delete",
        help="Delete a variable",
        description="Delete a variable. Deleting a missing variable succeeds."
    )
    _add_target_arguments(vars_delete_parser, "variable")

    vars_import_parser = vars_subparsers.add_parser(
        "import",
        help="Look up a variable by import ID",
        description="Look up an existing variable by an import ID of the form <vault>/<name>"
    )
    vars_import_parser.add_argument("import_id", help="Import ID, e.g. default/REGION")
    vars_import_parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Output only the value (useful for scripts)"
    )

    return parser, {
        "config": config_parser,
        "secrets": secrets_parser,
        "vars": vars_parser,
    }


COMMANDS = {
    ("version", None): cmd_version,
    ("config", "set-path"): cmd_config_set_path,
    ("config", "show"): cmd_config_show,
    ("config", "clear"): cmd_config_clear,
    ("secrets", "create"): cmd_secrets_create,
    ("secrets", "update"): cmd_secrets_update,
    ("secrets", "read"): cmd_secrets_read,
    ("secrets", "delete"): cmd_secrets_delete,
    ("vars", "create"): cmd_vars_create,
    ("vars", "update"): cmd_vars_update,
    ("vars", "read"): cmd_vars_read,
    ("vars", "delete"): cmd_vars_delete,
    ("vars", "import"): cmd_vars_import,
}


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (authentication, network, resource not found, etc.)
        2 - Usage errors (invalid arguments, invalid name format, etc.)
    """
    parser, command_parsers = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    # If no command provided, show help and exit with usage error code
    if not args.command:
        parser.print_help()
        sys.exit(2)

    subcommand = getattr(args, f"{args.command}_command", None)
    handler = COMMANDS.get((args.command, subcommand))
    if handler is None:
        command_parsers.get(args.command, parser).print_help()
        sys.exit(2)

    try:
        handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

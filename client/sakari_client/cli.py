import argparse
import sys
import json
import pprint
from typing import Callable, Optional

from dotenv import find_dotenv, load_dotenv

from . import __version__
from . import resources
from .api import ApiClient, RequestDescriptor
from .config import resolve_account_id
from .errors import RequestError, SakariError
from .logging_config import get_logger, setup_logging
from .settings_store import SettingsStore

logger = get_logger(__name__)

EPILOG = """\
Examples:
  $ sakari config set clientId <your-client-id>
  $ sakari config set clientSecret <your-client-secret>
  $ sakari config set accountId <your-account-id>
  $ sakari messages send --to "+12345678900" --from "+10987654321" --body "Hello World"
  $ sakari messages list --limit 50
  $ sakari contacts list --limit 50
  $ sakari accounts list

API Documentation:
  https://developers.sakari.io/

Get API Credentials:
  https://hub.sakari.io/
"""


def print_data(data, as_json: bool) -> None:
    if as_json:
        print(json.dumps(data, indent=2))
    elif isinstance(data, str):
        print(data)
    else:
        pprint.pprint(data, sort_dicts=False)


def print_error(error: SakariError) -> None:
    print(f"Error: {error}", file=sys.stderr)
    if isinstance(error, RequestError) and error.has_response and error.body not in (None, ''):
        body = error.body if isinstance(error.body, str) else json.dumps(error.body, indent=2)
        print(body, file=sys.stderr)


def run_request(args: argparse.Namespace, store: SettingsStore,
                build: Callable[[], RequestDescriptor], success: str, failure: str) -> int:
    """Issue one API request and render its result"""
    descriptor = build()
    result = ApiClient(store).attempt(descriptor)
    if not result.ok:
        logger.debug(f"{descriptor!r} failed: {result.error!r}")
        print(failure, file=sys.stderr)
        print_error(result.error)
        return 1

    print(f"✓ {success}", file=sys.stderr)
    print_data(result.value, args.json)
    return 0


# Config commands

def cmd_config_set(args: argparse.Namespace, store: SettingsStore) -> int:
    store.set(args.key, args.value)
    print(f"✓ Set {args.key} = {args.value}")
    return 0


def cmd_config_get(args: argparse.Namespace, store: SettingsStore) -> int:
    value = store.get(args.key)
    print(value if value not in (None, '') else "(not set)")
    return 0


def cmd_config_list(args: argparse.Namespace, store: SettingsStore) -> int:
    print(json.dumps(store.list_all(), indent=2))
    return 0


def cmd_config_delete(args: argparse.Namespace, store: SettingsStore) -> int:
    store.delete(args.key)
    print(f"✓ Deleted {args.key}")
    return 0


def cmd_config_clear(args: argparse.Namespace, store: SettingsStore) -> int:
    store.clear()
    print("✓ Configuration cleared")
    return 0


# Message commands

def cmd_messages_send(args: argparse.Namespace, store: SettingsStore) -> int:
    return run_request(
        args, store,
        lambda: resources.send_message_request(resolve_account_id(store), args.to, args.from_, args.body),
        "Message sent", "Failed to send message",
    )


def cmd_messages_list(args: argparse.Namespace, store: SettingsStore) -> int:
    return run_request(
        args, store,
        lambda: resources.list_messages_request(resolve_account_id(store), args.limit, args.offset),
        "Messages retrieved", "Failed to fetch messages",
    )


def cmd_messages_get(args: argparse.Namespace, store: SettingsStore) -> int:
    return run_request(
        args, store,
        lambda: resources.get_message_request(resolve_account_id(store), args.id),
        "Message retrieved", "Failed to fetch message",
    )


# Contact commands

def cmd_contacts_list(args: argparse.Namespace, store: SettingsStore) -> int:
    return run_request(
        args, store,
        lambda: resources.list_contacts_request(resolve_account_id(store), args.limit, args.offset),
        "Contacts retrieved", "Failed to fetch contacts",
    )


def cmd_contacts_create(args: argparse.Namespace, store: SettingsStore) -> int:
    return run_request(
        args, store,
        lambda: resources.create_contact_request(
            resolve_account_id(store), args.mobile, first_name=args.first, last_name=args.last),
        "Contact created", "Failed to create contact",
    )


def cmd_contacts_get(args: argparse.Namespace, store: SettingsStore) -> int:
    return run_request(
        args, store,
        lambda: resources.get_contact_request(resolve_account_id(store), args.id),
        "Contact retrieved", "Failed to fetch contact",
    )


# Account commands

def cmd_accounts_list(args: argparse.Namespace, store: SettingsStore) -> int:
    return run_request(
        args, store, resources.list_accounts_request,
        "Accounts retrieved", "Failed to fetch accounts",
    )


def cmd_accounts_get(args: argparse.Namespace, store: SettingsStore) -> int:
    return run_request(
        args, store,
        lambda: resources.get_account_request(args.id),
        "Account retrieved", "Failed to fetch account",
    )


def _add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Output as JSON")


def _add_paging(parser: argparse.ArgumentParser, noun: str) -> None:
    parser.add_argument("--limit", type=int, default=resources.DEFAULT_PAGE_SIZE,
                        help=f"Number of {noun} to retrieve (default: {resources.DEFAULT_PAGE_SIZE})")
    parser.add_argument("--offset", type=int, default=0, help="Offset for pagination (default: 0)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sakari",
        description="Sakari API CLI - SMS messaging platform",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}",
                   help="Output the current version")
    p.add_argument("--config", default=None,
                   help="Settings file path (default: $SAKARI_CONFIG or XDG_CONFIG_HOME/sakari-cli/config.json)")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging on stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Config commands
    p_config = sub.add_parser("config", help="Manage configuration")
    config_sub = p_config.add_subparsers(dest="config_cmd", required=True)

    p_set = config_sub.add_parser("set", help="Set a configuration value")
    p_set.add_argument("key", help="Configuration key")
    p_set.add_argument("value", help="Configuration value")
    p_set.set_defaults(func=cmd_config_set)

    p_get = config_sub.add_parser("get", help="Get a configuration value")
    p_get.add_argument("key", help="Configuration key")
    p_get.set_defaults(func=cmd_config_get)

    p_list = config_sub.add_parser("list", help="List all configuration")
    p_list.set_defaults(func=cmd_config_list)

    p_delete = config_sub.add_parser("delete", help="Delete a configuration value, reverting it to its default")
    p_delete.add_argument("key", help="Configuration key")
    p_delete.set_defaults(func=cmd_config_delete)

    p_clear = config_sub.add_parser("clear", help="Clear all configuration")
    p_clear.set_defaults(func=cmd_config_clear)

    # Message commands
    p_messages = sub.add_parser("messages", help="Manage SMS messages")
    messages_sub = p_messages.add_subparsers(dest="messages_cmd", required=True)

    p_send = messages_sub.add_parser("send", help="Send an SMS message")
    p_send.add_argument("--to", required=True, help="Recipient phone number (E.164 format)")
    p_send.add_argument("--from", dest="from_", required=True, help="Sender phone number")
    p_send.add_argument("--body", required=True, help="Message body")
    _add_json_flag(p_send)
    p_send.set_defaults(func=cmd_messages_send)

    p_mlist = messages_sub.add_parser("list", help="List messages")
    _add_paging(p_mlist, "messages")
    _add_json_flag(p_mlist)
    p_mlist.set_defaults(func=cmd_messages_list)

    p_mget = messages_sub.add_parser("get", help="Get message by ID")
    p_mget.add_argument("id", help="Message ID")
    _add_json_flag(p_mget)
    p_mget.set_defaults(func=cmd_messages_get)

    # Contact commands
    p_contacts = sub.add_parser("contacts", help="Manage contacts")
    contacts_sub = p_contacts.add_subparsers(dest="contacts_cmd", required=True)

    p_clist = contacts_sub.add_parser("list", help="List contacts")
    _add_paging(p_clist, "contacts")
    _add_json_flag(p_clist)
    p_clist.set_defaults(func=cmd_contacts_list)

    p_create = contacts_sub.add_parser("create", help="Create a contact")
    p_create.add_argument("--mobile", required=True, help="Mobile number (E.164 format)")
    p_create.add_argument("--first", help="First name")
    p_create.add_argument("--last", help="Last name")
    _add_json_flag(p_create)
    p_create.set_defaults(func=cmd_contacts_create)

    p_cget = contacts_sub.add_parser("get", help="Get contact by ID")
    p_cget.add_argument("id", help="Contact ID")
    _add_json_flag(p_cget)
    p_cget.set_defaults(func=cmd_contacts_get)

    # Account commands
    p_accounts = sub.add_parser("accounts", help="Manage accounts")
    accounts_sub = p_accounts.add_subparsers(dest="accounts_cmd", required=True)

    p_alist = accounts_sub.add_parser("list", help="List accounts")
    _add_json_flag(p_alist)
    p_alist.set_defaults(func=cmd_accounts_list)

    p_aget = accounts_sub.add_parser("get", help="Get account by ID")
    p_aget.add_argument("id", help="Account ID")
    _add_json_flag(p_aget)
    p_aget.set_defaults(func=cmd_accounts_get)

    return p


def main(argv: Optional[list] = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)

    # Variables already in the environment win over .env
    load_dotenv(find_dotenv(usecwd=True), override=False)
    setup_logging(log_level="DEBUG" if args.verbose else None)

    try:
        store = SettingsStore(args.config)
        return args.func(args, store)
    except SakariError as e:
        print_error(e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

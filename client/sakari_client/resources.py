"""
Sakari API resources

Path builders and request descriptors for the messages, contacts and
accounts endpoints.

Account-scoped paths are built from whatever account ID is passed in, including
an empty one, which yields e.g. /accounts//messages. That is logged as a warning
rather than rejected, so the API reports the problem.
"""

import logging
from typing import Optional

from .api import RequestDescriptor

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


def _account_scoped(account_id: str, collection: str, item_id: Optional[str] = None) -> str:
    if not account_id:
        logger.warning(
            f"No account ID configured; requesting /accounts//{collection}. "
            "Set it with: sakari config set accountId <your-account-id>"
        )
    path = f"/accounts/{account_id}/{collection}"
    if item_id is not None:
        path = f"{path}/{item_id}"
    return path


def accounts_path(account_id: Optional[str] = None) -> str:
    if account_id is None:
        return "/accounts"
    return f"/accounts/{account_id}"


def messages_path(account_id: str, message_id: Optional[str] = None) -> str:
    return _account_scoped(account_id, "messages", message_id)


def contacts_path(account_id: str, contact_id: Optional[str] = None) -> str:
    return _account_scoped(account_id, "contacts", contact_id)


def _page(limit: int, offset: int) -> dict:
    return {'limit': int(limit), 'offset': int(offset)}


# Messages

def send_message_request(account_id: str, to: str, from_: str, body: str) -> RequestDescriptor:
    """
    Build the request that sends one SMS.

    Args:
        account_id: Sakari account ID
        to: Recipient phone number (E.164 format)
        from_: Sender phone number
        body: Message text
    """
    payload = {'to': to, 'from': from_, 'body': body}
    return RequestDescriptor('POST', messages_path(account_id), body=payload)


def list_messages_request(account_id: str, limit: int = DEFAULT_PAGE_SIZE,
                          offset: int = 0) -> RequestDescriptor:
    return RequestDescriptor('GET', messages_path(account_id), params=_page(limit, offset))


def get_message_request(account_id: str, message_id: str) -> RequestDescriptor:
    return RequestDescriptor('GET', messages_path(account_id, message_id))


# Contacts

def list_contacts_request(account_id: str, limit: int = DEFAULT_PAGE_SIZE,
                          offset: int = 0) -> RequestDescriptor:
    return RequestDescriptor('GET', contacts_path(account_id), params=_page(limit, offset))


def create_contact_request(account_id: str, mobile: str, first_name: Optional[str] = None,
                           last_name: Optional[str] = None) -> RequestDescriptor:
    """Build the request that creates a contact; unset names are omitted"""
    payload = {'mobile': mobile, 'firstName': first_name, 'lastName': last_name}
    payload = {k: v for k, v in payload.items() if v is not None}
    return RequestDescriptor('POST', contacts_path(account_id), body=payload)


def get_contact_request(account_id: str, contact_id: str) -> RequestDescriptor:
    return RequestDescriptor('GET', contacts_path(account_id, contact_id))


# Accounts

def list_accounts_request() -> RequestDescriptor:
    return RequestDescriptor('GET', accounts_path())


def get_account_request(account_id: str) -> RequestDescriptor:
    return RequestDescriptor('GET', accounts_path(account_id))

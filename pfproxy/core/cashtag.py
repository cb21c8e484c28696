"""Cash App confirmation links. No lookup is performed."""

from urllib.parse import quote

from pfproxy.exceptions import InvalidInputError
from pfproxy.models.cashtag import CashtagResult

CONFIRM_URL = "https://cash.app/{cashtag}"


def build_cashtag(tag: str | None) -> CashtagResult:
    """
    Build the cashtag and the link a user can open to confirm it.

    Raises:
        InvalidInputError: If the tag is empty
    """
    tag = (tag or "").strip()
    if not tag:
        raise InvalidInputError("Missing tag")
    if not tag.startswith("$"):
        tag = "$" + tag

    return CashtagResult(
        cashtag=tag,
        name=tag[1:],
        avatar=None,
        confirm_url=CONFIRM_URL.format(cashtag=quote(tag, safe="")),
    )

"""Encoding of alias sets into a single composite email address.

A template such as ``git@example.com`` is combined with aliases:

- no aliases: the template itself
- one alias: ``mb@example.com``
- several aliases: ``git+lb+mb@example.com``

Decoding is deliberately partial. :func:`decode_alias_prefix` only strips the
template's ``local+`` prefix from a stored address; it cannot recover the alias
list when the address was edited by hand or built from another template.
"""

from collections.abc import Sequence

from ..errors import MalformedAddressError

ALIAS_SEPARATOR = "+"


def split_email(address: str) -> tuple[str, str]:
    """Split an email address into its local part and domain.

    Args:
        address: Address of the form ``local@domain``.

    Returns:
        Tuple of (local_part, domain).

    Raises:
        MalformedAddressError: If the address does not contain exactly one "@".
    """
    parts = address.split("@")
    if len(parts) != 2:
        raise MalformedAddressError(address)
    return parts[0], parts[1]


def encode_email(template: str, aliases: Sequence[str]) -> str:
    """Build the composite email address for ``aliases``.

    Aliases are joined in the order given; callers that need the same result
    for the same set of aliases must sort them first.

    Args:
        template: Template address, e.g. ``git@example.com``.
        aliases: Aliases of the collaborators.

    Returns:
        The composite address.

    Raises:
        MalformedAddressError: If the template is not a valid address.
    """
    local, domain = split_email(template)

    if not aliases:
        return template
    if len(aliases) == 1:
        return f"{aliases[0]}@{domain}"
    return f"{local}{ALIAS_SEPARATOR}{ALIAS_SEPARATOR.join(aliases)}@{domain}"


def decode_alias_prefix(template: str, email: str) -> str:
    """Recover the ``+``-joined alias string from a composite address.

    ``("git@example.com", "git+lb+mb@example.com")`` gives ``"lb+mb"`` and
    ``("git@example.com", "mb@example.com")`` gives ``"mb"``.

    Raises:
        MalformedAddressError: If either address is malformed.
    """
    template_local, _ = split_email(template)
    local, _ = split_email(email)

    prefix = template_local + ALIAS_SEPARATOR
    if local.startswith(prefix):
        return local[len(prefix):]
    return local

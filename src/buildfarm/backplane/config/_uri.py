"""
Parsing of connection URIs of the form 'scheme://[userinfo@]host[:port][/path]'.
"""
from typing import Optional
from urllib.parse import SplitResult, unquote, urlsplit


def parse_uri(uri: str) -> SplitResult:
    """
    Splits a connection URI into its components.

    :param uri:
                The URI to parse.
    :return:
                The split URI.
    :raises ValueError:
                If the URI is malformed.
    """
    if any(char.isspace() or not char.isprintable() for char in uri):
        raise ValueError("Malformed URI, contains whitespace or control characters")

    # urlsplit raises ValueError itself for malformed IPv6 hosts
    split = urlsplit(uri)

    # Scheme-only, opaque and host-less URIs are valid, an authority without a host is not
    if split.netloc != "" and split.hostname is None:
        raise ValueError("Malformed URI, authority without a host")

    # Accessing the port validates it (raises ValueError if out of range or not numeric)
    split.port

    return split


def get_userinfo(uri: SplitResult) -> Optional[str]:
    """
    Gets the (still percent-encoded) userinfo component of a split URI, if any.
    """
    userinfo, sep, _ = uri.netloc.rpartition("@")
    if sep == "":
        return None

    return userinfo


def get_raw_password(uri: SplitResult) -> Optional[str]:
    """
    Gets the password of a split URI as spelled in the URI (still percent-encoded),
    or None if the URI has no userinfo.
    """
    userinfo = get_userinfo(uri)
    if userinfo is None:
        return None

    _, sep, password = userinfo.partition(":")
    if sep == "":
        return userinfo

    return password


def get_password(uri: str) -> Optional[str]:
    """
    Gets the password from the userinfo of a connection URI. Userinfo of the form
    'user:password' yields 'password'; userinfo without a colon is taken as a bare
    password.

    :param uri:
                The URI.
    :return:
                The (percent-decoded) password, or None if the URI has no userinfo.
    :raises ValueError:
                If the URI is malformed.
    """
    raw_password = get_raw_password(parse_uri(uri))
    if raw_password is None:
        return None

    return unquote(raw_password)


def mask_password(uri: str, marker: str) -> str:
    """
    Replaces every occurrence of the URI's password within the URI string by a marker.
    This is a plain substring replacement, so the password text is also replaced
    wherever else it occurs in the URI.

    :param uri:
                The URI.
    :param marker:
                The text to replace the password with.
    :return:
                The masked URI, or the URI unchanged if it has no (or an empty) password.
    :raises ValueError:
                If the URI is malformed.
    """
    raw_password = get_raw_password(parse_uri(uri))
    if not raw_password:
        return uri

    # The spelling in the URI first, so the decoded text can't break it up
    masked = uri.replace(raw_password, marker)

    password = unquote(raw_password)
    if password and password != raw_password:
        masked = masked.replace(password, marker)

    return masked

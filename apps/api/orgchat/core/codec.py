"""Reversible tagged encoding for secrets and message text at rest.

Tokens are ``<tag><base64(utf-8 text)>``. There is no key material, salt or
authentication tag: anyone with read access to the document store can
recover the plaintext. Switching to authenticated encryption changes the
token format and needs a new tag.
"""

from __future__ import annotations

import base64
import binascii
import logging

from orgchat.errors import DecodeError

logger = logging.getLogger(__name__)

CREDENTIAL_TAG = "cgpt_"
MESSAGE_TAG = "msg_"


class SecretCodec:
    """One tag namespace of the codec.

    ``strict`` namespaces raise ``DecodeError`` for untagged or corrupt tokens;
    lenient ones hand the input back unchanged.
    """

    def __init__(self, tag: str, *, strict: bool) -> None:
        self.tag = tag
        self.strict = strict

    def encode(self, plaintext: str) -> str:
        encoded = base64.b64encode(plaintext.encode("utf-8")).decode("ascii")
        return f"{self.tag}{encoded}"

    def decode(self, token: str) -> str:
        if not token.startswith(self.tag):
            if self.strict:
                logger.warning("codec.decode_rejected tag=%s reason=missing_tag", self.tag)
                raise DecodeError("Invalid credential format")
            return token

        payload = token[len(self.tag):]
        try:
            return base64.b64decode(payload, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            logger.warning("codec.decode_rejected tag=%s reason=malformed_payload", self.tag)
            if self.strict:
                raise DecodeError("Failed to decode credential") from exc
            return token


credential_codec = SecretCodec(CREDENTIAL_TAG, strict=True)
message_codec = SecretCodec(MESSAGE_TAG, strict=False)


def encode_credential(plaintext: str) -> str:
    return credential_codec.encode(plaintext)


def decode_credential(token: str) -> str:
    return credential_codec.decode(token)


def encode_message(plaintext: str) -> str:
    return message_codec.encode(plaintext)


def decode_message(token: str) -> str:
    return message_codec.decode(token)

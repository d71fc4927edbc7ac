""" packets.py

Reading the packet dumps printed by ``gpg --list-packets``.
"""
import logging
import re

from typing import Dict, Iterator, List, Tuple

__all__ = ['split_packet',
           'iter_packets',
           'list_recipients', ]

#: the header line of a public-key encrypted session key packet
PUBKEY_ENC_PACKET = ':pubkey enc packet:'

_header = re.compile(r'^:(?P<tag>[^:]+):(?P<body>.*)$')


def split_packet(line: str) -> Dict[str, str]:
    """
    Split one packet header line into its named fields.

    ``:pubkey enc packet: version=3 algo=1 keyid=0123456789ABCDEF`` gives
    ``{'version': '3', 'algo': '1', 'keyid': '0123456789ABCDEF'}``. Tokens without a ``=`` are skipped, except that a
    comma separated ``name value`` pair, the way gpg itself prints these lines
    (``version 3, algo 1, keyid 0123456789ABCDEF``), is read as a field as well.

    Never raises: anything that does not look like a field is left out of the result.
    """
    fields = {}

    m = _header.match(line.strip())
    if m is None:
        return fields

    for segment in m.group('body').split(','):
        tokens = segment.split()
        if len(tokens) == 2 and not any('=' in t for t in tokens):
            fields[tokens[0]] = tokens[1]
            continue

        for token in tokens:
            name, sep, value = token.partition('=')
            if sep and name:
                fields[name] = value

    return fields


def iter_packets(text: str) -> Iterator[Tuple[str, Dict[str, str]]]:
    """yields ``(tag, fields)`` for every packet header line in a packet dump"""
    for line in text.splitlines():
        line = line.strip()
        m = _header.match(line)
        if m is None:
            continue
        yield m.group('tag').strip(), split_packet(line)


def list_recipients(text: str) -> List[str]:
    """
    Collect the key IDs a message is encrypted to, in the order their packets appear.

    Duplicates are kept. A dump without any ``:pubkey enc packet:`` line gives an empty list.
    """
    recipients = []
    for line in text.splitlines():
        line = line.strip()
        logging.debug("gpg output: %s", line)
        if not line.startswith(PUBKEY_ENC_PACKET):
            continue

        fields = split_packet(line)
        if 'keyid' in fields:
            recipients.append(fields['keyid'])

    return recipients

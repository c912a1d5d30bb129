"""
Key naming for the two key families.

    URLSet:<term>            set of document ids containing the term
    TermCounter:<document>   hash of term -> occurrence count

The scheme is not reversible when a term or document id contains the
delimiter.
"""

DELIMITER = ':'
URL_SET_PREFIX = 'URLSet'
TERM_COUNTER_PREFIX = 'TermCounter'

URL_SET_PATTERN = URL_SET_PREFIX + DELIMITER + '*'
TERM_COUNTER_PATTERN = TERM_COUNTER_PREFIX + DELIMITER + '*'
ALL_KEYS_PATTERN = '*'


def url_set_key(term: str) -> str:
    return URL_SET_PREFIX + DELIMITER + term


def term_counter_key(document_id: str) -> str:
    return TERM_COUNTER_PREFIX + DELIMITER + document_id


def term_from_key(key: str) -> str:
    """
    Term portion of a URLSet key: the field after the first delimiter, up to
    the next one. Keys without a term portion give ''.
    """
    parts = key.split(DELIMITER)
    while parts and parts[-1] == '':
        parts.pop()

    if len(parts) < 2:
        return ''
    return parts[1]


def document_from_key(key: str) -> str:
    """Everything after the first delimiter of a TermCounter key."""
    _, _, document_id = key.partition(DELIMITER)
    return document_id

# quiz_app/services/text.py
import html

def decode_entities(text: str) -> str:
    """
    Resolves HTML character references (e.g. '&quot;', '&#039;') to plain text.
    Decoding is repeated until the text stops changing so that double-encoded
    provider strings come out clean and decoding stays idempotent.
    Malformed references are left as-is.
    """
    if not text:
        return text
    decoded = html.unescape(text)
    # Each effective pass shortens the string, so this always terminates.
    while decoded != text:
        text = decoded
        decoded = html.unescape(text)
    return decoded
